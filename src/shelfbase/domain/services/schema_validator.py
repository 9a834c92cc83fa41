"""Schema validation for item payloads.

Checks that a submitted item carries exactly one value for every field in
its collection's schema, under the bucket of the field's declared type, and
that every value has the right Python type. A payload that omits a field,
supplies an unknown field, or files a field under the wrong type is rejected
as a whole.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from shelfbase.domain.entities import FIELD_TYPES, CollectionField, FieldType, ItemFields


@dataclass
class SchemaValidationError:
    """A single schema validation error."""

    field: str
    message: str
    code: str


class SchemaValidator:
    """Validator for item payloads against a collection schema.

    Validation aggregates every error it finds; an empty error list means the
    payload satisfies the completeness invariant.
    """

    @classmethod
    def validate_number(cls, value: Any, field_id: str) -> SchemaValidationError | None:
        """Validate a number field value."""
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return SchemaValidationError(
                field=field_id,
                message=f"Expected number value, got {type(value).__name__}",
                code="invalid_type",
            )
        try:
            stored = float(value)
        except OverflowError:
            stored = math.inf
        if not math.isfinite(stored):
            return SchemaValidationError(
                field=field_id,
                message="Number must be finite and fit in a double",
                code="out_of_range",
            )
        return None

    @classmethod
    def validate_text(cls, value: Any, field_id: str) -> SchemaValidationError | None:
        """Validate a text or multiline text field value."""
        if not isinstance(value, str):
            return SchemaValidationError(
                field=field_id,
                message=f"Expected text value, got {type(value).__name__}",
                code="invalid_type",
            )
        return None

    @classmethod
    def validate_checkbox(cls, value: Any, field_id: str) -> SchemaValidationError | None:
        """Validate a checkbox field value."""
        if not isinstance(value, bool):
            return SchemaValidationError(
                field=field_id,
                message=f"Expected boolean value, got {type(value).__name__}",
                code="invalid_type",
            )
        return None

    @classmethod
    def validate_date(cls, value: Any, field_id: str) -> SchemaValidationError | None:
        """Validate a date field value.

        Accepts ISO 8601 formatted strings or datetime objects.
        """
        if not isinstance(value, (datetime, str)):
            return SchemaValidationError(
                field=field_id,
                message=f"Expected date string, got {type(value).__name__}",
                code="invalid_type",
            )

        try:
            parse_date(value)
        except ValueError:
            return SchemaValidationError(
                field=field_id,
                message="Invalid date format. Use ISO 8601 format (e.g., 2024-01-01T12:00:00Z)",
                code="invalid_date_format",
            )
        except OverflowError:
            return SchemaValidationError(
                field=field_id,
                message="Date is out of range once converted to UTC",
                code="out_of_range",
            )
        return None

    @classmethod
    def validate_value(
        cls, value: Any, field_type: FieldType, field_id: str
    ) -> SchemaValidationError | None:
        """Validate a single value against its declared type."""
        validators = {
            FieldType.NUMBER: cls.validate_number,
            FieldType.TEXT: cls.validate_text,
            FieldType.MULTILINE_TEXT: cls.validate_text,
            FieldType.CHECKBOX: cls.validate_checkbox,
            FieldType.DATE: cls.validate_date,
        }
        return validators[FieldType(field_type)](value, field_id)

    @classmethod
    def check_type_bucket(
        cls,
        field_type: FieldType,
        submitted: dict[str, Any],
        schema: list[CollectionField],
        schema_types: dict[str, FieldType],
    ) -> list[SchemaValidationError]:
        """Compare one type bucket of the payload against the schema.

        The set of submitted field IDs must equal the set of schema field IDs
        declared with this type.
        """
        errors: list[SchemaValidationError] = []
        expected = {f.id for f in schema if f.type == field_type}
        provided = set(submitted)

        for field_id in sorted(expected - provided):
            errors.append(
                SchemaValidationError(
                    field=field_id,
                    message=f"{field_type.value} field '{field_id}' is missing",
                    code="missing_field",
                )
            )

        for field_id in sorted(provided - expected):
            declared = schema_types.get(field_id)
            if declared is None:
                errors.append(
                    SchemaValidationError(
                        field=field_id,
                        message=f"Unknown field '{field_id}' not defined in collection schema",
                        code="unknown_field",
                    )
                )
            else:
                errors.append(
                    SchemaValidationError(
                        field=field_id,
                        message=(
                            f"Field '{field_id}' is declared as {declared.value}, "
                            f"not {field_type.value}"
                        ),
                        code="wrong_type_bucket",
                    )
                )

        for field_id in sorted(provided & expected):
            error = cls.validate_value(submitted[field_id], field_type, field_id)
            if error:
                errors.append(error)

        return errors

    @classmethod
    def validate(
        cls, fields: ItemFields, schema: list[CollectionField]
    ) -> list[SchemaValidationError]:
        """Validate an item payload against a collection schema.

        Args:
            fields: Submitted values bucketed by type.
            schema: Field definitions of the item's collection.

        Returns:
            List of validation errors (empty if valid).
        """
        schema_types = {f.id: f.type for f in schema}
        errors: list[SchemaValidationError] = []
        for field_type in FIELD_TYPES:
            errors.extend(
                cls.check_type_bucket(
                    field_type, fields.of_type(field_type), schema, schema_types
                )
            )
        return errors

    @classmethod
    def is_complete(cls, fields: ItemFields, schema: list[CollectionField]) -> bool:
        """Whether the payload satisfies the schema in every type bucket."""
        return not cls.validate(fields, schema)

    @classmethod
    def normalize(cls, fields: ItemFields) -> ItemFields:
        """Return a copy with stored representations of validated values.

        Date strings become timezone-aware datetimes (naive values are taken
        as UTC) and integral numbers become floats.
        """
        normalized = ItemFields()
        for field_id, value in fields.number_fields.items():
            normalized.number_fields[field_id] = float(value)
        normalized.text_fields.update(fields.text_fields)
        normalized.multiline_text_fields.update(fields.multiline_text_fields)
        normalized.checkbox_fields.update(fields.checkbox_fields)
        for field_id, value in fields.date_fields.items():
            normalized.date_fields[field_id] = parse_date(value)
        return normalized


def parse_date(value: datetime | str) -> datetime:
    """Parse an ISO 8601 value into a timezone-aware UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
