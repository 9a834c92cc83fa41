"""Unit tests for domain entities and failures."""

from datetime import datetime

import pytest

from shelfbase.domain.entities import (
    FIELD_TYPES,
    BadRequestFailure,
    Collection,
    CollectionField,
    FieldType,
    Item,
    ItemFields,
    NotFoundFailure,
    ValidateLengthFailure,
    is_failure,
)
from shelfbase.domain.services.id_generator import new_id


class TestItemFields:
    def test_of_type_returns_the_live_bucket(self):
        fields = ItemFields()
        fields.of_type(FieldType.TEXT)["publisher"] = "Penguin"
        assert fields.text_fields == {"publisher": "Penguin"}

    def test_by_type_walks_the_fixed_order(self):
        assert [t for t, _ in ItemFields().by_type()] == list(FIELD_TYPES)

    def test_len_spans_all_buckets(self):
        fields = ItemFields(number_fields={"year": 1.0}, checkbox_fields={"signed": True})
        assert len(fields) == 2

    def test_from_buckets(self):
        fields = ItemFields.from_buckets({FieldType.DATE: {"bought": datetime(2024, 1, 1)}})
        assert fields.date_fields == {"bought": datetime(2024, 1, 1)}


class TestEntities:
    def test_item_requires_collection(self):
        with pytest.raises(ValueError, match="Collection ID is required"):
            Item(id="i1", collection_id="", name="Dune")

    def test_item_renamed_copies(self):
        item = Item(id="i1", collection_id="c1", name="Dune", tags={"scifi"})
        renamed = item.renamed("Dune Messiah", {"sequel"})
        assert renamed.name == "Dune Messiah"
        assert renamed.tags == {"sequel"}
        assert item.name == "Dune"
        assert renamed.created_at == item.created_at

    def test_collection_requires_owner(self):
        with pytest.raises(ValueError, match="Owner ID is required"):
            Collection(id="c1", owner_id="", name="Books", topic_id="t1")

    def test_field_type_is_normalized_from_string(self):
        field = CollectionField(id="f1", collection_id="c1", name="Year", type="Number")
        assert field.type is FieldType.NUMBER


class TestFailures:
    def test_not_found_builds_message(self):
        failure = NotFoundFailure(resource="Item", resource_id="i1")
        assert failure.message == "Item 'i1' not found"

    def test_validate_length_is_a_bad_request(self):
        failure = ValidateLengthFailure(field_name="name", satisfies_min_length=False)
        assert isinstance(failure, BadRequestFailure)
        assert is_failure(failure)

    def test_validate_length_requires_a_failed_bound(self):
        with pytest.raises(ValueError):
            ValidateLengthFailure(field_name="name")

    def test_plain_values_are_not_failures(self):
        assert not is_failure("an-id")
        assert not is_failure(None)


def test_new_id_is_url_safe_and_unique():
    ids = {new_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(len(i) == 22 and "/" not in i and "+" not in i for i in ids)
