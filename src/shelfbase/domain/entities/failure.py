"""Typed failure values returned by domain services.

Validation and authorization problems are expected outcomes, so services
return one of these instead of raising. Routers translate them into HTTP
responses.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Failure:
    """Base class for every failure a service can return."""

    message: str = ""


@dataclass
class NotFoundFailure(Failure):
    """A referenced collection, item, field, comment or user does not exist."""

    resource: str = ""
    resource_id: str = ""

    def __post_init__(self) -> None:
        if not self.message and self.resource:
            self.message = f"{self.resource} '{self.resource_id}' not found"


@dataclass
class NotAuthorizedFailure(Failure):
    """The requester is neither the owner of the resource nor an admin."""

    message: str = "Not authorized"


@dataclass
class BadRequestFailure(Failure):
    """The payload is malformed or violates the collection schema.

    ``errors`` holds the individual validation errors, if any.
    """

    message: str = "Bad request"
    errors: list[Any] = field(default_factory=list)


@dataclass
class ValidateLengthFailure(BadRequestFailure):
    """A name is outside its allowed length range."""

    field_name: str = ""
    satisfies_min_length: bool = True
    satisfies_max_length: bool = True

    def __post_init__(self) -> None:
        if self.satisfies_min_length and self.satisfies_max_length:
            raise ValueError("ValidateLengthFailure requires a failed length check")


@dataclass
class ConflictFailure(Failure):
    """A uniqueness constraint in an underlying store was violated."""

    message: str = "Conflict"


@dataclass
class InternalFailure(Failure):
    """An unexpected store failure, after rollback.

    ``retryable`` is set when the failure was a timeout.
    """

    message: str = "Internal error"
    retryable: bool = False


def is_failure(value: Any) -> bool:
    """Whether a service result is a failure."""
    return isinstance(value, Failure)
