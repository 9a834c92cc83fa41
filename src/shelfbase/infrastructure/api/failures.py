"""Translation of domain failures into HTTP responses."""

from dataclasses import asdict

from fastapi import status
from fastapi.responses import JSONResponse

from shelfbase.domain.entities import (
    BadRequestFailure,
    ConflictFailure,
    Failure,
    InternalFailure,
    NotAuthorizedFailure,
    NotFoundFailure,
    ValidateLengthFailure,
)

# Checked in order, so subclasses come before their bases
_STATUS = (
    (NotFoundFailure, status.HTTP_404_NOT_FOUND, "Not found"),
    (NotAuthorizedFailure, status.HTTP_403_FORBIDDEN, "Not authorized"),
    (ValidateLengthFailure, status.HTTP_422_UNPROCESSABLE_CONTENT, "Validation error"),
    (BadRequestFailure, status.HTTP_400_BAD_REQUEST, "Bad request"),
    (ConflictFailure, status.HTTP_409_CONFLICT, "Conflict"),
    (InternalFailure, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error"),
)


def failure_response(failure: Failure) -> JSONResponse:
    """Build the JSON error response for a failure returned by a service."""
    status_code, error = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error"
    for failure_type, code, label in _STATUS:
        if isinstance(failure, failure_type):
            status_code, error = code, label
            break

    content: dict = {"error": error, "message": failure.message}
    if isinstance(failure, ValidateLengthFailure):
        content["field"] = failure.field_name
        content["satisfies_min_length"] = failure.satisfies_min_length
        content["satisfies_max_length"] = failure.satisfies_max_length
    elif isinstance(failure, BadRequestFailure) and failure.errors:
        content["details"] = [asdict(e) for e in failure.errors]
    if isinstance(failure, InternalFailure) and failure.retryable:
        content["retryable"] = True
    return JSONResponse(status_code=status_code, content=content)
