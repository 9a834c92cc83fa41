"""Domain services for ShelfBase.

The schema validator, the authorization rule and ID generation are pure and
exported here. The request-scoped services that work against the stores
(items, collections, comments, search, users) are imported from their own
modules.
"""

from shelfbase.domain.services.authorization import (
    AuthorizationGate,
    authorize_owner_or_admin,
)
from shelfbase.domain.services.id_generator import new_id
from shelfbase.domain.services.schema_validator import (
    SchemaValidationError,
    SchemaValidator,
    parse_date,
)

__all__ = [
    "AuthorizationGate",
    "SchemaValidationError",
    "SchemaValidator",
    "authorize_owner_or_admin",
    "new_id",
    "parse_date",
]
