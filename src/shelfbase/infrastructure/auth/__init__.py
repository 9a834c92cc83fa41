"""Authentication infrastructure: bearer JWT access tokens."""

from shelfbase.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenError,
    TokenExpiredError,
    jwt_service,
)

__all__ = [
    "InvalidTokenError",
    "JWTService",
    "TokenError",
    "TokenExpiredError",
    "jwt_service",
]
