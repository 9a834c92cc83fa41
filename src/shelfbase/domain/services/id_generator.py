"""Random identifier generation.

IDs are 22 URL-safe characters drawn from ``secrets``. Uniqueness is
probabilistic; the stores enforce it with primary keys and a collision is
reported as a conflict.
"""

import secrets

ID_BYTES = 16


def new_id() -> str:
    """Generate a new random URL-safe identifier."""
    return secrets.token_urlsafe(ID_BYTES)
