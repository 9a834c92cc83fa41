"""ShelfBase - Self-hosted backend for user-owned collections.

Users define collections with a typed, owner-customizable schema and fill
them with items whose field values must match that schema exactly.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
