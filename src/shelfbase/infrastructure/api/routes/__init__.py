"""API Routes for ShelfBase."""

from shelfbase.infrastructure.api.routes.collections_router import router as collections_router
from shelfbase.infrastructure.api.routes.collections_router import topics_router
from shelfbase.infrastructure.api.routes.comments_router import router as comments_router
from shelfbase.infrastructure.api.routes.items_router import router as items_router
from shelfbase.infrastructure.api.routes.search_router import router as search_router
from shelfbase.infrastructure.api.routes.users_router import router as users_router

__all__ = [
    "collections_router",
    "comments_router",
    "items_router",
    "search_router",
    "topics_router",
    "users_router",
]
