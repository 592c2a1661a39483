"""API routes package."""

from lookbook.api.routes.health import router as health_router
from lookbook.api.routes.suggest import router as suggest_router

__all__ = [
    "health_router",
    "suggest_router",
]
