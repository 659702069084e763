"""API routers package."""

from .common import router as common_router
from .preferences import router as preferences_router
from .sync import router as sync_router

__all__ = [
    "common_router",
    "preferences_router",
    "sync_router",
]
