"""API routes package."""

from vault.routes.file_routes import router as file_router
from vault.routes.group_routes import router as group_router

__all__ = ["file_router", "group_router"]
