"""API routes package."""

from manager.routes.auth_routes import router as auth_router
from manager.routes.file_routes import router as file_router
from manager.routes.status_routes import router as status_router
from manager.routes.user_routes import router as user_router

__all__ = ["auth_router", "file_router", "status_router", "user_router"]
