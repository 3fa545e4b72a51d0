"""Service layer for business logic."""

from manager.services.auth_service import AuthService
from manager.services.file_service import FileService

__all__ = [
    "AuthService",
    "FileService",
]
