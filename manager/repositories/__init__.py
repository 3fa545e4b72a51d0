"""Repository layer for data access."""

from manager.repositories.user_repository import User, UserRepository
from manager.repositories.file_repository import FileRepository

__all__ = [
    "User",
    "UserRepository",
    "FileRepository",
]
