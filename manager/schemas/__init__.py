"""Pydantic schemas for API requests and responses."""

from manager.schemas.auth import (
    RegisterRequest,
    UserResponse,
    ConnectResponse
)
from manager.schemas.files import (
    UploadRequest,
    FileResponse
)
from manager.schemas.common import ErrorResponse, StatusResponse, StatsResponse

__all__ = [
    "RegisterRequest",
    "UserResponse",
    "ConnectResponse",
    "UploadRequest",
    "FileResponse",
    "ErrorResponse",
    "StatusResponse",
    "StatsResponse"
]
