"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str
    code: str


class StatusResponse(BaseModel):
    """Response model for backend liveness."""
    redis: bool
    db: bool


class StatsResponse(BaseModel):
    """Response model for object counts."""
    users: int
    files: int
