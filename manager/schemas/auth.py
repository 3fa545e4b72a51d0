"""Pydantic schemas for user and session endpoints."""

from typing import Any

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    """Request model for user registration. Missing or mistyped fields are reported by the service."""
    email: Any = None
    password: Any = None


class UserResponse(BaseModel):
    """Response model for a user."""
    id: str
    email: str


class ConnectResponse(BaseModel):
    """Response model for login."""
    token: str
