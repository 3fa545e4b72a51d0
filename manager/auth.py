"""Authentication and security utilities."""

import base64
import binascii
from typing import Optional, Tuple

import bcrypt
from fastapi import Header, Request


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: Bcrypt hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = password.encode('utf-8')
    hash_bytes = password_hash.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hash_bytes)


def parse_basic_credentials(authorization: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Extract (email, password) from an "Authorization: Basic ..." header.

    Returns:
        Tuple of email and password, or None if the header is missing or malformed
    """
    if not authorization or not authorization.startswith("Basic "):
        return None

    encoded = authorization[len("Basic "):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode('utf-8')
    except (binascii.Error, ValueError):
        return None

    email, sep, password = decoded.partition(':')
    if not sep or not email or not password:
        return None
    return email, password


def get_container(request: Request):
    """
    FastAPI dependency returning the ServiceContainer built at startup.
    """
    return request.app.state.container


async def get_current_user(request: Request, x_token: Optional[str] = Header(None)) -> str:
    """
    FastAPI dependency resolving the X-Token header to a user_id.

    Raises:
        UnauthenticatedError: If the token is missing, unknown or expired
        TransientBackendError: If the session store is unreachable
    """
    container = get_container(request)
    user_id = await container.auth_service.authenticate(x_token)
    request.state.user_id = user_id
    return user_id
