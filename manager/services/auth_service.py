"""Authentication service for business logic."""

import sqlite3
from datetime import datetime
from typing import Any, Optional

from common.exceptions import UnauthenticatedError, UserAlreadyExistsError, ValidationError
from common.logging_config import get_logger
from common.utils import generate_uuid
from manager.auth import hash_password, parse_basic_credentials, verify_password
from manager.repositories.user_repository import User, UserRepository
from manager.session_store import SessionStore

logger = get_logger(__name__)


class AuthService:
    def __init__(self, user_repo: UserRepository, sessions: SessionStore):
        self.user_repo = user_repo
        self.sessions = sessions

    def register_user(self, email: Any, password: Any) -> User:
        if not email:
            raise ValidationError("Missing email")
        if not isinstance(email, str):
            raise ValidationError("Invalid email")
        if not password:
            raise ValidationError("Missing password")
        if not isinstance(password, str):
            raise ValidationError("Invalid password")

        logger.info("Attempting to register a new user")
        if self.user_repo.get_by_email(email) is not None:
            logger.warning("Registration failed: email already exists")
            raise UserAlreadyExistsError()

        try:
            user = self.user_repo.create_user(
                user_id=generate_uuid(),
                email=email,
                password_hash=hash_password(password),
                created_at=datetime.utcnow(),
            )
        except sqlite3.IntegrityError:
            logger.warning("Registration failed due to integrity error")
            raise UserAlreadyExistsError()

        logger.info(f"Successfully registered user [user_id={user.user_id}]")
        return user

    async def login_user(self, email: str, password: str) -> str:
        user = self.user_repo.get_by_email(email)
        if user is None:
            logger.warning("Login failed: unknown email")
            raise UnauthenticatedError()

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password [user_id={user.user_id}]")
            raise UnauthenticatedError()

        token = await self.sessions.issue(user.user_id)
        logger.info(f"Successfully logged in user [user_id={user.user_id}]")
        return token

    async def connect(self, authorization: Optional[str]) -> str:
        """
        Log in with an "Authorization: Basic base64(email:password)" header.

        Returns:
            A new session token
        """
        credentials = parse_basic_credentials(authorization)
        if credentials is None:
            raise UnauthenticatedError()
        email, password = credentials
        return await self.login_user(email, password)

    async def disconnect(self, token: Optional[str]) -> None:
        """
        Revoke a session. An unknown or already revoked token is Unauthenticated.
        """
        if not token or not await self.sessions.revoke(token):
            raise UnauthenticatedError()
        logger.info("Session revoked")

    async def authenticate(self, token: Optional[str]) -> str:
        """
        Resolve a required token to its user_id.

        Raises:
            UnauthenticatedError: If the token is missing, unknown or expired
        """
        user_id = await self.sessions.resolve(token) if token else None
        if user_id is None:
            raise UnauthenticatedError()
        return user_id

    def get_user(self, user_id: str) -> User:
        user = self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UnauthenticatedError()
        return user
