"""User repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from manager.database import Database

logger = get_logger(__name__)


@dataclass(frozen=True)
class User:
    user_id: str
    email: str
    password_hash: str
    created_at: datetime


class UserRepository:
    def __init__(self, database: Database):
        self.database = database

    def create_user(
        self,
        user_id: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ) -> User:
        """
        Insert a new user.

        Raises:
            sqlite3.IntegrityError: If the email is already registered
        """
        logger.debug(f"Creating user [user_id={user_id}]")

        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO users (user_id, email, password_hash, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, email, password_hash, created_at.isoformat())
            )
            conn.commit()

        logger.info(f"User created successfully [user_id={user_id}]")
        return User(
            user_id=user_id,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def get_by_email(self, email: str) -> Optional[User]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT user_id, email, password_hash, created_at FROM users WHERE email = ?",
                (email,)
            )
            return self._row_to_user(cursor.fetchone())

    def get_by_user_id(self, user_id: str) -> Optional[User]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT user_id, email, password_hash, created_at FROM users WHERE user_id = ?",
                (user_id,)
            )
            return self._row_to_user(cursor.fetchone())

    def count(self) -> int:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS c FROM users")
            return int(cursor.fetchone()["c"])

    @staticmethod
    def _row_to_user(row: Optional[sqlite3.Row]) -> Optional[User]:
        if row is None:
            return None
        return User(
            user_id=row["user_id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
