"""User service: registration, login and profile lookup."""

import sqlite3
from datetime import datetime
from typing import Optional
from werkzeug.security import check_password_hash, generate_password_hash
from errors import AuthError, PersistenceError, ValidationError
from models.user import User
from logger import get_logger

logger = get_logger()

_USER_SELECT_FIELDS = "id, username, email, created_at"


class UserService:
    """Service for managing users."""

    def __init__(self, db_manager):
        """Initialize the user service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def register(self, username: str, password: str, email: str) -> User:
        """Create a new user.

        Uniqueness of username and email is enforced by the table's UNIQUE
        constraints in the same statement as the insert, so two concurrent
        registrations cannot both claim a name.

        Args:
            username: Validated username.
            password: Plain-text password; only its hash is stored.
            email: Validated email address.

        Returns:
            The created User.

        Raises:
            ValidationError: If the username or email is already taken.
            PersistenceError: If the insert fails for another reason.
        """
        password_hash = generate_password_hash(password)

        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (username, password, email) VALUES (?, ?, ?)",
                    (username, password_hash, email),
                )
                conn.commit()
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            message = str(e)
            if "users.username" in message:
                raise ValidationError("用户名已存在") from e
            if "users.email" in message:
                raise ValidationError("邮箱已存在") from e
            raise PersistenceError(f"注册失败: {e}") from e
        except sqlite3.Error as e:
            logger.error(f"Failed to register user {username}: {e}")
            raise PersistenceError(f"注册失败: {e}") from e

        logger.info(f"Registered user {username} (ID: {user_id})")
        return self.find(user_id)

    def authenticate(self, username: str, password: str) -> User:
        """Check a username/password pair.

        Returns:
            The matching User.

        Raises:
            AuthError: If the user does not exist or the password is wrong.
            PersistenceError: If the lookup fails.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    f"SELECT {_USER_SELECT_FIELDS}, password FROM users WHERE username = ?",
                    (username,),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to look up user {username}: {e}")
            raise PersistenceError(f"登录失败: {e}") from e

        if row is None or not check_password_hash(row[4], password):
            logger.warning(f"Failed login attempt for {username}")
            raise AuthError("用户名或密码错误")

        return self._row_to_user(row)

    def find(self, user_id: int) -> Optional[User]:
        """Get a user by ID.

        Returns:
            User object if found, None otherwise.

        Raises:
            PersistenceError: If the lookup fails.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    f"SELECT {_USER_SELECT_FIELDS} FROM users WHERE id = ?",
                    (user_id,),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to look up user {user_id}: {e}")
            raise PersistenceError(f"获取用户信息失败: {e}") from e

        if row:
            return self._row_to_user(row)
        return None

    def _row_to_user(self, row: tuple) -> User:
        return User(
            id=row[0],
            username=row[1],
            email=row[2],
            created_at=datetime.fromisoformat(row[3]) if row[3] else None,
        )
