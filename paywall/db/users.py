"""Database operations for user management."""

import os
import logging
from typing import Optional

from paywall.models.user import User, Role
from .connection import get_db_cursor, degrade_when_unavailable

logger = logging.getLogger(__name__)

USER_COLUMNS = """
    id, email, name, role, password_hash, external_id, login_method,
    created_at, updated_at, last_signed_in
"""


@degrade_when_unavailable(None)
def get_user_by_id(user_id: int) -> Optional[User]:
    """Get a user by primary key."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
            (user_id,),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


@degrade_when_unavailable(None)
def get_user_by_email(email: str) -> Optional[User]:
    """Get a user by email address."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE email = %s LIMIT 1",
            (email,),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


@degrade_when_unavailable(None)
def get_user_by_external_id(external_id: str) -> Optional[User]:
    """Get a user by their external identity provider ID."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE external_id = %s",
            (external_id,),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


@degrade_when_unavailable([])
def get_all_users() -> list[User]:
    """Get every user, oldest first."""
    with get_db_cursor() as cursor:
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY id")
        rows = cursor.fetchall()
        return [_row_to_user(row) for row in rows]


def create_user(
    email: Optional[str],
    name: Optional[str],
    password_hash: Optional[str] = None,
    role: Role = "user",
    external_id: Optional[str] = None,
    login_method: Optional[str] = None,
) -> User:
    """Create a new user record.

    Args:
        email: User's email; unique when present.
        name: Display name.
        password_hash: `salt:key` scrypt hash, or None for external-identity users.
        role: User's role, defaults to 'user'.
        external_id: Identity provider user ID, or None for email/password users.
        login_method: How the user signs in (e.g. 'email').

    Returns:
        The created User object.
    """
    logger.info(f"Creating new user with email={email}, external_id={external_id}")

    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            INSERT INTO users (email, name, password_hash, role, external_id, login_method)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {USER_COLUMNS}
            """,
            (email, name, password_hash, role, external_id, login_method),
        )
        row = cursor.fetchone()
        user = _row_to_user(row)
        logger.info(f"Created user id={user.id}")
        return user


def record_sign_in(user_id: int) -> None:
    """Stamp the user's last sign-in time."""
    with get_db_cursor() as cursor:
        cursor.execute(
            "UPDATE users SET last_signed_in = NOW() WHERE id = %s",
            (user_id,),
        )


def set_user_role(user_id: int, role: Role) -> Optional[User]:
    """Change a user's role.

    Only the admin bootstrap command calls this; no API route mutates roles.

    Returns:
        The updated User object, or None if user not found.
    """
    logger.info(f"Setting role={role} for user id={user_id}")
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            UPDATE users
            SET role = %s
            WHERE id = %s
            RETURNING {USER_COLUMNS}
            """,
            (role, user_id),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def update_external_profile(
    external_id: str,
    email: Optional[str],
    name: Optional[str],
    login_method: Optional[str],
) -> Optional[User]:
    """Refresh the cached profile of an external-identity user and stamp the sign-in.

    Returns:
        The updated User object, or None if user not found.
    """
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            UPDATE users
            SET email = %s, name = %s, login_method = %s, last_signed_in = NOW()
            WHERE external_id = %s
            RETURNING {USER_COLUMNS}
            """,
            (email, name, login_method, external_id),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def get_owner_external_id() -> Optional[str]:
    """External ID that is granted the admin role on first sign-in, if configured."""
    return os.getenv("OWNER_EXTERNAL_ID") or None


def get_or_create_external_user(
    external_id: str,
    email: Optional[str],
    name: Optional[str],
    login_method: Optional[str] = None,
) -> User:
    """Get an existing external-identity user or create a new one.

    If the user exists, their cached profile is refreshed and the sign-in is
    recorded. Otherwise a new user is created with the 'user' role, or 'admin'
    when `external_id` matches OWNER_EXTERNAL_ID.

    Args:
        external_id: The identity provider's user ID.
        email: User's email from the identity provider.
        name: User's display name from the identity provider.
        login_method: Identity provider name, e.g. 'google'.

    Returns:
        The User object (existing or newly created).
    """
    existing_user = get_user_by_external_id(external_id)

    if existing_user:
        updated_user = update_external_profile(external_id, email, name, login_method)
        return updated_user or existing_user

    role: Role = "admin" if external_id == get_owner_external_id() else "user"
    return create_user(
        email=email,
        name=name,
        role=role,
        external_id=external_id,
        login_method=login_method,
    )


def _row_to_user(row) -> User:
    """Convert a database row to a User object."""
    (
        id,
        email,
        name,
        role,
        password_hash,
        external_id,
        login_method,
        created_at,
        updated_at,
        last_signed_in,
    ) = row
    return User(
        id=id,
        email=email,
        name=name,
        role=role,
        password_hash=password_hash,
        external_id=external_id,
        login_method=login_method,
        created_at=created_at,
        updated_at=updated_at,
        last_signed_in=last_signed_in,
    )
