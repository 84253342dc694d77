"""User model for application-level user management."""

from __future__ import annotations
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


Role = Literal["user", "admin"]


class User(BaseModel):
    """Platform user with role-based access control.

    Users sign up with email and password, or arrive through an external
    identity provider, in which case `external_id` is set and there is no
    password hash.
    """

    id: int
    email: str | None
    name: str | None
    role: Role
    password_hash: str | None = Field(default=None, exclude=True)
    external_id: str | None = None
    login_method: str | None = None
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime | None = None

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == "admin"

    def public(self) -> PublicUser:
        return PublicUser(id=self.id, email=self.email, name=self.name, role=self.role)


class PublicUser(BaseModel):
    """The subset of a user returned to clients after login or registration."""

    id: int
    email: str | None
    name: str | None
    role: Role
