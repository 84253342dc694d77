"""Session tokens, the session cookie, and role-based authorization."""

import os
import logging
from datetime import datetime, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, ValidationError

from paywall.db.users import get_user_by_id
from paywall.errors import Unauthorized
from paywall.models.user import Role, User
from paywall.rules.access import require_role
from .constants import COOKIE_NAME, JWT_ALGORITHM, SESSION_TTL

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


class SessionClaims(BaseModel):
    """Identity embedded in a session token."""

    id: int
    email: str
    name: str
    role: Role


def get_jwt_secret() -> str:
    """Get the token signing secret from environment.

    This is a required environment variable validated at startup.
    """
    return os.environ["JWT_SECRET"]


def issue_session_token(user: User, now: Optional[datetime] = None) -> str:
    """Sign a session token for `user`, valid for SESSION_TTL."""
    if now is None:
        now = datetime.now(timezone.utc)
    claims = SessionClaims(
        id=user.id, email=user.email or "", name=user.name or "", role=user.role
    )
    payload = {
        **claims.model_dump(),
        "iat": now,
        "exp": now + SESSION_TTL,
    }
    return jwt.encode(payload, get_jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_session_token(token: str) -> Optional[SessionClaims]:
    """Validate a session token.

    Returns the embedded claims if valid, None if expired, tampered or malformed.
    """
    try:
        decoded = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
        return SessionClaims.model_validate(decoded)
    except jwt.ExpiredSignatureError:
        logger.warning("Session token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {e}")
        return None
    except ValidationError as e:
        logger.warning(f"Session token missing required claims: {e}")
        return None


def _is_https(request: Request) -> bool:
    forwarded = request.headers.get("x-forwarded-proto", "")
    protocols = [proto.strip().lower() for proto in forwarded.split(",")]
    return request.url.scheme == "https" or "https" in protocols


def set_session_cookie(response: Response, request: Request, token: str) -> None:
    """Attach the session cookie to `response`.

    Cross-site (`SameSite=None`) cookies require `Secure`, so plain-HTTP
    requests (local development) fall back to `SameSite=Lax`.
    """
    secure = _is_https(request)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=int(SESSION_TTL.total_seconds()),
        httponly=True,
        secure=secure,
        samesite="none" if secure else "lax",
        path="/",
    )


def clear_session_cookie(response: Response, request: Request) -> None:
    secure = _is_https(request)
    response.delete_cookie(
        key=COOKIE_NAME,
        httponly=True,
        secure=secure,
        samesite="none" if secure else "lax",
        path="/",
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """FastAPI dependency resolving the caller's identity, if any.

    Reads the session cookie, falling back to an `Authorization: Bearer` header.
    The user is re-read from the database so role changes apply immediately.

    Returns:
        User object, or None for anonymous callers and invalid/expired tokens.
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        return None

    claims = decode_session_token(token)
    if not claims:
        return None

    user = get_user_by_id(claims.id)
    if user is None:
        logger.warning(f"Session token refers to unknown user id={claims.id}")
    return user


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    """FastAPI dependency requiring a logged-in user.

    Raises:
        Unauthorized if the request carries no valid session.
    """
    if user is None:
        raise Unauthorized("Login required")
    return user


async def require_admin(user: User = Depends(require_user)) -> User:
    """FastAPI dependency requiring admin role.

    Raises:
        Forbidden if the user doesn't have admin role.
    """
    return require_role(user, "admin")
