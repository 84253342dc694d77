"""Email/password registration, login, and session routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from psycopg.errors import UniqueViolation

from paywall.app.models import AuthResponse, LoginRequest, RegisterRequest, SuccessResponse
from paywall.app.passwords import hash_password, verify_password
from paywall.app.session import (
    clear_session_cookie,
    get_current_user,
    issue_session_token,
    set_session_cookie,
)
from paywall.db.users import create_user, get_user_by_email, record_sign_in
from paywall.errors import Conflict, Unauthorized
from paywall.models.user import PublicUser, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Same message for unknown email and wrong password, so login can't be used to
# find out which emails are registered.
INVALID_CREDENTIALS = "Incorrect email or password"


def _start_session(user: User, request: Request, response: Response) -> AuthResponse:
    token = issue_session_token(user)
    set_session_cookie(response, request, token)
    return AuthResponse(user=user.public())


@router.post("/register", response_model=AuthResponse)
def register(body: RegisterRequest, request: Request, response: Response) -> AuthResponse:
    """Create an email/password account and log it in.

    Raises:
        Conflict if the email is already registered.
    """
    if get_user_by_email(body.email) is not None:
        raise Conflict("This email is already registered")

    try:
        user = create_user(
            email=body.email,
            name=body.name,
            password_hash=hash_password(body.password),
            role="user",
            login_method="email",
        )
    except UniqueViolation:
        # Lost a race with a concurrent registration for the same email
        raise Conflict("This email is already registered")
    return _start_session(user, request, response)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, request: Request, response: Response) -> AuthResponse:
    """Check email and password and start a session.

    Raises:
        Unauthorized if the email is unknown or the password is wrong.
    """
    user = get_user_by_email(body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info(f"Failed login attempt for email={body.email}")
        raise Unauthorized(INVALID_CREDENTIALS)

    record_sign_in(user.id)
    return _start_session(user, request, response)


@router.post("/logout", response_model=SuccessResponse)
def logout(request: Request, response: Response) -> SuccessResponse:
    """Clear the session cookie. Succeeds whether or not a session existed."""
    clear_session_cookie(response, request)
    return SuccessResponse()


@router.get("/me", response_model=Optional[PublicUser])
def me(user: Optional[User] = Depends(get_current_user)) -> Optional[PublicUser]:
    """Get the logged-in user, or null for anonymous callers."""
    return user.public() if user else None
