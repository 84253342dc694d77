from datetime import timedelta

"""Session cookie and token settings shared by the auth routes and dependencies."""

COOKIE_NAME = "app_session_id"

# Both the signed token and the cookie carrying it live this long.
SESSION_TTL = timedelta(days=7)

JWT_ALGORITHM = "HS256"
