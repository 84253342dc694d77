"""Session authentication and role-based authorization."""

from .session import (
    get_current_user,
    require_user,
    require_admin,
)

# Export for use in routers
__all__ = [
    "get_current_user",
    "require_user",
    "require_admin",
]
