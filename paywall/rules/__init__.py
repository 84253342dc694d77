from .access import (
    Access,
    decide_access,
    can_view,
    visible_items,
    ensure_can_view,
    require_role,
)

__all__ = [
    "Access",
    "decide_access",
    "can_view",
    "visible_items",
    "ensure_can_view",
    "require_role",
]
