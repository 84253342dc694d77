"""Who may see which catalog item.

Pure decision logic: the caller supplies the user, the item, and a way to look
up the user's latest subscription. Nothing here reads the database itself.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from paywall.errors import Forbidden, Unauthorized
from paywall.models.content import Content
from paywall.models.subscription import Subscription
from paywall.models.user import Role, User

logger = logging.getLogger(__name__)

SubscriptionLookup = Callable[[], Optional[Subscription]]


class Access(Enum):
    ALLOW = "allow"
    DENY_LOGIN_REQUIRED = "login_required"
    DENY_SUBSCRIPTION_REQUIRED = "subscription_required"

    @property
    def allowed(self) -> bool:
        return self is Access.ALLOW


def decide_access(
    user: Optional[User],
    item: Content,
    latest_subscription: SubscriptionLookup,
    now: Optional[datetime] = None,
) -> Access:
    """Decide whether `user` (None for anonymous) may view `item`.

    Rules, first match wins:
    - public items are visible to everyone
    - anonymous users are denied (they must log in)
    - admins see everything
    - users whose latest subscription is active and unexpired see everything
    - everyone else is denied (they must subscribe)

    `latest_subscription` is only called when the last two rules are reached.
    """
    if item.is_public:
        return Access.ALLOW
    if user is None:
        return Access.DENY_LOGIN_REQUIRED
    if user.is_admin:
        return Access.ALLOW

    subscription = latest_subscription()
    if subscription is not None and subscription.is_active(now):
        return Access.ALLOW
    return Access.DENY_SUBSCRIPTION_REQUIRED


def can_view(
    user: Optional[User],
    item: Content,
    latest_subscription: SubscriptionLookup,
    now: Optional[datetime] = None,
) -> bool:
    return decide_access(user, item, latest_subscription, now).allowed


def visible_items(
    user: Optional[User],
    items: list[Content],
    latest_subscription: SubscriptionLookup,
    now: Optional[datetime] = None,
) -> list[Content]:
    """Filter a listing down to the items `user` may view.

    Items are either kept whole or dropped; nothing is redacted. The
    subscription lookup runs at most once for the whole listing.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    cached: list[Optional[Subscription]] = []

    def lookup_once() -> Optional[Subscription]:
        if not cached:
            cached.append(latest_subscription())
        return cached[0]

    return [item for item in items if can_view(user, item, lookup_once, now)]


def ensure_can_view(
    user: Optional[User],
    item: Content,
    latest_subscription: SubscriptionLookup,
    now: Optional[datetime] = None,
) -> Content:
    """Return `item` if `user` may view it, else raise the matching denial.

    Raises:
        Unauthorized: if the item is private and the caller is anonymous.
        Forbidden: if the caller is logged in without an active subscription.
    """
    decision = decide_access(user, item, latest_subscription, now)
    if decision is Access.DENY_LOGIN_REQUIRED:
        raise Unauthorized("Login required to access this content")
    if decision is Access.DENY_SUBSCRIPTION_REQUIRED:
        logger.debug(f"User id={user.id if user else None} denied content id={item.id}")
        raise Forbidden("An active subscription is required to access this content")
    return item


def require_role(user: User, role: Role) -> User:
    """Return `user` if they hold `role`, else raise Forbidden."""
    if user.role != role:
        raise Forbidden(f"{role.capitalize()} access required")
    return user
