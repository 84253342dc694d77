"""Catalog browsing routes, filtered by the caller's access."""

from functools import partial
from typing import List, Optional

from fastapi import APIRouter, Depends

from paywall.app.auth import get_current_user
from paywall.db.content import get_all_content, get_content_by_id, get_public_content
from paywall.db.subscriptions import get_latest_subscription
from paywall.errors import NotFound
from paywall.models.content import Content
from paywall.models.user import User
from paywall.rules.access import SubscriptionLookup, ensure_can_view, visible_items

router = APIRouter(prefix="/content", tags=["content"])


def _subscription_lookup(user: Optional[User]) -> SubscriptionLookup:
    if user is None:
        return lambda: None
    return partial(get_latest_subscription, user.id)


@router.get("", response_model=List[Content])
def list_content(user: Optional[User] = Depends(get_current_user)) -> list[Content]:
    """Get the catalog items the caller may view.

    Anonymous callers only ever see public items, so they skip the full scan.
    """
    items = get_public_content() if user is None else get_all_content()
    return visible_items(user, items, _subscription_lookup(user))


@router.get("/{content_id}", response_model=Content)
def read_content(
    content_id: int,
    user: Optional[User] = Depends(get_current_user),
) -> Content:
    """Get a single catalog item.

    Raises:
        NotFound if no item has that ID.
        Unauthorized if the item is private and the caller isn't logged in.
        Forbidden if the caller has no active subscription.
    """
    item = get_content_by_id(content_id)
    if item is None:
        raise NotFound(f"Content with ID '{content_id}' not found")
    return ensure_can_view(user, item, _subscription_lookup(user))
