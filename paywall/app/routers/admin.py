"""Admin-only routes: catalog management and user/subscription listings."""

from typing import List

from fastapi import APIRouter, Depends

from paywall.app.auth import require_admin
from paywall.app.models import SuccessResponse
from paywall.db.content import create_content, delete_content, update_content
from paywall.db.subscriptions import get_all_subscriptions
from paywall.db.users import get_all_users
from paywall.errors import NotFound
from paywall.models.content import Content, ContentCreate, ContentUpdate
from paywall.models.subscription import Subscription
from paywall.models.user import User

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/content", response_model=Content)
def add_content(
    request: ContentCreate,
    _user: User = Depends(require_admin),
) -> Content:
    """Add an item to the catalog."""
    return create_content(request)


@router.patch("/content/{content_id}", response_model=Content)
def edit_content(
    content_id: int,
    request: ContentUpdate,
    _user: User = Depends(require_admin),
) -> Content:
    """Update catalog item properties. Omitted fields are left unchanged.

    Raises:
        NotFound if no item has that ID.
    """
    updated = update_content(content_id, request)
    if updated is None:
        raise NotFound(f"Content with ID '{content_id}' not found")
    return updated


@router.delete("/content/{content_id}", response_model=SuccessResponse)
def remove_content(
    content_id: int,
    _user: User = Depends(require_admin),
) -> SuccessResponse:
    """Permanently delete a catalog item.

    Raises:
        NotFound if no item has that ID.
    """
    if not delete_content(content_id):
        raise NotFound(f"Content with ID '{content_id}' not found")
    return SuccessResponse()


@router.get("/users", response_model=List[User])
def list_users(_user: User = Depends(require_admin)) -> list[User]:
    """Get every registered user. Password hashes are never included."""
    return get_all_users()


@router.get("/subscriptions", response_model=List[Subscription])
def list_subscriptions(_user: User = Depends(require_admin)) -> list[Subscription]:
    """Get every subscription, newest first."""
    return get_all_subscriptions()
