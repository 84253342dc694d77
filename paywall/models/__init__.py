from .user import User, PublicUser, Role
from .subscription import Subscription, NewSubscription, SubscriptionStatus
from .content import Content, ContentCreate, ContentUpdate, ContentType


__all__ = [
    "User",
    "PublicUser",
    "Role",
    "Subscription",
    "NewSubscription",
    "SubscriptionStatus",
    "Content",
    "ContentCreate",
    "ContentUpdate",
    "ContentType",
]
