from .user import UserFactory
from .content import ContentFactory
from .subscription import SubscriptionFactory

__all__ = [
    "UserFactory",
    "ContentFactory",
    "SubscriptionFactory",
]
