# venue_admin/models/__init__.py
from .base import Base
from .user import User, UserRole
from .venues import Club, Event, Restaurant, Lounge, Pub, Beach, LiveShow
from .feed import Post
from .subscriptions import SubscriptionPlan

__all__ = [
    "Base",
    "User", "UserRole",
    "Club", "Event", "Restaurant", "Lounge", "Pub", "Beach", "LiveShow",
    "Post",
    "SubscriptionPlan",
]
