# Import all models so Base.metadata is complete for create_all / migrations

from .base import Base, BaseModel
from .user import User, UserRole
from .marketplace import MarketplaceItem, Transaction, TransactionStatusEnum
from .user_stats import UserStats
from .notification import Notification
from .message import Conversation, Message

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "UserRole",
    "MarketplaceItem",
    "Transaction",
    "TransactionStatusEnum",
    "UserStats",
    "Notification",
    "Conversation",
    "Message",
]
