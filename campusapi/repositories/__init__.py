# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .transaction_repository import TransactionRepository
from .user_stats_repository import UserStatsRepository
from .notification_repository import NotificationRepository
from .message_repository import MessageRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "TransactionRepository",
    "UserStatsRepository",
    "NotificationRepository",
    "MessageRepository",
]
