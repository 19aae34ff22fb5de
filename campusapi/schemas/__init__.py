from .user import User, UserBrief
from .balance import SettlementSweepResult, UserStatsSchema
from .message import UnreadMessage, UnreadNotifierResult
from .notification import NotificationSchema
