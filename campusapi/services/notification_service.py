import logging
from typing import List

from sqlalchemy.orm import Session

from campusapi.repositories.notification_repository import NotificationRepository
from campusapi.schemas.notification import (
    MarkNotificationsReadResponse,
    NotificationSchema,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """사용자 알림 조회 및 읽음 처리"""

    RECENT_LIMIT = 50

    def __init__(self, db: Session):
        self.db = db
        self.notification_repo = NotificationRepository(db)

    def get_user_notifications(self, user_id: str) -> List[NotificationSchema]:
        return self.notification_repo.get_recent_for_user(user_id, limit=self.RECENT_LIMIT)

    def mark_as_read(
        self, user_id: str, notification_ids: List[str]
    ) -> MarkNotificationsReadResponse:
        updated = self.notification_repo.mark_read(user_id, notification_ids)
        logger.info(f"Marked {updated} notifications as read for user {user_id}")
        return MarkNotificationsReadResponse(updated=updated)
