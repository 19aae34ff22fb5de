from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session

from campusapi.models.notification import Notification as NotificationModel
from campusapi.repositories.base import BaseRepository
from campusapi.schemas.notification import NotificationSchema


class NotificationRepository(BaseRepository[NotificationModel, NotificationSchema]):
    """알림 리포지토리 - 추가 전용, is_read만 변경"""

    def __init__(self, db: Session):
        super().__init__(NotificationModel, NotificationSchema, db)

    def create_notification(
        self, user_id: str, type: str, title: str, message: str, commit: bool = True
    ) -> NotificationSchema:
        notification = self.create(
            commit=commit, user_id=user_id, type=type, title=title, message=message
        )
        assert notification is not None
        return notification

    def get_recent_for_user(self, user_id: str, limit: int = 50) -> List[NotificationSchema]:
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.created_at))
            .limit(limit)
            .all()
        )
        return self._to_schemas(instances)

    def mark_read(self, user_id: str, notification_ids: List[str]) -> int:
        """본인 소유 알림만 읽음 처리, 변경된 행 수 반환"""
        updated = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.id.in_(notification_ids),
                self.model_class.user_id == user_id,
            )
            .update({self.model_class.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated
