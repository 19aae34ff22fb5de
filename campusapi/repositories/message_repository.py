from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import desc, update
from sqlalchemy.orm import Session

from campusapi.models.message import Message as MessageModel
from campusapi.repositories.base import BaseRepository
from campusapi.schemas.message import UnreadMessage


class MessageRepository(BaseRepository[MessageModel, UnreadMessage]):
    """메시지 리포지토리 - 안 읽은 메시지 이메일 알림용 조회/플래그"""

    def __init__(self, db: Session):
        super().__init__(MessageModel, UnreadMessage, db)

    def find_pending_email_notification(
        self,
        cutoff: datetime,
        limit: int,
        conversation_id: Optional[str] = None,
        after: Optional[Tuple[datetime, str]] = None,
    ) -> List[UnreadMessage]:
        """읽지 않았고, 알림 미발송이며, cutoff 이전(포함)에 생성된 메시지"""
        query = self.db.query(self.model_class).filter(
            self.model_class.is_read.is_(False),
            self.model_class.email_notification_sent.is_(False),
            self.model_class.created_at <= cutoff,
        )

        if conversation_id:
            query = query.filter(self.model_class.conversation_id == conversation_id)

        query = self._apply_keyset(query, after)
        return self._to_schemas(query.limit(limit).all())

    def mark_email_notification_sent(self, message_id: str) -> bool:
        """알림 발송 플래그 설정 (이미 설정된 경우 False)"""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.id == message_id,
                self.model_class.email_notification_sent.is_(False),
            )
            .values(email_notification_sent=True)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def find_recent_unread(self, limit: int = 10) -> List[UnreadMessage]:
        """진단용 - 최근 안 읽은 메시지"""
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.is_read.is_(False))
            .order_by(desc(self.model_class.created_at))
            .limit(limit)
            .all()
        )
        return self._to_schemas(instances)
