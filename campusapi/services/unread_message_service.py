"""
안 읽은 메시지 이메일 알림 서비스

유예 시간(기본 60초)이 지나도 읽지 않은 메시지에 대해 수신자별로
스윕당 최대 한 통의 이메일을 보냅니다.

- 발송 성공한 메시지만 email_notification_sent = true 로 표시합니다.
- 발송 실패한 메시지는 표시하지 않으므로 다음 스윕에서 다시 대상이 됩니다.
- 같은 수신자의 나머지 메시지는 이번 스윕에서 건너뜁니다 (스팸 방지).
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Set
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from campusapi.config import Settings
from campusapi.repositories.base import KeysetScan
from campusapi.repositories.message_repository import MessageRepository
from campusapi.schemas.message import UnreadMessage, UnreadNotifierResult
from campusapi.services.email_service import EmailService
from campusapi.utils.email_templates import get_unread_message_email_template
from campusapi.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class UnreadMessageService:
    def __init__(self, db: Session, settings: Settings, email_service: EmailService):
        self.db = db
        self.settings = settings
        self.email_service = email_service
        self.message_repo = MessageRepository(db)

    def build_conversation_url(self, conversation_id: str) -> str:
        query = urlencode({"tab": "messages", "conversation": conversation_id})
        return f"{self.settings.APP_BASE_URL.rstrip('/')}/dashboard?{query}"

    def run_unread_notifier(
        self, conversation_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> UnreadNotifierResult:
        """유예 시간이 지난 안 읽은 메시지에 대해 수신자별 이메일 알림 발송"""
        now = now or utc_now()
        cutoff = now - timedelta(seconds=self.settings.GRACE_PERIOD_SECONDS)

        emails_sent = 0
        total_unread = 0
        processed_receivers: Set[str] = set()

        scan = self._pending_messages(cutoff, conversation_id)

        try:
            for message in scan:
                total_unread += 1

                if message.receiver_id in processed_receivers:
                    logger.debug(
                        f"Skip message {message.id}: receiver {message.receiver_id} "
                        "already notified in this sweep"
                    )
                    continue

                if self._notify_receiver(message):
                    emails_sent += 1
                    processed_receivers.add(message.receiver_id)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Unread message notifier aborted: {str(e)}")
            return UnreadNotifierResult(success=False, error=str(e) or "Unknown error")

        if scan.capped:
            logger.warning(
                f"Unread message notifier reached row cap ({self.settings.SWEEP_MAX_ROWS}); "
                "remaining messages are left for the next sweep"
            )

        logger.info(
            f"Unread message notifications sent: {emails_sent} "
            f"(scanned {total_unread} unread messages)"
        )
        return UnreadNotifierResult(
            success=True,
            emails_sent=emails_sent,
            total_unread_messages=total_unread,
        )

    def _pending_messages(
        self, cutoff: datetime, conversation_id: Optional[str]
    ) -> KeysetScan[UnreadMessage]:
        return KeysetScan(
            lambda limit, after: self.message_repo.find_pending_email_notification(
                cutoff, limit=limit, conversation_id=conversation_id, after=after
            ),
            batch_size=self.settings.SWEEP_BATCH_SIZE,
            max_rows=self.settings.SWEEP_MAX_ROWS,
        )

    def _notify_receiver(self, message: UnreadMessage) -> bool:
        """이메일 한 통 발송 후 성공 시 메시지에 발송 플래그 설정"""
        conversation_url = self.build_conversation_url(message.conversation_id)

        logger.info(
            f"Sending email notification to {message.receiver.name} "
            f"for message {message.id}"
        )
        result = self.email_service.send_email(
            to=message.receiver.email,
            subject=f"New message from {message.sender.name}",
            html=get_unread_message_email_template(
                message.receiver.name,
                message.sender.name,
                message.content,
                conversation_url,
            ),
        )

        if not result.success:
            logger.warning(
                f"Failed to send email for message {message.id} from "
                f"{message.sender.name} to {message.receiver.name}: {result.error}"
            )
            return False

        if not self.message_repo.mark_email_notification_sent(message.id):
            # 다른 스윕이 먼저 표시한 경우. 이메일은 이미 발송되었으므로 발송 건수에는 포함
            logger.warning(
                f"Message {message.id} was already flagged as notified by another sweep"
            )
        return True
