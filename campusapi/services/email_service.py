import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from campusapi.config import Settings
from campusapi.schemas.email import EmailDeliveryMode, EmailResult
from campusapi.services.aws_service import AwsService

logger = logging.getLogger(__name__)


def resolve_delivery_mode(settings: Settings) -> EmailDeliveryMode:
    """USE_REAL_EMAILS 이거나 운영 환경이면 실제 수신자에게 발송"""
    if settings.USE_REAL_EMAILS or settings.is_production:
        return EmailDeliveryMode.REAL
    return EmailDeliveryMode.SANDBOX


class EmailService:
    """
    아웃바운드 이메일 발송 서비스 (AWS SES)

    send_email은 예외를 던지지 않고 EmailResult.success로 실패를 알립니다.
    수신자 라우팅(실제/샌드박스)은 생성 시점에 한 번 결정됩니다.
    """

    def __init__(self, settings: Settings, aws_service: Optional[AwsService] = None):
        self.settings = settings
        self.aws_service = aws_service or AwsService(settings)
        self.delivery_mode = resolve_delivery_mode(settings)

    def resolve_recipient(self, to: str) -> str:
        if self.delivery_mode == EmailDeliveryMode.REAL:
            return to
        return self.settings.SANDBOX_EMAIL

    def send_email(self, to: str, subject: str, html: str) -> EmailResult:
        recipient = self.resolve_recipient(to)

        try:
            message_id = self.aws_service.send_ses_email(
                source=self.settings.SES_FROM_EMAIL,
                to_email=recipient,
                subject=subject,
                body_html=html,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to send email via SES to {recipient}: {str(e)}")
            return EmailResult(success=False, recipient=recipient, error=str(e))

        logger.info(f"Email sent to {recipient}, MessageId: {message_id}")
        return EmailResult(success=True, message_id=message_id, recipient=recipient)
