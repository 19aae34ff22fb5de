from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from campusapi.schemas.user import UserBrief


class UnreadMessage(BaseModel):
    """이메일 알림 대상 메시지 (발신자/수신자 정보 포함)"""

    id: str
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool
    email_notification_sent: bool
    created_at: datetime
    sender: UserBrief
    receiver: UserBrief

    class Config:
        from_attributes = True


class UnreadNotifierResult(BaseModel):
    """
    안 읽은 메시지 알림 스윕 결과

    성공: {success: true, emailsSent, totalUnreadMessages}
    실패: {success: false, error}
    """

    success: bool
    emails_sent: Optional[int] = Field(None, alias="emailsSent")
    total_unread_messages: Optional[int] = Field(None, alias="totalUnreadMessages")
    error: Optional[str] = None

    class Config:
        populate_by_name = True

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
