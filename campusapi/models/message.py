from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campusapi.models.base import BaseModel, generate_id
from campusapi.models.user import User


class Conversation(BaseModel):
    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    participant1_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    participant2_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )


class Message(BaseModel):
    """
    채팅 메시지

    is_read = false, email_notification_sent = false 이고 유예 시간이 지난
    메시지만 이메일 알림 대상입니다. 알림 발송 후에는
    email_notification_sent = true 로 바뀌며 다시 대상이 되지 않습니다.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index(
            "idx_messages_unread_notify",
            "is_read",
            "email_notification_sent",
            "created_at",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    conversation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("conversations.id"), nullable=False, index=True
    )
    sender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    receiver_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_notification_sent: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    sender: Mapped[User] = relationship(foreign_keys=[sender_id], lazy="joined")
    receiver: Mapped[User] = relationship(foreign_keys=[receiver_id], lazy="joined")
