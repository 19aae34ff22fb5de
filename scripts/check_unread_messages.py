"""
안 읽은 메시지 진단 스크립트

최근 안 읽은 메시지와 각 메시지의 이메일 알림 대상 여부를 출력합니다.
알림 스윕이 메시지를 건너뛰는 이유를 확인할 때 사용합니다.
"""

from datetime import timedelta

from campusapi.config import settings
from campusapi.database.session import get_db_context
from campusapi.repositories.message_repository import MessageRepository
from campusapi.utils.timezone_utils import ensure_utc, to_wib, utc_now


def check_unread_messages(limit: int = 10):
    now = utc_now()
    cutoff = now - timedelta(seconds=settings.GRACE_PERIOD_SECONDS)

    with get_db_context(commit=False) as db:
        messages = MessageRepository(db).find_recent_unread(limit=limit)

        print(f"Recent unread messages: {len(messages)}")
        print(f"Grace period cutoff: {cutoff.isoformat()}")
        print("-" * 60)

        for message in messages:
            created_at = ensure_utc(message.created_at)
            age_seconds = int((now - created_at).total_seconds())
            eligible = (
                not message.email_notification_sent and created_at <= cutoff
            )

            print(f"Message {message.id}")
            print(f"  From: {message.sender.name} ({message.sender.email})")
            print(f"  To:   {message.receiver.name} ({message.receiver.email})")
            print(f"  Content: {message.content[:50]}")
            print(f"  Sent at: {to_wib(created_at):%Y-%m-%d %H:%M:%S} WIB")
            print(f"  Age: {age_seconds}s")
            print(f"  Email sent: {message.email_notification_sent}")
            print(f"  Eligible for email: {'yes' if eligible else 'no'}")


if __name__ == "__main__":
    check_unread_messages()
