"""
타임존 유틸리티

DB에는 UTC로 저장하고, 사용자 표시용으로만 WIB(UTC+7)를 사용합니다.
"""

from datetime import datetime, timezone, timedelta
from typing import Optional

# 서부 인도네시아 표준시 (WIB = UTC+7)
WIB = timezone(timedelta(hours=7))


def utc_now() -> datetime:
    """현재 UTC 시간을 반환합니다."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주합니다 (SQLite는 타임존을 저장하지 않음)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_wib(dt: datetime) -> datetime:
    return ensure_utc(dt).astimezone(WIB)  # type: ignore[union-attr]
