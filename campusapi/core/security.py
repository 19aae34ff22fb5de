import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError

from campusapi.config import Settings, settings as default_settings


class TokenPayload(BaseModel):
    sub: str  # subject, user id
    email: Optional[str] = None


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
    settings: Settings = default_settings,
) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt


def decode_access_token(
    token: str, settings: Settings = default_settings
) -> Optional[TokenPayload]:
    """JWT 토큰을 검증하고 페이로드를 반환합니다. 유효하지 않으면 None."""
    try:
        payload: Dict[str, Any] = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError):
        return None


def verify_shared_secret(provided: Optional[str], expected: str) -> bool:
    """크론 트리거용 공유 시크릿 비교 (타이밍 공격 방지)"""
    if not expected or not provided:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())
