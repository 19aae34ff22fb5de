from typing import Optional
from sqlalchemy.orm import Session

from campusapi.config import Settings
from campusapi.core.security import decode_access_token
from campusapi.core.exceptions import AuthenticationError
from campusapi.repositories.user_repository import UserRepository
from campusapi.schemas.user import User as UserSchema
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.user_repo = UserRepository(db)
        self.settings = settings

    def get_current_user(self, token: str) -> Optional[UserSchema]:
        """토큰으로 현재 사용자 조회"""
        payload = decode_access_token(token, settings=self.settings)
        if payload is None:
            raise AuthenticationError("Invalid or expired token")

        user = self.user_repo.get_by_id(payload.sub)
        if user is None:
            logger.warning(f"Token subject {payload.sub} does not match any user")
            raise AuthenticationError("User not found")
        return user
