from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import Optional

from campusapi.models.user import UserRole


class User(BaseModel):
    id: str
    email: EmailStr
    name: str
    created_at: Optional[datetime] = None
    is_active: bool = True
    role: UserRole = UserRole.USER

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)


class UserBrief(BaseModel):
    """이메일 발송 등에 필요한 최소 사용자 정보"""

    id: str
    name: str
    email: str

    class Config:
        from_attributes = True
