from enum import Enum
from typing import Union

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from campusapi.models.base import BaseModel, generate_id


class UserRole(str, Enum):
    """사용자 역할 정의"""

    USER = "user"  # 일반 사용자 (학생)
    ADMIN = "admin"  # 관리자

    @classmethod
    def is_admin(cls, role: Union[str, "UserRole"]) -> bool:
        if isinstance(role, cls):
            role = role.value
        return role == cls.ADMIN.value


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (Index("idx_users_email", "email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.USER.value, nullable=False
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(str(self.role))
