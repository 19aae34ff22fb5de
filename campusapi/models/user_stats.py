"""
판매자 잔액 원장 (UserStats)

사용자당 한 행. 판매 대금은 먼저 pending_balance에 적립되고,
보류 기간이 지나면 정산 스윕이 available_balance로 옮깁니다.
"""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from campusapi.models.base import BaseModel, generate_id


class UserStats(BaseModel):
    __tablename__ = "user_stats"
    __table_args__ = (
        CheckConstraint("pending_balance >= 0", name="ck_user_stats_pending_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), unique=True, nullable=False
    )

    # 잔액 (Rupiah)
    pending_balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    available_balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    withdrawn_balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    total_earnings: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    # 활동 카운터
    items_sold: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    items_bought: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_spent: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    messages_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self):
        return (
            f"<UserStats(user_id={self.user_id}, pending={self.pending_balance}, "
            f"available={self.available_balance})>"
        )
