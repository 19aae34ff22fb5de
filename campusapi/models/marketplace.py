import enum
from typing import Optional

from sqlalchemy import BigInteger, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campusapi.models.base import BaseModel, generate_id


class TransactionStatusEnum(enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class MarketplaceItem(BaseModel):
    __tablename__ = "marketplace_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    seller_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)


class Transaction(BaseModel):
    """
    구매 거래 - 결제가 확인되면 COMPLETED 상태가 됩니다.

    정산 스윕은 거래를 읽기만 하고 변경하지 않습니다.
    판매자 잔액의 이동은 user_stats 원장에서만 일어납니다.
    """

    __tablename__ = "transactions"
    __table_args__ = (Index("idx_transactions_status_created", "status", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    # 상품이 삭제되면 NULL이 됩니다
    item_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("marketplace_items.id", ondelete="SET NULL"),
        nullable=True,
    )
    buyer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)  # Rupiah
    status: Mapped[TransactionStatusEnum] = mapped_column(
        Enum(TransactionStatusEnum),
        default=TransactionStatusEnum.PENDING,
        nullable=False,
    )
    item_type: Mapped[str] = mapped_column(
        String(30), default="marketplace", nullable=False
    )

    item: Mapped[Optional[MarketplaceItem]] = relationship(lazy="joined")

    def __repr__(self):
        return f"<Transaction(id={self.id}, amount={self.amount}, status={self.status})>"

    @property
    def seller_id(self) -> Optional[str]:
        return self.item.seller_id if self.item is not None else None
