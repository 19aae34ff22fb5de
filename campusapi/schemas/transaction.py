from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from campusapi.models.marketplace import TransactionStatusEnum


class TransactionSchema(BaseModel):
    id: str
    item_id: Optional[str] = None
    buyer_id: str
    seller_id: Optional[str] = None  # 상품이 삭제된 경우 None
    amount: int
    status: TransactionStatusEnum
    item_type: str = "marketplace"
    created_at: datetime

    class Config:
        from_attributes = True
