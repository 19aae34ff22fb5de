from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class UserStatsSchema(BaseModel):
    """판매자 잔액 원장"""

    id: str
    user_id: str
    pending_balance: int = Field(0, description="보류 중인 판매 대금")
    available_balance: int = Field(0, description="출금 가능 잔액")
    withdrawn_balance: int = 0
    total_earnings: int = 0
    items_sold: int = 0
    items_bought: int = 0
    total_spent: int = 0
    messages_count: int = 0
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    pending_balance: int = Field(..., alias="pendingBalance")
    available_balance: int = Field(..., alias="availableBalance")
    withdrawn_balance: int = Field(..., alias="withdrawnBalance")
    total_earnings: int = Field(..., alias="totalEarnings")

    class Config:
        populate_by_name = True


class SettlementSweepResult(BaseModel):
    """
    정산 스윕 실행 결과

    성공: {success: true, releasedCount, totalReleased, processedTransactions, failedCount}
    실패: {success: false, error}
    """

    success: bool
    released_count: Optional[int] = Field(None, alias="releasedCount")
    total_released: Optional[int] = Field(None, alias="totalReleased")
    processed_transactions: Optional[int] = Field(None, alias="processedTransactions")
    failed_count: Optional[int] = Field(None, alias="failedCount")
    error: Optional[str] = None

    class Config:
        populate_by_name = True

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class SellerBackfillResult(BaseModel):
    seller_id: str = Field(..., alias="sellerId")
    transaction_count: int = Field(..., alias="transactionCount")
    total_earnings: int = Field(..., alias="totalEarnings")
    available_balance: int = Field(..., alias="availableBalance")
    pending_balance: int = Field(..., alias="pendingBalance")

    class Config:
        populate_by_name = True


class BalanceBackfillSummary(BaseModel):
    total_transactions: int = Field(..., alias="totalTransactions")
    sellers_updated: int = Field(..., alias="sellersUpdated")

    class Config:
        populate_by_name = True


class BalanceBackfillResponse(BaseModel):
    success: bool = True
    message: str = "Balance backfill completed successfully"
    summary: BalanceBackfillSummary
    results: List[SellerBackfillResult] = []

    class Config:
        populate_by_name = True
