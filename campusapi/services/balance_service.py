import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusapi.config import Settings
from campusapi.core.exceptions import ServiceException
from campusapi.repositories.transaction_repository import TransactionRepository
from campusapi.repositories.user_stats_repository import UserStatsRepository
from campusapi.schemas.balance import (
    BalanceBackfillResponse,
    BalanceBackfillSummary,
    BalanceResponse,
    SellerBackfillResult,
)
from campusapi.schemas.transaction import TransactionSchema
from campusapi.services.balance_release_service import calculate_seller_earnings
from campusapi.utils.timezone_utils import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class BalanceService:
    """판매자 잔액 조회 및 거래 내역 기반 잔액 재계산(백필)"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.transaction_repo = TransactionRepository(db)
        self.user_stats_repo = UserStatsRepository(db)

    def get_user_balance(self, user_id: str) -> BalanceResponse:
        """잔액 원장 조회 (없으면 0 잔액으로 생성)"""
        stats = self.user_stats_repo.get_or_create(user_id)
        return BalanceResponse(
            pending_balance=stats.pending_balance,
            available_balance=stats.available_balance,
            withdrawn_balance=stats.withdrawn_balance,
            total_earnings=stats.total_earnings,
        )

    def backfill_balances(self, now: Optional[datetime] = None) -> BalanceBackfillResponse:
        """
        COMPLETED 마켓플레이스 거래로부터 판매자별 잔액을 다시 계산합니다.

        보류 기간이 지난 거래의 수익은 available, 그 외는 pending 으로 집계하고
        출금 잔액은 0으로 초기화합니다.
        """
        now = now or utc_now()
        cutoff = now - timedelta(days=self.settings.HOLD_PERIOD_DAYS)

        try:
            transactions = self.transaction_repo.find_completed_by_item_type("marketplace")
            logger.info(f"Balance backfill: found {len(transactions)} completed transactions")

            by_seller: Dict[str, List[TransactionSchema]] = defaultdict(list)
            for transaction in transactions:
                if transaction.seller_id:
                    by_seller[transaction.seller_id].append(transaction)

            results: List[SellerBackfillResult] = []
            for seller_id, seller_transactions in by_seller.items():
                total_earnings = 0
                pending_balance = 0
                available_balance = 0

                for transaction in seller_transactions:
                    _, seller_earnings = calculate_seller_earnings(
                        transaction.amount, self.settings.PLATFORM_FEE_RATE
                    )
                    total_earnings += seller_earnings

                    if ensure_utc(transaction.created_at) < cutoff:
                        available_balance += seller_earnings
                    else:
                        pending_balance += seller_earnings

                self.user_stats_repo.upsert_balances(
                    seller_id,
                    total_earnings=total_earnings,
                    available_balance=available_balance,
                    pending_balance=pending_balance,
                    items_sold=len(seller_transactions),
                    commit=False,
                )
                results.append(
                    SellerBackfillResult(
                        seller_id=seller_id,
                        transaction_count=len(seller_transactions),
                        total_earnings=total_earnings,
                        available_balance=available_balance,
                        pending_balance=pending_balance,
                    )
                )

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Balance backfill failed: {str(e)}")
            raise ServiceException(
                f"Balance backfill failed: {str(e)}", error_code="BALANCE_001"
            )

        return BalanceBackfillResponse(
            summary=BalanceBackfillSummary(
                total_transactions=len(transactions),
                sellers_updated=len(by_seller),
            ),
            results=results,
        )
