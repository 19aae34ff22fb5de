"""
판매 대금 자동 정산 (에스크로 해제) 서비스

보류 기간(기본 3일)이 지난 COMPLETED 거래마다 판매자의 보류 잔액을
출금 가능 잔액으로 옮기고 알림을 생성합니다.

- 거래 레코드는 변경하지 않습니다. 중복 정산은 "정산됨" 상태가 아니라
  pending_balance >= 판매자 수익 조건부 차감으로 막습니다.
- 조건을 만족하지 못한 거래는 건너뛰며, 다음 스윕에서 다시 평가됩니다.
- 한 거래의 DB 오류는 그 거래만 롤백하고 스윕은 계속 진행합니다.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_FLOOR
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusapi.config import Settings
from campusapi.repositories.base import KeysetScan
from campusapi.repositories.notification_repository import NotificationRepository
from campusapi.repositories.transaction_repository import TransactionRepository
from campusapi.repositories.user_stats_repository import UserStatsRepository
from campusapi.schemas.balance import SettlementSweepResult
from campusapi.schemas.transaction import TransactionSchema
from campusapi.utils.email_templates import format_rupiah
from campusapi.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


def calculate_seller_earnings(amount: int, fee_rate: float) -> Tuple[int, int]:
    """
    플랫폼 수수료와 판매자 수익 계산

    수수료는 내림(floor) 처리합니다. 예: 333 * 0.05 = 16.65 -> 수수료 16, 수익 317

    Returns:
        (platform_fee, seller_earnings)
    """
    platform_fee = int(
        (Decimal(amount) * Decimal(str(fee_rate))).to_integral_value(rounding=ROUND_FLOOR)
    )
    return platform_fee, amount - platform_fee


class BalanceReleaseService:
    """판매 대금 정산 스윕"""

    NOTIFICATION_TYPE = "system"
    NOTIFICATION_TITLE = "Balance Available"

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.transaction_repo = TransactionRepository(db)
        self.user_stats_repo = UserStatsRepository(db)
        self.notification_repo = NotificationRepository(db)

    def run_settlement_sweep(self, now: Optional[datetime] = None) -> SettlementSweepResult:
        """보류 기간이 지난 거래의 판매자 수익을 출금 가능 잔액으로 이동합니다."""
        now = now or utc_now()
        # 스윕 전체에 하나의 기준 시각을 사용
        cutoff = now - timedelta(days=self.settings.HOLD_PERIOD_DAYS)

        released_count = 0
        total_released = 0
        processed = 0
        failed = 0

        scan = self._eligible_transactions(cutoff)

        try:
            for transaction in scan:
                processed += 1
                try:
                    earnings = self._release_transaction(transaction)
                except SQLAlchemyError as e:
                    self.db.rollback()
                    failed += 1
                    logger.error(
                        f"Failed to release transaction {transaction.id}: {str(e)}"
                    )
                    continue

                if earnings is not None:
                    released_count += 1
                    total_released += earnings
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Settlement sweep aborted: {str(e)}")
            return SettlementSweepResult(success=False, error=str(e) or "Unknown error")

        if scan.capped:
            logger.warning(
                f"Settlement sweep reached row cap ({self.settings.SWEEP_MAX_ROWS}); "
                "remaining transactions are left for the next sweep"
            )

        logger.info(
            f"Settlement sweep done: cutoff={cutoff.isoformat()} processed={processed} "
            f"released={released_count} total={total_released} failed={failed}"
        )
        return SettlementSweepResult(
            success=True,
            released_count=released_count,
            total_released=total_released,
            processed_transactions=processed,
            failed_count=failed,
        )

    def _eligible_transactions(self, cutoff: datetime) -> KeysetScan[TransactionSchema]:
        """cutoff 이전 COMPLETED 거래를 배치 단위로 순회 (스윕당 SWEEP_MAX_ROWS 상한)"""
        return KeysetScan(
            lambda limit, after: self.transaction_repo.find_completed_before(
                cutoff, limit=limit, after=after
            ),
            batch_size=self.settings.SWEEP_BATCH_SIZE,
            max_rows=self.settings.SWEEP_MAX_ROWS,
        )

    def _release_transaction(self, transaction: TransactionSchema) -> Optional[int]:
        """
        거래 한 건 정산. 정산된 금액을 반환하고, 건너뛴 경우 None.

        잔액 이동과 알림 생성은 하나의 커밋으로 처리됩니다.
        """
        seller_id = transaction.seller_id
        if transaction.item_id is None or seller_id is None:
            logger.info(f"Skip transaction {transaction.id}: item no longer exists")
            return None

        _, seller_earnings = calculate_seller_earnings(
            transaction.amount, self.settings.PLATFORM_FEE_RATE
        )

        if self.user_stats_repo.get_by_user_id(seller_id) is None:
            logger.info(
                f"Skip transaction {transaction.id}: seller {seller_id} has no balance ledger"
            )
            return None

        if not self.user_stats_repo.try_decrement_if_at_least(seller_id, seller_earnings):
            logger.info(
                f"Skip transaction {transaction.id}: pending balance of seller {seller_id} "
                f"is below {seller_earnings}"
            )
            return None

        self.notification_repo.create_notification(
            user_id=seller_id,
            type=self.NOTIFICATION_TYPE,
            title=self.NOTIFICATION_TITLE,
            message=(
                f"{format_rupiah(seller_earnings)} from your sale is now available "
                "for withdrawal!"
            ),
            commit=False,
        )
        self.db.commit()

        logger.info(
            f"Released {seller_earnings} to seller {seller_id} for transaction {transaction.id}"
        )
        return seller_earnings
