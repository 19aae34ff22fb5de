from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from campusapi.models.marketplace import Transaction as TransactionModel
from campusapi.models.marketplace import TransactionStatusEnum
from campusapi.repositories.base import BaseRepository
from campusapi.schemas.transaction import TransactionSchema


class TransactionRepository(BaseRepository[TransactionModel, TransactionSchema]):
    """거래 리포지토리 - 정산 대상 조회 (읽기 전용)"""

    def __init__(self, db: Session):
        super().__init__(TransactionModel, TransactionSchema, db)

    def find_completed_before(
        self,
        cutoff: datetime,
        limit: int,
        after: Optional[Tuple[datetime, str]] = None,
    ) -> List[TransactionSchema]:
        """cutoff 이전(포함)에 생성된 COMPLETED 거래를 (created_at, id) 순으로 조회"""
        query = self.db.query(self.model_class).filter(
            self.model_class.status == TransactionStatusEnum.COMPLETED,
            self.model_class.created_at <= cutoff,
        )
        query = self._apply_keyset(query, after)
        return self._to_schemas(query.limit(limit).all())

    def find_completed_by_item_type(
        self, item_type: str = "marketplace"
    ) -> List[TransactionSchema]:
        """잔액 백필용 - 특정 상품 유형의 모든 COMPLETED 거래 (오래된 순)"""
        instances = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.status == TransactionStatusEnum.COMPLETED,
                self.model_class.item_type == item_type,
            )
            .order_by(self.model_class.created_at.asc())
            .all()
        )
        return self._to_schemas(instances)
