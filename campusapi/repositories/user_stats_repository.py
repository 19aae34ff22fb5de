"""
잔액 원장 리포지토리

핵심 특징:
- 보류 잔액 -> 출금 가능 잔액 이동은 조건부 단일 UPDATE 문으로 처리됩니다
  (pending_balance >= amount 조건이 WHERE 절에 포함).
- 읽고-계산하고-쓰는 방식이 아니므로 동시에 실행된 스윕끼리도
  pending_balance를 음수로 만들 수 없습니다.
"""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from campusapi.models.user_stats import UserStats as UserStatsModel
from campusapi.repositories.base import BaseRepository
from campusapi.schemas.balance import UserStatsSchema


class UserStatsRepository(BaseRepository[UserStatsModel, UserStatsSchema]):
    def __init__(self, db: Session):
        super().__init__(UserStatsModel, UserStatsSchema, db)

    def get_by_user_id(self, user_id: str) -> Optional[UserStatsSchema]:
        return self.get_by_field("user_id", user_id)

    def get_or_create(self, user_id: str, commit: bool = True) -> UserStatsSchema:
        """원장이 없으면 0 잔액으로 생성"""
        existing = self.get_by_user_id(user_id)
        if existing:
            return existing
        created = self.create(commit=commit, user_id=user_id)
        assert created is not None
        return created

    def try_decrement_if_at_least(self, user_id: str, amount: int) -> bool:
        """
        pending_balance가 amount 이상일 때만 pending -> available 로 amount 만큼 이동

        Args:
            user_id: 판매자 ID
            amount: 이동할 금액 (0 이상, 0원 거래도 정산 처리)

        Returns:
            bool: 이동이 적용되었으면 True, 조건 불충족(또는 원장 없음)이면 False

        Note:
            커밋하지 않습니다. 호출자가 알림 생성까지 하나의 단위로 커밋합니다.
        """
        if amount < 0:
            return False

        stmt = (
            update(self.model_class)
            .where(
                self.model_class.user_id == user_id,
                self.model_class.pending_balance >= amount,
            )
            .values(
                pending_balance=self.model_class.pending_balance - amount,
                available_balance=self.model_class.available_balance + amount,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def upsert_balances(
        self,
        user_id: str,
        total_earnings: int,
        available_balance: int,
        pending_balance: int,
        items_sold: int,
        commit: bool = True,
    ) -> Optional[UserStatsSchema]:
        """백필 결과로 잔액을 덮어쓰기 (없으면 생성)"""
        instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .first()
        )

        if instance is None:
            return self.create(
                commit=commit,
                user_id=user_id,
                total_earnings=total_earnings,
                available_balance=available_balance,
                pending_balance=pending_balance,
                withdrawn_balance=0,
                items_sold=items_sold,
            )

        return self.update(
            instance.id,
            commit=commit,
            total_earnings=total_earnings,
            available_balance=available_balance,
            pending_balance=pending_balance,
            withdrawn_balance=0,  # 아직 출금 내역 없음
        )
