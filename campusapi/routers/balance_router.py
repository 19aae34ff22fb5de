import logging
from typing import Any, Callable

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusapi.containers import Container
from campusapi.core.auth_middleware import get_current_active_user, require_admin
from campusapi.database.session import get_db
from campusapi.schemas.balance import BalanceBackfillResponse, BalanceResponse
from campusapi.schemas.user import User as UserSchema
from campusapi.services.balance_release_service import BalanceReleaseService
from campusapi.services.balance_service import BalanceService

router = APIRouter(tags=["balance"])
logger = logging.getLogger("campusapi")


@router.post("/balance/auto-release")
@inject
def auto_release_balances(
    current_user: UserSchema = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    release_service_factory: Callable[..., BalanceReleaseService] = Depends(
        Provide[Container.services.balance_release_service.provider]
    ),
) -> Any:
    """
    보류 기간이 지난 판매 대금 정산 실행

    실패 여부와 관계없이 스윕 결과를 그대로 반환합니다.
    """
    logger.info(f"Settlement sweep requested by user {current_user.id}")
    result = release_service_factory(db=db).run_settlement_sweep()
    return result.to_response()


@router.get("/balance/me", response_model=BalanceResponse)
@inject
def get_my_balance(
    current_user: UserSchema = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    balance_service_factory: Callable[..., BalanceService] = Depends(
        Provide[Container.services.balance_service.provider]
    ),
) -> BalanceResponse:
    return balance_service_factory(db=db).get_user_balance(current_user.id)


@router.post(
    "/admin/balance/backfill",
    response_model=BalanceBackfillResponse,
)
@inject
def backfill_balances(
    current_user: UserSchema = Depends(require_admin),
    db: Session = Depends(get_db),
    balance_service_factory: Callable[..., BalanceService] = Depends(
        Provide[Container.services.balance_service.provider]
    ),
) -> BalanceBackfillResponse:
    """관리자 전용: 완료된 거래 내역으로 판매자 잔액 재계산"""
    logger.info(f"Balance backfill requested by admin {current_user.id}")
    return balance_service_factory(db=db).backfill_balances()
