"""
스케줄러(cron) 전용 엔드포인트

Authorization: Bearer <CRON_SECRET> 헤더가 일치해야 호출할 수 있습니다.
"""

import logging
from typing import Any, Callable, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from campusapi.containers import Container
from campusapi.core.auth_middleware import verify_cron_secret
from campusapi.database.session import get_db
from campusapi.services.balance_release_service import BalanceReleaseService
from campusapi.services.unread_message_service import UnreadMessageService

router = APIRouter(
    prefix="/cron",
    tags=["cron"],
    dependencies=[Depends(verify_cron_secret)],
)
logger = logging.getLogger("campusapi")


@router.get("/release-balances")
@inject
def release_balances(
    db: Session = Depends(get_db),
    release_service_factory: Callable[..., BalanceReleaseService] = Depends(
        Provide[Container.services.balance_release_service.provider]
    ),
) -> Any:
    result = release_service_factory(db=db).run_settlement_sweep()
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": result.error},
        )
    return result.to_response()


@router.get("/notify-unread-messages")
@inject
def notify_unread_messages(
    conversation_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    unread_service_factory: Callable[..., UnreadMessageService] = Depends(
        Provide[Container.services.unread_message_service.provider]
    ),
) -> Any:
    """
    유예 시간이 지난 안 읽은 메시지에 대해 이메일 알림 발송

    conversation_id가 주어지면 해당 대화의 메시지만 대상으로 합니다.
    """
    result = unread_service_factory(db=db).run_unread_notifier(
        conversation_id=conversation_id
    )
    if not result.success:
        logger.error(f"Unread message notifier failed: {result.error}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": result.error},
        )
    return result.to_response()
