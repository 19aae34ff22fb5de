from typing import Callable, List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusapi.containers import Container
from campusapi.core.auth_middleware import get_current_active_user
from campusapi.database.session import get_db
from campusapi.schemas.notification import (
    MarkNotificationsReadRequest,
    MarkNotificationsReadResponse,
    NotificationSchema,
)
from campusapi.schemas.user import User as UserSchema
from campusapi.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationSchema])
@inject
def list_notifications(
    current_user: UserSchema = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    notification_service_factory: Callable[..., NotificationService] = Depends(
        Provide[Container.services.notification_service.provider]
    ),
) -> List[NotificationSchema]:
    """최근 알림 50건 조회"""
    return notification_service_factory(db=db).get_user_notifications(current_user.id)


@router.put("", response_model=MarkNotificationsReadResponse)
@inject
def mark_notifications_read(
    payload: MarkNotificationsReadRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    notification_service_factory: Callable[..., NotificationService] = Depends(
        Provide[Container.services.notification_service.provider]
    ),
) -> MarkNotificationsReadResponse:
    return notification_service_factory(db=db).mark_as_read(
        current_user.id, payload.notification_ids
    )
