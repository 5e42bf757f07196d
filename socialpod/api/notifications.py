from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from socialpod import models
from socialpod.api.errors import EndpointError
from socialpod.database import get_db
from socialpod.presenters import NotificationPresenter
from socialpod.schemas.notification import NotificationUpdate
from socialpod.services import notification_service
from socialpod.utils.security import get_current_user, require_write_scope

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])

NOT_FOUND = "api.endpoint_errors.notifications.not_found"
CANT_PROCESS = "api.endpoint_errors.notifications.cant_process"


def _parse_timestamp(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise EndpointError(422, CANT_PROCESS)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@router.get("")
def get_my_notifications(
    only_unread: bool = Query(False),
    only_after: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    created_after = _parse_timestamp(only_after) if only_after else None
    notifications = notification_service.list_user_notifications(
        db,
        user_id=current_user.id,
        unread_only=only_unread,
        created_after=created_after,
        limit=limit,
    )
    return {"data": [NotificationPresenter(n).as_api_json(include_target=True) for n in notifications]}


@router.get("/unread-count")
def get_unread_count(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = notification_service.get_unread_count(db, user_id=current_user.id)
    return {"unread_count": count}


@router.patch("/read-all")
def mark_all_notifications_read(
    current_user: models.User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    count = notification_service.mark_all_notifications_read(db, user_id=current_user.id)
    return {"updated": count}


@router.get("/{guid}")
def get_notification(
    guid: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    notification = notification_service.get_user_notification(db, user_id=current_user.id, guid=guid)
    if not notification:
        raise EndpointError(404, NOT_FOUND)
    return NotificationPresenter(notification).as_api_json()


@router.patch("/{guid}", status_code=204)
def update_notification(
    guid: str,
    payload: NotificationUpdate,
    current_user: models.User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    if payload.read is None:
        raise EndpointError(422, CANT_PROCESS)

    notification = notification_service.set_read_state(
        db,
        user_id=current_user.id,
        guid=guid,
        read=payload.read,
    )
    if not notification:
        raise EndpointError(404, NOT_FOUND)
    return Response(status_code=204)
