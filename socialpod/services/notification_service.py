from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from socialpod import models
from socialpod.models.mixins import utcnow
from socialpod.models.notification import Notification, NotificationType
from socialpod.utils.email import is_email_enabled, send_email

logger = logging.getLogger(__name__)


# Public API name -> internal notification type
NOTIFICATIONS_JSON_TYPES = {
    "also_commented": NotificationType.ALSO_COMMENTED,
    "comment_on_post": NotificationType.COMMENT_ON_POST,
    "liked": NotificationType.LIKED,
    "liked_comment": NotificationType.LIKED_COMMENT,
    "mentioned": NotificationType.MENTIONED_IN_POST,
    "mentioned_in_comment": NotificationType.MENTIONED_IN_COMMENT,
    "reshared": NotificationType.RESHARED,
    "started_sharing": NotificationType.STARTED_SHARING,
    "contacts_birthday": NotificationType.CONTACTS_BIRTHDAY,
}

NOTIFICATIONS_REVERSE_JSON_TYPES = {
    internal: api_name for api_name, internal in NOTIFICATIONS_JSON_TYPES.items()
}

_unmapped = [member.value for member in NotificationType if member not in NOTIFICATIONS_REVERSE_JSON_TYPES]
if _unmapped:
    raise RuntimeError(f"Notification types without an API name: {', '.join(_unmapped)}")


EMAIL_SUBJECT_BY_TYPE = {
    NotificationType.ALSO_COMMENTED: "New comment on a post you commented on",
    NotificationType.COMMENT_ON_POST: "New comment on your post",
    NotificationType.LIKED: "Someone liked your post",
    NotificationType.STARTED_SHARING: "Someone started sharing with you",
}

EVENT_PHRASES = {
    NotificationType.ALSO_COMMENTED: "also commented on a post",
    NotificationType.COMMENT_ON_POST: "commented on your post",
    NotificationType.LIKED: "liked your post",
    NotificationType.LIKED_COMMENT: "liked your comment",
    NotificationType.MENTIONED_IN_POST: "mentioned you in a post",
    NotificationType.MENTIONED_IN_COMMENT: "mentioned you in a comment",
    NotificationType.RESHARED: "reshared your post",
    NotificationType.STARTED_SHARING: "started sharing with you",
    NotificationType.CONTACTS_BIRTHDAY: "has a birthday today",
}


def api_type_name(notification_type: NotificationType) -> str:
    return NOTIFICATIONS_REVERSE_JSON_TYPES[notification_type]


def list_user_notifications(
    db: Session,
    *,
    user_id: int,
    unread_only: bool = False,
    created_after: Optional[datetime] = None,
    limit: int = 50,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.recipient_id == user_id)
    if unread_only:
        query = query.filter(Notification.unread.is_(True))
    if created_after is not None:
        query = query.filter(Notification.created_at >= created_after)
    return query.order_by(Notification.updated_at.desc(), Notification.id.desc()).limit(limit).all()


def get_user_notification(db: Session, *, user_id: int, guid: str) -> Optional[Notification]:
    return db.query(Notification).filter(
        Notification.guid == guid,
        Notification.recipient_id == user_id,
    ).first()


def set_read_state(
    db: Session,
    *,
    user_id: int,
    guid: str,
    read: bool,
) -> Optional[Notification]:
    notification = get_user_notification(db, user_id=user_id, guid=guid)
    if not notification:
        return None
    notification.unread = not read
    db.commit()
    return notification


def mark_all_notifications_read(db: Session, *, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.unread.is_(True),
    ).update({"unread": False}, synchronize_session=False)
    db.commit()
    return int(updated)


def get_unread_count(db: Session, *, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.unread.is_(True),
    ).count()


def notify(
    db: Session,
    *,
    recipient: Optional[models.User],
    notification_type: NotificationType,
    actor: models.Person,
    target: Optional[models.Post] = None,
) -> Optional[Notification]:
    """
    Record that ``actor`` did something ``recipient`` should hear about.

    An existing notification for the same recipient, type and target absorbs
    the new actor and becomes unread again. Nothing is recorded for remote
    recipients or for a user acting on their own content.
    """
    if recipient is None or recipient.person is None:
        return None
    if recipient.person.id == actor.id:
        return None

    target_id = target.id if target is not None else None
    notification = db.query(Notification).filter(
        Notification.recipient_id == recipient.id,
        Notification.type == notification_type,
        Notification.target_id.is_(None) if target_id is None else Notification.target_id == target_id,
    ).first()

    if notification is None:
        notification = Notification(
            recipient=recipient,
            type=notification_type,
            target=target,
            actors=[actor],
        )
        db.add(notification)
        logger.debug("Created %s notification for user %s", notification_type.value, recipient.id)
    else:
        if actor not in notification.actors:
            notification.actors.append(actor)
        notification.unread = True
        notification.updated_at = utcnow()
        logger.debug(
            "Aggregated actor %s into notification %s",
            actor.diaspora_id,
            notification.guid,
        )

    db.flush()
    return notification


def describe(notification: Notification) -> str:
    names = [actor.name for actor in notification.actors]
    if len(names) > 2:
        who = f"{', '.join(names[:2])} and {len(names) - 2} more"
    else:
        who = " and ".join(names)
    return f"{who} {EVENT_PHRASES[notification.type]}."


def _send_notification_email(to_email: str, subject: str, body_text: str, *, notification_guid: str, recipient_id: int) -> None:
    """Send SMTP mail in a background thread so API latency stays low."""
    sent = send_email(
        to_email=to_email,
        subject=subject,
        body_text=body_text,
    )
    if not sent:
        logger.info(
            "Notification email not sent (recipient_id=%s, notification=%s)",
            recipient_id,
            notification_guid,
        )


def dispatch_email_for_notification(db: Session, notification: Optional[Notification]) -> bool:
    """
    Best-effort email delivery for a committed notification.
    This function never raises and should not impact request success.
    """
    if notification is None:
        return False
    try:
        if not is_email_enabled():
            return False

        recipient = db.query(models.User).filter(
            models.User.id == notification.recipient_id
        ).first()
        if not recipient or not recipient.email:
            return False

        subject = EMAIL_SUBJECT_BY_TYPE.get(notification.type, "New notification")
        recipient_name = recipient.person.name if recipient.person else recipient.username
        body_text = (
            f"Hi {recipient_name},\n\n"
            f"{describe(notification)}\n\n"
            "Sign in to your pod to see what happened."
        )

        worker = threading.Thread(
            target=_send_notification_email,
            args=(
                recipient.email,
                subject,
                body_text,
            ),
            kwargs={
                "notification_guid": notification.guid,
                "recipient_id": recipient.id,
            },
            daemon=True,
        )
        worker.start()
        return True
    except Exception as exc:
        logger.warning(
            "Notification email dispatch failed (notification=%s): %s",
            getattr(notification, "guid", None),
            exc,
        )
        return False
