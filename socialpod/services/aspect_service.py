"""
Aspects (visibility groups) and contacts.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from socialpod import models
from socialpod.models.notification import NotificationType
from socialpod.services import notification_service

logger = logging.getLogger(__name__)


class AspectNotFoundError(LookupError):
    pass


class AspectCreateError(ValueError):
    pass


class ContactCreateError(ValueError):
    pass


def list_aspects(db: Session, user: models.User) -> List[models.Aspect]:
    return (
        db.query(models.Aspect)
        .filter(models.Aspect.user_id == user.id)
        .order_by(models.Aspect.id.asc())
        .all()
    )


def get_user_aspect(db: Session, user: models.User, aspect_id: int) -> models.Aspect:
    aspect = db.query(models.Aspect).filter(
        models.Aspect.id == aspect_id,
        models.Aspect.user_id == user.id,
    ).first()
    if aspect is None:
        raise AspectNotFoundError(f"Aspect {aspect_id} not found")
    return aspect


def create_aspect(db: Session, user: models.User, name: str) -> models.Aspect:
    name = name.strip()
    if not name:
        raise AspectCreateError("Aspect name cannot be blank")
    existing = db.query(models.Aspect.id).filter(
        models.Aspect.user_id == user.id,
        models.Aspect.name == name,
    ).first()
    if existing:
        raise AspectCreateError(f"Aspect '{name}' already exists")

    aspect = models.Aspect(user_id=user.id, name=name)
    db.add(aspect)
    db.commit()
    db.refresh(aspect)
    return aspect


def resolve_aspects(
    db: Session,
    user: models.User,
    aspect_ids: Optional[Iterable[int]],
) -> List[models.Aspect]:
    """
    Aspects a new post or photo is shared to.

    No ids means every aspect of the user; unknown or foreign ids raise
    AspectNotFoundError.
    """
    ids = list(aspect_ids or [])
    if not ids:
        return list_aspects(db, user)
    return [get_user_aspect(db, user, aspect_id) for aspect_id in dict.fromkeys(ids)]


def parse_aspect_ids(raw: Optional[str]) -> Tuple[bool, List[int]]:
    """
    Parse the ``aspect_ids`` form value of uploads.

    Returns (public, ids): "public" makes the item public, "all" or nothing
    shares with every aspect, otherwise a comma separated id list.
    """
    value = (raw or "").strip().lower()
    if value == "public":
        return True, []
    if value in ("", "all"):
        return False, []
    try:
        return False, [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise AspectNotFoundError(f"Invalid aspect ids: {raw!r}")


def _get_or_build_contact(db: Session, user: models.User, person: models.Person) -> models.Contact:
    contact = db.query(models.Contact).filter(
        models.Contact.user_id == user.id,
        models.Contact.person_id == person.id,
    ).first()
    if contact is None:
        contact = models.Contact(user=user, person=person, sharing=False, receiving=False)
        db.add(contact)
    return contact


def share_with(
    db: Session,
    user: models.User,
    person: models.Person,
    aspect: models.Aspect,
) -> Tuple[models.Contact, Optional[models.Notification]]:
    """
    Start sharing ``aspect`` with ``person``.

    The caller commits. Returns the contact and the started-sharing
    notification for a local recipient, if one was recorded.
    """
    if aspect.user_id != user.id:
        raise AspectNotFoundError(f"Aspect {aspect.id} not found")
    if user.person is not None and person.id == user.person.id:
        raise ContactCreateError("Cannot share with yourself")

    contact = _get_or_build_contact(db, user, person)
    contact.receiving = True
    db.flush()

    already_member = db.query(models.AspectMembership.id).filter(
        models.AspectMembership.aspect_id == aspect.id,
        models.AspectMembership.contact_id == contact.id,
    ).first()
    if not already_member:
        db.add(models.AspectMembership(aspect=aspect, contact=contact))

    notification = None
    if person.owner is not None:
        reverse = _get_or_build_contact(db, person.owner, user.person)
        reverse.sharing = True
        notification = notification_service.notify(
            db,
            recipient=person.owner,
            notification_type=NotificationType.STARTED_SHARING,
            actor=user.person,
        )

    db.flush()
    logger.info("User %s shares aspect %s with %s", user.id, aspect.id, person.diaspora_id)
    return contact, notification
