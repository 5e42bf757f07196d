from __future__ import annotations

from typing import Optional, Union

from sqlalchemy.orm import Session

from socialpod import models

Shareable = Union[models.Post, models.Photo]


def is_visible_to(db: Session, shareable: Shareable, user: Optional[models.User]) -> bool:
    """
    Whether ``user`` may see a post or photo.

    Public items are visible to everyone. Otherwise the viewer must be the
    author, or a contact placed in one of the aspects the item was shared to.
    Photos attached to a post are also visible wherever that post is.
    """
    if shareable.public:
        return True
    if user is None or user.person is None:
        return False

    person = user.person
    if shareable.author_id == person.id:
        return True

    aspect_ids = [aspect.id for aspect in shareable.aspects]
    if aspect_ids:
        membership = (
            db.query(models.AspectMembership.id)
            .join(models.Contact, models.AspectMembership.contact_id == models.Contact.id)
            .filter(
                models.AspectMembership.aspect_id.in_(aspect_ids),
                models.Contact.person_id == person.id,
            )
            .first()
        )
        if membership is not None:
            return True

    if isinstance(shareable, models.Photo) and shareable.status_message is not None:
        return is_visible_to(db, shareable.status_message, user)
    return False
