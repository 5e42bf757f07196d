"""
Post Service Layer
Status messages, likes and comments, and the notifications they trigger.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from socialpod import models
from socialpod.models.mixins import generate_guid
from socialpod.models.notification import NotificationType
from socialpod.services import aspect_service, notification_service
from socialpod.services.visibility import is_visible_to

logger = logging.getLogger(__name__)


class PostNotFoundError(LookupError):
    pass


class PostCreateError(ValueError):
    pass


class LikeExistsError(ValueError):
    pass


def get_visible_post(db: Session, user: models.User, guid: str) -> models.Post:
    post = db.query(models.Post).filter(models.Post.guid == guid).first()
    if post is None or not is_visible_to(db, post, user):
        raise PostNotFoundError(guid)
    return post


def create_status_message(
    db: Session,
    user: models.User,
    *,
    text: str,
    public: bool = False,
    photo_guids: Sequence[str] = (),
    aspect_ids: Sequence[int] = (),
) -> models.Post:
    """
    Publish a status message, attaching some of the author's photos.

    Attached photos stop being pending and take over the post's visibility.

    Raises:
        PostCreateError: Empty message, unknown aspect, or a photo that is
            not the author's or already belongs to another post
    """
    photos: List[models.Photo] = []
    if photo_guids:
        photos = db.query(models.Photo).filter(
            models.Photo.guid.in_(list(photo_guids)),
            models.Photo.author_id == user.person.id,
        ).all()
        if len(photos) != len(set(photo_guids)):
            raise PostCreateError("Unknown photo")
        if any(photo.status_message_guid for photo in photos):
            raise PostCreateError("Photo is already attached to a post")

    if not text and not photos:
        raise PostCreateError("A post needs text or photos")

    try:
        aspects = [] if public else aspect_service.resolve_aspects(db, user, aspect_ids)
    except aspect_service.AspectNotFoundError as exc:
        raise PostCreateError(str(exc)) from exc

    post = models.Post(
        guid=generate_guid(),
        author=user.person,
        text=text,
        public=public,
        aspects=aspects,
    )
    db.add(post)

    for photo in photos:
        photo.status_message = post
        photo.status_message_guid = post.guid
        photo.pending = False
        photo.public = public
        photo.aspects = list(aspects)

    db.commit()
    db.refresh(post)
    logger.info("User %s published post %s with %d photos", user.id, post.guid, len(photos))
    return post


def _already_liked(db: Session, post: models.Post, person: models.Person) -> bool:
    return db.query(models.Like.id).filter(
        models.Like.post_id == post.id,
        models.Like.author_id == person.id,
    ).first() is not None


def like_post(
    db: Session,
    user: models.User,
    guid: str,
) -> Tuple[models.Like, Optional[models.Notification]]:
    post = get_visible_post(db, user, guid)
    if _already_liked(db, post, user.person):
        raise LikeExistsError(guid)

    try:
        like = models.Like(post=post, author=user.person)
        db.add(like)
        notification = notification_service.notify(
            db,
            recipient=post.author.owner,
            notification_type=NotificationType.LIKED,
            actor=user.person,
            target=post,
        )
        db.commit()
    except IntegrityError as exc:
        # A concurrent request stored the same like first
        db.rollback()
        raise LikeExistsError(guid) from exc
    return like, notification


def comment_on_post(
    db: Session,
    user: models.User,
    guid: str,
    text: str,
) -> Tuple[models.Comment, List[models.Notification]]:
    """
    Comment on a visible post.

    The post author hears about it as a comment on their post; everyone else
    who commented before hears about it as an also-commented event.
    """
    post = get_visible_post(db, user, guid)
    earlier_commenters = []
    for comment in post.comments:
        if comment.author not in earlier_commenters:
            earlier_commenters.append(comment.author)

    comment = models.Comment(post=post, author=user.person, text=text)
    db.add(comment)

    notifications = []
    author_notification = notification_service.notify(
        db,
        recipient=post.author.owner,
        notification_type=NotificationType.COMMENT_ON_POST,
        actor=user.person,
        target=post,
    )
    if author_notification is not None:
        notifications.append(author_notification)

    for commenter in earlier_commenters:
        if commenter.id in (post.author_id, user.person.id):
            continue
        notification = notification_service.notify(
            db,
            recipient=commenter.owner,
            notification_type=NotificationType.ALSO_COMMENTED,
            actor=user.person,
            target=post,
        )
        if notification is not None:
            notifications.append(notification)

    db.commit()
    db.refresh(comment)
    return comment, notifications
