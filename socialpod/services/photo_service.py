"""
Photo Service Layer
Upload, lookup and removal of photos, plus profile photo updates.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from socialpod import models
from socialpod.crud import user as user_crud
from socialpod.models.mixins import generate_guid
from socialpod.services import aspect_service
from socialpod.services.media_service import InvalidImageError, media_storage
from socialpod.services.visibility import is_visible_to

logger = logging.getLogger(__name__)


class PhotoNotFoundError(LookupError):
    """No photo with that guid exists, or the viewer may not see it."""


class PhotoCreateError(ValueError):
    """The upload could not be turned into a photo."""


def _find_by_guid(db: Session, guid: str) -> Optional[models.Photo]:
    return db.query(models.Photo).filter(models.Photo.guid == guid).first()


def get_visible_photo(db: Session, user: models.User, guid: str) -> models.Photo:
    photo = _find_by_guid(db, guid)
    if photo is None or not is_visible_to(db, photo, user):
        raise PhotoNotFoundError(guid)
    return photo


def list_user_photos(db: Session, user: models.User) -> List[models.Photo]:
    return (
        db.query(models.Photo)
        .filter(models.Photo.author_id == user.person.id)
        .order_by(models.Photo.created_at.desc(), models.Photo.id.desc())
        .all()
    )


def set_profile_photo(db: Session, user: models.User, photo: models.Photo) -> models.Profile:
    return user_crud.update_profile_images(
        db,
        user.person,
        large=photo.url("large"),
        medium=photo.url("medium"),
        small=photo.url("small"),
    )


def create_photo(
    db: Session,
    user: models.User,
    *,
    content: Optional[bytes],
    content_type: Optional[str],
    pending: bool = False,
    set_as_profile_photo: bool = False,
    aspect_ids: Optional[str] = None,
) -> models.Photo:
    """
    Validate and store an uploaded image and record it as a photo.

    Args:
        db: Database session
        user: Uploading user
        content: Raw upload bytes (None when nothing was uploaded)
        content_type: Content type the client declared for the upload
        pending: Keep the photo as a draft until it is attached to a post
        set_as_profile_photo: Use the renditions as the user's avatar
        aspect_ids: "public", "all" (default) or comma separated aspect ids

    Returns:
        The committed Photo

    Raises:
        PhotoCreateError: If the upload is missing or invalid, or it
            cannot be stored; nothing is persisted in that case
    """
    if content is None:
        raise PhotoCreateError("No image supplied")

    try:
        image = media_storage.inspect(content, content_type)
        public, ids = aspect_service.parse_aspect_ids(aspect_ids)
        aspects = [] if public else aspect_service.resolve_aspects(db, user, ids)
    except (InvalidImageError, aspect_service.AspectNotFoundError) as exc:
        logger.info("Rejected photo upload from user %s: %s", user.id, exc)
        raise PhotoCreateError(str(exc)) from exc

    try:
        file_name, width, height = media_storage.store(image)
    except OSError as exc:
        raise PhotoCreateError("Could not store the image") from exc

    try:
        photo = models.Photo(
            guid=generate_guid(),
            author=user.person,
            pending=pending,
            public=public,
            file_name=file_name,
            width=width,
            height=height,
            aspects=aspects,
        )
        db.add(photo)
        db.flush()
        if set_as_profile_photo:
            set_profile_photo(db, user, photo)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        media_storage.remove(file_name)
        logger.error("Failed to save photo for user %s: %s", user.id, exc)
        raise PhotoCreateError("Could not save the photo") from exc

    db.refresh(photo)
    return photo


def delete_photo(db: Session, user: models.User, guid: str) -> None:
    """Delete one of the user's own photos; anyone else's is reported as missing."""
    photo = _find_by_guid(db, guid)
    if photo is None or photo.author_id != user.person.id:
        raise PhotoNotFoundError(guid)

    file_name = photo.file_name
    profile = user.person.profile
    # The avatar falls back to the default once its files are gone
    if profile is not None and profile.image_url_small == photo.url("small"):
        user_crud.clear_profile_images(db, user.person)
    db.delete(photo)
    db.commit()
    media_storage.remove(file_name)
    logger.info("Deleted photo %s of user %s", guid, user.id)
