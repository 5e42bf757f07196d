# socialpod/api/photos.py
"""
Photos API Router

Endpoints:
- GET /api/v1/photos - List the current user's photos
- GET /api/v1/photos/{guid} - Get a visible photo
- POST /api/v1/photos - Upload a photo (multipart, write scope)
- DELETE /api/v1/photos/{guid} - Delete an own photo (write scope)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from socialpod.api.errors import EndpointError
from socialpod.config import settings
from socialpod.database import get_db
from socialpod.models.user import User
from socialpod.presenters import PhotoPresenter
from socialpod.services import photo_service
from socialpod.utils.security import get_current_user, require_write_scope

router = APIRouter(prefix="/api/v1/photos", tags=["photos"])

NOT_FOUND = "api.endpoint_errors.photos.not_found"
FAILED_CREATE = "api.endpoint_errors.photos.failed_create"


# ======================
# LIST OWN PHOTOS
# ======================
@router.get("")
def list_photos(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    photos = photo_service.list_user_photos(db, current_user)
    return {"data": [PhotoPresenter(photo).as_api_json(full=True) for photo in photos]}


# ======================
# SHOW PHOTO
# ======================
@router.get("/{guid}")
def get_photo(
    guid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a photo by guid.

    Own photos, public photos and photos shared with the user are returned;
    everything else is reported as not found.
    """
    try:
        photo = photo_service.get_visible_photo(db, current_user, guid)
    except photo_service.PhotoNotFoundError:
        raise EndpointError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return PhotoPresenter(photo).as_api_json(full=True)


# ======================
# UPLOAD PHOTO
# ======================
@router.post("")
def create_photo(
    image: Optional[UploadFile] = File(None),
    pending: bool = Form(False),
    set_profile_photo: bool = Form(False),
    aspect_ids: Optional[str] = Form(None),
    current_user: User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    """
    Upload an image as a new photo.

    - pending: keep as a draft until attached to a post
    - set_profile_photo: also use it as the user's avatar
    - aspect_ids: "public", "all" (default) or comma separated aspect ids
    """
    content = None
    content_type = None
    if image is not None:
        try:
            # One byte past the limit is enough to reject an oversized upload
            content = image.file.read(settings.MAX_UPLOAD_BYTES + 1)
            content_type = image.content_type
        finally:
            image.file.close()

    try:
        photo = photo_service.create_photo(
            db,
            current_user,
            content=content,
            content_type=content_type,
            pending=pending,
            set_as_profile_photo=set_profile_photo,
            aspect_ids=aspect_ids,
        )
    except photo_service.PhotoCreateError:
        raise EndpointError(422, FAILED_CREATE)

    return PhotoPresenter(photo).as_api_json(full=True)


# ======================
# DELETE PHOTO
# ======================
@router.delete("/{guid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_photo(
    guid: str,
    current_user: User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    try:
        photo_service.delete_photo(db, current_user, guid)
    except photo_service.PhotoNotFoundError:
        raise EndpointError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
