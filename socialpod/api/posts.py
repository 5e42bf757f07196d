# socialpod/api/posts.py
"""
Posts API Router

Endpoints:
- POST /api/v1/posts - Publish a status message
- GET /api/v1/posts/{guid} - Get a visible post
- POST /api/v1/posts/{guid}/likes - Like a post
- POST /api/v1/posts/{guid}/comments - Comment on a post
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from socialpod.api.errors import EndpointError
from socialpod.database import get_db
from socialpod.models.user import User
from socialpod.presenters import PersonPresenter, PostPresenter
from socialpod.presenters.base import api_timestamp
from socialpod.schemas.post import CommentCreate, PostCreate
from socialpod.services import notification_service, post_service
from socialpod.utils.security import get_current_user, require_write_scope

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])

POST_NOT_FOUND = "api.endpoint_errors.posts.post_not_found"


@router.post("")
def create_post(
    payload: PostCreate,
    current_user: User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    try:
        post = post_service.create_status_message(
            db,
            current_user,
            text=payload.body,
            public=payload.public,
            photo_guids=payload.photos,
            aspect_ids=payload.aspect_ids,
        )
    except post_service.PostCreateError:
        raise EndpointError(422, "api.endpoint_errors.posts.failed_create")
    return PostPresenter(post).as_api_json()


@router.get("/{guid}")
def get_post(
    guid: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        post = post_service.get_visible_post(db, current_user, guid)
    except post_service.PostNotFoundError:
        raise EndpointError(status.HTTP_404_NOT_FOUND, POST_NOT_FOUND)
    return PostPresenter(post).as_api_json()


@router.post("/{guid}/likes", status_code=status.HTTP_204_NO_CONTENT)
def like_post(
    guid: str,
    current_user: User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    try:
        _, notification = post_service.like_post(db, current_user, guid)
    except post_service.PostNotFoundError:
        raise EndpointError(status.HTTP_404_NOT_FOUND, POST_NOT_FOUND)
    except post_service.LikeExistsError:
        raise EndpointError(422, "api.endpoint_errors.likes.like_exists")

    notification_service.dispatch_email_for_notification(db, notification)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{guid}/comments", status_code=status.HTTP_201_CREATED)
def comment_on_post(
    guid: str,
    payload: CommentCreate,
    current_user: User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    try:
        comment, notifications = post_service.comment_on_post(db, current_user, guid, payload.body)
    except post_service.PostNotFoundError:
        raise EndpointError(status.HTTP_404_NOT_FOUND, POST_NOT_FOUND)

    for notification in notifications:
        notification_service.dispatch_email_for_notification(db, notification)

    return {
        "guid": comment.guid,
        "body": comment.text,
        "created_at": api_timestamp(comment.created_at),
        "author": PersonPresenter(comment.author).as_api_json(),
    }
