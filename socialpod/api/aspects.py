from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from socialpod import models
from socialpod.api.errors import EndpointError
from socialpod.crud import user as user_crud
from socialpod.database import get_db
from socialpod.schemas.aspect import AspectCreate, AspectResponse, ContactAdd
from socialpod.services import aspect_service, notification_service
from socialpod.utils.security import get_current_user, require_write_scope

router = APIRouter(prefix="/api/v1/aspects", tags=["Aspects"])


@router.get("")
def get_my_aspects(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    aspects = aspect_service.list_aspects(db, current_user)
    return {"data": [AspectResponse.model_validate(aspect).model_dump() for aspect in aspects]}


@router.post("", response_model=AspectResponse)
def create_aspect(
    payload: AspectCreate,
    current_user: models.User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    try:
        return aspect_service.create_aspect(db, current_user, payload.name)
    except aspect_service.AspectCreateError:
        raise EndpointError(422, "api.endpoint_errors.aspects.cant_create")


@router.post("/{aspect_id}/contacts", status_code=204)
def add_contact_to_aspect(
    aspect_id: int,
    payload: ContactAdd,
    current_user: models.User = Depends(require_write_scope),
    db: Session = Depends(get_db)
):
    try:
        aspect = aspect_service.get_user_aspect(db, current_user, aspect_id)
    except aspect_service.AspectNotFoundError:
        raise EndpointError(404, "api.endpoint_errors.aspects.not_found")

    person = user_crud.get_person_by_guid(db, payload.person_guid)
    if person is None:
        raise EndpointError(404, "api.endpoint_errors.contacts.not_found")

    try:
        _, notification = aspect_service.share_with(db, current_user, person, aspect)
    except aspect_service.ContactCreateError:
        db.rollback()
        raise EndpointError(422, "api.endpoint_errors.contacts.cant_create")
    db.commit()

    notification_service.dispatch_email_for_notification(db, notification)
    return Response(status_code=204)
