from fastapi import APIRouter, Depends

from socialpod import models
from socialpod.presenters import PersonPresenter
from socialpod.utils.security import get_current_user

router = APIRouter(prefix="/api/v1/user", tags=["Users"])


# ======================
# GET: Current user's person
# ======================
@router.get("")
def get_me(current_user: models.User = Depends(get_current_user)):
    person = current_user.person
    data = PersonPresenter(person).as_api_json()
    data["email"] = current_user.email
    return data
