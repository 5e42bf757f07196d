from typing import Optional

from sqlalchemy.orm import Session
from socialpod import models
from socialpod.config import settings
from socialpod.utils.security import get_password_hash

DEFAULT_ASPECTS = ("Family", "Friends", "Work", "Acquaintances")


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> models.User:
    """Create a local account with its person, profile and default aspects."""
    db_user = models.User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        is_active=True,
    )
    db_user.person = models.Person(
        diaspora_id=f"{username}@{settings.pod_host}",
        profile=models.Profile(first_name=first_name, last_name=last_name),
    )
    db_user.aspects = [models.Aspect(name=name) for name in DEFAULT_ASPECTS]
    db.add(db_user)
    db.flush()
    return db_user


def get_user_by_username(db: Session, username: str):
    return db.query(models.User).filter(models.User.username == username).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def get_person_by_guid(db: Session, guid: str):
    return db.query(models.Person).filter(models.Person.guid == guid).first()


def update_profile_images(db: Session, person: models.Person, *, large: str, medium: str, small: str):
    profile = person.profile
    if profile is None:
        profile = models.Profile(person=person)
        db.add(profile)
    profile.image_url = large
    profile.image_url_medium = medium
    profile.image_url_small = small
    return profile


def clear_profile_images(db: Session, person: models.Person):
    profile = person.profile
    if profile is None:
        return None
    profile.image_url = None
    profile.image_url_medium = None
    profile.image_url_small = None
    return profile
