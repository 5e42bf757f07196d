from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import png_bytes, read_only_token, read_write_token
from socialpod import models
from socialpod.config import settings
from socialpod.i18n import t
from socialpod.services import aspect_service, post_service
from socialpod.services.media_service import media_storage

NOT_FOUND = t("api.endpoint_errors.photos.not_found")
FAILED_CREATE = t("api.endpoint_errors.photos.failed_create")


@pytest.fixture
def world(db_session, make_user, make_photo):
    user = make_user("owner")
    reader = make_user("reader")
    alice = make_user("alice", first_name="Alice", last_name="Smith")
    eve = make_user("eve", first_name="Eve", last_name="Jones")

    private_aspect = aspect_service.create_aspect(db_session, alice, "private aspect")
    aspect_service.share_with(db_session, alice, eve.person, private_aspect)
    db_session.commit()

    private_photo = make_photo(alice, aspect_ids=str(private_aspect.id))
    public_photo = make_photo(alice, aspect_ids="public")
    user_photo1 = make_photo(user, aspect_ids="all", pending=True)
    user_photo2 = make_photo(user, aspect_ids="all", pending=True)
    post = post_service.create_status_message(
        db_session,
        user,
        text="Post with photos",
        public=True,
        photo_guids=[user_photo2.guid],
    )

    return {
        "user": user,
        "alice": alice,
        "token": read_write_token(user),
        "read_only_token": read_only_token(reader),
        "private_photo": private_photo,
        "public_photo": public_photo,
        "user_photo1": user_photo1,
        "user_photo2": user_photo2,
        "post": post,
    }


def confirm_person_format(data, user):
    assert data["guid"] == user.person.guid
    assert data["diaspora_id"] == user.person.diaspora_id
    assert data["name"] == user.person.name
    assert data["avatar"]


def confirm_photo_format(data, photo, user):
    assert data["guid"] == photo.guid
    if photo.status_message_guid:
        assert data["post"] == photo.status_message_guid
    else:
        assert "post" not in data
    assert "height" in data["dimensions"]
    assert "width" in data["dimensions"]
    assert data["sizes"]["small"]
    assert data["sizes"]["medium"]
    assert data["sizes"]["large"]
    confirm_person_format(data["author"], user)


def _upload(client, token, content=None, content_type="image/png", **form):
    files = None
    if content is not None:
        files = {"image": ("button.png", content, content_type)}
    return client.post(
        "/api/v1/photos",
        params={"access_token": token},
        data={key: str(value).lower() for key, value in form.items()},
        files=files,
    )


# ======================
# SHOW
# ======================

def test_show_own_photo(client, world):
    response = client.get(
        f"/api/v1/photos/{world['user_photo1'].guid}",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 200
    data = response.json()
    assert "post" not in data
    confirm_photo_format(data, world["user_photo1"], world["user"])


def test_show_own_photo_used_in_post(client, world, db_session):
    photo = world["user_photo2"]
    db_session.refresh(photo)
    response = client.get(
        f"/api/v1/photos/{photo.guid}",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["post"] == world["post"].guid
    confirm_photo_format(data, photo, world["user"])


def test_show_other_users_public_photo(client, world):
    response = client.get(
        f"/api/v1/photos/{world['public_photo'].guid}",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 200
    confirm_photo_format(response.json(), world["public_photo"], world["alice"])


def test_show_accepts_bearer_header(client, world):
    response = client.get(
        f"/api/v1/photos/{world['user_photo1'].guid}",
        headers={"Authorization": f"Bearer {world['token']}"},
    )
    assert response.status_code == 200


def test_show_other_users_private_photo_is_not_found(client, world):
    response = client.get(
        f"/api/v1/photos/{world['private_photo'].guid}",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 404
    assert response.text == NOT_FOUND


def test_show_invalid_guid(client, world):
    response = client.get(
        "/api/v1/photos/999_999_999",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 404
    assert response.text == NOT_FOUND


def test_show_not_found_message_is_localized(client, world):
    response = client.get(
        "/api/v1/photos/999_999_999",
        params={"access_token": world["token"]},
        headers={"Accept-Language": "de-DE,de;q=0.9"},
    )
    assert response.status_code == 404
    assert response.text == t("api.endpoint_errors.photos.not_found", "de")


def test_show_with_invalid_access_token(client, world):
    response = client.get(
        f"/api/v1/photos/{world['user_photo1'].guid}",
        params={"access_token": "999_999_999"},
    )
    assert response.status_code == 401


# ======================
# INDEX
# ======================

def test_index_lists_only_own_photos(client, world):
    response = client.get("/api/v1/photos", params={"access_token": world["token"]})
    assert response.status_code == 200
    photos = response.json()["data"]
    assert len(photos) == 2
    assert {photo["guid"] for photo in photos} == {
        world["user_photo1"].guid,
        world["user_photo2"].guid,
    }


def test_index_with_invalid_access_token(client, world):
    response = client.get("/api/v1/photos", params={"access_token": "999_999_999"})
    assert response.status_code == 401


# ======================
# CREATE
# ======================

def test_create_with_no_arguments(client, world, db_session):
    response = _upload(client, world["token"], png_bytes())
    assert response.status_code == 200
    data = response.json()
    photo = db_session.query(models.Photo).filter(models.Photo.guid == data["guid"]).one()
    assert photo.pending is False
    assert photo.author_id == world["user"].person.id
    assert data["dimensions"] == {"height": 80, "width": 120}
    confirm_photo_format(data, photo, world["user"])


def test_create_pending_flag(client, world, db_session):
    response = _upload(client, world["token"], png_bytes(), pending=False)
    assert response.status_code == 200
    data = response.json()
    assert "post" not in data
    photo = db_session.query(models.Photo).filter(models.Photo.guid == data["guid"]).one()
    assert photo.pending is False

    response = _upload(client, world["token"], png_bytes(), pending=True)
    assert response.status_code == 200
    photo = db_session.query(models.Photo).filter(models.Photo.guid == response.json()["guid"]).one()
    assert photo.pending is True


def test_create_as_profile_photo(client, world, db_session):
    response = _upload(client, world["token"], png_bytes(), set_profile_photo=True)
    assert response.status_code == 200
    data = response.json()

    db_session.expire_all()
    profile = world["user"].person.profile
    assert profile.image_url_small == data["sizes"]["small"]
    assert profile.image_url_medium == data["sizes"]["medium"]
    assert profile.image_url == data["sizes"]["large"]


def test_create_writes_renditions(client, world, db_session):
    response = _upload(client, world["token"], png_bytes(width=1400, height=700))
    assert response.status_code == 200
    photo = db_session.query(models.Photo).filter(models.Photo.guid == response.json()["guid"]).one()
    for size in (None, "small", "medium", "large"):
        assert (media_storage.storage_root / photo.stored_name(size)).exists()


def test_create_over_size_limit(client, world, db_session, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 32)
    before = db_session.query(models.Photo).count()

    response = _upload(client, world["token"], png_bytes())

    assert response.status_code == 422
    assert response.text == FAILED_CREATE
    assert db_session.query(models.Photo).count() == before


def test_create_failed_save_leaves_no_files(client, world, db_session, monkeypatch):
    stored_before = set(media_storage.storage_root.iterdir())
    photos_before = db_session.query(models.Photo).count()

    def failing_commit():
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(db_session, "commit", failing_commit)
    response = _upload(client, world["token"], png_bytes())
    monkeypatch.undo()

    assert response.status_code == 422
    assert response.text == FAILED_CREATE
    assert set(media_storage.storage_root.iterdir()) == stored_before
    assert db_session.query(models.Photo).count() == photos_before


def test_create_with_no_image(client, world):
    response = _upload(client, world["token"])
    assert response.status_code == 422
    assert response.text == FAILED_CREATE


def test_create_with_non_image_file(client, world, db_session):
    before = db_session.query(models.Photo).count()
    response = _upload(client, world["token"], b"# README\n\nNot an image.\n", content_type="text/plain")
    assert response.status_code == 422
    assert response.text == FAILED_CREATE
    assert db_session.query(models.Photo).count() == before


def test_create_with_improperly_identified_file(client, world):
    response = _upload(client, world["token"], b"# README\n\nNot an image.\n", content_type="image/png")
    assert response.status_code == 422
    assert response.text == FAILED_CREATE


def test_create_with_mismatched_image_type(client, world):
    response = _upload(client, world["token"], png_bytes(), content_type="image/jpeg")
    assert response.status_code == 422
    assert response.text == FAILED_CREATE


def test_create_with_unknown_aspect(client, world):
    response = _upload(client, world["token"], png_bytes(), aspect_ids="99999")
    assert response.status_code == 422
    assert response.text == FAILED_CREATE


def test_create_with_invalid_access_token(client, world):
    response = _upload(client, "999_999_999", png_bytes())
    assert response.status_code == 401


def test_create_with_read_only_access_token(client, world):
    response = _upload(client, world["read_only_token"], png_bytes())
    assert response.status_code == 403


# ======================
# DESTROY
# ======================

def test_destroy_own_photo(client, world, db_session):
    guid = world["user_photo1"].guid
    response = client.delete(
        f"/api/v1/photos/{guid}",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 204
    assert response.content == b""
    assert db_session.query(models.Photo).filter(models.Photo.guid == guid).first() is None


def test_destroy_profile_photo_resets_avatar(client, world, db_session):
    token = world["token"]
    uploaded = _upload(client, token, png_bytes(), set_profile_photo=True).json()
    assert client.get("/api/v1/user", params={"access_token": token}).json()["avatar"] == uploaded["sizes"]["medium"]

    response = client.delete(f"/api/v1/photos/{uploaded['guid']}", params={"access_token": token})
    assert response.status_code == 204

    db_session.expire_all()
    profile = world["user"].person.profile
    assert profile.image_url is None
    assert profile.image_url_medium is None
    assert profile.image_url_small is None
    me = client.get("/api/v1/user", params={"access_token": token}).json()
    assert me["avatar"] == settings.default_avatar_url


def test_destroy_other_photo_keeps_avatar(client, world, db_session):
    token = world["token"]
    uploaded = _upload(client, token, png_bytes(), set_profile_photo=True).json()

    response = client.delete(
        f"/api/v1/photos/{world['user_photo1'].guid}",
        params={"access_token": token},
    )
    assert response.status_code == 204

    db_session.expire_all()
    assert world["user"].person.profile.image_url_small == uploaded["sizes"]["small"]


def test_destroy_other_users_photo(client, world, db_session):
    guid = world["public_photo"].guid
    response = client.delete(
        f"/api/v1/photos/{guid}",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 404
    assert response.text == NOT_FOUND
    assert db_session.query(models.Photo).filter(models.Photo.guid == guid).first() is not None


def test_destroy_invalid_guid(client, world):
    response = client.delete(
        "/api/v1/photos/999_999_999",
        params={"access_token": world["token"]},
    )
    assert response.status_code == 404
    assert response.text == NOT_FOUND


def test_destroy_with_invalid_access_token(client, world):
    response = client.delete(
        f"/api/v1/photos/{world['user_photo1'].guid}",
        params={"access_token": "999_999_999"},
    )
    assert response.status_code == 401


def test_destroy_with_read_only_access_token(client, world, db_session):
    guid = world["user_photo1"].guid
    response = client.delete(
        f"/api/v1/photos/{guid}",
        params={"access_token": world["read_only_token"]},
    )
    assert response.status_code == 403
    assert db_session.query(models.Photo).filter(models.Photo.guid == guid).first() is not None
