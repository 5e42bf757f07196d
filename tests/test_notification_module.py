from __future__ import annotations

import pytest

# Skip suite when FastAPI dependency is not present in local environment.
pytest.importorskip("fastapi")

from fastapi import HTTPException

from conftest import read_only_token, read_write_token
from socialpod.api.notifications import (
    get_my_notifications,
    get_unread_count,
    mark_all_notifications_read,
    update_notification,
)
from socialpod.i18n import t
from socialpod.schemas.notification import NotificationUpdate
from socialpod.services import post_service

NOT_FOUND = t("api.endpoint_errors.notifications.not_found")
CANT_PROCESS = t("api.endpoint_errors.notifications.cant_process")


@pytest.fixture
def liked(db_session, make_user):
    author = make_user("author")
    fan = make_user("fan")
    post = post_service.create_status_message(db_session, author, text="hi", public=True)
    _, notification = post_service.like_post(db_session, fan, post.guid)
    return {"author": author, "fan": fan, "post": post, "notification": notification}


def test_notification_api_read_flow(db_session, liked):
    author = liked["author"]

    unread = get_my_notifications(
        only_unread=True,
        only_after=None,
        limit=50,
        current_user=author,
        db=db_session,
    )
    assert len(unread["data"]) == 1
    assert unread["data"][0]["guid"] == liked["notification"].guid

    assert get_unread_count(current_user=author, db=db_session)["unread_count"] == 1

    update_notification(
        guid=liked["notification"].guid,
        payload=NotificationUpdate(read=True),
        current_user=author,
        db=db_session,
    )
    assert get_unread_count(current_user=author, db=db_session)["unread_count"] == 0

    update_notification(
        guid=liked["notification"].guid,
        payload=NotificationUpdate(read=False),
        current_user=author,
        db=db_session,
    )
    all_marked = mark_all_notifications_read(current_user=author, db=db_session)
    assert all_marked["updated"] == 1
    assert get_unread_count(current_user=author, db=db_session)["unread_count"] == 0


def test_update_notification_404(db_session, liked):
    with pytest.raises(HTTPException) as exc_info:
        update_notification(
            guid="missing",
            payload=NotificationUpdate(read=True),
            current_user=liked["author"],
            db=db_session,
        )
    assert exc_info.value.status_code == 404


def test_index_over_http(client, liked):
    response = client.get(
        "/api/v1/notifications",
        params={"access_token": read_only_token(liked["author"])},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["type"] == "liked"
    assert data[0]["read"] is False
    assert data[0]["target"]["guid"] == liked["post"].guid
    assert data[0]["event_creators"][0]["guid"] == liked["fan"].person.guid


def test_index_only_after_filters(client, liked):
    token = read_only_token(liked["author"])
    response = client.get(
        "/api/v1/notifications",
        params={"access_token": token, "only_after": "2999-01-01T00:00:00Z"},
    )
    assert response.status_code == 200
    assert response.json()["data"] == []

    response = client.get(
        "/api/v1/notifications",
        params={"access_token": token, "only_after": "2000-01-01T00:00:00+00:00"},
    )
    assert len(response.json()["data"]) == 1


def test_index_with_bad_only_after(client, liked):
    response = client.get(
        "/api/v1/notifications",
        params={"access_token": read_only_token(liked["author"]), "only_after": "yesterday"},
    )
    assert response.status_code == 422
    assert response.text == CANT_PROCESS


def test_show_over_http(client, liked):
    guid = liked["notification"].guid
    response = client.get(
        f"/api/v1/notifications/{guid}",
        params={"access_token": read_only_token(liked["author"])},
    )
    assert response.status_code == 200
    assert response.json()["guid"] == guid

    response = client.get(
        f"/api/v1/notifications/{guid}",
        params={"access_token": read_only_token(liked["fan"])},
    )
    assert response.status_code == 404
    assert response.text == NOT_FOUND


def test_patch_over_http(client, liked, db_session):
    guid = liked["notification"].guid
    token = read_write_token(liked["author"])

    response = client.patch(
        f"/api/v1/notifications/{guid}",
        params={"access_token": token},
        json={"read": True},
    )
    assert response.status_code == 204
    db_session.refresh(liked["notification"])
    assert liked["notification"].unread is False

    response = client.patch(
        f"/api/v1/notifications/{guid}",
        params={"access_token": token},
        json={},
    )
    assert response.status_code == 422
    assert response.text == CANT_PROCESS


def test_patch_requires_write_scope(client, liked):
    response = client.patch(
        f"/api/v1/notifications/{liked['notification'].guid}",
        params={"access_token": read_only_token(liked["author"])},
        json={"read": True},
    )
    assert response.status_code == 403
