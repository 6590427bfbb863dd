"""Admin accounts and categories."""

from __future__ import annotations

from sqlalchemy.orm import Session

from conftest import DEFAULT_PASSWORD, admin_headers
from inkwell import models


def _admin_payload(n: int, **overrides) -> dict:
    payload = {
        "username": f"moderator{n}",
        "email": f"moderator{n}@example.com",
        "password": "a-long-password",
        "name": f"Moderator {n}",
    }
    payload.update(overrides)
    return payload


def test_first_admin_bootstraps_as_super_admin(client):
    first = client.post("/admins", json=_admin_payload(1))
    second = client.post("/admins", json=_admin_payload(2))

    assert first.status_code == 201
    assert first.json()["isSuperAdmin"] is True
    assert first.json()["adminCode"].startswith("ADM-")
    assert second.status_code == 403


def test_super_admin_creates_admin_and_is_logged(client, db: Session, make_admin):
    boss = make_admin()

    response = client.post("/admins", json=_admin_payload(3), headers=admin_headers(boss))
    duplicate = client.post("/admins", json=_admin_payload(4, email="moderator3@example.com"), headers=admin_headers(boss))

    assert response.status_code == 201
    assert response.json()["isSuperAdmin"] is False
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Email already in use"
    assert db.query(models.Log).one().action == "OTHER"


def test_admin_login_sets_cookie(client, make_admin):
    admin = make_admin()

    response = client.post("/admins/login", json={"email": admin.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    assert "token=" in response.headers["set-cookie"]
    assert "HttpOnly" in response.headers["set-cookie"]
    me = client.get("/admins/me")
    assert me.json()["id"] == str(admin.id)


def test_admin_login_rejects_bad_password_and_deleted_admin(client, make_admin):
    admin = make_admin()
    deleted = make_admin(is_deleted=True)

    wrong = client.post("/admins/login", json={"email": admin.email, "password": "not-the-password"})
    gone = client.post("/admins/login", json={"email": deleted.email, "password": DEFAULT_PASSWORD})

    assert wrong.status_code == 403
    assert gone.status_code == 403


def test_super_admin_soft_deletes_admin(client, db: Session, make_admin):
    boss = make_admin()
    helper = make_admin(is_super_admin=False)

    self_delete = client.delete(f"/admins/{boss.id}", headers=admin_headers(boss))
    by_helper = client.delete(f"/admins/{boss.id}", headers=admin_headers(helper))
    deleted = client.delete(f"/admins/{helper.id}", headers=admin_headers(boss))

    assert self_delete.status_code == 403
    assert by_helper.status_code == 403
    assert deleted.json()["isDeleted"] is True
    # A deleted admin's token stops working
    assert client.get("/admins/me", headers=admin_headers(helper)).status_code == 401


def test_admin_profile_update_is_logged(client, db: Session, make_admin):
    admin = make_admin()

    response = client.patch("/admins/me", json={"name": "Renamed Admin"}, headers=admin_headers(admin))

    assert response.json()["name"] == "Renamed Admin"
    assert db.query(models.Log).one().action == "UPDATE_PROFILE"


def test_admin_password_change(client, make_admin):
    admin = make_admin()
    headers = admin_headers(admin)

    wrong = client.put(
        "/admins/me/password",
        json={"currentPassword": "nope", "newPassword": "brand-new-password"},
        headers=headers,
    )
    right = client.put(
        "/admins/me/password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "brand-new-password"},
        headers=headers,
    )

    assert wrong.status_code == 403
    assert right.status_code == 200
    login = client.post("/admins/login", json={"email": admin.email, "password": "brand-new-password"})
    assert login.status_code == 200


# ============================================================================
# CATEGORIES
# ============================================================================


def test_category_management(client, db: Session, make_admin):
    admin = make_admin()
    headers = admin_headers(admin)

    created = client.post("/categories", json={"name": "Science Fiction", "colorLight": "#eee"}, headers=headers)
    assert created.status_code == 201
    assert created.json()["slug"] == "science-fiction"

    duplicate = client.post("/categories", json={"name": "Science Fiction"}, headers=headers)
    assert duplicate.status_code == 409

    category_id = created.json()["id"]
    renamed = client.patch(f"/categories/{category_id}", json={"name": "Sci-Fi"}, headers=headers)
    assert renamed.json()["name"] == "Sci-Fi"

    listed = client.get("/categories").json()
    assert [category["name"] for category in listed] == ["Sci-Fi"]

    assert client.delete(f"/categories/{category_id}", headers=headers).status_code == 204
    actions = sorted(log.action for log in db.query(models.Log).all())
    assert actions == ["CREATE_CATEGORY", "DELETE_CATEGORY", "OTHER"]


def test_category_with_posts_cannot_be_deleted(client, make_user, make_post, category, make_admin):
    make_post(make_user())

    response = client.delete(f"/categories/{category.id}", headers=admin_headers(make_admin()))

    assert response.status_code == 400


def test_category_writes_require_admin(client):
    assert client.post("/categories", json={"name": "Anything"}).status_code == 401
