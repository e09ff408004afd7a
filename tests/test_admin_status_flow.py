"""
관리자 계정 활성 상태 변경(PATCH /admin/{id}/status) 통합 테스트.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from resort_admin.models.admin_log import AdminAction, AdminActionLog
from resort_admin.models.user import Role
from resort_admin.services import identity
from tests.helpers import DEFAULT_PASSWORD, auth_header, create_and_login, create_user_in_db, get_user, login


def status_logs(db):
    db.expire_all()
    return db.scalars(select(AdminActionLog).where(AdminActionLog.action == AdminAction.SET_STATUS)).all()


def test_super_admin_deactivates_admin_and_revokes_sessions(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.post("/auth/login", json={"email": admin.email, "password": DEFAULT_PASSWORD})
    admin_token = r.json()["data"]["access_token"]
    admin_refresh = client.cookies.get("refresh_token")
    client.cookies.clear()

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": False}, headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["result"] == "updated"
    assert body["data"]["is_active"] is False

    target = get_user(db_session, admin.id)
    assert target.is_active is False
    assert target.session_version == 1
    assert target.refresh_token_version == 1

    logs = status_logs(db_session)
    assert len(logs) == 1
    assert (logs[0].before_value, logs[0].after_value) == ("active", "inactive")

    # 기존 Access Token / Refresh 쿠키 모두 거부
    r = client.get("/auth/session", headers=auth_header(admin_token))
    assert r.status_code == 401

    client.cookies.set("refresh_token", admin_refresh)
    r = client.get("/auth/session")
    assert r.status_code == 401
    client.cookies.clear()

    r = client.post("/auth/login", json={"email": admin.email, "password": DEFAULT_PASSWORD})
    assert r.status_code == 403


def test_super_admin_reactivates_admin(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN, is_active=False)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": True}, headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    assert r.json()["result"] == "updated"
    assert get_user(db_session, admin.id).is_active is True
    assert get_user(db_session, admin.id).session_version == 0


def test_admin_cannot_change_other_admin_status(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    other = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.patch(f"/admin/{other.id}/status", json={"isActive": False}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "admins cannot change other admins' status"
    assert get_user(db_session, other.id).is_active is True
    assert status_logs(db_session) == []


def test_admin_cannot_self_deactivate(client, db_session):
    admin, admin_token = create_and_login(client, db_session, role=Role.ADMIN)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": False}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "admins cannot self-deactivate"
    assert get_user(db_session, admin.id).is_active is True


def test_super_admin_cannot_be_deactivated(client, db_session):
    super_admin, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    other_super = create_user_in_db(db_session, role=Role.SUPER_ADMIN)

    for target in (super_admin, other_super):
        r = client.patch(f"/admin/{target.id}/status", json={"isActive": False}, headers=auth_header(super_token))
        assert r.status_code == 403
        assert r.json()["detail"] == "super admin cannot be deactivated"


def test_same_state_is_no_change_without_audit_row(client, db_session):
    admin, admin_token = create_and_login(client, db_session, role=Role.ADMIN)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": True}, headers=auth_header(admin_token))
    assert r.status_code == 200, r.text
    assert r.json()["result"] == "no_change"
    assert status_logs(db_session) == []
    assert get_user(db_session, admin.id).session_version == 0


def test_admin_endpoint_rejects_staff_target(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    staff = create_user_in_db(db_session, role=Role.STAFF)

    r = client.patch(f"/admin/{staff.id}/status", json={"isActive": False}, headers=auth_header(super_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "use the staff-status endpoint"


def test_status_body_must_be_strict_boolean(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    for body in ({"isActive": "false"}, {"isActive": 0}, {}):
        r = client.patch(f"/admin/{admin.id}/status", json=body, headers=auth_header(super_token))
        assert r.status_code == 400, body
    assert get_user(db_session, admin.id).is_active is True


def test_unknown_admin_is_404(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)

    r = client.patch(f"/admin/{uuid.uuid4()}/status", json={"isActive": False}, headers=auth_header(super_token))
    assert r.status_code == 404
    assert r.json()["detail"] == "Admin not found."


def test_staff_actor_is_forbidden(client, db_session):
    _, staff_token = create_and_login(client, db_session, role=Role.STAFF)
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": False}, headers=auth_header(staff_token))
    assert r.status_code == 403
    assert get_user(db_session, admin.id).is_active is True


def test_unauthenticated_is_401(client, db_session):
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": False})
    assert r.status_code == 401


def test_session_invalidation_failure_is_logged_not_surfaced(client, db_session, monkeypatch, caplog):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    def boom(db, user):
        raise RuntimeError("session store unavailable")

    monkeypatch.setattr(identity, "sign_out_everywhere", boom)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": False}, headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    assert r.json()["result"] == "updated"

    target = get_user(db_session, admin.id)
    assert target.is_active is False
    assert target.session_version == 0
    assert any("Failed to invalidate sessions" in rec.getMessage() for rec in caplog.records)


def test_deactivation_response_survives_failed_session_invalidation(client, db_session, monkeypatch):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    def session_store_down(*args, **kwargs):
        raise RuntimeError("session store unavailable")

    # 세션 만료 실패 뒤 대상 계정을 다시 읽는 단계가 없어야 함
    monkeypatch.setattr(identity, "sign_out_everywhere", session_store_down)
    monkeypatch.setattr(Session, "refresh", session_store_down)

    r = client.patch(f"/admin/{admin.id}/status", json={"isActive": False}, headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["result"] == "updated"
    assert body["data"]["id"] == str(admin.id)
    assert body["data"]["is_active"] is False


def test_admin_list_and_logs(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN)
    create_user_in_db(db_session, role=Role.STAFF)

    r = client.get("/admin", headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    roles = sorted(m["role"] for m in r.json()["data"])
    assert roles == ["admin", "super_admin"]

    client.patch(f"/admin/{admin.id}/status", json={"isActive": False}, headers=auth_header(super_token))
    r = client.get("/admin/logs", params={"action": "SET_STATUS"}, headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    logs = r.json()["data"]
    assert len(logs) == 1
    assert logs[0]["target_id"] == str(admin.id)


def test_create_admin_requires_super_admin(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    body = {
        "email": "new.admin@resort-test.com",
        "password": "N3w-Admin!",
        "name": "New Admin",
        "position": "Operations",
    }

    r = client.post("/admin", json=body, headers=auth_header(admin_token))
    assert r.status_code == 403

    r = client.post("/admin", json=body, headers=auth_header(super_token))
    assert r.status_code == 201, r.text
    assert r.json()["data"]["role"] == "admin"
    assert r.json()["data"]["is_admin"] is True

    assert login(client, "new.admin@resort-test.com", "N3w-Admin!")
