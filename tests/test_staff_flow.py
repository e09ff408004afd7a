"""
직원 계정 관리 통합 테스트.
- 직원 상태 변경은 관리자 상태 변경과 같은 정책을 따르고 STAFF 계정만 대상으로 함
- 계정 생성 / 프로필 수정 규칙 (비밀번호 정책, 권한 변경, username 중복)
"""

from sqlalchemy import select

from resort_admin.models.admin_log import AdminAction, AdminActionLog
from resort_admin.models.staff import StaffProfile
from resort_admin.models.user import Role
from tests.helpers import DEFAULT_PASSWORD, auth_header, create_and_login, create_user_in_db, get_user, login


def get_profile(db, user_id):
    db.expire_all()
    return db.scalar(select(StaffProfile).where(StaffProfile.user_id == user_id))


# ---------- 상태 변경 ----------

def test_admin_deactivates_staff(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    staff, staff_token = create_and_login(client, db_session, role=Role.STAFF)

    r = client.patch(f"/staff/{staff.id}/status", json={"isActive": False}, headers=auth_header(admin_token))
    assert r.status_code == 200, r.text
    assert r.json()["result"] == "updated"
    assert get_user(db_session, staff.id).is_active is False

    r = client.get("/auth/session", headers=auth_header(staff_token))
    assert r.status_code == 401


def test_staff_status_endpoint_rejects_admin_targets(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    admin = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.patch(f"/staff/{admin.id}/status", json={"isActive": False}, headers=auth_header(super_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "use the admin-status endpoint"
    assert get_user(db_session, admin.id).is_active is True


def test_staff_status_endpoint_rejects_customers(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    customer = create_user_in_db(db_session, role=Role.CUSTOMER)

    r = client.patch(f"/staff/{customer.id}/status", json={"isActive": False}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "customer accounts are not managed by the staff-status endpoint"


def test_admin_cannot_use_staff_endpoint_on_other_admin(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    other = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.patch(f"/staff/{other.id}/status", json={"isActive": False}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "admins cannot change other admins' status"


def test_staff_cannot_change_staff_status(client, db_session):
    _, staff_token = create_and_login(client, db_session, role=Role.STAFF)
    other = create_user_in_db(db_session, role=Role.STAFF)

    r = client.patch(f"/staff/{other.id}/status", json={"isActive": False}, headers=auth_header(staff_token))
    assert r.status_code == 403


def test_staff_status_no_change(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    staff = create_user_in_db(db_session, role=Role.STAFF, is_active=False)

    r = client.patch(f"/staff/{staff.id}/status", json={"isActive": False}, headers=auth_header(admin_token))
    assert r.status_code == 200, r.text
    assert r.json()["result"] == "no_change"


# ---------- 계정 생성 ----------

def new_staff_body(**overrides):
    body = {
        "email": "jin.lee@resort-test.com",
        "password": "Fr0nt-Desk!",
        "name": "Jin Lee",
        "position": "Front Desk",
        "role": "Staff",
        "username": "jinlee",
        "phoneNumber": "010-1234-5678",
    }
    body.update(overrides)
    return body


def test_admin_creates_staff_account(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)

    r = client.post("/staff", json=new_staff_body(), headers=auth_header(admin_token))
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["role"] == "staff"
    assert data["username"] == "jinlee"
    assert data["phone_number"] == "010-1234-5678"
    assert data["is_admin"] is False

    db_session.expire_all()
    logs = db_session.scalars(select(AdminActionLog).where(AdminActionLog.action == AdminAction.CREATE_ACCOUNT)).all()
    assert len(logs) == 1

    assert login(client, "jin.lee@resort-test.com", "Fr0nt-Desk!")


def test_create_staff_rejects_duplicates(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    r = client.post("/staff", json=new_staff_body(), headers=auth_header(admin_token))
    assert r.status_code == 201, r.text

    r = client.post("/staff", json=new_staff_body(username="other"), headers=auth_header(admin_token))
    assert r.status_code == 409
    assert r.json()["detail"] == "Email already registered."

    r = client.post("/staff", json=new_staff_body(email="someone@resort-test.com"), headers=auth_header(admin_token))
    assert r.status_code == 409
    assert r.json()["detail"] == "Username already taken."


def test_create_staff_enforces_password_policy(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)

    r = client.post("/staff", json=new_staff_body(password="short"), headers=auth_header(admin_token))
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail.startswith("Password does not meet policy. Must:")
    assert "be at least 8 characters" in detail
    assert "contain a number" in detail


def test_only_super_admin_creates_admin_through_staff_endpoint(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)

    r = client.post("/staff", json=new_staff_body(role="admin"), headers=auth_header(admin_token))
    assert r.status_code == 403

    r = client.post("/staff", json=new_staff_body(role="admin"), headers=auth_header(super_token))
    assert r.status_code == 201, r.text
    assert r.json()["data"]["is_admin"] is True


def test_create_staff_rejects_unknown_role(client, db_session):
    _, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)

    r = client.post("/staff", json=new_staff_body(role="owner"), headers=auth_header(super_token))
    assert r.status_code == 400

    r = client.post("/staff", json=new_staff_body(role="super_admin"), headers=auth_header(super_token))
    assert r.status_code == 400


# ---------- 프로필 수정 ----------

def test_update_staff_profile_fields(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    staff = create_user_in_db(db_session, role=Role.STAFF, username="old_name")

    r = client.put(
        f"/staff/{staff.id}",
        json={"name": "Hana Kim", "position": "Concierge", "phoneNumber": "010-5555-0000", "username": "hana"},
        headers=auth_header(admin_token),
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["name"] == "Hana Kim"
    assert data["position"] == "Concierge"
    assert data["phone_number"] == "010-5555-0000"
    assert data["username"] == "hana"

    profile = get_profile(db_session, staff.id)
    assert profile.name == "Hana Kim"


def test_update_staff_username_conflict(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    create_user_in_db(db_session, role=Role.STAFF, username="taken")
    staff = create_user_in_db(db_session, role=Role.STAFF)

    r = client.put(f"/staff/{staff.id}", json={"username": "taken"}, headers=auth_header(admin_token))
    assert r.status_code == 409
    assert r.json()["detail"] == "Username already taken."


def test_update_staff_password_policy_and_session_reset(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    staff, staff_token = create_and_login(client, db_session, role=Role.STAFF)

    r = client.put(f"/staff/{staff.id}", json={"password": "alllowercase1!"}, headers=auth_header(admin_token))
    assert r.status_code == 400
    assert r.json()["detail"] == "New password does not meet policy. Must: contain an uppercase letter."

    r = client.put(f"/staff/{staff.id}", json={"password": "N3w-Secret!"}, headers=auth_header(admin_token))
    assert r.status_code == 200, r.text

    r = client.get("/auth/session", headers=auth_header(staff_token))
    assert r.status_code == 401

    r = client.post("/auth/login", json={"email": staff.email, "password": DEFAULT_PASSWORD})
    assert r.status_code == 401
    assert login(client, staff.email, "N3w-Secret!")


def test_admin_cannot_modify_super_admin_or_other_admin(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    super_admin = create_user_in_db(db_session, role=Role.SUPER_ADMIN)
    other_admin = create_user_in_db(db_session, role=Role.ADMIN)

    r = client.put(f"/staff/{super_admin.id}", json={"name": "X"}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "Only Super Admins can modify Super Admin accounts."

    r = client.put(f"/staff/{other_admin.id}", json={"name": "X"}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "Admins cannot modify other admins."


def test_role_change_rules(client, db_session):
    admin, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    super_admin, super_token = create_and_login(client, db_session, role=Role.SUPER_ADMIN)
    staff = create_user_in_db(db_session, role=Role.STAFF)

    r = client.put(f"/staff/{admin.id}", json={"role": "staff"}, headers=auth_header(admin_token))
    assert r.status_code == 400
    assert r.json()["detail"] == "Cannot change your own role"

    r = client.put(f"/staff/{staff.id}", json={"role": "admin"}, headers=auth_header(admin_token))
    assert r.status_code == 403
    assert r.json()["detail"] == "Only SUPER_ADMIN can promote to ADMIN"

    r = client.put(f"/staff/{staff.id}", json={"role": "admin"}, headers=auth_header(super_token))
    assert r.status_code == 200, r.text
    assert r.json()["data"]["role"] == "admin"
    assert r.json()["data"]["is_admin"] is True

    db_session.expire_all()
    role_logs = db_session.scalars(select(AdminActionLog).where(AdminActionLog.action == AdminAction.SET_ROLE)).all()
    assert [(log.before_value, log.after_value) for log in role_logs] == [("staff", "admin")]


def test_is_admin_flag_follows_request_without_role_change(client, db_session):
    _, admin_token = create_and_login(client, db_session, role=Role.ADMIN)
    staff = create_user_in_db(db_session, role=Role.STAFF)

    r = client.put(f"/staff/{staff.id}", json={"isAdmin": True}, headers=auth_header(admin_token))
    assert r.status_code == 200, r.text
    assert r.json()["data"]["is_admin"] is True
    assert r.json()["data"]["role"] == "staff"


def test_list_staff(client, db_session):
    _, staff_token = create_and_login(client, db_session, role=Role.STAFF)
    create_user_in_db(db_session, role=Role.ADMIN)
    create_user_in_db(db_session, role=Role.CUSTOMER)

    r = client.get("/staff", headers=auth_header(staff_token))
    assert r.status_code == 200, r.text
    roles = sorted(m["role"] for m in r.json()["data"])
    assert roles == ["admin", "staff"]
