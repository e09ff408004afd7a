"""
services/accounts.py

직원 / 관리자 계정 관리 서비스.

주요 기능:
- 직원 / 관리자 목록 조회 (프로필 포함)
- 계정 생성 (users + staff + 감사 로그를 하나의 트랜잭션으로)
- 프로필 부분 수정 (비밀번호 정책, 권한 변경 규칙, username 중복 확인)
- 계정 활성 상태 변경 (services.policy 결과 적용 + 비활성화 시 세션 강제 만료)

설계 원칙:
- 정책 / 검증 오류는 DB 변경 전에 발생시킴 (상태 변경 없음)
- DB 오류는 rollback 후 StoreFailure 로 변환 (원인 메시지 포함)
- 실제 변경이 있을 때만 감사 로그를 남김

관련 파일:
- resort_admin.services.policy      : 상태 변경 허용 여부
- resort_admin.services.identity    : 세션 강제 만료
- resort_admin.routers.staff / admin

"""

import logging
import uuid
from enum import Enum

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resort_admin.core.errors import Conflict, NotFound, PermissionDenied, StoreFailure, ValidationError
from resort_admin.core.security import get_password_hash, password_policy_violations
from resort_admin.models.admin_log import AdminAction
from resort_admin.models.staff import StaffProfile
from resort_admin.models.user import ADMIN_ROLES, Role, User, utcnow
from resort_admin.schemas.account import AccountCreateRequest, AccountUpdateRequest
from resort_admin.services.admin_log import write_admin_log
from resort_admin.services.identity import revoke_sessions_best_effort
from resort_admin.services.policy import StatusScope, authorize_status_change

logger = logging.getLogger(__name__)


class StatusChangeResult(str, Enum):
    UPDATED = "updated"
    NO_CHANGE = "no_change"


# 프로필 수정 / 생성 시 지정 가능한 권한 (SUPER_ADMIN 은 부트스트랩 스크립트로만 생성)
ASSIGNABLE_ROLES = {
    StatusScope.STAFF: frozenset({Role.STAFF, Role.ADMIN}),
    StatusScope.ADMIN: frozenset({Role.ADMIN}),
}

_NOT_FOUND = {
    StatusScope.STAFF: "Staff member not found.",
    StatusScope.ADMIN: "Admin not found.",
}


def _active_label(is_active: bool) -> str:
    return "active" if is_active else "inactive"


def member_to_dict(user: User, profile: StaffProfile | None) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "role": Role(user.role).value,
        "is_active": user.is_active,
        "name": profile.name if profile else None,
        "username": profile.username if profile else None,
        "phone_number": profile.phone_number if profile else None,
        "position": profile.position if profile else None,
        "is_admin": profile.is_admin if profile else False,
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "last_updated": user.last_updated.isoformat() if user.last_updated else None,
    }


def get_profile(db: Session, user_id: uuid.UUID) -> StaffProfile | None:
    return db.scalar(select(StaffProfile).where(StaffProfile.user_id == user_id))


def _parse_role(value: str) -> Role:
    try:
        return Role(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid role: {value}")


def _username_taken(db: Session, username: str, exclude_user_id: uuid.UUID | None = None) -> bool:
    stmt = select(StaffProfile.id).where(StaffProfile.username == username)
    if exclude_user_id is not None:
        stmt = stmt.where(StaffProfile.user_id != exclude_user_id)
    return db.scalar(stmt) is not None


def list_members(db: Session, scope: StatusScope) -> list[dict]:
    stmt = select(User, StaffProfile).outerjoin(StaffProfile, StaffProfile.user_id == User.id)
    if scope == StatusScope.ADMIN:
        stmt = stmt.where(User.role.in_(list(ADMIN_ROLES)))
    else:
        stmt = stmt.where(User.role != Role.CUSTOMER)
    rows = db.execute(stmt.order_by(User.created_at)).all()
    return [member_to_dict(user, profile) for user, profile in rows]


"""
계정 생성

- 권한 미지정 시 엔드포인트 기본값 (직원: STAFF, 관리자: ADMIN)
- ADMIN 계정 생성은 SUPER_ADMIN만 가능
- 비밀번호 정책 위반 -> 400, 이메일 / username 중복 -> 409
- users, staff, 감사 로그를 한 번에 커밋

"""

def create_member(db: Session, *, actor: User, data: AccountCreateRequest, scope: StatusScope) -> dict:
    default_role = Role.ADMIN if scope == StatusScope.ADMIN else Role.STAFF
    role = _parse_role(data.role) if data.role else default_role

    if role not in ASSIGNABLE_ROLES[scope]:
        raise ValidationError(f"Role '{role.value}' cannot be assigned here")
    if role == Role.ADMIN and Role(actor.role) != Role.SUPER_ADMIN:
        raise PermissionDenied("Only SUPER_ADMIN can create ADMIN accounts")

    violations = password_policy_violations(data.password)
    if violations:
        raise ValidationError("Password does not meet policy. Must: " + ", ".join(violations) + ".")

    email = data.email.lower()
    if db.scalar(select(User.id).where(User.email == email)) is not None:
        raise Conflict("Email already registered.")

    username = data.username.strip() if data.username else None
    if username and _username_taken(db, username):
        raise Conflict("Username already taken.")

    try:
        user = User(
            email=email,
            password_hash=get_password_hash(data.password),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.flush()

        profile = StaffProfile(
            user_id=user.id,
            name=data.name,
            username=username,
            phone_number=data.phone_number,
            position=data.position,
            is_admin=role in ADMIN_ROLES,
        )
        db.add(profile)
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.CREATE_ACCOUNT,
            target_type="user",
            target_id=user.id,
            after_value=role.value,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email or username already in use.")
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to create account: {e}")

    db.refresh(user)
    db.refresh(profile)
    logger.info("Account %s (%s) created by %s", user.id, role.value, actor.id)
    return member_to_dict(user, profile)


"""
계정 프로필 부분 수정

검사 순서:
1. 대상 계정 / 프로필 존재 여부                          -> 404
2. SUPER_ADMIN 대상은 SUPER_ADMIN만 수정 가능            -> 403
3. ADMIN 행위자는 다른 ADMIN 수정 불가                   -> 403
4. 권한 변경: 본인 권한 변경 불가(400), ADMIN 승격은 SUPER_ADMIN만(403)
5. 새 비밀번호 정책 검사                                 -> 400
6. username 중복                                        -> 409

- 비밀번호가 바뀌면 같은 트랜잭션에서 세션 버전을 올려 기존 토큰 무효화
- 권한이 바뀌면 is_admin 은 권한에서 유도, 아니면 요청의 isAdmin 사용

"""

def update_member(
    db: Session,
    *,
    actor: User,
    target_id: uuid.UUID,
    data: AccountUpdateRequest,
    scope: StatusScope,
) -> dict:
    target = db.get(User, target_id)
    profile = get_profile(db, target_id) if target else None
    if target is None or profile is None:
        raise NotFound(_NOT_FOUND[scope])
    if scope == StatusScope.ADMIN and Role(target.role) not in ADMIN_ROLES:
        raise NotFound(_NOT_FOUND[scope])

    actor_role, target_role = Role(actor.role), Role(target.role)
    actor_is_target = actor.id == target.id

    if target_role == Role.SUPER_ADMIN and actor_role != Role.SUPER_ADMIN:
        raise PermissionDenied("Only Super Admins can modify Super Admin accounts.")
    if target_role == Role.ADMIN and actor_role == Role.ADMIN and not actor_is_target:
        raise PermissionDenied("Admins cannot modify other admins.")

    changes = data.model_dump(exclude_unset=True)

    new_role = None
    if changes.get("role"):
        requested = _parse_role(changes["role"])
        if requested != target_role:
            if actor_is_target:
                raise ValidationError("Cannot change your own role")
            if target_role == Role.SUPER_ADMIN:
                raise PermissionDenied("Cannot change SUPER_ADMIN role")
            if requested not in ASSIGNABLE_ROLES[StatusScope.STAFF]:
                raise ValidationError(f"Role '{requested.value}' cannot be assigned here")
            if requested == Role.ADMIN and actor_role != Role.SUPER_ADMIN:
                raise PermissionDenied("Only SUPER_ADMIN can promote to ADMIN")
            new_role = requested

    new_password = changes.get("password")
    if new_password:
        violations = password_policy_violations(new_password)
        if violations:
            raise ValidationError("New password does not meet policy. Must: " + ", ".join(violations) + ".")

    username = None
    if "username" in changes:
        username = changes["username"].strip() if changes["username"] else None
        if username and _username_taken(db, username, exclude_user_id=target.id):
            raise Conflict("Username already taken.")

    try:
        for field in ("name", "position"):
            if changes.get(field):
                setattr(profile, field, changes[field])
        if "phone_number" in changes:
            profile.phone_number = changes["phone_number"]
        if "username" in changes:
            profile.username = username

        if new_role is not None:
            write_admin_log(
                db,
                actor_id=actor.id,
                action=AdminAction.SET_ROLE,
                target_type="user",
                target_id=target.id,
                before_value=target_role.value,
                after_value=new_role.value,
            )
            target.role = new_role
            profile.is_admin = new_role in ADMIN_ROLES
        elif changes.get("is_admin") is not None:
            profile.is_admin = changes["is_admin"]

        if new_password:
            target.password_hash = get_password_hash(new_password)
            target.session_version += 1
            target.refresh_token_version += 1

        target.last_updated = utcnow()
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.UPDATE_ACCOUNT,
            target_type="user",
            target_id=target.id,
            after_value=",".join(sorted(changes))[:100] or None,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Username already taken.")
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to update account: {e}")

    db.refresh(target)
    db.refresh(profile)
    return member_to_dict(target, profile)


"""
계정 활성 상태 변경

1. 대상 계정 조회 (없으면 404)
2. services.policy.authorize_status_change 로 허용 여부 판단 (거부 -> 403, 사유 포함)
3. 현재 상태와 같으면 NO_CHANGE (DB 변경 / 로그 없음)
4. is_active, last_updated, 감사 로그를 한 트랜잭션으로 커밋
5. 비활성화라면 대상의 모든 세션을 best-effort 로 만료 (실패해도 UPDATED)

"""

def change_account_status(
    db: Session,
    *,
    actor: User,
    target_id: uuid.UUID,
    requested_active: bool,
    scope: StatusScope,
) -> tuple[StatusChangeResult, dict]:
    target = db.get(User, target_id)
    if target is None:
        raise NotFound(_NOT_FOUND[scope])

    decision = authorize_status_change(
        actor_role=actor.role,
        target_role=target.role,
        target_active=target.is_active,
        requested_active=requested_active,
        actor_is_target=actor.id == target.id,
        scope=scope,
    )
    if not decision.allowed:
        raise PermissionDenied(decision.reason)

    profile = get_profile(db, target.id)
    if decision.no_change:
        return StatusChangeResult.NO_CHANGE, member_to_dict(target, profile)

    before = _active_label(target.is_active)
    try:
        target.is_active = requested_active
        target.last_updated = utcnow()
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.SET_STATUS,
            target_type="user",
            target_id=target.id,
            before_value=before,
            after_value=_active_label(requested_active),
        )
        db.commit()
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to update account status: {e}")

    logger.info("Account %s set %s by %s", target.id, _active_label(requested_active), actor.id)

    # 세션 만료 단계의 실패가 응답에 영향을 주지 않도록 먼저 응답을 만든다
    member = member_to_dict(target, profile)

    if not requested_active:
        revoke_sessions_best_effort(db, target)

    return StatusChangeResult.UPDATED, member
