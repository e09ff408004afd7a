"""
services/policy.py

권한 정책(Policy) 판단 함수 모음.

DB / HTTP 의존성이 없는 순수 함수만 둔다.
라우터와 서비스는 이 파일의 결과(허용/거부 + 사유)를 받아
상태 변경 여부를 결정한다.

주요 기능:
- 계정 활성 상태 변경 허용 여부 (관리자 / 직원 엔드포인트 공용)
- 예약 삭제 허용 여부 및 거부 사유
- 객실 관리 가능 권한 확인

설계 원칙:
- 규칙은 정해진 순서대로 평가하고 처음 일치한 규칙의 결과를 사용
- 거부 사유(reason)는 어떤 규칙에 걸렸는지 구분 가능한 문장으로 반환
- 관리자/직원 상태 변경 엔드포인트가 같은 함수를 사용 (scope로 대상 범위만 구분)

관련 파일:
- resort_admin.services.accounts      : 상태 변경 적용
- resort_admin.services.reservations  : 예약 삭제
- resort_admin.services.rooms         : 객실 삭제

"""

from dataclasses import dataclass
from enum import Enum

from resort_admin.models.reservation import ReservationStatus
from resort_admin.models.user import ADMIN_ROLES, Role


class StatusScope(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


@dataclass(frozen=True)
class StatusDecision:
    allowed: bool
    reason: str | None = None
    no_change: bool = False

    @classmethod
    def deny(cls, reason: str) -> "StatusDecision":
        return cls(allowed=False, reason=reason)


"""
계정 활성 상태 변경 정책

평가 순서 (처음 일치한 규칙 적용):
1. SUPER_ADMIN 대상 비활성화 요청        -> 거부 (행위자와 무관)
2. ADMIN 대상 + 행위자가 SUPER_ADMIN 아님
   a. 본인이 아님                       -> 거부
   b. 본인 비활성화                     -> 거부
3. 엔드포인트 범위(scope) 밖의 대상        -> 거부
4. 현재 상태 == 요청 상태                 -> 허용 (no_change, 변경/로그 없음)
5. 그 외                                -> 허용

"""

def authorize_status_change(
    actor_role: Role,
    target_role: Role,
    target_active: bool,
    requested_active: bool,
    actor_is_target: bool,
    scope: StatusScope = StatusScope.ADMIN,
) -> StatusDecision:
    actor_role, target_role = Role(actor_role), Role(target_role)

    if target_role == Role.SUPER_ADMIN and requested_active is False:
        return StatusDecision.deny("super admin cannot be deactivated")

    if target_role == Role.ADMIN and actor_role != Role.SUPER_ADMIN:
        if not actor_is_target:
            return StatusDecision.deny("admins cannot change other admins' status")
        if requested_active is False:
            return StatusDecision.deny("admins cannot self-deactivate")

    if scope == StatusScope.ADMIN:
        if target_role not in ADMIN_ROLES:
            return StatusDecision.deny("use the staff-status endpoint")
    else:
        if target_role in ADMIN_ROLES:
            return StatusDecision.deny("use the admin-status endpoint")
        if target_role != Role.STAFF:
            return StatusDecision.deny("customer accounts are not managed by the staff-status endpoint")

    if target_active == requested_active:
        return StatusDecision(allowed=True, no_change=True)

    return StatusDecision(allowed=True)


# 직원이 삭제할 수 있는 예약 상태
STAFF_DELETABLE_STATUSES = frozenset({
    ReservationStatus.PENDING,
    ReservationStatus.REJECTED,
    ReservationStatus.EXPIRED,
    ReservationStatus.CANCELLED,
})


def can_delete_reservation(actor_role: Role, status: ReservationStatus, payment_received: bool) -> bool:
    actor_role, status = Role(actor_role), ReservationStatus(status)
    if actor_role == Role.SUPER_ADMIN:
        return True
    if actor_role == Role.STAFF:
        return status in STAFF_DELETABLE_STATUSES
    if actor_role == Role.ADMIN:
        if status in STAFF_DELETABLE_STATUSES:
            return True
        return status == ReservationStatus.CONFIRMED_PENDING_PAYMENT and not payment_received
    return False


def reservation_denial_reason(actor_role: Role) -> str:
    actor_role = Role(actor_role)
    if actor_role == Role.STAFF:
        return "Permission denied: Staff can only delete Pending, Rejected, Expired, or Cancelled reservations."
    if actor_role == Role.ADMIN:
        return (
            "Permission denied: Admins can only delete Pending, Rejected, Expired, Cancelled, "
            "or unpaid Confirmed_Pending_Payment reservations."
        )
    return "Permission denied."


def can_manage_rooms(actor_role: Role) -> bool:
    return Role(actor_role) in ADMIN_ROLES
