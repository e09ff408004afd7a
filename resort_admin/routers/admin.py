"""
admin.py

관리자(Admin) 계정 관리 API.

주요 기능:
- 관리자 목록 조회
- 관리자 계정 생성 (SUPER_ADMIN만)
- 관리자 프로필 수정
- 관리자 계정 활성 상태 변경
  * SUPER_ADMIN 은 비활성화 불가
  * ADMIN 은 다른 ADMIN 의 상태를 바꿀 수 없고, 본인 비활성화도 불가
  * 비활성화 시 대상의 모든 세션 강제 만료
- 관리자 행위 로그 조회

관련 파일:
- resort_admin.services.accounts   : 실제 처리 로직
- resort_admin.services.policy     : 상태 변경 정책
- resort_admin.models.admin_log    : 행위 로그 모델

"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, desc
from sqlalchemy.orm import Session

from resort_admin.core.deps import get_db, get_current_admin
from resort_admin.models.admin_log import AdminAction, AdminActionLog
from resort_admin.models.user import User
from resort_admin.schemas.account import AccountCreateRequest, AccountUpdateRequest, StatusUpdateRequest
from resort_admin.services.accounts import (
    change_account_status,
    create_member,
    list_members,
    update_member,
)
from resort_admin.services.policy import StatusScope

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("")
def list_admins(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return {"data": list_members(db, StatusScope.ADMIN)}


@router.post("", status_code=201)
def create_admin(
    data: AccountCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    member = create_member(db, actor=current_admin, data=data, scope=StatusScope.ADMIN)
    return {"message": "Admin created successfully.", "data": member}


# 관리자 행위 로그 조회 (최신순)
@router.get("/logs")
def list_admin_logs(
    action: AdminAction | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    stmt = select(AdminActionLog).order_by(desc(AdminActionLog.created_at)).limit(limit)
    if action is not None:
        stmt = stmt.where(AdminActionLog.action == action)

    logs = db.scalars(stmt).all()
    return {
        "data": [
            {
                "id": str(log.id),
                "actor_id": str(log.actor_id),
                "action": log.action.value,
                "target_type": log.target_type,
                "target_id": log.target_id,
                "before_value": log.before_value,
                "after_value": log.after_value,
                "created_at": log.created_at.isoformat(),
            }
            for log in logs
        ]
    }


@router.put("/{admin_id}")
def update_admin(
    admin_id: uuid.UUID,
    data: AccountUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    member = update_member(db, actor=current_admin, target_id=admin_id, data=data, scope=StatusScope.ADMIN)
    return {"message": "Admin updated successfully.", "data": member}


# 관리자 계정 활성 / 비활성화
@router.patch("/{admin_id}/status")
def set_admin_status(
    admin_id: uuid.UUID,
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    result, member = change_account_status(
        db,
        actor=current_admin,
        target_id=admin_id,
        requested_active=data.is_active,
        scope=StatusScope.ADMIN,
    )
    return {
        "message": f"Admin status {'activated' if data.is_active else 'deactivated'}",
        "result": result.value,
        "data": member,
    }
