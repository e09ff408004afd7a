"""
staff.py

직원(Staff) 계정 관리 API.

주요 기능:
- 직원 목록 조회 (STAFF 이상)
- 직원 / 관리자 계정 생성 (ADMIN 이상, 관리자 생성은 SUPER_ADMIN만)
- 직원 프로필 부분 수정 (비밀번호, 권한, 이름, username, 연락처, 직책)
- 직원 계정 활성 상태 변경 (관리자 상태 변경과 같은 정책 사용, 대상은 STAFF 계정만)

관련 파일:
- resort_admin.services.accounts   : 실제 처리 로직
- resort_admin.services.policy     : 상태 변경 정책

"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resort_admin.core.deps import get_db, get_current_admin, get_current_staff
from resort_admin.models.user import User
from resort_admin.schemas.account import AccountCreateRequest, AccountUpdateRequest, StatusUpdateRequest
from resort_admin.services.accounts import (
    change_account_status,
    create_member,
    list_members,
    update_member,
)
from resort_admin.services.policy import StatusScope

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("")
def list_staff(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return {"data": list_members(db, StatusScope.STAFF)}


@router.post("", status_code=201)
def create_staff(
    data: AccountCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    member = create_member(db, actor=current_admin, data=data, scope=StatusScope.STAFF)
    return {"message": "Staff member created successfully.", "data": member}


@router.put("/{staff_id}")
def update_staff(
    staff_id: uuid.UUID,
    data: AccountUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    member = update_member(db, actor=current_admin, target_id=staff_id, data=data, scope=StatusScope.STAFF)
    return {"message": "Staff member updated successfully.", "data": member}


# 직원 계정 활성 / 비활성화
@router.patch("/{staff_id}/status")
def set_staff_status(
    staff_id: uuid.UUID,
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    result, member = change_account_status(
        db,
        actor=current_admin,
        target_id=staff_id,
        requested_active=data.is_active,
        scope=StatusScope.STAFF,
    )
    return {
        "message": f"Staff status {'activated' if data.is_active else 'deactivated'}",
        "result": result.value,
        "data": member,
    }
