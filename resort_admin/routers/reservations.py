"""
reservations.py

예약(Reservation) 조회 / 삭제 API.

- 조회: STAFF 이상, status 쿼리로 필터링 가능
- 삭제: 인증된 모든 사용자가 호출할 수 있으나 실제 허용 여부는 권한과 예약 상태로 결정
  * STAFF       : Pending / Rejected / Expired / Cancelled
  * ADMIN       : 위 상태 + 결제 전 Confirmed_Pending_Payment
  * SUPER_ADMIN : 모든 상태

"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resort_admin.core.deps import get_db, get_current_staff, get_current_user
from resort_admin.models.user import User
from resort_admin.services.reservations import delete_reservation, list_reservations

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("")
def get_reservations(
    status: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return {"data": list_reservations(db, status)}


@router.delete("/{reservation_id}")
def remove_reservation(
    reservation_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    delete_reservation(db, actor=current_user, reservation_id=reservation_id)
    return {"message": "Reservation deleted successfully."}
