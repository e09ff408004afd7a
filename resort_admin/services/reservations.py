"""
services/reservations.py

예약 조회 / 삭제 서비스.

- 삭제 허용 여부는 services.policy.can_delete_reservation 으로 판단
- 거부 시 권한별 사유 메시지로 403, 아무것도 변경하지 않음
- 허용 시 예약 삭제 + 감사 로그를 한 트랜잭션으로 커밋

"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from resort_admin.core.errors import NotFound, PermissionDenied, StoreFailure, ValidationError
from resort_admin.models.admin_log import AdminAction
from resort_admin.models.reservation import Reservation, ReservationStatus
from resort_admin.models.user import User
from resort_admin.services.admin_log import write_admin_log
from resort_admin.services.policy import can_delete_reservation, reservation_denial_reason

logger = logging.getLogger(__name__)


def reservation_to_dict(reservation: Reservation) -> dict:
    return {
        "id": str(reservation.id),
        "room_id": str(reservation.room_id) if reservation.room_id else None,
        "customer_id": str(reservation.customer_id) if reservation.customer_id else None,
        "check_in": reservation.check_in.isoformat() if reservation.check_in else None,
        "check_out": reservation.check_out.isoformat() if reservation.check_out else None,
        "status": ReservationStatus(reservation.status).value,
        "payment_received": reservation.payment_received,
        "total_price": reservation.total_price,
        "notes": reservation.notes,
        "created_at": reservation.created_at.isoformat() if reservation.created_at else None,
    }


def list_reservations(db: Session, status: str | None = None) -> list[dict]:
    stmt = select(Reservation).order_by(Reservation.created_at.desc())
    if status:
        try:
            stmt = stmt.where(Reservation.status == ReservationStatus(status))
        except ValueError:
            raise ValidationError(f"Invalid reservation status: {status}")
    return [reservation_to_dict(r) for r in db.scalars(stmt).all()]


def delete_reservation(db: Session, *, actor: User, reservation_id: uuid.UUID) -> None:
    reservation = db.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFound("Reservation not found.")

    if not can_delete_reservation(actor.role, reservation.status, reservation.payment_received):
        raise PermissionDenied(reservation_denial_reason(actor.role))

    status = ReservationStatus(reservation.status).value
    try:
        db.delete(reservation)
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.DELETE_RESERVATION,
            target_type="reservation",
            target_id=reservation_id,
            before_value=status,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to delete reservation: {e}")

    logger.info("Reservation %s (%s) deleted by %s", reservation_id, status, actor.id)
