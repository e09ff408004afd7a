"""
reservation.py

예약(Reservation) 모델 정의 파일.

예약 생성/확정 등 예약 흐름 자체는 고객용 서비스에서 처리하며,
이 백엔드에서는 조회와 삭제(삭제 정책 적용)만 수행한다.

"""

import uuid
from datetime import date, datetime
from enum import Enum

from sqlalchemy import Boolean, Date, DateTime, Enum as SAEnum, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from resort_admin.db.base import Base
from resort_admin.models.user import utcnow


"""
예약 상태(ReservationStatus)

- 값은 대시보드에서 사용하는 문자열을 그대로 사용한다 (예: Confirmed_Pending_Payment)

"""

class ReservationStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED_PENDING_PAYMENT = "Confirmed_Pending_Payment"
    ACCEPTED = "Accepted"
    CHECKED_IN = "Checked_In"
    CHECKED_OUT = "Checked_Out"
    CANCELLED = "Cancelled"
    REJECTED = "Rejected"
    NO_SHOW = "No_Show"
    EXPIRED = "Expired"


class Reservation(Base):
    __tablename__ = "reservations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    room_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("rooms.id"), nullable=True)
    customer_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    check_in: Mapped[date | None] = mapped_column(Date, nullable=True)
    check_out: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[ReservationStatus] = mapped_column(
        SAEnum(
            ReservationStatus,
            name="reservation_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=ReservationStatus.PENDING,
    )
    payment_received: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    total_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
