"""

admin_log.py

관리자(Admin) 행위 기록(Audit Log) 모델 정의 파일.

관리자/직원에 의해 수행된 주요 관리 행위
(계정 상태 변경, 프로필/권한 변경, 예약 삭제, 객실 삭제 등)를
DB에 영구적으로 기록하기 위한 로그 테이블을 정의한다.

설계 원칙:
- 실제 데이터 변경과 같은 트랜잭션에서 기록 (커밋은 호출 측에서)
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계
- 대상은 사용자만이 아니므로 target_type + target_id 로 기록
- 상태 변경 없는 요청(no-op)은 기록하지 않음

"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from resort_admin.db.base import Base
from resort_admin.models.user import utcnow


#  관리자 행위 유형 Enum

class AdminAction(str, Enum):
    CREATE_ACCOUNT = "CREATE_ACCOUNT"
    UPDATE_ACCOUNT = "UPDATE_ACCOUNT"
    SET_ROLE = "SET_ROLE"
    SET_STATUS = "SET_STATUS"
    DELETE_RESERVATION = "DELETE_RESERVATION"
    CREATE_ROOM = "CREATE_ROOM"
    UPDATE_ROOM = "UPDATE_ROOM"
    DELETE_ROOM = "DELETE_ROOM"


"""
관리자 행위 로그 모델

- actor_id      : 행위를 수행한 사용자 ID
- action        : 수행된 관리자 행위 유형
- target_type   : 대상 종류 (user / reservation / room)
- target_id     : 대상 ID (문자열)
- before_value  : 변경 전 값 (예: "active", "staff")
- after_value   : 변경 후 값
- created_at    : 행위 발생 시각 (UTC)

"""

class AdminActionLog(Base):
    __tablename__ = "admin_action_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    actor_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    action: Mapped[AdminAction] = mapped_column(SAEnum(AdminAction, name="admin_action"), nullable=False)

    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)

    before_value: Mapped[str | None] = mapped_column(String(100), nullable=True)
    after_value: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
