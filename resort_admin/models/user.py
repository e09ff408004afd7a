"""
user.py

사용자(User, 인증 주체) 및 권한(Role) 모델 정의 파일.

호텔/리조트 관리 시스템에 로그인하는 모든 계정(고객, 직원, 관리자)의
기본 정보와 권한(Role), 활성 상태, 세션 버전을 관리한다.

모든 인증, 권한, 상태 변경, 관리자 기능의 기준이 되는 핵심 모델이다.
계정은 삭제하지 않고 is_active=False 로 비활성화한다.

"""

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from resort_admin.db.base import Base


"""
사용자 권한(Role) 정의

- CUSTOMER     : 고객 (예약 / 좋아요)
- STAFF        : 프런트 직원
- ADMIN        : 관리자
- SUPER_ADMIN  : 최고 관리자 (비활성화 불가)

DB에는 소문자 값(customer, staff, admin, super_admin)으로 저장된다.

"""

class Role(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


"""
사용자(User) 모델

- email 은 고유 식별자
- role 을 통해 접근 권한 제어
- is_active=False 이면 로그인 / 토큰 인증 모두 거부
- session_version        : Access Token의 sv 와 비교 (강제 로그아웃 시 증가)
- refresh_token_version  : Refresh Token의 rtv 와 비교 (재발급/로그아웃 시 증가)

"""

class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.CUSTOMER,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    session_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    refresh_token_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
