"""
staff.py

직원 프로필(StaffProfile) 모델 정의 파일.

STAFF / ADMIN / SUPER_ADMIN 계정은 users 테이블과 1:1로
staff 테이블에 표시 이름, 로그인용 username, 연락처, 직책(position)을 가진다.
is_admin 은 화면 표시용 편의 플래그이며 role 과 함께 갱신된다.

"""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from resort_admin.db.base import Base


class StaffProfile(Base):
    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), unique=True, nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str | None] = mapped_column(String(50), unique=True, index=True, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    position: Mapped[str] = mapped_column(String(50), nullable=False)

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
