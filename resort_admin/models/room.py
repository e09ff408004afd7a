"""
room.py

객실(Room) 및 좋아요(Like) 모델 정의 파일.

- image_paths           : 객실 이미지 저장소 참조(공개 URL 또는 버킷 내 경로) 목록, 순서 유지
- panoramic_image_path  : 360도 파노라마 이미지 참조 (선택)
- Like.room_id 는 rooms.id 를 참조하므로 객실 삭제 전에 반드시 먼저 삭제해야 한다

"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from resort_admin.db.base import Base
from resort_admin.models.user import utcnow


class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    image_paths: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    panoramic_image_path: Mapped[str | None] = mapped_column(String(500), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    def storage_refs(self) -> list[str]:
        refs = list(self.image_paths or [])
        if self.panoramic_image_path:
            refs.append(self.panoramic_image_path)
        return refs


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        Index("ix_likes_room_id", "room_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    room_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("rooms.id"), nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
