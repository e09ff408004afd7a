"""
services/rooms.py

객실 관리 서비스 (생성 / 수정 / 삭제).

객실 삭제 순서:
1. 행위자 권한 확인 (ADMIN / SUPER_ADMIN)          -> 아니면 403
2. 해당 객실의 좋아요(likes) 삭제
3. 객실 조회 (없으면 404, 좋아요 삭제도 롤백)
4. 객실 삭제 + 감사 로그
   2~4 는 하나의 트랜잭션으로 커밋 (중간 실패 시 전부 롤백)
5. 커밋 이후 저장소의 객실 이미지 / 파노라마 이미지 best-effort 삭제
   실패해도 삭제 결과는 성공 (failed_files 로 보고, 고아 파일 가능)

설계 원칙:
- 객실 행이 남아 있는 동안에는 이미지가 지워지지 않도록 저장소 정리는 커밋 뒤에 수행
- 저장소 오류는 로그만 남기고 호출 측으로 전파하지 않음

관련 파일:
- resort_admin.services.storage   : 이미지 경로 변환 / 삭제
- resort_admin.routers.rooms

"""

import logging
import uuid
from dataclasses import dataclass, field

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from resort_admin.core.errors import NotFound, PermissionDenied, StoreFailure
from resort_admin.models.admin_log import AdminAction
from resort_admin.models.room import Like, Room
from resort_admin.models.user import User
from resort_admin.schemas.room import RoomCreateRequest, RoomUpdateRequest
from resort_admin.services.admin_log import write_admin_log
from resort_admin.services.policy import can_manage_rooms
from resort_admin.services.storage import StorageBackend, remove_room_images

logger = logging.getLogger(__name__)

ROOM_PERMISSION_DENIED = "Permission denied: Admin role required"


@dataclass
class RoomDeletion:
    room_id: str
    removed_likes: int = 0
    removed_files: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)


def room_to_dict(room: Room) -> dict:
    return {
        "id": str(room.id),
        "name": room.name,
        "room_number": room.room_number,
        "capacity": room.capacity,
        "price": room.price,
        "amenities": list(room.amenities or []),
        "image_paths": list(room.image_paths or []),
        "panoramic_image_path": room.panoramic_image_path,
        "is_active": room.is_active,
        "created_at": room.created_at.isoformat() if room.created_at else None,
    }


def _require_room_manager(actor: User) -> None:
    if not can_manage_rooms(actor.role):
        raise PermissionDenied(ROOM_PERMISSION_DENIED)


def list_rooms(db: Session) -> list[dict]:
    rooms = db.scalars(select(Room).order_by(Room.room_number)).all()
    return [room_to_dict(r) for r in rooms]


def create_room(db: Session, *, actor: User, data: RoomCreateRequest) -> dict:
    _require_room_manager(actor)

    try:
        room = Room(
            name=data.name,
            room_number=data.room_number,
            capacity=data.capacity,
            price=data.price,
            amenities=data.amenities,
            image_paths=data.image_paths,
            panoramic_image_path=data.panoramic_image_path,
        )
        db.add(room)
        db.flush()
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.CREATE_ROOM,
            target_type="room",
            target_id=room.id,
            after_value=room.room_number,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to create room: {e}")

    db.refresh(room)
    return room_to_dict(room)


def update_room(db: Session, *, actor: User, room_id: uuid.UUID, data: RoomUpdateRequest) -> dict:
    _require_room_manager(actor)

    room = db.get(Room, room_id)
    if room is None:
        raise NotFound("Room not found")

    changes = data.model_dump(exclude_unset=True)
    try:
        for key, value in changes.items():
            # panoramic_image_path 만 null 로 비울 수 있음
            if value is None and key != "panoramic_image_path":
                continue
            setattr(room, key, value)
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.UPDATE_ROOM,
            target_type="room",
            target_id=room.id,
            after_value=",".join(sorted(changes))[:100] or None,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to update room: {e}")

    db.refresh(room)
    return room_to_dict(room)


def delete_room(db: Session, *, actor: User, room_id: uuid.UUID, storage: StorageBackend) -> RoomDeletion:
    _require_room_manager(actor)

    result = RoomDeletion(room_id=str(room_id))

    try:
        removed = db.execute(delete(Like).where(Like.room_id == room_id))
        result.removed_likes = removed.rowcount or 0
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to delete likes for this room: {e}")

    room = db.get(Room, room_id)
    if room is None:
        db.rollback()
        raise NotFound("Room not found")

    refs = room.storage_refs()
    try:
        db.delete(room)
        write_admin_log(
            db,
            actor_id=actor.id,
            action=AdminAction.DELETE_ROOM,
            target_type="room",
            target_id=room_id,
            before_value=room.room_number,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to delete room: {e}")

    logger.info("Room %s deleted by %s (%d likes removed)", room_id, actor.id, result.removed_likes)

    if refs:
        cleanup = remove_room_images(storage, refs)
        result.removed_files = cleanup.removed
        result.failed_files = cleanup.failed

    return result
