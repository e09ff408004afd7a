"""
rooms.py

객실(Room) 관리 API.

- 조회: STAFF 이상
- 생성 / 수정: ADMIN 이상
- 삭제: Bearer 토큰으로만 인증 (쿠키 세션 불가), ADMIN 이상
  좋아요 -> 객실 삭제 후 저장소 이미지 정리 결과를 함께 반환

"""

import uuid
from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resort_admin.core.deps import get_db, get_current_staff, get_current_user, get_current_user_bearer_only, get_storage
from resort_admin.models.user import User
from resort_admin.schemas.room import RoomCreateRequest, RoomUpdateRequest
from resort_admin.services.rooms import create_room, delete_room, list_rooms, update_room
from resort_admin.services.storage import StorageBackend

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("")
def get_rooms(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return {"data": list_rooms(db)}


@router.post("", status_code=201)
def add_room(
    data: RoomCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    room = create_room(db, actor=current_user, data=data)
    return {"message": "Room created successfully.", "data": room}


@router.put("/{room_id}")
def edit_room(
    room_id: uuid.UUID,
    data: RoomUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    room = update_room(db, actor=current_user, room_id=room_id, data=data)
    return {"message": "Room updated successfully.", "data": room}


@router.delete("/{room_id}")
def remove_room(
    room_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_bearer_only),
    storage: StorageBackend = Depends(get_storage),
):
    result = delete_room(db, actor=current_user, room_id=room_id, storage=storage)
    return {"message": "Room deleted successfully.", "data": asdict(result)}
