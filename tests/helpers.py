# tests/helpers.py
import uuid
from datetime import date, timedelta

from sqlalchemy.orm import Session

from resort_admin.core.security import get_password_hash
from resort_admin.models.reservation import Reservation, ReservationStatus
from resort_admin.models.room import Like, Room
from resort_admin.models.staff import StaffProfile
from resort_admin.models.user import ADMIN_ROLES, Role, User

DEFAULT_PASSWORD = "Passw0rd!"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_user_in_db(
    db: Session,
    *,
    role: Role = Role.STAFF,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
    name: str | None = None,
    username: str | None = None,
    position: str = "Front Desk",
) -> User:
    """고객이 아닌 계정은 직원 프로필(staff)도 함께 생성"""
    user = User(
        email=email or f"{role.value}_{uuid.uuid4().hex[:6]}@resort-test.com",
        password_hash=get_password_hash(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.flush()

    if role != Role.CUSTOMER:
        db.add(StaffProfile(
            user_id=user.id,
            name=name or role.value.replace("_", " ").title(),
            username=username,
            position=position,
            is_admin=role in ADMIN_ROLES,
        ))
    db.commit()
    db.refresh(user)
    return user


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    """로그인 후 Access Token 반환 (refresh 쿠키는 지워서 Bearer 인증만 사용)"""
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return r.json()["data"]["access_token"]


def create_and_login(client, db: Session, *, role: Role, **kwargs) -> tuple[User, str]:
    user = create_user_in_db(db, role=role, **kwargs)
    return user, login(client, user.email)


def create_room_in_db(db: Session, *, image_paths: list[str] | None = None,
                      panoramic_image_path: str | None = None, likes: int = 0) -> Room:
    room = Room(
        name="Ocean View Suite",
        room_number=f"{uuid.uuid4().int % 900 + 100}",
        capacity=2,
        price=250.0,
        amenities=["wifi", "minibar"],
        image_paths=image_paths or [],
        panoramic_image_path=panoramic_image_path,
    )
    db.add(room)
    db.flush()
    for _ in range(likes):
        db.add(Like(room_id=room.id))
    db.commit()
    db.refresh(room)
    return room


def create_reservation_in_db(db: Session, *, status: ReservationStatus,
                             payment_received: bool = False) -> Reservation:
    reservation = Reservation(
        check_in=date.today() + timedelta(days=7),
        check_out=date.today() + timedelta(days=9),
        status=status,
        payment_received=payment_received,
        total_price=500.0,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


def get_user(db: Session, user_id) -> User:
    db.expire_all()
    return db.get(User, uuid.UUID(str(user_id)))
