from typing import Generator

from fastapi import Cookie, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from resort_admin.core.config import settings
from resort_admin.core.errors import PermissionDenied
from resort_admin.db.session import SessionLocal
from resort_admin.models.user import Role, User
from resort_admin.services.identity import resolve_principal
from resort_admin.services.storage import LocalStorageService, StorageBackend

# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)

# 로그인 시 발급되는 세션 쿠키 이름
REFRESH_COOKIE_NAME = "refresh_token"


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> StorageBackend:
    return LocalStorageService(
        settings.STORAGE_ROOT,
        settings.ROOM_IMAGES_BUCKET,
        public_base_url=settings.STORAGE_PUBLIC_BASE_URL,
    )


# Bearer 토큰 우선, 없거나 유효하지 않으면 refresh_token 쿠키로 확인
def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    refresh_token: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> User:
    return resolve_principal(
        db,
        bearer_token=cred.credentials if cred else None,
        session_token=refresh_token,
    )


# 객실 삭제 등 쿠키 세션을 허용하지 않는 엔드포인트용
def get_current_user_bearer_only(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    return resolve_principal(
        db,
        bearer_token=cred.credentials if cred else None,
        session_token=None,
        allow_cookie=False,
    )


ROLE_LEVEL = {
    Role.CUSTOMER: 0,
    Role.STAFF: 1,
    Role.ADMIN: 2,
    Role.SUPER_ADMIN: 3,
}

def require_min_role(min_role: Role):
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if ROLE_LEVEL[Role(current_user.role)] < ROLE_LEVEL[min_role]:
            raise PermissionDenied(f"Requires role >= {min_role.value}")
        return current_user
    return _checker

get_current_staff = require_min_role(Role.STAFF)
get_current_admin = require_min_role(Role.ADMIN)
