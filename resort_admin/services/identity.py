"""
services/identity.py

인증 주체(Principal) 확인 및 세션 무효화 로직.

요청에 담긴 자격 증명으로 현재 사용자를 확인하고,
관리자가 계정을 비활성화하거나 사용자가 로그아웃할 때
해당 사용자의 모든 세션(Access / Refresh Token)을 무효화한다.

인증 순서:
1. Authorization: Bearer <access token>
   - 서명 / 만료 / type=access 확인
   - 토큰의 sv 가 users.session_version 과 같아야 함
2. (1이 없거나 유효하지 않으면) refresh_token 세션 쿠키
   - type=refresh, rtv 가 users.refresh_token_version 과 같아야 함
3. 둘 다 실패하거나 사용자 행이 없으면 Unauthenticated
   비활성(is_active=False) 계정도 Unauthenticated

설계 원칙:
- 읽기 전용 (인증 과정에서 DB를 변경하지 않음)
- FastAPI 의존성은 resort_admin.core.deps 에서 이 함수를 감싸서 사용

"""

import logging
import uuid

from jose import JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from resort_admin.core.errors import Unauthenticated
from resort_admin.core.security import decode_access_token, decode_refresh_token
from resort_admin.models.user import User, utcnow

logger = logging.getLogger(__name__)


def _load_user(db: Session, subject: str) -> User | None:
    try:
        user_id = uuid.UUID(subject)
    except ValueError:
        return None
    return db.scalar(select(User).where(User.id == user_id))


def user_from_access_token(db: Session, token: str) -> User | None:
    try:
        sub, session_version = decode_access_token(token)
    except JWTError:
        return None
    user = _load_user(db, sub)
    if user is None or session_version != user.session_version:
        return None
    return user


def user_from_session_cookie(db: Session, token: str) -> User | None:
    try:
        sub, token_rtv = decode_refresh_token(token)
    except JWTError:
        return None
    user = _load_user(db, sub)
    if user is None or token_rtv != user.refresh_token_version:
        return None
    return user


def resolve_principal(
    db: Session,
    *,
    bearer_token: str | None,
    session_token: str | None,
    allow_cookie: bool = True,
) -> User:
    user = None
    if bearer_token:
        user = user_from_access_token(db, bearer_token)
    if user is None and allow_cookie and session_token:
        user = user_from_session_cookie(db, session_token)

    if user is None:
        if not bearer_token and not (allow_cookie and session_token):
            raise Unauthenticated("Authentication required.")
        raise Unauthenticated("Could not validate credentials")

    if not user.is_active:
        raise Unauthenticated("Account is deactivated")

    return user


"""
세션 강제 무효화 (모든 기기 로그아웃)

- session_version / refresh_token_version 을 함께 증가시켜
  이미 발급된 Access Token 과 Refresh Token 을 모두 무효화
- 커밋까지 수행 (상태 변경과 별도 단계)

"""

def sign_out_everywhere(db: Session, user: User) -> None:
    user.session_version += 1
    user.refresh_token_version += 1
    user.last_updated = utcnow()
    db.commit()


"""
세션 강제 무효화 (best-effort)

- 계정 비활성화 이후 단계에서 호출
- 상태 변경은 이미 커밋된 상태이므로 실패해도 호출 측에 오류를 돌려주지 않고 로그만 남김
- 실패 여부를 bool 로 반환

"""

def revoke_sessions_best_effort(db: Session, user: User) -> bool:
    try:
        sign_out_everywhere(db, user)
    except Exception:
        db.rollback()
        logger.exception("Failed to invalidate sessions for user %s", user.id)
        return False
    logger.info("Invalidated all sessions for user %s", user.id)
    return True
