"""
auth.py

인증(Authentication) API 모음.

관리자 대시보드의 로그인, 토큰 재발급, 로그아웃, 현재 세션 조회를 담당한다.
JWT 기반 인증 방식을 사용하며, Access Token + Refresh Token 구조를 따른다.

주요 기능:
- 로그인 및 토큰 발급 (비활성 계정은 로그인 불가)
- Refresh Token 기반 Access Token 재발급 (Refresh Token 회전)
- 로그아웃 (모든 기기의 세션 무효화)
- 현재 세션 조회 (인증 주체 + 직원 프로필)

설계 원칙:
- Access Token은 Authorization Header로 전달
- Refresh Token은 HttpOnly Cookie로 관리 (세션 쿠키 역할도 겸함)
- session_version / refresh_token_version 으로 강제 로그아웃 처리

관련 파일:
- resort_admin.core.security        : 비밀번호 해시 / JWT 생성·검증
- resort_admin.core.deps            : 인증 의존성(get_current_user)
- resort_admin.services.identity    : 세션 무효화
- resort_admin.client.session       : 이 API를 사용하는 클라이언트 세션 저장소

"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status, Response, Request
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from resort_admin.core.config import settings
from resort_admin.core.deps import REFRESH_COOKIE_NAME, get_current_user, get_db
from resort_admin.core.errors import StoreFailure
from resort_admin.core.security import (
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from resort_admin.models.user import Role, User
from resort_admin.schemas.auth import LoginRequest
from resort_admin.services.accounts import get_profile
from resort_admin.services.identity import sign_out_everywhere

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,        # 로컬 False / HTTPS 운영 True
        samesite=settings.COOKIE_SAMESITE,    # "lax" 추천
        domain=settings.COOKIE_DOMAIN,        # 보통 None
        path="/",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(key=REFRESH_COOKIE_NAME, path="/", domain=settings.COOKIE_DOMAIN)


"""
로그인 API

- 이메일 / 비밀번호 인증
- 비활성화된 계정은 로그인 불가 (403)
- Access Token은 응답 바디로 반환
- Refresh Token은 HttpOnly Cookie로 설정

"""

@router.post("/login")
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):

    user = db.scalar(select(User).where(User.email == data.email.lower()))

    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    access = create_access_token(subject=str(user.id), session_version=user.session_version)
    refresh = create_refresh_token(subject=str(user.id), refresh_token_version=user.refresh_token_version)
    _set_refresh_cookie(response, refresh)

    logger.info("User %s signed in", user.id)
    return {
        "data": {
            "access_token": access,
            "token_type": "bearer",
        }
    }


"""
Access Token 재발급 API

- Refresh Token 쿠키를 사용해 새로운 Access Token 발급
- Refresh Token Version이 일치하지 않으면 재발급 거부
- 재발급 시 Refresh Token을 회전(rotation)

"""

@router.post("/refresh")
def refresh(request: Request, response: Response, db: Session = Depends(get_db)):
    token = request.cookies.get(REFRESH_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing refresh token")

    try:
        user_id, token_rtv = decode_refresh_token(token)
        user_uuid = uuid.UUID(user_id)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = db.get(User, user_uuid)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if token_rtv != user.refresh_token_version:
        raise HTTPException(status_code=401, detail="Refresh token revoked")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is deactivated")

    try:
        user.refresh_token_version += 1
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to rotate refresh token: {e}")

    new_access = create_access_token(subject=str(user.id), session_version=user.session_version)
    new_refresh = create_refresh_token(
        subject=str(user.id),
        refresh_token_version=user.refresh_token_version,
    )
    _set_refresh_cookie(response, new_refresh)

    return {
        "data": {
            "access_token": new_access,
            "token_type": "bearer",
        }
    }


"""
로그아웃 API

- session_version / refresh_token_version 증가로 모든 기기의 토큰 무효화
- 클라이언트의 Refresh Token 쿠키 삭제

"""

@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        sign_out_everywhere(db, user)
    except Exception as e:
        db.rollback()
        raise StoreFailure(f"Failed to sign out: {e}")

    logger.info("User %s signed out", user.id)
    response = Response(status_code=204)
    _clear_refresh_cookie(response)
    return response


"""
현재 세션 조회 API

- Bearer 토큰 또는 refresh_token 쿠키로 인증 주체 확인
- 고객이 아닌 계정은 직원 프로필(name / username / position) 포함

"""

@router.get("/session")
def get_session(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    staff = None
    if Role(user.role) != Role.CUSTOMER:
        profile = get_profile(db, user.id)
        if profile:
            staff = {
                "name": profile.name,
                "username": profile.username,
                "position": profile.position,
            }

    return {
        "data": {
            "id": str(user.id),
            "email": user.email,
            "role": Role(user.role).value,
            "is_active": user.is_active,
            "staff": staff,
        }
    }
