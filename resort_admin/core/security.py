"""
security.py

비밀번호 해싱, 비밀번호 정책 검증, JWT 토큰 생성/검증을 담당하는 보안 유틸리티 모음.

이 파일은 인증(identity) 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- 비밀번호 정책 검증 (8자 이상, 대/소문자, 숫자, 특수문자)
- JWT Access Token 생성 / 디코딩 (sv: session_version 포함)
- JWT Refresh Token 생성 / 디코딩 (rtv: refresh_token_version 포함)

설계 원칙:
- Access Token과 Refresh Token을 명확히 분리 (시크릿도 분리)
- 토큰 생성 로직을 공통 함수로 통합하여 중복 제거
- 토큰에 버전(sv / rtv)을 포함하여 서버 측 강제 로그아웃 지원
- 시간 기반(exp) 만료는 UTC 기준으로 처리

관련 파일:
- resort_admin.core.config          : JWT 시크릿 키 및 만료 설정
- resort_admin.services.identity    : 토큰을 실제로 검증하는 인증 로직
- resort_admin.routers.auth         : 로그인 / 재발급 API

"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Literal

from jose import jwt, JWTError
from passlib.context import CryptContext

from resort_admin.core.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
비밀번호 정책 검증 함수

- 만족하지 못한 규칙 목록을 반환 (빈 리스트면 통과)
- 메시지는 "Password must: ..." 형태로 이어 붙여 사용자에게 노출

"""

PASSWORD_MIN_LENGTH = 8

_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "contain an uppercase letter"),
    (re.compile(r"[a-z]"), "contain a lowercase letter"),
    (re.compile(r"[0-9]"), "contain a number"),
    (re.compile(r"[^A-Za-z0-9]"), "contain a special character (e.g., !@#$%)"),
)


def password_policy_violations(password: str) -> list[str]:
    violations = []
    if len(password) < PASSWORD_MIN_LENGTH:
        violations.append(f"be at least {PASSWORD_MIN_LENGTH} characters")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            violations.append(message)
    return violations


"""
JWT 토큰 생성 내부 공통 함수

- subject(sub): 사용자 식별자(user_id)
- token_type: access 또는 refresh
- exp: 만료 시각 (UTC timestamp)
- extra: sv / rtv 등 버전 정보

"""

def _create_token(*, subject: str, token_type: Literal["access", "refresh"],
                  expires_delta: timedelta, secret: str, extra: Optional[dict] = None) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    payload = {
        "sub": subject,
        "type": token_type,
        "exp": int(expire.timestamp()),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)


def create_access_token(subject: str, session_version: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=subject,
        token_type="access",
        expires_delta=expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        secret=settings.SECRET_KEY,
        extra={"sv": session_version},
    )


def create_refresh_token(subject: str, refresh_token_version: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=subject,
        token_type="refresh",
        expires_delta=expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        secret=settings.REFRESH_SECRET_KEY,
        extra={"rtv": refresh_token_version},
    )


"""
토큰 디코딩 함수

- 서명 / 만료 / 토큰 타입 확인
- subject(user_id)와 버전(sv 또는 rtv) 반환
- 유효하지 않을 경우 JWTError 발생

"""

def decode_access_token(token: str) -> tuple[str, int]:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Not an access token")
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Missing subject")
    return sub, int(payload.get("sv", -1))


def decode_refresh_token(token: str) -> tuple[str, int]:
    payload = jwt.decode(token, settings.REFRESH_SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "refresh":
        raise JWTError("Not a refresh token")
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Missing subject")
    return sub, int(payload.get("rtv", -1))
