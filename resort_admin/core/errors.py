"""
errors.py

서비스 계층에서 사용하는 오류(Error) 분류.

라우터에서 HTTPException을 직접 만들던 방식 대신,
서비스 함수는 아래 예외를 발생시키고
main.py에 등록된 exception handler가 HTTP 응답으로 변환한다.

- Unauthenticated   (401) : 자격 증명이 없거나 유효하지 않음
- PermissionDenied  (403) : 정책 규칙 위반, 어떤 규칙인지 reason에 명시
- NotFound          (404) : 대상 레코드 없음
- ValidationError   (400) : 요청 본문/필드 형식 오류
- Conflict          (409) : 유니크 제약 위반 (이메일, username 등)
- StoreFailure      (500) : DB 등 저장소 오류, 원인 메시지를 뒤에 붙임
- 그 밖의 예외        (500) : unhandled_error_handler 가 로그를 남기고 JSON 으로 응답

응답 형태는 FastAPI 기본과 동일하게 {"detail": "..."} 를 유지한다.

"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: dict[str, str] | None = None

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT


class StoreFailure(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


# pydantic 검증 실패(필드 누락, 타입 불일치, 잘못된 UUID 등)는 400으로 통일
def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"},
    )


# 분류되지 않은 예외도 {"detail"} 형태의 500 응답으로 변환
def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {exc}"},
    )
