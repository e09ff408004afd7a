"""
session.py

데이터베이스 엔진 및 세션(Session) 관리 파일.

SQLAlchemy Engine과 SessionLocal을 생성하여
애플리케이션 전반에서 공통으로 사용하는 DB 연결을 관리한다.
요청 단위 세션 생성/종료는 resort_admin.core.deps.get_db 가 담당한다.

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- pool_pre_ping=True로 유휴 연결 오류 방지
- SQLite URL(로컬 개발용)은 스레드 검사 옵션을 끈다

"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from resort_admin.core.config import settings


def make_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, **kwargs)


engine = make_engine(settings.DATABASE_URL)

# 요청 단위로 사용할 세션 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)
