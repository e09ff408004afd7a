import os
import tempfile

# 앱 설정 로드 전에 테스트용 기본 환경 변수 지정
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-key")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="resort-storage-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resort_admin.main import app as fastapi_app
from resort_admin.core.config import settings
from resort_admin.core.deps import get_db, get_storage
from resort_admin.db.base import Base
from resort_admin.services.storage import LocalStorageService

# ✅ 모델 import (Base.metadata에 테이블 등록)
import resort_admin.models.user  # noqa: F401
import resort_admin.models.staff  # noqa: F401
import resort_admin.models.room  # noqa: F401
import resort_admin.models.reservation  # noqa: F401
import resort_admin.models.admin_log  # noqa: F401


TEST_DB_URL = settings.TEST_DATABASE_URL or os.getenv("TEST_DATABASE_URL")

# TEST_DATABASE_URL 이 없으면 메모리 SQLite (모든 세션이 같은 연결을 공유)
if TEST_DB_URL:
    engine = create_engine(TEST_DB_URL, pool_pre_ping=True)
else:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    # FK 의존성 역순으로 삭제
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db_session():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage(tmp_path):
    return LocalStorageService(
        str(tmp_path / "storage"),
        settings.ROOM_IMAGES_BUCKET,
        public_base_url="http://testserver/storage",
    )


@pytest.fixture()
def client(storage):
    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
