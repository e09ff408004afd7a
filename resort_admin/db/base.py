"""
base.py

SQLAlchemy ORM Base 정의 파일.

모든 모델(User, StaffProfile, Room, Like, Reservation, AdminActionLog)은
이 Base를 기준으로 테이블 메타데이터가 관리되며,
Alembic 마이그레이션과 테스트용 스키마 생성 또한 이 Base를 기준으로 동작한다.

설계 원칙:
- Base 정의는 단일 파일에서만 관리
- 모델 간 순환 참조 방지

"""

from sqlalchemy.orm import declarative_base

# 모든 ORM 모델이 상속받는 Base 클래스
Base = declarative_base()
