"""

SUPER_ADMIN 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- .env에 정의된 SUPERADMIN_* 환경 변수를 읽어
  SUPER_ADMIN 계정과 직원 프로필(staff)을 함께 생성한다.
- 이미 SUPER_ADMIN 계정이 존재하면 생성하지 않고 종료한다.
- 비밀번호는 로그인 API와 같은 정책(8자 이상, 대/소문자, 숫자, 특수문자)을 따른다.

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_superadmin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from resort_admin.db.session import SessionLocal
from resort_admin.models.staff import StaffProfile
from resort_admin.models.user import User, Role
from resort_admin.core.security import get_password_hash, password_policy_violations



def main():
    db = SessionLocal()
    try:
        exists = db.scalar(
            select(User).where(User.role == Role.SUPER_ADMIN)
        )
        if exists:
            print("✅ SUPER_ADMIN already exists. Skip creation.")
            return

        email = os.environ["SUPERADMIN_EMAIL"].lower()
        password = os.environ["SUPERADMIN_PASSWORD"]
        name = os.environ.get("SUPERADMIN_NAME", "Super Admin")
        username = os.environ.get("SUPERADMIN_USERNAME") or None
        position = os.environ.get("SUPERADMIN_POSITION", "General Manager")
        phone = os.environ.get("SUPERADMIN_PHONE") or None

        violations = password_policy_violations(password)
        if violations:
            raise RuntimeError("SUPERADMIN_PASSWORD must: " + ", ".join(violations))

        email_exists = db.scalar(
            select(User).where(User.email == email)
        )
        if email_exists:
            raise RuntimeError("Email already exists but is not SUPER_ADMIN")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            role=Role.SUPER_ADMIN,
            is_active=True,
        )
        db.add(user)
        db.flush()

        db.add(StaffProfile(
            user_id=user.id,
            name=name,
            username=username,
            phone_number=phone,
            position=position,
            is_admin=True,
        ))
        db.commit()

        print(f"🚀 SUPER_ADMIN created: {email}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
