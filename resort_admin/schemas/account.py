from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool


# 🔹 계정 활성 상태 변경 요청 (관리자 / 직원 공용)
# "true" 같은 문자열은 허용하지 않음 -> 400
class StatusUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_active: StrictBool = Field(..., alias="isActive")


# 🔹 직원 / 관리자 계정 생성 요청
class AccountCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=50)
    role: str | None = None
    username: str | None = Field(default=None, max_length=50)
    phone_number: str | None = Field(default=None, alias="phoneNumber", max_length=30)


# 🔹 직원 / 관리자 프로필 부분 수정 요청 (보낸 필드만 반영)
class AccountUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str | None = None
    role: str | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    username: str | None = Field(default=None, max_length=50)
    phone_number: str | None = Field(default=None, alias="phoneNumber", max_length=30)
    position: str | None = Field(default=None, min_length=1, max_length=50)
    is_admin: StrictBool | None = Field(default=None, alias="isAdmin")
