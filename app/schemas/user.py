"""사용자 관련 Pydantic 요청/응답 스키마 정의.

User Pydantic request/response schema definitions for admin user management.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_null

# 허용 값 패턴 — Allowed values
ROLE_PATTERN: str = r"^(admin|author|subscriber)$"
USER_STATUS_PATTERN: str = r"^(active|inactive|banned)$"


class UserCreate(BaseModel):
    """사용자 생성 요청 스키마 (관리자용).

    User creation request schema (admin-only operation).

    Attributes:
        username: 로그인 아이디 (Login username, 3-50 chars, unique)
        password: 비밀번호 (Plain text, will be bcrypt-hashed)
        email: 이메일 (Email address, unique)
        nickname: 표시 이름 (Display name, optional)
        role: 역할 (admin / author / subscriber, default subscriber)
    """

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=100)  # 평문, 서버에서 해싱 (Hashed server-side)
    email: str = Field(min_length=3, max_length=255)
    nickname: str | None = Field(None, max_length=100)
    avatar: str | None = Field(None, max_length=500)
    description: str | None = None
    role: str = Field("subscriber", pattern=ROLE_PATTERN)


class UserUpdate(BaseModel):
    """사용자 프로필 수정 요청 스키마 (부분 업데이트).

    Profile update request schema (partial update).
    Only provided fields are updated; omitted fields remain unchanged.
    """

    nickname: str | None = Field(None, max_length=100)
    email: str | None = Field(None, min_length=3, max_length=255)
    avatar: str | None = Field(None, max_length=500)
    description: str | None = None
    password: str | None = Field(None, min_length=6, max_length=100)

    @field_validator("email")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class UserStatusUpdate(BaseModel):
    status: str = Field(pattern=USER_STATUS_PATTERN)


class UserRoleUpdate(BaseModel):
    role: str = Field(pattern=ROLE_PATTERN)


class UserResponse(BaseModel):
    """사용자 응답 스키마 — 비밀번호 해시는 포함하지 않음 (Never includes the hash)."""

    id: str
    username: str
    email: str
    nickname: str | None
    avatar: str | None
    description: str | None
    role: str
    status: str
    created_at: datetime
    updated_at: datetime
