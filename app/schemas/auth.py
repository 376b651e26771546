"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, registration, token issuance/refresh, and current user info.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        username: 사용자 로그인 아이디 (User login identifier)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str  # 사용자 로그인 아이디 (User login identifier)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema. New accounts get the subscriber role.

    Attributes:
        username: 사용자 아이디 (Desired login username, 3-50 chars)
        password: 비밀번호 (Plain text, will be bcrypt-hashed on server)
        email: 이메일 (Email address, unique)
        nickname: 표시 이름 (Display name, defaults to username)
    """

    username: str = Field(min_length=3, max_length=50)  # 전역 고유 (Globally unique)
    password: str = Field(min_length=6, max_length=100)  # 평문, 서버에서 bcrypt 해싱
    email: str = Field(min_length=3, max_length=255)
    nickname: str | None = Field(None, max_length=100)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    JWT token issuance response schema.
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 30분 기본 (Access token, default TTL: 30min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"  # 토큰 유형 — 항상 "bearer" (Token type for Authorization header)


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마.

    Token refresh and logout request schema.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token to exchange or revoke)
    """

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me)."""

    id: str
    username: str
    email: str
    nickname: str | None
    avatar: str | None
    description: str | None
    role: str  # admin / author / subscriber
    status: str  # active / inactive / banned
    created_at: datetime
