"""인증 서비스 — 로그인, 회원가입, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for login, registration, token refresh and
logout. Refresh tokens are persisted and rotated on every refresh.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import RefreshToken, User
from app.repositories.auth_repository import auth_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from app.utils.exceptions import DuplicateError, ForbiddenError, UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import hash_password, verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages login, registration, token refresh, and logout.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT token payload from user data.

        Args:
            user: 사용자 모델 (User model instance)

        Returns:
            dict[str, str]: JWT 페이로드 딕셔너리 (JWT payload dictionary)
        """
        return {"sub": str(user.id), "role": user.role}

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate access and refresh token pair for a user and persist the
        refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)
        """
        payload: dict[str, str] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 리프레시 토큰을 DB에 저장 — Persist refresh token to database
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Process login with username and password.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Login request data)

        Returns:
            TokenResponse: 토큰 응답 (Token response)

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
            ForbiddenError: 비활성/차단된 계정일 때 (Inactive or banned account)
        """
        user: User | None = await user_repository.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")

        if not user.is_active:
            raise ForbiddenError("User account is not active")

        return await self._generate_tokens(db, user)

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> TokenResponse:
        """회원가입을 처리합니다 — subscriber 역할로 생성.

        Process self-registration. New accounts get the subscriber role.

        Raises:
            DuplicateError: 사용자명 또는 이메일 중복 (Username or email taken)
        """
        if await user_repository.get_by_username(db, data.username) is not None:
            raise DuplicateError("Username already exists")
        if await user_repository.get_by_email(db, data.email) is not None:
            raise DuplicateError("Email already exists")

        user: User = await user_repository.create(
            db,
            {
                "username": data.username,
                "password_hash": hash_password(data.password),
                "email": data.email,
                "nickname": data.nickname or data.username,
                "role": "subscriber",
                "status": "active",
            },
        )
        return await self._generate_tokens(db, user)

    async def refresh_tokens(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a refresh token. The old token is
        deleted (rotation).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            refresh_token: 기존 리프레시 토큰 (Current refresh token)

        Returns:
            TokenResponse: 새 토큰 응답 (New token response)

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        # JWT 디코딩으로 서명/만료/유형 확인 — Verify signature, expiry and type
        try:
            payload: dict = decode_token(refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != "refresh":
            raise UnauthorizedError("Invalid token type")

        # DB에서 리프레시 토큰 확인 — Verify refresh token in database
        db_token: RefreshToken | None = await auth_repository.get_refresh_token(db, refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        if db_token.is_expired():
            await auth_repository.delete_refresh_token(db, refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            user_id: UUID = UUID(str(payload.get("sub")))
        except ValueError:
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        # 기존 리프레시 토큰 삭제 후 새 토큰 발급 — Delete old token and issue new pair
        await auth_repository.delete_refresh_token(db, refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다 (없어도 성공).

        Process logout by deleting the refresh token. Idempotent.
        """
        await auth_repository.delete_refresh_token(db, refresh_token)

    def get_me(self, user: User) -> UserMeResponse:
        """현재 로그인한 사용자 프로필을 반환합니다.

        Return the profile of the currently authenticated user.
        """
        return UserMeResponse(
            id=str(user.id),
            username=user.username,
            email=user.email,
            nickname=user.nickname,
            avatar=user.avatar,
            description=user.description,
            role=user.role,
            status=user.status,
            created_at=user.created_at,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
