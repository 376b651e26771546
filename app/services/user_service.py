"""사용자 서비스 — 관리자용 사용자 CRUD 비즈니스 로직.

User Service — Business logic for admin user management: creation, profile
update, status/role changes and deletion.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.auth_repository import auth_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from app.utils.pagination import Page, PageParams, build_page
from app.utils.password import hash_password


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    def _to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다.

        Convert a User model instance to a UserResponse schema.
        The password hash is never copied.
        """
        return UserResponse(
            id=str(user.id),
            username=user.username,
            email=user.email,
            nickname=user.nickname,
            avatar=user.avatar,
            description=user.description,
            role=user.role,
            status=user.status,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    async def _get_or_404(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self, db: AsyncSession) -> list[UserResponse]:
        """전체 사용자 목록 (username 오름차순) — All users by username."""
        users: list[User] = await user_repository.list_ordered(db)
        return [self._to_response(u) for u in users]

    async def list_users_paginated(
        self,
        db: AsyncSession,
        params: PageParams,
        role: str | None = None,
        status: str | None = None,
    ) -> Page[UserResponse]:
        """사용자 목록을 페이지 단위로 조회합니다 (최신 가입순).

        Paginated user list, newest first, optionally filtered by role/status.
        """
        users, total = await user_repository.get_paginated(
            db, user_repository.list_query(role, status), params.page, params.per_page
        )
        return build_page([self._to_response(u) for u in users], total, params)

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        """사용자 상세 정보를 조회합니다.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        return self._to_response(await self._get_or_404(db, user_id))

    async def get_by_username(self, db: AsyncSession, username: str) -> UserResponse:
        user: User | None = await user_repository.get_by_username(db, username)
        if user is None:
            raise NotFoundError("User not found")
        return self._to_response(user)

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """새 사용자를 생성합니다.

        Create a new user with a hashed password.

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
                "avatar": data.avatar,
                "description": data.description,
                "role": data.role,
                "status": "active",
            },
        )
        return self._to_response(user)

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: UserUpdate,
    ) -> UserResponse:
        """사용자 프로필을 수정합니다 (부분 업데이트).

        Update profile fields. A new password is hashed before storing.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
            DuplicateError: 다른 사용자가 이미 사용하는 이메일 (Email taken)
        """
        await self._get_or_404(db, user_id)
        update_data: dict = data.model_dump(exclude_unset=True)

        if update_data.get("email") is not None:
            if await user_repository.exists(db, {"email": update_data["email"]}, exclude_id=user_id):
                raise DuplicateError("Email already exists")

        password: str | None = update_data.pop("password", None)
        if password is not None:
            update_data["password_hash"] = hash_password(password)

        user: User | None = await user_repository.update(db, user_id, update_data)
        return self._to_response(user)

    async def update_status(self, db: AsyncSession, user_id: UUID, status: str) -> UserResponse:
        """계정 상태 변경 — 비활성/차단 시 리프레시 토큰 폐기.

        Change the account status. Leaving "active" revokes refresh tokens.
        """
        await self._get_or_404(db, user_id)
        if status != "active":
            await auth_repository.delete_user_refresh_tokens(db, user_id)
        user: User | None = await user_repository.update(db, user_id, {"status": status})
        return self._to_response(user)

    async def update_role(self, db: AsyncSession, user_id: UUID, role: str) -> UserResponse:
        await self._get_or_404(db, user_id)
        user: User | None = await user_repository.update(db, user_id, {"role": role})
        return self._to_response(user)

    async def delete_user(self, db: AsyncSession, user_id: UUID, caller: User) -> None:
        """사용자를 삭제합니다 — 작성한 콘텐츠는 남고 작성자만 비워짐.

        Delete a user. Posts, pages, comments and attachments stay with their
        author reference cleared.

        Raises:
            BadRequestError: 자기 자신을 삭제하려 할 때 (Self-deletion)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        if caller.id == user_id:
            raise BadRequestError("You cannot delete your own account")
        await self._get_or_404(db, user_id)
        await user_repository.detach_content(db, user_id)
        await auth_repository.delete_user_refresh_tokens(db, user_id)
        await user_repository.delete(db, user_id)


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
