"""관리자 사용자 라우터 — 사용자 CRUD, 상태/역할 변경.

Admin User Router — User management endpoints (admin only): listing,
detail, creation, profile update, status and role changes, deletion.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import (
    ROLE_PATTERN,
    USER_STATUS_PATTERN,
    UserCreate,
    UserResponse,
    UserRoleUpdate,
    UserStatusUpdate,
    UserUpdate,
)
from app.services.user_service import user_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
    params: Annotated[PageParams, Depends(page_params)],
    role: Annotated[str | None, Query(pattern=ROLE_PATTERN, description="역할 필터")] = None,
    status: Annotated[str | None, Query(pattern=USER_STATUS_PATTERN, description="상태 필터")] = None,
) -> Page[UserResponse]:
    """사용자 목록을 페이지 단위로 조회합니다.

    Paginated user list, newest first, optionally filtered by role/status.
    """
    return await user_service.list_users_paginated(db, params, role, status)


@router.get("/all", response_model=list[UserResponse])
async def list_all_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> list[UserResponse]:
    return await user_service.list_users(db)


@router.get("/by-username/{username}", response_model=UserResponse)
async def get_user_by_username(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    return await user_service.get_by_username(db, username)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.post("/", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """새 사용자를 생성합니다.

    Create a new user. Duplicate username or email → 409.
    """
    result: UserResponse = await user_service.create_user(db, data)
    await db.commit()
    return result


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """사용자 프로필을 수정합니다 (닉네임, 이메일, 아바타, 소개, 비밀번호)."""
    result: UserResponse = await user_service.update_user(db, user_id, data)
    await db.commit()
    return result


@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: UUID,
    data: UserStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    result: UserResponse = await user_service.update_status(db, user_id, data.status)
    await db.commit()
    return result


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: UUID,
    data: UserRoleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    result: UserResponse = await user_service.update_role(db, user_id, data.role)
    await db.commit()
    return result


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict[str, str]:
    """사용자를 삭제합니다 — 자기 자신은 삭제 불가 (400).

    Delete a user. Their content stays with the author reference cleared.
    """
    await user_service.delete_user(db, user_id, current_user)
    await db.commit()
    return {"message": "User deleted successfully"}
