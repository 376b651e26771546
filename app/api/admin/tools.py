"""관리자 외부 도구 라우터 — 사이드바 외부 링크 관리.

Admin External Tool Router — Management of the sidebar external links.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.widget import ExternalToolCreate, ExternalToolResponse, ExternalToolUpdate
from app.services.external_tool_service import external_tool_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[ExternalToolResponse])
async def list_tools(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[ExternalToolResponse]:
    """전체 도구 목록 (비활성 포함, 표시 순서)."""
    return await external_tool_service.list_tools(db, params)


@router.post("/initialize", response_model=MessageResponse)
async def initialize_default_tools(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> dict[str, str]:
    """기본 도구 생성 — 테이블이 비어 있을 때만 (Idempotent)."""
    created: int = await external_tool_service.initialize_defaults(db)
    await db.commit()
    return {"message": f"Initialized {created} default tools"}


@router.get("/{tool_id}", response_model=ExternalToolResponse)
async def get_tool(
    tool_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ExternalToolResponse:
    return await external_tool_service.get_tool(db, tool_id)


@router.post("/", response_model=ExternalToolResponse, status_code=201)
async def create_tool(
    data: ExternalToolCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ExternalToolResponse:
    result: ExternalToolResponse = await external_tool_service.create_tool(db, data)
    await db.commit()
    return result


@router.put("/{tool_id}", response_model=ExternalToolResponse)
async def update_tool(
    tool_id: UUID,
    data: ExternalToolUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ExternalToolResponse:
    result: ExternalToolResponse = await external_tool_service.update_tool(db, tool_id, data)
    await db.commit()
    return result


@router.delete("/{tool_id}", response_model=MessageResponse)
async def delete_tool(
    tool_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> dict[str, str]:
    await external_tool_service.delete_tool(db, tool_id)
    await db.commit()
    return {"message": "External tool deleted successfully"}
