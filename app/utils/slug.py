"""슬러그 생성 유틸리티.

Slug generation utility shared by posts, pages, categories and tags.

A slug is the lowercase-hyphenated, URL-safe form of a title. Collisions are
resolved by appending -1, -2, ... to the base slug.
"""

import re
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

_DISALLOWED: re.Pattern[str] = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE: re.Pattern[str] = re.compile(r"\s+")
_HYPHENS: re.Pattern[str] = re.compile(r"-+")


def slugify(text: str) -> str:
    """제목을 슬러그 기본형으로 변환합니다.

    Convert text to its base slug form.

    Examples:
        >>> slugify("Hello, World!  Again")
        'hello-world-again'
        >>> slugify("技术")
        ''
    """
    slug: str = _DISALLOWED.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


async def unique_slug(
    db: AsyncSession,
    model: type[Any],
    source: str,
    fallback: str,
    exclude_id: UUID | None = None,
) -> str:
    """테이블 내에서 고유한 슬러그를 생성합니다.

    Generate a slug for `source` that is unique in `model.slug`.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        model: slug 컬럼을 가진 모델 (Model class with a `slug` column)
        source: 제목/이름 (Title or name to derive the slug from)
        fallback: 슬러그가 비었을 때 사용할 기본값 (Base used when source has no ASCII chars)
        exclude_id: 자기 자신 제외 — 수정 시 사용 (Row id to ignore, used on update)

    Returns:
        str: 고유 슬러그 (Unique slug)
    """
    base: str = slugify(source) or fallback
    candidate: str = base
    counter: int = 1

    while await _slug_taken(db, model, candidate, exclude_id):
        candidate = f"{base}-{counter}"
        counter += 1

    return candidate


async def _slug_taken(
    db: AsyncSession,
    model: type[Any],
    slug: str,
    exclude_id: UUID | None,
) -> bool:
    query = select(func.count()).select_from(model).where(model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    count: int = (await db.execute(query)).scalar() or 0
    return count > 0
