"""초기 데이터 시드 스크립트 — 사용자, 카테고리, 태그, 샘플 게시글 생성.

Seed script — Creates the initial accounts, taxonomy, sample posts and the
default external tools. Run it once to bootstrap an empty database.

Usage:
    python -m app.seed

Creates:
    - 2개 계정: admin / admin123 (admin), author / author123 (author)
    - 3개 카테고리, 3개 태그 (3 categories, 3 tags)
    - 3개 샘플 게시글 — 2개 발행, 1개 초안 (2 published posts, 1 draft)
    - 기본 외부 도구 8개 (8 default external tools)
"""

import asyncio

from sqlalchemy import select

from app.database import async_session, engine, Base
from app.models import User
from app.repositories.user_repository import user_repository
from app.schemas.post import PostCreate
from app.schemas.taxonomy import CategoryCreate, TagCreate
from app.schemas.user import UserCreate
from app.services.category_service import category_service
from app.services.external_tool_service import external_tool_service
from app.services.post_service import post_service
from app.services.tag_service import tag_service
from app.services.user_service import user_service

SEED_USERS: list[UserCreate] = [
    UserCreate(username="admin", password="admin123", email="admin@inkwell.local", nickname="Administrator", role="admin"),
    UserCreate(username="author", password="author123", email="author@inkwell.local", nickname="Author", role="author"),
]

SEED_CATEGORIES: list[CategoryCreate] = [
    CategoryCreate(name="Technology", description="Software, tools and the web"),
    CategoryCreate(name="Life", description="Notes from everyday life"),
    CategoryCreate(name="Reading", description="Book notes and reviews"),
]

SEED_TAGS: list[str] = ["Python", "FastAPI", "Notes"]


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts accounts, taxonomy,
    posts and external tools.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if any user exists).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        for data in SEED_USERS:
            await user_service.create_user(db, data)
        author: User | None = await user_repository.get_by_username(db, "author")

        categories = [await category_service.create_category(db, data) for data in SEED_CATEGORIES]
        for name in SEED_TAGS:
            await tag_service.create_tag(db, TagCreate(name=name))

        posts: list[PostCreate] = [
            PostCreate(
                title="Hello Inkwell",
                summary="The first post on a fresh blog.",
                content="<p>Welcome to your new blog. Edit or delete this post, then start writing.</p>",
                status="published",
                category_id=categories[1].id,
                tags=["Notes"],
                top_priority=1,
            ),
            PostCreate(
                title="Building an API with FastAPI",
                summary="Routers, dependencies and async sessions.",
                content="<p>FastAPI routers keep endpoints small while services hold the rules.</p>",
                status="published",
                category_id=categories[0].id,
                tags=["Python", "FastAPI"],
            ),
            PostCreate(
                title="Reading list",
                content="<p>Books to read this year.</p>",
                status="draft",
                category_id=categories[2].id,
            ),
        ]
        for data in posts:
            await post_service.create_post(db, data, author)

        tools: int = await external_tool_service.initialize_defaults(db)

        await db.commit()
        print(
            f"Seeded: users={len(SEED_USERS)}, categories={len(categories)}, "
            f"tags={len(SEED_TAGS)}, posts={len(posts)}, tools={tools}"
        )
        print("Accounts: admin/admin123, author/author123")


if __name__ == "__main__":
    asyncio.run(seed())
