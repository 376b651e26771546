"""사용자 레포지토리 — 사용자 CRUD 및 작성자 참조 정리.

User Repository — CRUD queries for users, plus detaching a deleted user
from the content they authored.
"""

from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attachment import Attachment
from app.models.blog import Comment, Page, Post
from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        """사용자명으로 사용자를 조회합니다 — Lookup by username."""
        return await self.get_one_by(db, "username", username)

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        """이메일로 사용자를 조회합니다 — Lookup by email."""
        return await self.get_one_by(db, "email", email)

    async def list_ordered(self, db: AsyncSession) -> list[User]:
        """전체 사용자 목록 (username 오름차순)."""
        return list(await self.get_all(db, order_by=User.username))

    def list_query(self, role: str | None = None, status: str | None = None) -> Select:
        """페이지네이션용 기본 쿼리 — 최신 가입순.

        Base query for the paginated list, newest first.
        """
        query: Select = select(User)
        if role is not None:
            query = query.where(User.role == role)
        if status is not None:
            query = query.where(User.status == status)
        return query.order_by(User.created_at.desc())

    async def detach_content(self, db: AsyncSession, user_id: UUID) -> None:
        """삭제될 사용자의 글/페이지/댓글/첨부파일 참조를 NULL로 만듭니다.

        Clear the author/uploader reference on everything the user owns so the
        content outlives the account.
        """
        await db.execute(update(Post).where(Post.author_id == user_id).values(author_id=None))
        await db.execute(update(Page).where(Page.author_id == user_id).values(author_id=None))
        await db.execute(update(Comment).where(Comment.user_id == user_id).values(user_id=None))
        await db.execute(
            update(Attachment).where(Attachment.uploader_id == user_id).values(uploader_id=None)
        )
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
