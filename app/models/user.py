"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Blog accounts with a three-step role hierarchy and an account status.

Tables:
    - users: 사용자 계정 (User accounts)
    - refresh_tokens: 리프레시 토큰 (Issued refresh tokens)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

# 역할별 권한 레벨 — Permission level per role (lower = more authority)
ROLE_LEVELS: dict[str, int] = {
    "admin": 1,
    "author": 2,
    "subscriber": 3,
}


class User(Base):
    """사용자 모델 — 블로그 계정 정보.

    User model — Blog account information.
    Username and email are globally unique.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        email: 이메일 (Email address, unique)
        nickname: 표시 이름 (Display name, defaults to username)
        avatar: 아바타 URL (Avatar image URL)
        description: 자기소개 (Short bio)
        role: 역할 (admin / author / subscriber)
        status: 계정 상태 (active / inactive / banned)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_tokens: 리프레시 토큰 목록 (Active refresh tokens, cascade delete)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 이메일 — Email address (전역 고유, globally unique)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 표시 이름 — Display name shown on posts and comments
    nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 아바타 — Avatar URL
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 자기소개 — Bio
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 역할 — Role name: admin, author, subscriber
    role: Mapped[str] = mapped_column(String(20), default="subscriber", nullable=False)
    # 계정 상태 — Account status: active, inactive, banned
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def level(self) -> int:
        """역할 권한 레벨 — Permission level of the role (unknown roles rank lowest)."""
        return ROLE_LEVELS.get(self.role, max(ROLE_LEVELS.values()))

    @property
    def is_active(self) -> bool:
        """활성 계정 여부 — Whether the account may authenticate."""
        return self.status == "active"

    @property
    def display_name(self) -> str:
        """표시 이름 — Nickname, falling back to the username."""
        return self.nickname or self.username


class RefreshToken(Base):
    """리프레시 토큰 — 발급된 JWT 리프레시 토큰 저장.

    Issued refresh tokens. A token is usable only while its row exists and
    it has not expired; refresh rotates the row, logout deletes it.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # JWT 원문 — Encoded token string
    token: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now: datetime | None = None) -> bool:
        """만료 여부 — SQLite는 tz 정보를 잃으므로 naive 값은 UTC로 간주."""
        expires: datetime = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires <= (now or datetime.now(timezone.utc))
