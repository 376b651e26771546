"""initial_blog_schema

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-19 09:00:00.000000

초기 스키마:
1. users, refresh_tokens — 계정과 리프레시 토큰
2. categories, tags, posts, post_tags, comments, pages — 블로그 콘텐츠
3. attachments — 업로드 파일 메타데이터
4. external_tools, news, stocks — 사이드바 위젯
5. themes — 설치된 테마
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a0b1c2d3e4f5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # ── 1. users — 사용자 계정 ──
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('nickname', sa.String(100), nullable=True),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('role', sa.String(20), server_default='subscriber', nullable=False),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(512), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])

    # ── 2. 블로그 콘텐츠 — Blog content ──
    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('slug', sa.String(120), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'tags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
        sa.Column('slug', sa.String(80), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        'posts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        sa.Column('summary', sa.String(500), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('original_content', sa.Text(), nullable=True),
        sa.Column('thumbnail', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), server_default='draft', nullable=False),
        sa.Column('author_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('category_id', sa.Uuid(), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('allow_comment', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('top_priority', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('view_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('like_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('comment_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_posts_status', 'posts', ['status'])

    op.create_table(
        'post_tags',
        sa.Column('post_id', sa.Uuid(), sa.ForeignKey('posts.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Uuid(), sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'comments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('post_id', sa.Uuid(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('guest_name', sa.String(100), nullable=True),
        sa.Column('guest_email', sa.String(255), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_comments_post_id', 'comments', ['post_id'])

    op.create_table(
        'pages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('original_content', sa.Text(), nullable=True),
        sa.Column('author_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.String(20), server_default='draft', nullable=False),
        sa.Column('view_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        *_timestamps(),
    )

    # ── 3. attachments — 업로드 파일 ──
    op.create_table(
        'attachments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('path', sa.String(500), nullable=False, unique=True),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('media_type', sa.String(100), nullable=True),
        sa.Column('suffix', sa.String(20), nullable=True),
        sa.Column('size', sa.BigInteger(), server_default=sa.text('0'), nullable=False),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('uploader_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', sa.String(20), server_default='other', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_attachments_uploader_id', 'attachments', ['uploader_id'])
    op.create_index('ix_attachments_type', 'attachments', ['type'])

    # ── 4. 위젯 — External tools, news, stocks ──
    op.create_table(
        'external_tools',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('icon', sa.String(100), nullable=True),
        sa.Column('icon_bg_color', sa.String(20), nullable=True),
        sa.Column('category', sa.String(20), server_default='other', nullable=False),
        sa.Column('display_order', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'news',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('summary', sa.String(1000), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('source', sa.String(100), nullable=True),
        sa.Column('source_url', sa.String(1000), nullable=True),
        sa.Column('thumbnail', sa.String(500), nullable=True),
        sa.Column('category', sa.String(20), server_default='other', nullable=False),
        sa.Column('view_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('is_hot', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('hot_score', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        *_timestamps(),
    )
    op.create_index('ix_news_source', 'news', ['source'])

    op.create_table(
        'stocks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('symbol', sa.String(20), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('name_cn', sa.String(100), nullable=True),
        sa.Column('market', sa.String(10), server_default='OTHER', nullable=False),
        sa.Column('price', sa.Float(), server_default=sa.text('0'), nullable=False),
        sa.Column('change_amount', sa.Float(), server_default=sa.text('0'), nullable=False),
        sa.Column('change_percent', sa.Float(), server_default=sa.text('0'), nullable=False),
        sa.Column('high', sa.Float(), nullable=True),
        sa.Column('low', sa.Float(), nullable=True),
        sa.Column('open', sa.Float(), nullable=True),
        sa.Column('prev_close', sa.Float(), nullable=True),
        sa.Column('volume', sa.BigInteger(), server_default=sa.text('0'), nullable=False),
        sa.Column('market_cap', sa.Float(), nullable=True),
        sa.Column('pe_ratio', sa.Float(), nullable=True),
        sa.Column('is_hot', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('hot_rank', sa.Integer(), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_stocks_market', 'stocks', ['market'])

    # ── 5. themes — 설치된 테마 ──
    op.create_table(
        'themes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('theme_id', sa.String(100), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('version', sa.String(50), nullable=True),
        sa.Column('author', sa.String(200), nullable=True),
        sa.Column('author_url', sa.String(500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('screenshot', sa.String(255), nullable=True),
        sa.Column('config', sa.JSON(), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('status', sa.String(20), server_default='enabled', nullable=False),
        sa.Column('template_engine', sa.String(20), server_default='jinja2', nullable=False),
        *_timestamps(),
    )
    op.create_index(
        'uq_themes_single_active', 'themes', ['is_active'], unique=True,
        postgresql_where=sa.text('is_active'), sqlite_where=sa.text('is_active'),
    )


def downgrade() -> None:
    op.drop_index('uq_themes_single_active', table_name='themes')
    op.drop_table('themes')
    op.drop_index('ix_stocks_market', table_name='stocks')
    op.drop_table('stocks')
    op.drop_index('ix_news_source', table_name='news')
    op.drop_table('news')
    op.drop_table('external_tools')
    op.drop_index('ix_attachments_type', table_name='attachments')
    op.drop_index('ix_attachments_uploader_id', table_name='attachments')
    op.drop_table('attachments')
    op.drop_table('pages')
    op.drop_index('ix_comments_post_id', table_name='comments')
    op.drop_table('comments')
    op.drop_table('post_tags')
    op.drop_index('ix_posts_status', table_name='posts')
    op.drop_table('posts')
    op.drop_table('tags')
    op.drop_table('categories')
    op.drop_index('ix_refresh_tokens_user_id', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
