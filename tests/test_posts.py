"""게시글 API 테스트.

Post API tests — Admin CRUD with slug/tag/publish rules, admin filters, and
the public published-only list and detail.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import auth_header

ADMIN = "/api/v1/admin/posts/"
PUBLIC = "/api/v1/public/posts/"


async def create_post(client: AsyncClient, token: str, **fields) -> dict:
    payload = {"title": "Hello World", "content": "<p>Body</p>", **fields}
    res = await client.post(ADMIN, json=payload, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()


class TestPostCreate:
    """게시글 생성 테스트."""

    async def test_create_draft(self, client: AsyncClient, author_token, author_user):
        data = await create_post(client, author_token, tags=["python", "web", "python"])
        assert data["slug"] == "hello-world"
        assert data["status"] == "draft"
        assert data["published_at"] is None
        assert data["author_id"] == str(author_user.id)
        assert data["author_name"] == "Author"
        assert data["tags"] == ["python", "web"]
        assert data["view_count"] == 0
        assert data["allow_comment"] is True

    async def test_create_published_sets_published_at(self, client: AsyncClient, author_token):
        data = await create_post(client, author_token, status="published")
        assert data["published_at"] is not None

    async def test_slug_collision_suffix(self, client: AsyncClient, author_token):
        first = await create_post(client, author_token)
        second = await create_post(client, author_token)
        third = await create_post(client, author_token)
        assert [first["slug"], second["slug"], third["slug"]] == ["hello-world", "hello-world-1", "hello-world-2"]

    async def test_unknown_category(self, client: AsyncClient, author_token):
        res = await client.post(ADMIN, json={
            "title": "Orphan", "content": "body", "category_id": str(uuid.uuid4()),
        }, headers=auth_header(author_token))
        assert res.status_code == 404

    async def test_invalid_status(self, client: AsyncClient, author_token):
        res = await client.post(ADMIN, json={"title": "Bad", "content": "body", "status": "archived"},
                                headers=auth_header(author_token))
        assert res.status_code == 422

    async def test_subscriber_forbidden(self, client: AsyncClient, subscriber_token):
        res = await client.post(ADMIN, json={"title": "Nope", "content": "body"},
                                headers=auth_header(subscriber_token))
        assert res.status_code == 403


class TestPostUpdate:
    """게시글 수정 테스트."""

    async def test_title_change_regenerates_slug(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token)
        res = await client.put(f"{ADMIN}{post['id']}", json={"title": "Brand New Title"},
                               headers=auth_header(author_token))
        assert res.status_code == 200
        assert res.json()["slug"] == "brand-new-title"

    async def test_same_title_keeps_slug(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token)
        res = await client.put(f"{ADMIN}{post['id']}", json={"title": "Hello World", "summary": "short"},
                               headers=auth_header(author_token))
        assert res.json()["slug"] == "hello-world"
        assert res.json()["summary"] == "short"

    async def test_publish_stamps_once(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token)
        published = await client.put(f"{ADMIN}{post['id']}", json={"status": "published"},
                                     headers=auth_header(author_token))
        stamp = published.json()["published_at"]
        assert stamp is not None

        await client.put(f"{ADMIN}{post['id']}", json={"status": "draft"}, headers=auth_header(author_token))
        again = await client.put(f"{ADMIN}{post['id']}", json={"status": "published"},
                                 headers=auth_header(author_token))
        assert again.json()["published_at"] == stamp

    async def test_tags_replaced(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token, tags=["a", "b"])
        res = await client.put(f"{ADMIN}{post['id']}", json={"tags": ["c"]}, headers=auth_header(author_token))
        assert res.json()["tags"] == ["c"]

    async def test_tags_untouched_when_omitted(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token, tags=["a", "b"])
        res = await client.put(f"{ADMIN}{post['id']}", json={"summary": "s"}, headers=auth_header(author_token))
        assert res.json()["tags"] == ["a", "b"]

    async def test_null_for_required_field_rejected(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token, summary="keep")
        for payload in ({"title": None}, {"content": None}, {"status": None}, {"allow_comment": None}):
            res = await client.put(f"{ADMIN}{post['id']}", json=payload, headers=auth_header(author_token))
            assert res.status_code == 422, payload

        res = await client.get(f"{ADMIN}{post['id']}", headers=auth_header(author_token))
        assert res.json()["title"] == "Hello World"

    async def test_null_clears_optional_field(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token, summary="short")
        res = await client.put(f"{ADMIN}{post['id']}", json={"summary": None}, headers=auth_header(author_token))
        assert res.status_code == 200
        assert res.json()["summary"] is None


class TestPostAdminList:
    """관리자 목록/필터 테스트."""

    async def test_filters(self, client: AsyncClient, author_token):
        await create_post(client, author_token, title="Draft One")
        await create_post(client, author_token, title="Live One", status="published", tags=["news"])
        await create_post(client, author_token, title="Live Two", status="published", summary="python tips")

        published = await client.get(ADMIN, params={"status": "published"}, headers=auth_header(author_token))
        assert published.json()["total"] == 2

        keyword = await client.get(ADMIN, params={"keyword": "python"}, headers=auth_header(author_token))
        assert [p["title"] for p in keyword.json()["items"]] == ["Live Two"]

        tags = (await client.get("/api/v1/admin/tags/", headers=auth_header(author_token))).json()["items"]
        tagged = await client.get(ADMIN, params={"tag_id": tags[0]["id"]}, headers=auth_header(author_token))
        assert [p["title"] for p in tagged.json()["items"]] == ["Live One"]

    async def test_newest_first_and_paging(self, client: AsyncClient, author_token):
        for i in range(3):
            await create_post(client, author_token, title=f"Post {i}")

        res = await client.get(ADMIN, params={"page": 1, "per_page": 2}, headers=auth_header(author_token))
        data = res.json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert [p["title"] for p in data["items"]] == ["Post 2", "Post 1"]


class TestPostPublic:
    """공개 게시글 테스트."""

    async def test_published_only_and_pinned_first(self, client: AsyncClient, author_token):
        await create_post(client, author_token, title="Hidden Draft")
        await create_post(client, author_token, title="Older", status="published")
        await create_post(client, author_token, title="Newer", status="published")
        await create_post(client, author_token, title="Pinned", status="published", top_priority=5)

        res = await client.get(PUBLIC)
        assert res.status_code == 200
        assert [p["title"] for p in res.json()["items"]] == ["Pinned", "Newer", "Older"]

    async def test_filter_by_category_and_tag_slug(self, client: AsyncClient, author_token):
        category = await client.post("/api/v1/admin/categories/", json={"name": "Tech"},
                                     headers=auth_header(author_token))
        await create_post(client, author_token, title="In Tech", status="published",
                          category_id=category.json()["id"])
        await create_post(client, author_token, title="Tagged", status="published", tags=["Deep Dive"])

        by_category = await client.get(PUBLIC, params={"category": "tech"})
        assert [p["title"] for p in by_category.json()["items"]] == ["In Tech"]

        by_tag = await client.get(PUBLIC, params={"tag": "deep-dive"})
        assert [p["title"] for p in by_tag.json()["items"]] == ["Tagged"]

    async def test_search_title(self, client: AsyncClient, author_token):
        await create_post(client, author_token, title="FastAPI Basics", status="published")
        await create_post(client, author_token, title="Cooking", status="published")

        res = await client.get(PUBLIC, params={"keyword": "fastapi"})
        assert [p["title"] for p in res.json()["items"]] == ["FastAPI Basics"]

    async def test_detail_increments_views(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token, status="published")

        first = await client.get(f"{PUBLIC}{post['slug']}")
        assert first.status_code == 200
        assert first.json()["view_count"] == 1
        assert first.json()["content"] == "<p>Body</p>"

        second = await client.get(f"{PUBLIC}{post['slug']}")
        assert second.json()["view_count"] == 2

    async def test_draft_detail_not_found(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token)
        res = await client.get(f"{PUBLIC}{post['slug']}")
        assert res.status_code == 404


class TestPostDelete:
    """게시글 삭제 테스트."""

    async def test_delete_removes_comments(self, client: AsyncClient, author_token):
        post = await create_post(client, author_token, status="published", tags=["x"])
        await client.post("/api/v1/public/comments/", json={
            "post_id": post["id"], "content": "Nice", "guest_name": "Visitor",
        })

        res = await client.delete(f"{ADMIN}{post['id']}", headers=auth_header(author_token))
        assert res.status_code == 200

        missing = await client.get(f"{ADMIN}{post['id']}", headers=auth_header(author_token))
        assert missing.status_code == 404

        comments = await client.get("/api/v1/admin/comments/", headers=auth_header(author_token))
        assert comments.json()["total"] == 0

        tags = await client.get("/api/v1/public/tags/")
        assert tags.json()[0]["post_count"] == 0
