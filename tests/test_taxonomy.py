"""카테고리/태그 API 테스트.

Category and tag API tests — Slug generation, uniqueness, post counts,
public lookup by slug and deletion.
"""

from httpx import AsyncClient

from tests.conftest import auth_header

ADMIN_CATEGORIES = "/api/v1/admin/categories/"
ADMIN_TAGS = "/api/v1/admin/tags/"
PUBLIC = "/api/v1/public"


class TestCategory:
    """카테고리 테스트."""

    async def test_create_generates_slug(self, client: AsyncClient, author_token):
        res = await client.post(ADMIN_CATEGORIES, json={"name": "Web Development!", "description": "HTML"},
                                headers=auth_header(author_token))
        assert res.status_code == 201
        data = res.json()
        assert data["slug"] == "web-development"
        assert data["post_count"] == 0

    async def test_duplicate_name(self, client: AsyncClient, author_token):
        await client.post(ADMIN_CATEGORIES, json={"name": "News"}, headers=auth_header(author_token))
        res = await client.post(ADMIN_CATEGORIES, json={"name": "News"}, headers=auth_header(author_token))
        assert res.status_code == 409

    async def test_non_latin_name_uses_fallback_slug(self, client: AsyncClient, author_token):
        first = await client.post(ADMIN_CATEGORIES, json={"name": "技术"}, headers=auth_header(author_token))
        second = await client.post(ADMIN_CATEGORIES, json={"name": "生活"}, headers=auth_header(author_token))
        assert first.json()["slug"] == "category"
        assert second.json()["slug"] == "category-1"

    async def test_rename_regenerates_slug(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN_CATEGORIES, json={"name": "Old Name"}, headers=auth_header(author_token))
        category_id = created.json()["id"]

        res = await client.put(f"{ADMIN_CATEGORIES}{category_id}", json={"name": "New Name"},
                               headers=auth_header(author_token))
        assert res.status_code == 200
        assert res.json()["slug"] == "new-name"

    async def test_null_name_rejected(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN_CATEGORIES, json={"name": "Keep"}, headers=auth_header(author_token))
        category_id = created.json()["id"]

        res = await client.put(f"{ADMIN_CATEGORIES}{category_id}", json={"name": None},
                               headers=auth_header(author_token))
        assert res.status_code == 422

        cleared = await client.put(f"{ADMIN_CATEGORIES}{category_id}", json={"description": None},
                                   headers=auth_header(author_token))
        assert cleared.status_code == 200
        assert cleared.json()["name"] == "Keep"

    async def test_public_list_counts_posts(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN_CATEGORIES, json={"name": "Python"}, headers=auth_header(author_token))
        category_id = created.json()["id"]
        await client.post(ADMIN_CATEGORIES, json={"name": "Go"}, headers=auth_header(author_token))
        for title in ("First", "Second"):
            await client.post("/api/v1/admin/posts/", json={
                "title": title, "content": "body", "category_id": category_id,
            }, headers=auth_header(author_token))

        res = await client.get(f"{PUBLIC}/categories/")
        assert res.status_code == 200
        counts = {c["name"]: c["post_count"] for c in res.json()}
        assert counts == {"Go": 0, "Python": 2}

        by_slug = await client.get(f"{PUBLIC}/categories/python")
        assert by_slug.status_code == 200
        assert by_slug.json()["post_count"] == 2

    async def test_delete_keeps_posts(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN_CATEGORIES, json={"name": "Temp"}, headers=auth_header(author_token))
        category_id = created.json()["id"]
        post = await client.post("/api/v1/admin/posts/", json={
            "title": "Survivor", "content": "body", "category_id": category_id,
        }, headers=auth_header(author_token))

        res = await client.delete(f"{ADMIN_CATEGORIES}{category_id}", headers=auth_header(author_token))
        assert res.status_code == 200

        detail = await client.get(f"/api/v1/admin/posts/{post.json()['id']}", headers=auth_header(author_token))
        assert detail.status_code == 200
        assert detail.json()["category_id"] is None

    async def test_unknown_slug(self, client: AsyncClient):
        res = await client.get(f"{PUBLIC}/categories/missing")
        assert res.status_code == 404


class TestTag:
    """태그 테스트."""

    async def test_create_and_lookup_by_slug(self, client: AsyncClient, author_token):
        res = await client.post(ADMIN_TAGS, json={"name": "Machine Learning"}, headers=auth_header(author_token))
        assert res.status_code == 201
        assert res.json()["slug"] == "machine-learning"

        public = await client.get(f"{PUBLIC}/tags/machine-learning")
        assert public.status_code == 200
        assert public.json()["name"] == "Machine Learning"

    async def test_duplicate_tag(self, client: AsyncClient, author_token):
        await client.post(ADMIN_TAGS, json={"name": "python"}, headers=auth_header(author_token))
        res = await client.post(ADMIN_TAGS, json={"name": "python"}, headers=auth_header(author_token))
        assert res.status_code == 409

    async def test_tags_created_by_posts(self, client: AsyncClient, author_token):
        await client.post("/api/v1/admin/posts/", json={
            "title": "Tagged", "content": "body", "tags": ["alpha", "beta"],
        }, headers=auth_header(author_token))

        res = await client.get(f"{PUBLIC}/tags/")
        assert res.status_code == 200
        assert [(t["name"], t["post_count"]) for t in res.json()] == [("alpha", 1), ("beta", 1)]

    async def test_delete_tag_removes_links(self, client: AsyncClient, author_token):
        post = await client.post("/api/v1/admin/posts/", json={
            "title": "Tagged", "content": "body", "tags": ["gone", "kept"],
        }, headers=auth_header(author_token))
        tags = (await client.get(f"{ADMIN_TAGS}", headers=auth_header(author_token))).json()["items"]
        gone_id = next(t["id"] for t in tags if t["name"] == "gone")

        res = await client.delete(f"{ADMIN_TAGS}{gone_id}", headers=auth_header(author_token))
        assert res.status_code == 200

        detail = await client.get(f"/api/v1/admin/posts/{post.json()['id']}", headers=auth_header(author_token))
        assert detail.json()["tags"] == ["kept"]

    async def test_subscriber_cannot_create(self, client: AsyncClient, subscriber_token):
        res = await client.post(ADMIN_TAGS, json={"name": "nope"}, headers=auth_header(subscriber_token))
        assert res.status_code == 403
