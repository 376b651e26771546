"""페이지 API 테스트.

Standalone page API tests — Admin CRUD and the public published-only view.
"""

from httpx import AsyncClient

from tests.conftest import auth_header

ADMIN = "/api/v1/admin/pages/"
PUBLIC = "/api/v1/public/pages/"


class TestPage:
    """페이지 테스트."""

    async def test_create_sets_author_and_slug(self, client: AsyncClient, author_token, author_user):
        res = await client.post(ADMIN, json={"title": "About Me", "content": "<p>Hi</p>"},
                                headers=auth_header(author_token))
        assert res.status_code == 201
        data = res.json()
        assert data["slug"] == "about-me"
        assert data["status"] == "draft"
        assert data["author_id"] == str(author_user.id)
        assert data["author_name"] == "Author"

    async def test_public_shows_published_only(self, client: AsyncClient, author_token):
        await client.post(ADMIN, json={"title": "Contact", "content": "mail", "status": "published"},
                          headers=auth_header(author_token))
        await client.post(ADMIN, json={"title": "Secret", "content": "x"}, headers=auth_header(author_token))

        listed = await client.get(PUBLIC)
        assert [p["title"] for p in listed.json()] == ["Contact"]

        hidden = await client.get(f"{PUBLIC}secret")
        assert hidden.status_code == 404

    async def test_public_detail_counts_views(self, client: AsyncClient, author_token):
        await client.post(ADMIN, json={"title": "Contact", "content": "mail", "status": "published"},
                          headers=auth_header(author_token))
        await client.get(f"{PUBLIC}contact")
        res = await client.get(f"{PUBLIC}contact")
        assert res.status_code == 200
        assert res.json()["view_count"] == 2

    async def test_update_title_regenerates_slug(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN, json={"title": "Old", "content": "x"}, headers=auth_header(author_token))
        res = await client.put(f"{ADMIN}{created.json()['id']}", json={"title": "New Page", "status": "published"},
                               headers=auth_header(author_token))
        assert res.status_code == 200
        assert res.json()["slug"] == "new-page"
        assert res.json()["status"] == "published"

    async def test_null_title_rejected(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN, json={"title": "Stay", "content": "x"}, headers=auth_header(author_token))
        res = await client.put(f"{ADMIN}{created.json()['id']}", json={"title": None},
                               headers=auth_header(author_token))
        assert res.status_code == 422

    async def test_admin_list_and_delete(self, client: AsyncClient, author_token):
        created = await client.post(ADMIN, json={"title": "Temp", "content": "x"}, headers=auth_header(author_token))

        listed = await client.get(ADMIN, headers=auth_header(author_token))
        assert listed.json()["total"] == 1

        res = await client.delete(f"{ADMIN}{created.json()['id']}", headers=auth_header(author_token))
        assert res.status_code == 200

        missing = await client.get(f"{ADMIN}{created.json()['id']}", headers=auth_header(author_token))
        assert missing.status_code == 404
