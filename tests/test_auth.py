"""인증 API 테스트 — 로그인, 회원가입, 토큰 갱신, 로그아웃, /me 엔드포인트.

Auth API tests — Login, registration, token refresh, logout and /me.
"""

from httpx import AsyncClient

from tests.conftest import auth_header

AUTH = "/api/v1/auth"


class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, admin_user):
        """로그인 성공 — 토큰 쌍 발급."""
        res = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "admin123!"})
        assert res.status_code == 200
        data = res.json()
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"

    async def test_login_wrong_password(self, client: AsyncClient, admin_user):
        res = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "wrong"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid username or password"

    async def test_login_unknown_user(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={"username": "ghost", "password": "whatever"})
        assert res.status_code == 401

    async def test_login_banned_user(self, client: AsyncClient, db, author_user):
        """차단된 계정은 403."""
        author_user.status = "banned"
        await db.flush()

        res = await client.post(f"{AUTH}/login", json={"username": "author", "password": "author123!"})
        assert res.status_code == 403
        assert res.json()["detail"] == "User account is not active"


class TestRegister:
    """회원가입 테스트."""

    async def test_register_creates_subscriber(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "newbie",
            "password": "secret123",
            "email": "newbie@test.com",
        })
        assert res.status_code == 201
        token = res.json()["access_token"]

        me = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert me.status_code == 200
        data = me.json()
        assert data["username"] == "newbie"
        assert data["nickname"] == "newbie"
        assert data["role"] == "subscriber"
        assert data["status"] == "active"

    async def test_register_duplicate_username(self, client: AsyncClient, admin_user):
        res = await client.post(f"{AUTH}/register", json={
            "username": "admin",
            "password": "secret123",
            "email": "other@test.com",
        })
        assert res.status_code == 409

    async def test_register_duplicate_email(self, client: AsyncClient, admin_user):
        res = await client.post(f"{AUTH}/register", json={
            "username": "someone",
            "password": "secret123",
            "email": "admin@test.com",
        })
        assert res.status_code == 409

    async def test_register_short_password(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "someone",
            "password": "123",
            "email": "someone@test.com",
        })
        assert res.status_code == 422


class TestRefreshAndLogout:
    """토큰 갱신/로그아웃 테스트."""

    async def _login(self, client: AsyncClient) -> dict:
        res = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "admin123!"})
        return res.json()

    async def test_refresh_rotates_token(self, client: AsyncClient, admin_user):
        """갱신 후 기존 리프레시 토큰은 재사용 불가."""
        tokens = await self._login(client)

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        new_tokens = res.json()
        assert new_tokens["refresh_token"] != tokens["refresh_token"]

        reused = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert reused.status_code == 401

    async def test_refresh_rejects_access_token(self, client: AsyncClient, admin_user):
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["access_token"]})
        assert res.status_code == 401

    async def test_refresh_garbage_token(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "not-a-jwt"})
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, admin_user):
        tokens = await self._login(client)

        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204

        again = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert again.status_code == 204

        refresh = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refresh.status_code == 401


class TestMe:
    """/me 엔드포인트 테스트."""

    async def test_me_requires_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code in (401, 403)

    async def test_me_returns_profile(self, client: AsyncClient, author_token):
        res = await client.get(f"{AUTH}/me", headers=auth_header(author_token))
        assert res.status_code == 200
        data = res.json()
        assert data["username"] == "author"
        assert data["role"] == "author"
        assert "password_hash" not in data

    async def test_me_inactive_user_rejected(self, client: AsyncClient, db, author_user, author_token):
        author_user.status = "inactive"
        await db.flush()

        res = await client.get(f"{AUTH}/me", headers=auth_header(author_token))
        assert res.status_code == 401
