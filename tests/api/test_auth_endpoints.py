"""Tests for /api/auth endpoints."""

import asyncio

import pytest
from sqlalchemy import select

from app.config import settings
from app.core.exceptions import InvalidTokenError
from app.core.security import token_service
from app.models.account import Account
from app.models.user import User
from app.models.user_session import UserSession
from app.repositories import UserRepository
from tests.conftest import PASSWORD, bearer


async def _sessions_for(session_factory, email):
    async with session_factory() as session:
        user = (await session.execute(select(User).where(User.email == email))).scalars().one()
        result = await session.execute(select(UserSession).where(UserSession.user_id == user.id))
        return result.scalars().all()


# ============================================================================
# Register
# ============================================================================


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_returns_user_and_tokens(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "student@example.com", "password": PASSWORD, "name": "Asha"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["email"] == "student@example.com"
        assert data["user"]["role"] == "student"
        assert data["user"]["loginMethod"] == "credentials"
        assert data["accessToken"]
        assert data["refreshToken"]
        assert "passwordHash" not in data["user"]
        assert "password" not in data["user"]

    @pytest.mark.asyncio
    async def test_register_creates_session_and_credentials_account(self, client, session_factory, register_user):
        await register_user()

        assert len(await _sessions_for(session_factory, "student@example.com")) == 1
        async with session_factory() as session:
            accounts = (await session.execute(select(Account))).scalars().all()
        assert [a.provider for a in accounts] == ["credentials"]

    @pytest.mark.asyncio
    async def test_register_with_role(self, register_user):
        data = await register_user(email="hr@example.com", role="recruiter")
        assert data["user"]["role"] == "recruiter"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client, register_user):
        await register_user()

        response = await client.post(
            "/api/auth/register",
            json={"email": "student@example.com", "password": PASSWORD},
        )

        assert response.status_code == 409
        assert response.json() == {"error": "User with this email already exists"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"email": "not-an-email", "password": PASSWORD},
            {"email": "student@example.com", "password": "short1!"},
            {"email": "student@example.com", "password": "NoSpecial123"},
            {"email": "student@example.com", "password": PASSWORD, "role": "superuser"},
            {"password": PASSWORD},
        ],
    )
    async def test_invalid_input_is_400(self, client, body):
        response = await client.post("/api/auth/register", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation failed"
        assert data["details"]


# ============================================================================
# Login
# ============================================================================


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, client, register_user):
        await register_user()

        response = await client.post(
            "/api/auth/login",
            json={"email": "student@example.com", "password": PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["lastLoginAt"] is not None
        assert data["accessToken"]
        assert data["refreshToken"]

    @pytest.mark.asyncio
    async def test_each_login_adds_a_session(self, client, session_factory, register_user):
        await register_user()
        await client.post("/api/auth/login", json={"email": "student@example.com", "password": PASSWORD})

        assert len(await _sessions_for(session_factory, "student@example.com")) == 2

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, client, register_user):
        await register_user()

        wrong_password = await client.post(
            "/api/auth/login",
            json={"email": "student@example.com", "password": "Wr0ng!pass"},
        )
        unknown_email = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": PASSWORD},
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}

    @pytest.mark.asyncio
    async def test_blocked_user_cannot_login(self, client, register_user, set_user_flags):
        await register_user()
        await set_user_flags("student@example.com", is_blocked=True)

        response = await client.post(
            "/api/auth/login",
            json={"email": "student@example.com", "password": PASSWORD},
        )

        assert response.status_code == 403
        assert "blocked" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_deleted_user_cannot_login(self, client, register_user, set_user_flags):
        await register_user()
        await set_user_flags("student@example.com", is_deleted=True)

        response = await client.post(
            "/api/auth/login",
            json={"email": "student@example.com", "password": PASSWORD},
        )

        assert response.status_code == 403
        assert "deleted" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_blocked_user_with_wrong_password_gets_401(self, client, register_user, set_user_flags):
        await register_user()
        await set_user_flags("student@example.com", is_blocked=True)

        response = await client.post(
            "/api/auth/login",
            json={"email": "student@example.com", "password": "Wr0ng!pass"},
        )

        assert response.status_code == 401


# ============================================================================
# Refresh
# ============================================================================


class TestRefreshToken:

    @pytest.mark.asyncio
    async def test_refresh_rotates_session(self, client, session_factory, register_user):
        tokens = await register_user()

        response = await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Tokens refreshed successfully"
        assert data["refreshToken"] != tokens["refreshToken"]

        sessions = await _sessions_for(session_factory, "student@example.com")
        assert len(sessions) == 1
        assert sessions[0].refresh_token == data["refreshToken"]

    @pytest.mark.asyncio
    async def test_old_refresh_token_stops_working(self, client, register_user):
        tokens = await register_user()
        await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})

        response = await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})

        assert response.status_code == 401
        assert response.json() == {"error": "Refresh token not found"}

    @pytest.mark.asyncio
    async def test_new_refresh_token_works(self, client, register_user):
        tokens = await register_user()
        first = (await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})).json()

        response = await client.post("/api/auth/refresh-token", json={"refreshToken": first["refreshToken"]})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, client, register_user):
        tokens = await register_user()

        response = await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["accessToken"]})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired refresh token"}

    @pytest.mark.asyncio
    async def test_garbage_refresh_token(self, client):
        response = await client.post("/api/auth/refresh-token", json={"refreshToken": "garbage"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_refresh_token_is_400(self, client):
        response = await client.post("/api/auth/refresh-token", json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_expired_session_is_removed(self, client, session_factory, register_user):
        tokens = await register_user()
        async with session_factory() as session:
            row = (await session.execute(select(UserSession))).scalars().one()
            row.expires_at = row.expires_at.replace(year=2000)
            await session.commit()

        response = await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})

        assert response.status_code == 401
        assert response.json() == {"error": "Refresh token expired"}
        assert await _sessions_for(session_factory, "student@example.com") == []

    @pytest.mark.asyncio
    async def test_blocked_user_cannot_refresh(self, client, register_user, set_user_flags):
        tokens = await register_user()
        await set_user_flags("student@example.com", is_blocked=True)

        response = await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})

        assert response.status_code == 403


# ============================================================================
# Logout
# ============================================================================


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_removes_only_that_session(self, client, session_factory, register_user):
        first = await register_user()
        second = (
            await client.post("/api/auth/login", json={"email": "student@example.com", "password": PASSWORD})
        ).json()

        response = await client.post("/api/auth/logout", json={"refreshToken": first["refreshToken"]})

        assert response.status_code == 200
        assert response.json() == {"message": "Logout successful"}
        sessions = await _sessions_for(session_factory, "student@example.com")
        assert [s.refresh_token for s in sessions] == [second["refreshToken"]]

        refused = await client.post("/api/auth/refresh-token", json={"refreshToken": first["refreshToken"]})
        assert refused.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_unknown_token_still_succeeds(self, client):
        response = await client.post("/api/auth/logout", json={"refreshToken": "never-issued"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_logout_all_removes_every_session(self, client, session_factory, register_user):
        tokens = await register_user()
        await client.post("/api/auth/login", json={"email": "student@example.com", "password": PASSWORD})

        response = await client.post("/api/auth/logout-all", headers=bearer(tokens["accessToken"]))

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out from all devices successfully"}
        assert await _sessions_for(session_factory, "student@example.com") == []

    @pytest.mark.asyncio
    async def test_logout_all_requires_access_token(self, client):
        response = await client.post("/api/auth/logout-all")
        assert response.status_code == 401


# ============================================================================
# Profile and Email Lookups
# ============================================================================


class TestProfile:

    @pytest.mark.asyncio
    async def test_profile_returns_current_user(self, client, register_user):
        tokens = await register_user(name="Asha")

        response = await client.get("/api/auth/profile", headers=bearer(tokens["accessToken"]))

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "student@example.com"
        assert user["name"] == "Asha"
        assert "passwordHash" not in user


class TestEmailChecks:

    @pytest.mark.asyncio
    async def test_check_email(self, client, register_user):
        await register_user()

        taken = await client.get("/api/auth/check-email/student@example.com")
        free = await client.get("/api/auth/check-email/nobody@example.com")

        assert taken.json() == {"exists": True}
        assert free.json() == {"exists": False}

    @pytest.mark.asyncio
    async def test_check_email_verification_for_unknown_email(self, client):
        response = await client.get("/api/auth/check-email-verification/nobody@example.com")
        assert response.status_code == 200
        assert response.json() == {"verified": False}


class TestRegisterThenLogin:

    @pytest.mark.asyncio
    async def test_login_pair_verifies_under_distinct_secrets(self, client, register_user):
        await register_user(email="a@x.com", password="Passw0rd!")

        response = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "Passw0rd!"})

        assert response.status_code == 200
        data = response.json()
        assert token_service.verify_access_token(data["accessToken"]).email == "a@x.com"
        assert token_service.verify_refresh_token(data["refreshToken"]).email == "a@x.com"
        with pytest.raises(InvalidTokenError):
            token_service.verify_access_token(data["refreshToken"])

    @pytest.mark.asyncio
    async def test_duplicate_register_leaves_one_user(self, client, session_factory, register_user):
        await register_user()
        await client.post("/api/auth/register", json={"email": "student@example.com", "password": PASSWORD})

        async with session_factory() as session:
            users = (await session.execute(select(User).where(User.email == "student@example.com"))).scalars().all()
        assert len(users) == 1


class TestEmailChecksNormalization:

    @pytest.mark.asyncio
    async def test_lookups_match_the_stored_form(self, client, register_user):
        await register_user(email="asha@EXAMPLE.com")

        exists = await client.get("/api/auth/check-email/asha@EXAMPLE.com")
        verified = await client.get("/api/auth/check-email-verification/asha@EXAMPLE.com")
        duplicate = await client.post(
            "/api/auth/register", json={"email": "asha@EXAMPLE.com", "password": PASSWORD}
        )

        assert exists.json() == {"exists": True}
        assert verified.json() == {"verified": False}
        assert duplicate.status_code == 409

    @pytest.mark.asyncio
    async def test_unparseable_path_is_simply_unknown(self, client):
        response = await client.get("/api/auth/check-email/not-an-email")
        assert response.status_code == 200
        assert response.json() == {"exists": False}


class TestStoreDeadline:

    @pytest.mark.asyncio
    async def test_slow_store_call_is_500(self, client, monkeypatch):
        async def slow_lookup(self, email):
            return await self._bounded(asyncio.sleep(1))

        monkeypatch.setattr(settings, "DB_OPERATION_TIMEOUT_SECONDS", 0.01)
        monkeypatch.setattr(UserRepository, "get_by_email", slow_lookup)

        response = await client.get("/api/auth/check-email/student@example.com")

        assert response.status_code == 500
        assert response.json() == {"error": "Database operation timed out"}
