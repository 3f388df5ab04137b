"""Tests for email verification and password reset endpoints."""

from datetime import timedelta

import pytest
from sqlalchemy import update

from app.models.verification_token import VerificationToken
from app.utils.helpers import utcnow
from tests.conftest import PASSWORD, bearer


class TestEmailVerificationFlow:

    @pytest.mark.asyncio
    async def test_full_flow(self, client, register_user, email_outbox):
        await register_user()

        response = await client.post("/api/auth/create-verification-token", json={"email": "student@example.com"})
        assert response.status_code == 200
        assert response.json() == {"message": "Verification email sent"}
        assert len(email_outbox.verification) == 1
        to, code = email_outbox.verification[0]
        assert to == "student@example.com"

        response = await client.post(
            "/api/auth/verify-email",
            json={"data": {"email": "student@example.com", "code": code}},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Email verified successfully", "success": True}

        status = await client.get("/api/auth/check-email-verification/student@example.com")
        assert status.json() == {"verified": True}

    @pytest.mark.asyncio
    async def test_numeric_code_accepted(self, client, register_user, email_outbox):
        await register_user()
        await client.post("/api/auth/create-verification-token", json={"email": "student@example.com"})
        _, code = email_outbox.verification[0]

        response = await client.post(
            "/api/auth/verify-email",
            json={"data": {"email": "student@example.com", "code": int(code)}},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_unknown_email_is_404(self, client, email_outbox):
        response = await client.post("/api/auth/create-verification-token", json={"email": "nobody@example.com"})
        assert response.status_code == 404
        assert email_outbox.verification == []

    @pytest.mark.asyncio
    async def test_wrong_code(self, client, register_user, email_outbox):
        await register_user()
        await client.post("/api/auth/create-verification-token", json={"email": "student@example.com"})
        _, code = email_outbox.verification[0]
        wrong = "100000" if code != "100000" else "100001"

        response = await client.post(
            "/api/auth/verify-email",
            json={"data": {"email": "student@example.com", "code": wrong}},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid code"}

    @pytest.mark.asyncio
    async def test_expired_code(self, client, session_factory, register_user, email_outbox):
        await register_user()
        await client.post("/api/auth/create-verification-token", json={"email": "student@example.com"})
        _, code = email_outbox.verification[0]
        async with session_factory() as session:
            await session.execute(update(VerificationToken).values(expires_at=utcnow() - timedelta(minutes=1)))
            await session.commit()

        response = await client.post(
            "/api/auth/verify-email",
            json={"data": {"email": "student@example.com", "code": code}},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Code has expired"}

    @pytest.mark.asyncio
    async def test_missing_data_is_400(self, client):
        response = await client.post("/api/auth/verify-email", json={"email": "student@example.com"})
        assert response.status_code == 400


class TestPasswordResetFlow:

    @pytest.mark.asyncio
    async def test_request_answer_does_not_reveal_accounts(self, client, register_user, email_outbox):
        await register_user()

        known = await client.post("/api/auth/request-password-reset", json={"email": "student@example.com"})
        unknown = await client.post("/api/auth/request-password-reset", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert [to for to, _ in email_outbox.password_reset] == ["student@example.com"]

    @pytest.mark.asyncio
    async def test_reset_password_flow(self, client, register_user, email_outbox):
        tokens = await register_user()
        await client.post("/api/auth/request-password-reset", json={"email": "student@example.com"})
        _, code = email_outbox.password_reset[0]

        response = await client.post(
            "/api/auth/reset-password",
            json={"email": "student@example.com", "code": code, "newPassword": "N3w!password"},
        )
        assert response.status_code == 200

        old_login = await client.post("/api/auth/login", json={"email": "student@example.com", "password": PASSWORD})
        new_login = await client.post(
            "/api/auth/login", json={"email": "student@example.com", "password": "N3w!password"}
        )
        assert old_login.status_code == 401
        assert new_login.status_code == 200

        # Sessions from before the reset are gone
        refused = await client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert refused.status_code == 401
        # Access tokens stay valid until they expire
        profile = await client.get("/api/auth/profile", headers=bearer(tokens["accessToken"]))
        assert profile.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_with_bad_code(self, client, register_user):
        await register_user()
        response = await client.post(
            "/api/auth/reset-password",
            json={"email": "student@example.com", "code": "123456", "newPassword": "N3w!password"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_reset_rejects_weak_password(self, client, register_user):
        await register_user()
        response = await client.post(
            "/api/auth/reset-password",
            json={"email": "student@example.com", "code": "123456", "newPassword": "weak"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"
