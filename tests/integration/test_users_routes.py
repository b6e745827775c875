"""Integration tests for user management endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.infrastructure.db.models import AuditAction, AuditLogModel, UserModel

from tests.utils import FakeAccountEmails, headers_for


@pytest.fixture
def new_user() -> dict:
    return {
        "email": "Nina.New@Example.com",
        "password": "Welcome123!",
        "firstName": "Nina",
        "lastName": "New",
        "role": "RECRUITER",
        "commissionRate": 12.5,
    }


class TestCreateUser:
    """Tests for POST /users."""

    @pytest.mark.asyncio
    async def test_admin_creates_user_and_welcome_email_is_sent(
        self,
        async_client: AsyncClient,
        admin: UserModel,
        mailer: FakeAccountEmails,
        new_user: dict,
    ) -> None:
        response = await async_client.post("/users", json=new_user, headers=headers_for(admin))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == "nina.new@example.com"
        assert data["role"] == "RECRUITER"
        assert data["status"] == "ACTIVE"
        assert data["commissionRate"] == 12.5
        assert "password" not in data
        assert "passwordHash" not in data

        assert len(mailer.welcomes) == 1
        assert mailer.welcomes[0].to_email == "nina.new@example.com"
        assert mailer.welcomes[0].temporary_password == "Welcome123!"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(
        self, async_client: AsyncClient, admin: UserModel, new_user: dict
    ) -> None:
        await async_client.post("/users", json=new_user, headers=headers_for(admin))
        response = await async_client.post(
            "/users",
            json={**new_user, "email": "nina.new@example.com"},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_superadmin_role_cannot_be_granted(
        self, async_client: AsyncClient, admin: UserModel, new_user: dict
    ) -> None:
        response = await async_client.post(
            "/users", json={**new_user, "role": "SUPERADMIN"}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_short_password_is_rejected(
        self, async_client: AsyncClient, admin: UserModel, new_user: dict
    ) -> None:
        response = await async_client.post(
            "/users", json={**new_user, "password": "short"}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_superadmin_cannot_manage_user_list(
        self, async_client: AsyncClient, superadmin: UserModel, new_user: dict
    ) -> None:
        listing = await async_client.get("/users", headers=headers_for(superadmin))
        creation = await async_client.post(
            "/users", json=new_user, headers=headers_for(superadmin)
        )

        assert listing.status_code == status.HTTP_403_FORBIDDEN
        assert creation.status_code == status.HTTP_403_FORBIDDEN


class TestReadUsers:
    """Tests for GET /users and GET /users/{id}."""

    @pytest.mark.asyncio
    async def test_admin_lists_live_users(
        self, async_client: AsyncClient, admin: UserModel, recruiter: UserModel
    ) -> None:
        response = await async_client.get("/users", headers=headers_for(admin))

        assert response.status_code == status.HTTP_200_OK
        assert {user["id"] for user in response.json()} == {admin.id, recruiter.id}

    @pytest.mark.asyncio
    async def test_recruiter_reads_own_profile_only(
        self, async_client: AsyncClient, admin: UserModel, recruiter: UserModel
    ) -> None:
        own = await async_client.get(f"/users/{recruiter.id}", headers=headers_for(recruiter))
        other = await async_client.get(f"/users/{admin.id}", headers=headers_for(recruiter))

        assert own.status_code == status.HTTP_200_OK
        assert own.json()["email"] == recruiter.email
        assert other.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_missing_user_is_not_found(
        self, async_client: AsyncClient, admin: UserModel
    ) -> None:
        response = await async_client.get("/users/does-not-exist", headers=headers_for(admin))

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUpdateUser:
    """Tests for PATCH /users/{id}."""

    @pytest.mark.asyncio
    async def test_status_change_is_audited(
        self,
        async_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        admin: UserModel,
        recruiter: UserModel,
    ) -> None:
        response = await async_client.patch(
            f"/users/{recruiter.id}",
            json={"status": "INACTIVE", "firstName": "Rita B."},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "INACTIVE"
        assert response.json()["firstName"] == "Rita B."

        async with session_factory() as check:
            log = await check.scalar(select(AuditLogModel))
        assert log is not None
        assert log.action is AuditAction.USER_STATUS_CHANGED
        assert log.actor_id == admin.id
        assert log.metadata_ == {"oldStatus": "ACTIVE", "newStatus": "INACTIVE"}

    @pytest.mark.asyncio
    async def test_update_without_status_change_is_not_audited(
        self,
        async_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        admin: UserModel,
        recruiter: UserModel,
    ) -> None:
        response = await async_client.patch(
            f"/users/{recruiter.id}", json={"status": "ACTIVE"}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_200_OK
        async with session_factory() as check:
            assert await check.scalar(select(AuditLogModel)) is None

    @pytest.mark.asyncio
    async def test_commission_rate_null_clears_and_omission_keeps(
        self, async_client: AsyncClient, admin: UserModel, recruiter: UserModel
    ) -> None:
        kept = await async_client.patch(
            f"/users/{recruiter.id}", json={"lastName": "Renamed"}, headers=headers_for(admin)
        )
        cleared = await async_client.patch(
            f"/users/{recruiter.id}", json={"commissionRate": None}, headers=headers_for(admin)
        )

        assert kept.json()["commissionRate"] == 100
        assert cleared.json()["commissionRate"] is None

    @pytest.mark.asyncio
    async def test_email_taken_by_other_user_conflicts(
        self, async_client: AsyncClient, admin: UserModel, recruiter: UserModel
    ) -> None:
        response = await async_client.patch(
            f"/users/{recruiter.id}", json={"email": admin.email}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_recruiter_cannot_update(
        self, async_client: AsyncClient, recruiter: UserModel
    ) -> None:
        response = await async_client.patch(
            f"/users/{recruiter.id}", json={"commissionRate": 99}, headers=headers_for(recruiter)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestDeleteUser:
    """Tests for DELETE /users/{id}."""

    @pytest.mark.asyncio
    async def test_superadmin_soft_deletes_user(
        self,
        async_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        superadmin: UserModel,
        recruiter: UserModel,
    ) -> None:
        response = await async_client.delete(
            f"/users/{recruiter.id}", headers=headers_for(superadmin)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}

        async with session_factory() as check:
            row = await check.get(UserModel, recruiter.id)
        assert row is not None
        assert row.deleted_at is not None
        assert row.status.value == "INACTIVE"

        login = await async_client.post(
            "/auth/login", json={"email": recruiter.email, "password": "Password123!"}
        )
        assert login.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_self_delete_is_rejected(
        self, async_client: AsyncClient, superadmin: UserModel
    ) -> None:
        response = await async_client.delete(
            f"/users/{superadmin.id}", headers=headers_for(superadmin)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_admin_cannot_delete(
        self, async_client: AsyncClient, admin: UserModel, recruiter: UserModel
    ) -> None:
        response = await async_client.delete(f"/users/{recruiter.id}", headers=headers_for(admin))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_missing_user_is_not_found(
        self, async_client: AsyncClient, superadmin: UserModel
    ) -> None:
        response = await async_client.delete("/users/missing", headers=headers_for(superadmin))

        assert response.status_code == status.HTTP_404_NOT_FOUND
