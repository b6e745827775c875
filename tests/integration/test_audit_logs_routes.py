"""Integration tests for the audit log endpoint."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.services.audit import AuditRecorder
from src.infrastructure.db.models import AuditAction, UserModel

from tests.utils import headers_for


@pytest.fixture()
async def audit_trail(db: AsyncSession, admin: UserModel) -> None:
    recorder = AuditRecorder(db)
    for index in range(3):
        await recorder.record(
            actor_id=admin.id,
            action=AuditAction.COMMISSION_CREATED,
            entity_type="Commission",
            entity_id=f"commission-{index}",
            metadata={"amount": 100.0 * (index + 1)},
        )
    await recorder.record(
        actor_id=admin.id,
        action=AuditAction.GOAL_CREATED,
        entity_type="Goal",
        entity_id="goal-1",
    )


class TestAuditLogs:
    """Tests for GET /audit-logs."""

    @pytest.mark.asyncio
    async def test_newest_first_with_actor(
        self, async_client: AsyncClient, admin: UserModel, audit_trail: None
    ) -> None:
        response = await async_client.get("/audit-logs", headers=headers_for(admin))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [entry["entityId"] for entry in data] == [
            "goal-1",
            "commission-2",
            "commission-1",
            "commission-0",
        ]
        assert data[1]["metadata"] == {"amount": 300.0}
        assert data[1]["actor"] == {
            "firstName": "Adam",
            "lastName": "Admin",
            "email": "admin@example.com",
        }

    @pytest.mark.asyncio
    async def test_filter_and_limit(
        self, async_client: AsyncClient, admin: UserModel, audit_trail: None
    ) -> None:
        response = await async_client.get(
            "/audit-logs",
            params={"action": "COMMISSION_CREATED", "limit": 2},
            headers=headers_for(admin),
        )

        data = response.json()
        assert [entry["entityId"] for entry in data] == ["commission-2", "commission-1"]
        assert {entry["action"] for entry in data} == {"COMMISSION_CREATED"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"action": "LOGIN"}, {"limit": 0}, {"limit": "many"}])
    async def test_bad_query_is_rejected(
        self, async_client: AsyncClient, admin: UserModel, params: dict
    ) -> None:
        response = await async_client.get("/audit-logs", params=params, headers=headers_for(admin))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_superadmin_may_read(
        self, async_client: AsyncClient, superadmin: UserModel
    ) -> None:
        response = await async_client.get("/audit-logs", headers=headers_for(superadmin))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []
