"""
Integration tests for Highlights API.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from handpicked.api.highlights import get_highlight_maintainer
from handpicked.highlights import HighlightOrderMaintainer, HighlightStore, HighlightStoreError
from tests.fixtures.factories import ChannelFactory


@pytest.mark.integration
class TestHighlightsAPI:
    """Tests for /api/highlights endpoints."""

    @pytest.mark.asyncio
    async def test_list_empty(self, async_client: AsyncClient):
        response = await async_client.get("/api/highlights")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_promote_and_list(self, async_client: AsyncClient, db: AsyncSession):
        first = await ChannelFactory.persist(db, slug="folk")
        second = await ChannelFactory.persist(db, slug="blues")

        r1 = await async_client.post(f"/api/highlights/{first.id}/promote")
        r2 = await async_client.post(f"/api/highlights/{second.id}/promote")

        assert r1.status_code == 200
        assert r1.json()["highlight_order"] == 0
        assert r2.json()["highlight_order"] == 1

        listing = (await async_client.get("/api/highlights")).json()
        assert [entry["slug"] for entry in listing] == ["folk", "blues"]
        assert [entry["highlight_order"] for entry in listing] == [0, 1]

    @pytest.mark.asyncio
    async def test_promote_twice_conflicts(self, async_client: AsyncClient, db: AsyncSession):
        channel = await ChannelFactory.persist(db)

        await async_client.post(f"/api/highlights/{channel.id}/promote")
        response = await async_client.post(f"/api/highlights/{channel.id}/promote")

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_demote_compacts(self, async_client: AsyncClient, db: AsyncSession):
        channels = await ChannelFactory.persist_highlighted(db, 4)
        ids = [c.id for c in channels]

        response = await async_client.post(f"/api/highlights/{ids[1]}/demote")

        assert response.status_code == 200
        assert response.json()["highlight_order"] is None
        listing = (await async_client.get("/api/highlights")).json()
        assert [entry["channel_id"] for entry in listing] == [ids[0], ids[2], ids[3]]
        assert [entry["highlight_order"] for entry in listing] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_demote_not_highlighted(self, async_client: AsyncClient, db: AsyncSession):
        channel = await ChannelFactory.persist(db)

        response = await async_client.post(f"/api/highlights/{channel.id}/demote")

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_move_up_and_down(self, async_client: AsyncClient, db: AsyncSession):
        channels = await ChannelFactory.persist_highlighted(db, 3)
        ids = [c.id for c in channels]

        up = await async_client.post(f"/api/highlights/{ids[2]}/move-up")
        assert up.status_code == 200
        assert up.json()["highlight_order"] == 1

        listing = (await async_client.get("/api/highlights")).json()
        assert [entry["channel_id"] for entry in listing] == [ids[0], ids[2], ids[1]]

        down = await async_client.post(f"/api/highlights/{ids[2]}/move-down")
        assert down.json()["highlight_order"] == 2

    @pytest.mark.asyncio
    async def test_move_past_boundary(self, async_client: AsyncClient, db: AsyncSession):
        channels = await ChannelFactory.persist_highlighted(db, 2)
        ids = [c.id for c in channels]

        assert (await async_client.post(f"/api/highlights/{ids[0]}/move-up")).status_code == 409
        assert (await async_client.post(f"/api/highlights/{ids[1]}/move-down")).status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_channel(self, async_client: AsyncClient):
        for action in ("promote", "demote", "move-up", "move-down"):
            response = await async_client.post(f"/api/highlights/999/{action}")
            assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_store_error_is_503(self, app: FastAPI, async_client: AsyncClient):
        store = AsyncMock(spec=HighlightStore)
        store.get_slot.side_effect = HighlightStoreError("database is locked")
        store.list_highlighted.side_effect = HighlightStoreError("database is locked")
        app.dependency_overrides[get_highlight_maintainer] = lambda: HighlightOrderMaintainer(store)

        assert (await async_client.post("/api/highlights/1/promote")).status_code == 503
        assert (await async_client.get("/api/highlights")).status_code == 503


@pytest.mark.integration
class TestHighlightCandidatesAPI:
    """Tests for /api/highlights/candidates."""

    @pytest.mark.asyncio
    async def test_candidates_exclude_highlighted_and_private(self, async_client: AsyncClient, db: AsyncSession):
        open_channel = await ChannelFactory.persist(db, slug="open", title="Open Mic")
        await ChannelFactory.persist(db, slug="hidden", title="Hidden", is_public=False)
        await ChannelFactory.persist(db, slug="star", title="Star", is_highlight=True, highlight_order=0)

        response = await async_client.get("/api/highlights/candidates")

        assert response.status_code == 200
        assert [entry["slug"] for entry in response.json()] == ["open"]

        await async_client.post(f"/api/highlights/{open_channel.id}/promote")
        assert (await async_client.get("/api/highlights/candidates")).json() == []

    @pytest.mark.asyncio
    async def test_candidates_store_error_is_503(self, app: FastAPI, async_client: AsyncClient):
        store = AsyncMock(spec=HighlightStore)
        store.list_candidates.side_effect = HighlightStoreError("database is locked")
        app.dependency_overrides[get_highlight_maintainer] = lambda: HighlightOrderMaintainer(store)

        assert (await async_client.get("/api/highlights/candidates")).status_code == 503
