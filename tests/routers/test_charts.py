"""Tests for the chart and history endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


async def _setup(client: AsyncClient) -> tuple[dict, dict]:
    group = (await client.post("/v1/groups", json={"name": "charted"})).json()
    ids = {}
    for name in ("A", "B"):
        resp = await client.post(
            f"/v1/groups/{group['id']}/channels",
            json={"platform": "tiktok", "display_name": name},
        )
        ids[name] = resp.json()["id"]
    return group, ids


async def _push(client: AsyncClient, channel_id: str, viewers: int, ts: datetime):
    resp = await client.post(
        "/v1/samples",
        json={
            "channel_id": channel_id,
            "viewers_count": viewers,
            "is_live": True,
            "timestamp": ts.isoformat(),
        },
    )
    assert resp.status_code == 201, resp.text


# ---------------------------------------------------------------------------
# Rolling group chart
# ---------------------------------------------------------------------------


class TestGroupChart:
    @pytest.mark.asyncio
    async def test_empty_window(self, client: AsyncClient):
        group, _ = await _setup(client)
        resp = await client.get(f"/v1/groups/{group['id']}/chart")

        assert resp.status_code == 200
        data = resp.json()
        assert data["points"] == []
        assert data["peak_total"] == 0

    @pytest.mark.asyncio
    async def test_recent_samples_bucketed(self, client: AsyncClient):
        group, ids = await _setup(client)
        minute = datetime.now(timezone.utc).replace(second=0, microsecond=0) - timedelta(minutes=5)
        await _push(client, ids["A"], 20, minute + timedelta(seconds=5))
        await _push(client, ids["A"], 35, minute + timedelta(seconds=40))
        await _push(client, ids["B"], 10, minute + timedelta(seconds=20))

        data = (await client.get(f"/v1/groups/{group['id']}/chart?range=30min")).json()

        assert len(data["points"]) == 1
        point = data["points"][0]
        assert point["per_channel"] == {"A": 35, "B": 10}
        assert point["total_viewers"] == 45
        assert data["peak_total"] == 45

    @pytest.mark.asyncio
    async def test_samples_outside_range_excluded(self, client: AsyncClient):
        group, ids = await _setup(client)
        now = datetime.now(timezone.utc)
        await _push(client, ids["A"], 1, now - timedelta(hours=2))
        await _push(client, ids["A"], 2, now - timedelta(minutes=10))

        one_hour = (await client.get(f"/v1/groups/{group['id']}/chart?range=1h")).json()
        five_hours = (await client.get(f"/v1/groups/{group['id']}/chart?range=5h")).json()

        assert len(one_hour["points"]) == 1
        assert len(five_hours["points"]) == 2

    @pytest.mark.asyncio
    async def test_dense_fills_missing_channels(self, client: AsyncClient):
        group, ids = await _setup(client)
        base = datetime.now(timezone.utc).replace(second=0, microsecond=0) - timedelta(minutes=10)
        await _push(client, ids["A"], 5, base)
        await _push(client, ids["B"], 7, base + timedelta(minutes=1))

        data = (await client.get(f"/v1/groups/{group['id']}/chart?range=1h&dense=true")).json()

        assert [p["per_channel"] for p in data["points"]] == [
            {"A": 5, "B": 0},
            {"A": 0, "B": 7},
        ]

    @pytest.mark.asyncio
    async def test_invalid_range_400(self, client: AsyncClient):
        group, _ = await _setup(client)
        resp = await client.get(f"/v1/groups/{group['id']}/chart?range=2w")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_group_404(self, client: AsyncClient):
        resp = await client.get("/v1/groups/missing/chart")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestHistory:
    @pytest.mark.asyncio
    async def test_history_between_instants(self, client: AsyncClient):
        group, ids = await _setup(client)
        start = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
        await _push(client, ids["A"], 100, start)
        await _push(client, ids["A"], 110, start + timedelta(minutes=30))
        await _push(client, ids["B"], 50, start + timedelta(minutes=30, seconds=15))
        await _push(client, ids["A"], 999, start + timedelta(hours=2))

        resp = await client.get(
            "/v1/history",
            params={
                "start": start.isoformat(),
                "end": (start + timedelta(hours=1)).isoformat(),
                "group_id": group["id"],
            },
        )

        assert resp.status_code == 200
        data = resp.json()
        # The start instant is the open end of the window
        assert len(data["points"]) == 1
        assert data["points"][0]["per_channel"] == {"A": 110, "B": 50}
        assert data["peak_total"] == 160

    @pytest.mark.asyncio
    async def test_history_across_all_groups(self, client: AsyncClient):
        _, ids = await _setup(client)
        other = (await client.post("/v1/groups", json={"name": "other"})).json()
        c = (
            await client.post(
                f"/v1/groups/{other['id']}/channels",
                json={"platform": "tiktok", "display_name": "C"},
            )
        ).json()
        ts = datetime(2026, 3, 1, 10, 5, tzinfo=timezone.utc)
        await _push(client, ids["A"], 1, ts)
        await _push(client, c["id"], 2, ts)

        data = (
            await client.get(
                "/v1/history",
                params={"start": "2026-03-01T10:00:00Z", "end": "2026-03-01T11:00:00Z"},
            )
        ).json()
        assert data["points"][0]["per_channel"] == {"A": 1, "C": 2}

    @pytest.mark.asyncio
    async def test_end_before_start_400(self, client: AsyncClient):
        resp = await client.get(
            "/v1/history",
            params={"start": "2026-03-01T11:00:00Z", "end": "2026-03-01T10:00:00Z"},
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_start_required(self, client: AsyncClient):
        resp = await client.get("/v1/history")
        assert resp.status_code == 422
