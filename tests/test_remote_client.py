import httpx
import pytest

from signoff.client.remote import RemoteCollection, auth_headers, fetch_role
from signoff.client.seed import build_seed_events
from signoff.client.sync import ASSETS_DESCRIPTOR, EVENTS_DESCRIPTOR


class TestRemoteCollection:
    @pytest.mark.asyncio
    async def test_fetch_unwraps_and_normalizes(self, fake_api):
        fake_api.collections["/api/events"] = [
            {"id": "e1", "name": "Pride", "start_date": "2025-06-01", "total_target": 90, "tier": 1},
            {"id": "bad"},
        ]
        async with fake_api.client() as http:
            events = await RemoteCollection(http, EVENTS_DESCRIPTOR).fetch("test-token")
        assert [event.id for event in events] == ["e1"]

    @pytest.mark.asyncio
    async def test_fetch_failure_is_none(self, fake_api):
        fake_api.fail("GET", "/api/assets")
        async with fake_api.client() as http:
            remote = RemoteCollection(http, ASSETS_DESCRIPTOR)
            assert await remote.fetch("test-token") is None
            assert await remote.fetch("wrong-token") is None

    @pytest.mark.asyncio
    async def test_fetch_transport_error_is_none(self):
        async def handler(request):
            raise httpx.ConnectError("offline", request=request)

        async with httpx.AsyncClient(
            base_url="http://signoff.test", transport=httpx.MockTransport(handler)
        ) as http:
            assert await RemoteCollection(http, ASSETS_DESCRIPTOR).fetch("t") is None

    @pytest.mark.asyncio
    async def test_save_posts_envelope(self, fake_api):
        events = build_seed_events()[:2]
        async with fake_api.client() as http:
            assert await RemoteCollection(http, EVENTS_DESCRIPTOR).save(events, "test-token")
        [body] = fake_api.posted("/api/events")
        assert [row["id"] for row in body["events"]] == [event.id for event in events]
        assert body["events"][0]["totalTarget"] == events[0].total_target

    @pytest.mark.asyncio
    async def test_save_empty_is_noop(self, fake_api):
        async with fake_api.client() as http:
            assert await RemoteCollection(http, EVENTS_DESCRIPTOR).save([], "test-token")
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_delete_one(self, fake_api):
        fake_api.collections["/api/assets"] = [{"id": "a 1"}]
        async with fake_api.client() as http:
            remote = RemoteCollection(http, ASSETS_DESCRIPTOR)
            assert await remote.delete_one("a 1", "test-token")
            fake_api.fail("DELETE", "/api/assets")
            assert not await remote.delete_one("a 1", "test-token")
        assert fake_api.collections["/api/assets"] == []


class TestFetchRole:
    @pytest.mark.asyncio
    async def test_role(self, fake_api):
        fake_api.role = {"role": "reviewer", "locked": True}
        async with fake_api.client() as http:
            role = await fetch_role(http, "test-token")
        assert role.role == "reviewer"
        assert role.locked is True

    @pytest.mark.asyncio
    async def test_invalid_role_is_none(self, fake_api):
        fake_api.role = {"role": "admin"}
        async with fake_api.client() as http:
            assert await fetch_role(http, "test-token") is None

    def test_auth_headers(self):
        assert auth_headers("") == {}
        assert auth_headers("t") == {"Authorization": "Bearer t"}
