from datetime import datetime, timedelta, timezone

import httpx
import pytest
from asgi_lifespan import LifespanManager
from httpx import AsyncClient

from alagad_depot import deps
from alagad_depot.core.cache import TTLCache
from alagad_depot.core.clock import fixed_clock
from alagad_depot.core.config import Settings
from alagad_depot.core.events import NEW_DONATION
from alagad_depot.core.geocode import ReverseGeocoder
from alagad_depot.main import app
from alagad_depot.repos.inmemory import DonationStore
from alagad_depot.services.catalog import CACHE_KEY, PartnerCatalog
from alagad_depot.services.notifications import NotificationFeed

pytestmark = pytest.mark.anyio

async def test_health(test_client: AsyncClient):
    r = await test_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

async def test_list_and_filter_donations(test_client: AsyncClient):
    r = await test_client.get("/api/donations")
    assert r.status_code == 200, r.text
    assert len(r.json()) == 6

    r = await test_client.get("/api/donations", params={"category": "disaster"})
    assert [d["id"] for d in r.json()] == ["PH-DON-001", "PH-DON-006"]

    r = await test_client.get("/api/donations", params={"q": "palawan", "category": "all"})
    assert [d["id"] for d in r.json()] == ["PH-DON-003"]

async def test_get_unknown_donation_404(test_client: AsyncClient):
    r = await test_client.get("/api/donations/nope")
    assert r.status_code == 404

async def test_submit_validates_category(test_client: AsyncClient):
    r = await test_client.post("/api/donations", json={"title": "Rockets", "category": "spaceships"})
    assert r.status_code == 422

async def test_submit_update_delete_flow(test_client: AsyncClient):
    r = await test_client.post("/api/donations", json={
        "title": "Canned goods", "category": "food", "user_id": "u1",
        "organization": "Barangay 12", "latitude": 14.60, "longitude": 121.00,
    })
    assert r.status_code == 201, r.text
    did = r.json()["id"]

    mine = await test_client.get("/api/users/u1/donations")
    assert [d["id"] for d in mine.json()] == [did]

    r = await test_client.patch(f"/api/donations/{did}/status", json={"user_id": "u2", "status": "completed"})
    assert r.status_code == 403
    r = await test_client.patch(f"/api/donations/{did}/status", json={"user_id": "u1", "status": "urgent"})
    assert r.status_code == 200
    assert r.json()["status"] == "urgent"

    r = await test_client.patch(f"/api/donations/{did}/status", json={"user_id": "u1", "status": "lost"})
    assert r.status_code == 422

    r = await test_client.delete(f"/api/donations/{did}", params={"user_id": "u2"})
    assert r.status_code == 403
    r = await test_client.delete(f"/api/donations/{did}", params={"user_id": "u1"})
    assert r.status_code == 200
    assert (await test_client.get(f"/api/donations/{did}")).status_code == 404

async def test_timeline_for_urgent_campaign(test_client: AsyncClient):
    # PH-DON-006 is urgent and listed Aug 10, well past the 30h arrangement mark
    r = await test_client.get("/api/donations/PH-DON-006/timeline")
    assert r.status_code == 200, r.text
    body = r.json()
    assert [e["stage"] for e in body["events"]] == ["listed", "matched", "urgent", "arranged"]
    assert body["current_stage"] == "arranged"
    assert body["progress"] == 75
    assert body["listing_progress"] == 66

async def test_timeline_unknown_404(test_client: AsyncClient):
    assert (await test_client.get("/api/donations/nope/timeline")).status_code == 404

async def test_matches_for_recipient(test_client: AsyncClient):
    r = await test_client.post("/api/matching/recipient", json={
        "user_id": "r1", "categories": ["disaster"], "urgency": "high", "location_scope": "worldwide",
    })
    assert r.status_code == 200, r.text
    got = [(m["donation_id"], m["score"]) for m in r.json()]
    # PH-DON-006: 30 + 25 + 1 (6.5 days old); PH-DON-001: 30 + 16 (1.5 days old)
    assert got == [("PH-DON-006", 56), ("PH-DON-001", 46)]
    assert all(m["recipient_id"] == "r1" for m in r.json())

async def test_community_scope_near_manila(test_client: AsyncClient):
    r = await test_client.post("/api/matching/recipient", json={
        "user_id": "r1", "categories": ["food"], "location_scope": "community",
        "location": {"latitude": 14.5995, "longitude": 120.9842},
    })
    assert r.status_code == 200, r.text
    assert [m["donation_id"] for m in r.json()] == ["PH-DON-004"]
    assert r.json()[0]["match_reason"] == ["Category match: food", "Location proximity: 0km away"]

async def test_empty_categories_rejected(test_client: AsyncClient):
    r = await test_client.post("/api/matching/recipient", json={"user_id": "r1", "categories": []})
    assert r.status_code == 422

async def test_recipients_for_donation(test_client: AsyncClient):
    for body in (
        {"user_id": "r1", "categories": ["disaster"], "urgency": "high"},
        {"user_id": "r2", "categories": ["disaster"]},
        {"user_id": "r3", "categories": ["disaster"], "urgency": "high",
         "location": {"latitude": 14.0021, "longitude": 120.9934}},
    ):
        assert (await test_client.put("/api/matching/needs", json=body)).status_code == 200

    r = await test_client.get("/api/matching/donation/PH-DON-006")
    assert r.status_code == 200, r.text
    assert [(m["recipient_id"], m["score"]) for m in r.json()] == [("r3", 80), ("r1", 55)]

    r = await test_client.get("/api/matching/donation/nonexistent-id")
    assert r.status_code == 200
    assert r.json() == []

async def test_notifications_follow_submissions(test_client: AsyncClient):
    await test_client.post("/api/donations", json={"title": "Tents", "category": "disaster", "status": "urgent"})
    r = await test_client.get("/api/notifications")
    body = r.json()
    assert body["unread"] == 1
    assert body["items"][0]["title"] == "Urgent Donation Need"

    nid = body["items"][0]["id"]
    assert (await test_client.post(f"/api/notifications/{nid}/read")).json() == {"ok": True, "unread": 0}
    assert (await test_client.post("/api/notifications/missing/read")).status_code == 404
    assert (await test_client.post("/api/notifications/read-all")).json()["marked"] == 0

async def test_reverse_geocode_endpoint(test_client: AsyncClient):
    def handler(request):
        return httpx.Response(200, json={"display_name": "Legazpi, Albay"})

    app.dependency_overrides[deps.get_geocoder] = lambda: ReverseGeocoder(
        Settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))
    r = await test_client.get("/api/geo/reverse", params={"lat": 13.1391, "lng": 123.7438})
    assert r.status_code == 200, r.text
    assert r.json() == {"latitude": 13.1391, "longitude": 123.7438, "display_name": "Legazpi, Albay"}

    r = await test_client.get("/api/geo/reverse", params={"lat": 95, "lng": 0})
    assert r.status_code == 422

async def test_lifespan_starts_the_overridden_store_and_feed(bus):
    # PH-DON-001 is listed on Aug 15, 2023
    clock = fixed_clock(datetime(2023, 8, 15, 15, 0, tzinfo=timezone.utc))
    store = DonationStore(PartnerCatalog(TTLCache(timedelta(hours=24), clock)), bus, clock)
    feed = NotificationFeed(bus)
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_feed] = lambda: feed
    app.dependency_overrides[deps.get_clock] = lambda: clock
    try:
        async with LifespanManager(app):
            assert store.catalog.cache.is_fresh(CACHE_KEY)
            assert bus.subscribers(NEW_DONATION) == 1
            assert [n.id for n in feed.items] == ["notification-today-PH-DON-001"]
    finally:
        app.dependency_overrides.clear()
    assert bus.subscribers(NEW_DONATION) == 0
