# tests/conftest.py
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from alagad_depot import deps
from alagad_depot.core.cache import TTLCache
from alagad_depot.core.clock import fixed_clock
from alagad_depot.core.events import EventBus
from alagad_depot.main import app
from alagad_depot.repos.inmemory import DonationStore, NeedsStore
from alagad_depot.services.catalog import PartnerCatalog
from alagad_depot.services.notifications import NotificationFeed

# a day after the newest partner campaign (Aug 15, 2023)
NOW = datetime(2023, 8, 16, 12, 0, tzinfo=timezone.utc)

class MovableClock:
    def __init__(self, at: datetime = NOW):
        self.at = at

    def __call__(self) -> datetime:
        return self.at

    def advance(self, **kwargs):
        self.at = self.at + timedelta(**kwargs)

@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"

@pytest.fixture
def now():
    return NOW

@pytest.fixture
def clock(now):
    return fixed_clock(now)

@pytest.fixture
def movable_clock(now):
    return MovableClock(now)

@pytest.fixture
def bus():
    return EventBus()

@pytest.fixture
def store(bus, clock):
    catalog = PartnerCatalog(TTLCache(timedelta(hours=24), clock))
    return DonationStore(catalog, bus, clock)

@pytest.fixture
def needs_store():
    return NeedsStore()

@pytest.fixture
def feed(bus):
    f = NotificationFeed(bus, limit=50)
    f.attach()
    yield f
    f.detach()

@pytest.fixture
async def test_client(store, needs_store, feed, clock):
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_needs_store] = lambda: needs_store
    app.dependency_overrides[deps.get_feed] = lambda: feed
    app.dependency_overrides[deps.get_clock] = lambda: clock
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app, raise_app_exceptions=True)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
    finally:
        app.dependency_overrides.clear()
