# alagad_depot/deps.py
from datetime import timedelta

from alagad_depot.core.cache import TTLCache
from alagad_depot.core.clock import Clock, utc_now
from alagad_depot.core.config import Settings, get_settings
from alagad_depot.core.events import EventBus
from alagad_depot.core.geocode import ReverseGeocoder
from alagad_depot.repos.inmemory import DonationStore, NeedsStore
from alagad_depot.services.catalog import PartnerCatalog
from alagad_depot.services.notifications import NotificationFeed

_settings = get_settings()
_bus = EventBus()
_catalog = PartnerCatalog(TTLCache(timedelta(hours=_settings.catalog_ttl_hours)))
_store_singleton = DonationStore(_catalog, _bus)
_needs_singleton = NeedsStore()
_feed_singleton = NotificationFeed(_bus, limit=_settings.notification_limit)
_geocoder_singleton = None

def get_config() -> Settings:
    return _settings

def get_clock() -> Clock:
    return utc_now

def get_bus() -> EventBus:
    return _bus

def get_store() -> DonationStore:
    return _store_singleton

def get_needs_store() -> NeedsStore:
    return _needs_singleton

def get_feed() -> NotificationFeed:
    return _feed_singleton

def get_geocoder() -> ReverseGeocoder:
    # created lazily so importing the app never opens an HTTP client
    global _geocoder_singleton
    if _geocoder_singleton is None:
        _geocoder_singleton = ReverseGeocoder(_settings)
    return _geocoder_singleton
