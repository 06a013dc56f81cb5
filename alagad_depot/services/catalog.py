# alagad_depot/services/catalog.py
import logging
from datetime import timedelta
from typing import Callable, List, Optional

from alagad_depot.core.cache import TTLCache
from alagad_depot.core.clock import Clock, utc_now
from alagad_depot.schemas import DonationRecord

log = logging.getLogger(__name__)

CACHE_KEY = "partner-campaigns"

# Static stand-in for campaigns collected from partner NGO sites.
PARTNER_CAMPAIGNS = [
    {
        "id": "PH-DON-001",
        "title": "Typhoon Relief for Bicol Region",
        "description": "Support families affected by the recent typhoon in Bicol Region. "
                       "Donations will provide food, clean water, and temporary shelter.",
        "category": "disaster",
        "source": "Philippine Red Cross",
        "source_url": "https://redcross.org.ph/",
        "organization": "Philippine Red Cross",
        "contact_info": "donations@redcross.org.ph | (02) 8790-2300",
        "donation_link": "https://redcross.org.ph/donate/",
        "date": "Aug 15, 2023",
        "status": "active",
        "latitude": 13.1391,
        "longitude": 123.7438,
    },
    {
        "id": "PH-DON-002",
        "title": "School Supplies for Children in Mindanao",
        "description": "Help provide school supplies for underprivileged children in remote "
                       "areas of Mindanao to support their education.",
        "category": "education",
        "source": "DepEd Brigada Eskwela",
        "source_url": "https://www.deped.gov.ph/",
        "organization": "Department of Education",
        "contact_info": "brigada.eskwela@deped.gov.ph | (02) 8636-1663",
        "donation_link": "https://www.deped.gov.ph/brigada-eskwela/",
        "date": "Jun 5, 2023",
        "status": "active",
    },
    {
        "id": "PH-DON-003",
        "title": "Medical Mission in Palawan",
        "description": "Support a medical mission providing free healthcare services to "
                       "indigenous communities in Palawan.",
        "category": "healthcare",
        "source": "Philippine Medical Association",
        "source_url": "https://www.philippinemedicalassociation.org/",
        "organization": "Philippine Medical Association",
        "contact_info": "info@philippinemedicalassociation.org | (02) 8635-0247",
        "donation_link": "https://www.philippinemedicalassociation.org/donate/",
        "date": "Jul 20, 2023",
        "status": "urgent",
        "latitude": 9.7392,
        "longitude": 118.7353,
    },
    {
        "id": "PH-DON-004",
        "title": "Food Bank for Manila's Urban Poor",
        "description": "Help stock a food bank serving Manila's urban poor communities with "
                       "nutritious meals and essential groceries.",
        "category": "food",
        "source": "Caritas Manila",
        "source_url": "https://caritasmanila.org.ph/",
        "organization": "Caritas Manila",
        "contact_info": "admin@caritasmanila.org.ph | (02) 8562-0020",
        "donation_link": "https://caritasmanila.org.ph/donate-now/",
        "date": "Aug 2, 2023",
        "status": "active",
        "latitude": 14.5995,
        "longitude": 120.9842,
    },
    {
        "id": "PH-DON-005",
        "title": "Rebuilding Homes in Marawi",
        "description": "Support the ongoing efforts to rebuild homes for displaced families "
                       "in Marawi City following the conflict.",
        "category": "housing",
        "source": "Habitat for Humanity Philippines",
        "source_url": "https://habitat.org.ph/",
        "organization": "Habitat for Humanity Philippines",
        "contact_info": "info@habitat.org.ph | (02) 8846-2177",
        "donation_link": "https://habitat.org.ph/donate/",
        "date": "May 15, 2023",
        "status": "active",
    },
    {
        "id": "PH-DON-006",
        "title": "Emergency Response for Taal Volcano Evacuees",
        "description": "Provide emergency supplies and support for families evacuated due to "
                       "Taal Volcano activity.",
        "category": "disaster",
        "source": "DSWD",
        "source_url": "https://www.dswd.gov.ph/",
        "organization": "Department of Social Welfare and Development",
        "contact_info": "inquiry@dswd.gov.ph | (02) 8931-8101",
        "donation_link": "https://www.dswd.gov.ph/donations",
        "date": "Aug 10, 2023",
        "status": "urgent",
        "latitude": 14.0021,
        "longitude": 120.9934,
    },
]

def load_partner_campaigns() -> List[dict]:
    return [dict(c) for c in PARTNER_CAMPAIGNS]

class PartnerCatalog:
    """Partner campaigns behind a TTL cache (24h by default)."""

    def __init__(self, cache: Optional[TTLCache] = None,
                 source: Callable[[], List[dict]] = load_partner_campaigns,
                 clock: Clock = utc_now):
        self.cache = cache or TTLCache(timedelta(hours=24), clock)
        self._source = source

    async def fetch(self) -> List[DonationRecord]:
        cached = self.cache.get(CACHE_KEY)
        if cached is not None:
            log.debug("using cached partner campaigns")
            return cached
        log.info("loading fresh partner campaigns")
        records = [DonationRecord(**raw) for raw in self._source()]
        return self.cache.set(CACHE_KEY, records)

    async def get(self, donation_id: str) -> Optional[DonationRecord]:
        for d in await self.fetch():
            if d.id == donation_id:
                return d
        return None

    async def refresh(self) -> List[DonationRecord]:
        self.cache.invalidate(CACHE_KEY)
        return await self.fetch()
