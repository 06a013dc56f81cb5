# alagad_depot/repos/inmemory.py
import logging
import uuid
from typing import Dict, List, Optional

from alagad_depot.core.clock import Clock, utc_now
from alagad_depot.core.events import (
    DONATION_DELETED, DONATION_UPDATE, DONATIONS_FETCHED, NEW_DONATION, EventBus,
)
from alagad_depot.schemas import USER_SOURCE, DonationIn, DonationRecord, RecipientNeeds
from alagad_depot.services.catalog import PartnerCatalog

log = logging.getLogger(__name__)

class DonationStore:
    """
    Partner campaigns plus donations submitted through the app, kept in memory.
    Owner-checked writes return None/False instead of raising.
    """

    def __init__(self, catalog: PartnerCatalog, bus: EventBus, clock: Clock = utc_now):
        self.catalog = catalog
        self.bus = bus
        self._clock = clock
        self.user_donations: Dict[str, DonationRecord] = {}

    def _new_id(self) -> str:
        did = f"DON-{int(self._clock().timestamp() * 1000)}"
        if did in self.user_donations:
            did = f"{did}-{uuid.uuid4().hex[:6]}"
        return did

    # Reads
    async def list_donations(self) -> List[DonationRecord]:
        out = list(await self.catalog.fetch()) + list(self.user_donations.values())
        self.bus.emit(DONATIONS_FETCHED, {"count": len(out)})
        return out

    async def get_donation(self, donation_id: str) -> Optional[DonationRecord]:
        found = await self.catalog.get(donation_id)
        if found is not None:
            return found
        return self.user_donations.get(donation_id)

    async def search(self, keyword: str) -> List[DonationRecord]:
        kw = (keyword or "").strip().lower()
        return [
            d for d in await self.list_donations()
            if kw in d.title.lower() or kw in d.description.lower() or kw in d.organization.lower()
        ]

    async def by_category(self, category: str) -> List[DonationRecord]:
        return [d for d in await self.list_donations() if d.category == category]

    async def list_user_donations(self, user_id: str) -> List[DonationRecord]:
        return [
            d for d in self.user_donations.values()
            if d.user_id == user_id and d.source == USER_SOURCE
        ]

    # Writes
    async def submit_donation(self, payload: DonationIn) -> DonationRecord:
        """
        Only donations with an owner are kept; anonymous ones are broadcast
        on `new-donation` and handed back, nothing more.
        """
        data = payload.model_dump()
        data["id"] = data.get("id") or self._new_id()
        data["date"] = data.get("date") or self._clock()
        data["source"] = USER_SOURCE if data.get("user_id") else "Anonymous"
        doc = DonationRecord(**data)
        if doc.user_id:
            self.user_donations[doc.id] = doc
        log.info("donation %s submitted by %s", doc.id, doc.user_id or "anonymous")
        self.bus.emit(NEW_DONATION, doc)
        return doc

    def _owned(self, donation_id: str, user_id: str) -> Optional[DonationRecord]:
        doc = self.user_donations.get(donation_id)
        if doc is None or doc.user_id != user_id:
            log.warning("donation %s not found or not owned by %s", donation_id, user_id)
            return None
        return doc

    async def update_user_donation_status(self, donation_id: str, user_id: str,
                                          status: str) -> Optional[DonationRecord]:
        doc = self._owned(donation_id, user_id)
        if doc is None:
            return None
        doc = doc.model_copy(update={"status": status})
        self.user_donations[donation_id] = doc
        self.bus.emit(DONATION_UPDATE, doc)
        return doc

    async def delete_user_donation(self, donation_id: str, user_id: str) -> bool:
        if self._owned(donation_id, user_id) is None:
            return False
        del self.user_donations[donation_id]
        self.bus.emit(DONATION_DELETED, {"id": donation_id, "action": "deleted"})
        return True

    async def refresh(self) -> List[DonationRecord]:
        await self.catalog.refresh()
        return await self.list_donations()

class NeedsStore:
    """Latest stated needs per recipient, used for donation -> recipients matching."""

    def __init__(self):
        self.needs: Dict[str, RecipientNeeds] = {}

    async def save(self, needs: RecipientNeeds) -> RecipientNeeds:
        self.needs[needs.user_id] = needs
        return needs

    async def get(self, user_id: str) -> Optional[RecipientNeeds]:
        return self.needs.get(user_id)

    async def list(self) -> List[RecipientNeeds]:
        return list(self.needs.values())
