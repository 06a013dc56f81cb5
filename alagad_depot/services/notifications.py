# alagad_depot/services/notifications.py
import uuid
from datetime import timezone
from typing import Any, Callable, Iterable, List, Optional

from alagad_depot.core.clock import Clock, as_utc, utc_now
from alagad_depot.core.events import DONATION_UPDATE, NEW_DONATION, EventBus
from alagad_depot.schemas import DonationRecord, Notification

TODAY_PREFIX = "notification-today-"

def notification_for(donation: DonationRecord) -> Notification:
    if donation.status == "completed":
        kind, title = "completion", "Donation Completed"
        message = f"The donation to {donation.organization or 'Unknown'} has been completed."
    elif donation.status == "urgent":
        kind, title = "logistics", "Urgent Donation Need"
        message = f"Urgent need: {donation.title or 'Unknown'} requires immediate attention."
    else:
        kind, title = "match", "New Donation Available"
        message = f"A new donation opportunity is available: {donation.title or 'Unknown'}"
    return Notification(
        id=f"notification-{uuid.uuid4().hex[:12]}",
        type=kind,
        title=title,
        message=message,
        timestamp=donation.date,
        donation_id=donation.id,
    )

class NotificationFeed:
    """
    Listens on the event bus and keeps the newest `limit` notifications.
    Donations owned by `user_id` are skipped.
    """

    def __init__(self, bus: EventBus, user_id: Optional[str] = None, limit: int = 50):
        self.bus = bus
        self.user_id = user_id
        self.limit = limit
        self.items: List[Notification] = []
        self._unsubscribe: List[Callable[[], None]] = []

    def attach(self) -> None:
        if self._unsubscribe:
            return
        for topic in (NEW_DONATION, DONATION_UPDATE):
            self._unsubscribe.append(self.bus.subscribe(topic, self._on_donation))

    def detach(self) -> None:
        for unsub in self._unsubscribe:
            unsub()
        self._unsubscribe = []

    def _on_donation(self, topic: str, payload: Any) -> None:
        if not isinstance(payload, DonationRecord):
            return
        if self._owns(payload):
            return
        self.push(notification_for(payload))

    def _owns(self, donation: DonationRecord) -> bool:
        return self.user_id is not None and donation.user_id == self.user_id

    def seed_today(self, donations: Iterable[DonationRecord], clock: Clock = utc_now) -> int:
        """One "New Donation Today" entry per listing dated today (UTC). Already seeded ids are skipped."""
        today = as_utc(clock()).date()
        seen = {n.id for n in self.items}
        added = 0
        for d in donations:
            nid = f"{TODAY_PREFIX}{d.id}"
            if nid in seen or self._owns(d) or d.date.astimezone(timezone.utc).date() != today:
                continue
            self.push(Notification(
                id=nid,
                type="match",
                title="New Donation Today",
                message=f"A new donation was created today: {d.title}",
                timestamp=d.date,
                donation_id=d.id,
            ))
            added += 1
        return added

    def push(self, notification: Notification) -> Notification:
        self.items.insert(0, notification)
        del self.items[self.limit:]
        return notification

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.items if not n.read)

    def mark_read(self, notification_id: str) -> bool:
        for n in self.items:
            if n.id == notification_id:
                n.read = True
                return True
        return False

    def mark_all_read(self) -> int:
        changed = 0
        for n in self.items:
            if not n.read:
                n.read = True
                changed += 1
        return changed
