# alagad_depot/core/events.py
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

log = logging.getLogger(__name__)

DONATION_UPDATE = "donation-update"
DONATION_DELETED = "donation-deleted"
NEW_DONATION = "new-donation"
DONATIONS_FETCHED = "donations-fetched"

Handler = Callable[[str, Any], None]

class EventBus:
    """In-process observer registry. Handlers run synchronously, in subscription order."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        self._handlers[topic].append(handler)

        def unsubscribe():
            if handler in self._handlers[topic]:
                self._handlers[topic].remove(handler)

        return unsubscribe

    def emit(self, topic: str, payload: Any) -> int:
        delivered = 0
        for handler in list(self._handlers.get(topic, [])):
            try:
                handler(topic, payload)
                delivered += 1
            except Exception:
                # keep delivering to the remaining handlers
                log.exception("event handler failed for topic=%s", topic)
        return delivered

    def subscribers(self, topic: str) -> int:
        return len(self._handlers.get(topic, []))
