# alagad_depot/services/matching.py
"""
Donation <-> recipient scoring.

Every rule is additive and independent:

    category match      +30       donation.category in needs.categories
    urgency alignment   +25       needs.urgency == "high" and donation is urgent
    location proximity  0..25     linear decay to 0 at max_distance (default 50km)
    recency             0..20     linear decay to 0 at 7 days (recipient side only)

Scores are not clamped. Results with score <= threshold (30) are dropped and the
rest sorted by score, highest first, ties keeping input order.
"""
import logging
from datetime import datetime
from math import floor
from typing import Iterable, List, Optional, Tuple

from alagad_depot.core.clock import Clock, as_utc, utc_now
from alagad_depot.schemas import DonationRecord, MatchResult, RecipientNeeds
from alagad_depot.services.geo import COMMUNITY_RADIUS_KM, distance_to, filter_by_location_scope

log = logging.getLogger(__name__)

CATEGORY_POINTS = 30
URGENCY_POINTS = 25
PROXIMITY_POINTS = 25
RECENCY_POINTS = 20
RECENCY_WINDOW_DAYS = 7.0
DEFAULT_MAX_DISTANCE_KM = 50.0
MATCH_THRESHOLD = 30

Rule = Optional[Tuple[int, str]]

def round_half_up(x: float) -> int:
    return int(floor(x + 0.5))

# ---- individual rules --------------------------------------------------------

def category_rule(needs: RecipientNeeds, donation: DonationRecord) -> Rule:
    if donation.category in needs.categories:
        return CATEGORY_POINTS, f"Category match: {donation.category}"
    return None

def urgency_rule(needs: RecipientNeeds, donation: DonationRecord) -> Rule:
    if needs.urgency == "high" and donation.status == "urgent":
        return URGENCY_POINTS, "Urgent donation matches high urgency need"
    return None

def proximity_points(distance_km: float, max_distance_km: float) -> Optional[int]:
    if distance_km > max_distance_km:
        return None
    return round_half_up(PROXIMITY_POINTS * (1 - distance_km / max_distance_km))

def proximity_rule(needs: RecipientNeeds, donation: DonationRecord,
                   default_max_km: float = DEFAULT_MAX_DISTANCE_KM) -> Rule:
    dist = distance_to(needs.location, donation)
    if dist is None:
        return None
    pts = proximity_points(dist, needs.max_distance or default_max_km)
    if pts is None:
        return None
    return pts, f"Location proximity: {round_half_up(dist)}km away"

def recency_points(listed_at: datetime, now: datetime) -> Optional[int]:
    days = (now - listed_at).total_seconds() / 86400.0
    if days > RECENCY_WINDOW_DAYS:
        return None
    return round_half_up(RECENCY_POINTS * (1 - days / RECENCY_WINDOW_DAYS))

def recency_rule(donation: DonationRecord, now: datetime) -> Rule:
    pts = recency_points(donation.date, now)
    if pts is None:
        return None
    return pts, "Recently listed donation"

# ---- scoring + ranking -------------------------------------------------------

def score_pair(needs: RecipientNeeds, donation: DonationRecord, now: Optional[datetime] = None,
               default_max_km: float = DEFAULT_MAX_DISTANCE_KM) -> MatchResult:
    """
    Score one (needs, donation) pair. `now` enables the recency rule; leave it
    None for the donation -> recipients direction.
    """
    rules = [
        category_rule(needs, donation),
        urgency_rule(needs, donation),
        proximity_rule(needs, donation, default_max_km),
    ]
    if now is not None:
        rules.append(recency_rule(donation, now))

    score = 0
    reasons: List[str] = []
    for hit in rules:
        if hit is None:
            continue
        pts, reason = hit
        score += pts
        reasons.append(reason)

    return MatchResult(
        donation_id=donation.id,
        recipient_id=needs.user_id,
        score=score,
        match_reason=reasons,
    )

def rank(results: Iterable[MatchResult], threshold: int = MATCH_THRESHOLD) -> List[MatchResult]:
    kept = [r for r in results if r.score > threshold]
    # sorted() is stable, so equal scores keep their input order
    return sorted(kept, key=lambda r: r.score, reverse=True)

def score_donations_for_recipient(
    needs: RecipientNeeds,
    candidates: Iterable[DonationRecord],
    clock: Clock = utc_now,
    threshold: int = MATCH_THRESHOLD,
    default_max_km: float = DEFAULT_MAX_DISTANCE_KM,
) -> List[MatchResult]:
    now = as_utc(clock())
    return rank((score_pair(needs, d, now, default_max_km) for d in candidates), threshold)

def score_recipients_for_donation(
    donation_id: str,
    candidates: Iterable[RecipientNeeds],
    donations: Iterable[DonationRecord],
    threshold: int = MATCH_THRESHOLD,
    default_max_km: float = DEFAULT_MAX_DISTANCE_KM,
) -> List[MatchResult]:
    """
    Recipients for one donation. An unknown `donation_id` gives [] rather than
    an error, same as "no recipient scored high enough".
    """
    donation = next((d for d in donations if d.id == donation_id), None)
    if donation is None:
        log.info("no donation %s; returning no recipients", donation_id)
        return []
    return rank((score_pair(n, donation, None, default_max_km) for n in candidates), threshold)

def find_matches_for_recipient(
    needs: RecipientNeeds,
    donations: Iterable[DonationRecord],
    clock: Clock = utc_now,
    threshold: int = MATCH_THRESHOLD,
    default_max_km: float = DEFAULT_MAX_DISTANCE_KM,
    community_radius_km: float = COMMUNITY_RADIUS_KM,
) -> List[MatchResult]:
    """Apply the recipient's location scope, then score what is left."""
    pool = filter_by_location_scope(donations, needs.location_scope, needs.location, community_radius_km)
    return score_donations_for_recipient(needs, pool, clock, threshold, default_max_km)
