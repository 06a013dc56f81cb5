# alagad_depot/services/timeline.py
from datetime import timedelta
from typing import List, Optional

from alagad_depot.core.clock import Clock, as_utc, utc_now
from alagad_depot.schemas import DonationRecord, StatusEvent

TRACKING_STAGES = ["listed", "matched", "arranged", "completed"]

MATCHED_AFTER = timedelta(hours=12)
URGENT_AFTER = timedelta(hours=24)
ARRANGED_AFTER = timedelta(hours=30)
COMPLETED_AFTER = timedelta(days=7)

LISTING_PROGRESS = {"active": 33, "urgent": 66, "completed": 100}

def derive_status_timeline(donation: DonationRecord, clock: Clock = utc_now) -> List[StatusEvent]:
    """
    Rebuild the lifecycle of a listing from its status and listing date.
    Nothing here is stored; the same donation and clock always give the same events.
    """
    now = as_utc(clock())
    base = donation.date
    status = donation.status
    org = donation.organization

    events = [StatusEvent(
        id="1",
        stage="listed",
        title="Donation Listed",
        description=f"{donation.title} has been listed for donation.",
        timestamp=base,
        actor=org,
    )]

    matched_at = base + MATCHED_AFTER
    if matched_at <= now or status in ("urgent", "completed"):
        events.append(StatusEvent(
            id="2",
            stage="matched",
            title="Potential Recipients Found",
            description=f"Potential recipients for {donation.title} have been identified.",
            timestamp=matched_at,
            actor="System",
        ))

    if status == "urgent":
        events.append(StatusEvent(
            id="3",
            stage="urgent",
            title="Urgent Need Identified",
            description=f"This donation has been marked as urgent by {org}.",
            timestamp=base + URGENT_AFTER,
            actor=org,
        ))
        arranged_at = base + ARRANGED_AFTER
        if arranged_at <= now or status == "completed":
            events.append(StatusEvent(
                id="4",
                stage="arranged",
                title="Pickup/Delivery Arranged",
                description=f"Logistics for {donation.title} have been arranged.",
                timestamp=arranged_at,
                actor="Logistics Team",
            ))

    if status == "completed":
        # shown even when base + 7d is still ahead of `now`
        events.append(StatusEvent(
            id="5",
            stage="completed",
            title="Donation Completed",
            description=f"The donation to {org} has been successfully completed.",
            timestamp=base + COMPLETED_AFTER,
            actor=org,
        ))

    return events

def progress_percentage(stage: str) -> float:
    if stage not in TRACKING_STAGES:
        return 0.0
    return (TRACKING_STAGES.index(stage) + 1) / len(TRACKING_STAGES) * 100

def current_stage(events: List[StatusEvent]) -> Optional[str]:
    """Latest event that sits on the four-stage progress bar."""
    for ev in reversed(events):
        if ev.stage in TRACKING_STAGES:
            return ev.stage
    return None

def listing_progress(status: str) -> int:
    return LISTING_PROGRESS.get(status, 0)
