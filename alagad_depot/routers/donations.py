# alagad_depot/routers/donations.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from alagad_depot.core.clock import Clock
from alagad_depot.deps import get_clock, get_store
from alagad_depot.repos.inmemory import DonationStore
from alagad_depot.schemas import DonationIn, DonationRecord, DonationStatusUpdate, TimelineOut
from alagad_depot.services.timeline import (
    current_stage, derive_status_timeline, listing_progress, progress_percentage,
)

router = APIRouter(prefix="/api", tags=["donations"])

async def _get_or_404(store: DonationStore, donation_id: str) -> DonationRecord:
    doc = await store.get_donation(donation_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="Donation not found")
    return doc

@router.get("/donations", response_model=List[DonationRecord])
async def list_donations(
    q: Optional[str] = Query(None, description="keyword in title/description/organization"),
    category: Optional[str] = None,
    store: DonationStore = Depends(get_store),
):
    if q:
        docs = await store.search(q)
    else:
        docs = await store.list_donations()
    if category and category != "all":
        docs = [d for d in docs if d.category == category]
    return docs

@router.post("/donations", response_model=DonationRecord, status_code=201)
async def submit_donation(payload: DonationIn, store: DonationStore = Depends(get_store)):
    return await store.submit_donation(payload)

@router.post("/donations/refresh", response_model=List[DonationRecord])
async def refresh_donations(store: DonationStore = Depends(get_store)):
    return await store.refresh()

@router.get("/donations/{donation_id}", response_model=DonationRecord)
async def get_donation(donation_id: str, store: DonationStore = Depends(get_store)):
    return await _get_or_404(store, donation_id)

@router.patch("/donations/{donation_id}/status", response_model=DonationRecord)
async def update_status(donation_id: str, body: DonationStatusUpdate,
                        store: DonationStore = Depends(get_store)):
    await _get_or_404(store, donation_id)
    doc = await store.update_user_donation_status(donation_id, body.user_id, body.status)
    if doc is None:
        raise HTTPException(status_code=403, detail="Donation not owned by this user")
    return doc

@router.delete("/donations/{donation_id}")
async def delete_donation(donation_id: str, user_id: str = Query(...),
                          store: DonationStore = Depends(get_store)):
    await _get_or_404(store, donation_id)
    if not await store.delete_user_donation(donation_id, user_id):
        raise HTTPException(status_code=403, detail="Donation not owned by this user")
    return {"ok": True, "id": donation_id}

@router.get("/donations/{donation_id}/timeline", response_model=TimelineOut)
async def donation_timeline(donation_id: str, store: DonationStore = Depends(get_store),
                            clock: Clock = Depends(get_clock)):
    doc = await _get_or_404(store, donation_id)
    events = derive_status_timeline(doc, clock)
    stage = current_stage(events)
    return TimelineOut(
        donation_id=doc.id,
        status=doc.status,
        current_stage=stage,
        progress=progress_percentage(stage) if stage else 0.0,
        listing_progress=listing_progress(doc.status),
        events=events,
    )

@router.get("/users/{user_id}/donations", response_model=List[DonationRecord])
async def user_donations(user_id: str, store: DonationStore = Depends(get_store)):
    return await store.list_user_donations(user_id)
