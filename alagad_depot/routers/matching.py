# alagad_depot/routers/matching.py
from typing import List

from fastapi import APIRouter, Depends

from alagad_depot.core.clock import Clock
from alagad_depot.core.config import Settings
from alagad_depot.deps import get_clock, get_config, get_needs_store, get_store
from alagad_depot.repos.inmemory import DonationStore, NeedsStore
from alagad_depot.schemas import MatchResult, RecipientNeeds
from alagad_depot.services.matching import find_matches_for_recipient, score_recipients_for_donation

router = APIRouter(prefix="/api/matching", tags=["matching"])

@router.post("/recipient", response_model=List[MatchResult])
async def matches_for_recipient(
    needs: RecipientNeeds,
    store: DonationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    cfg: Settings = Depends(get_config),
):
    donations = await store.list_donations()
    return find_matches_for_recipient(
        needs, donations, clock,
        threshold=cfg.match_threshold,
        default_max_km=cfg.default_max_distance_km,
        community_radius_km=cfg.community_radius_km,
    )

@router.put("/needs", response_model=RecipientNeeds)
async def save_needs(needs: RecipientNeeds, needs_store: NeedsStore = Depends(get_needs_store)):
    return await needs_store.save(needs)

@router.get("/needs", response_model=List[RecipientNeeds])
async def list_needs(needs_store: NeedsStore = Depends(get_needs_store)):
    return await needs_store.list()

@router.get("/donation/{donation_id}", response_model=List[MatchResult])
async def recipients_for_donation(
    donation_id: str,
    store: DonationStore = Depends(get_store),
    needs_store: NeedsStore = Depends(get_needs_store),
    cfg: Settings = Depends(get_config),
):
    # unknown donation ids answer [] like "no recipient scored high enough"
    return score_recipients_for_donation(
        donation_id,
        await needs_store.list(),
        await store.list_donations(),
        threshold=cfg.match_threshold,
        default_max_km=cfg.default_max_distance_km,
    )
