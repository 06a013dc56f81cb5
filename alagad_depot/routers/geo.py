# alagad_depot/routers/geo.py
from fastapi import APIRouter, Depends, Query

from alagad_depot.core.geocode import ReverseGeocoder
from alagad_depot.deps import get_geocoder
from alagad_depot.schemas import ReverseGeocodeOut

router = APIRouter(prefix="/api/geo", tags=["geo"])

@router.get("/reverse", response_model=ReverseGeocodeOut)
def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    geocoder: ReverseGeocoder = Depends(get_geocoder),
):
    # sync handler; runs in FastAPI's threadpool
    return ReverseGeocodeOut(latitude=lat, longitude=lng, display_name=geocoder.describe(lat, lng))
