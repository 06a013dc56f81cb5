# alagad_depot/services/geo.py
from math import radians, sin, cos, atan2, sqrt
from typing import Iterable, List, Optional

from alagad_depot.schemas import DonationRecord, LatLng

EARTH_RADIUS_KM = 6371.0
COMMUNITY_RADIUS_KM = 50.0

def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km on a spherical Earth."""
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat/2)**2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon/2)**2
    # rounding can push a just past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c

def distance_to(location: Optional[LatLng], donation: DonationRecord) -> Optional[float]:
    """None when either side has no coordinates."""
    if location is None or not donation.has_coordinates:
        return None
    return haversine_km(location.latitude, location.longitude, donation.latitude, donation.longitude)

def filter_by_location_scope(
    donations: Iterable[DonationRecord],
    scope: str,
    location: Optional[LatLng] = None,
    radius_km: float = COMMUNITY_RADIUS_KM,
) -> List[DonationRecord]:
    """
    community + a location: keep donations within `radius_km`, plus those
    without coordinates (distance unknown). country/worldwide keep everything.
    """
    donations = list(donations)
    if scope != "community" or location is None:
        return donations
    out = []
    for d in donations:
        dist = distance_to(location, d)
        if dist is None or dist <= radius_km:
            out.append(d)
    return out
