# alagad_depot/core/geocode.py
from __future__ import annotations
import logging
from typing import Optional

import httpx

from alagad_depot.core.config import Settings, settings as default_settings

log = logging.getLogger(__name__)

class GeocodeError(Exception):
    pass

def format_coordinates(lat: float, lng: float) -> str:
    return f"{lat:.6f}, {lng:.6f}"

class ReverseGeocoder:
    """
    Coordinates -> human readable address through Nominatim's /reverse.
    Nominatim asks for an identifying User-Agent with a contact.
    """

    def __init__(self, settings: Settings = default_settings, client: Optional[httpx.Client] = None):
        self.url = settings.geocoder_url
        self.headers = {"User-Agent": f"AlagadDepot/1.0 (+{settings.admin_contact})"}
        self._client = client or httpx.Client(timeout=settings.geocoder_timeout)

    def lookup(self, lat: float, lng: float) -> str:
        """Returns Nominatim's display_name. Raises GeocodeError on failure."""
        try:
            r = self._client.get(
                self.url,
                params={"format": "json", "lat": lat, "lon": lng},
                headers=self.headers,
            )
            r.raise_for_status()
            js = r.json()
        except (httpx.HTTPError, ValueError) as ex:
            raise GeocodeError(str(ex)) from ex
        name = js.get("display_name") if isinstance(js, dict) else None
        if not name:
            raise GeocodeError("No results")
        return name

    def describe(self, lat: float, lng: float) -> str:
        """Like lookup(), but falls back to the formatted coordinates."""
        try:
            return self.lookup(lat, lng)
        except GeocodeError as ex:
            log.warning("reverse geocode failed for (%s, %s): %s", lat, lng, ex)
            return format_coordinates(lat, lng)

    def close(self) -> None:
        self._client.close()
