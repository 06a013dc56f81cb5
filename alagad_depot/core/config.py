from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # matching
    default_max_distance_km: float = 50.0
    match_threshold: int = 30
    community_radius_km: float = 50.0

    # partner catalog + notifications
    catalog_ttl_hours: float = 24.0
    notification_limit: int = 50

    # reverse geocoding (Nominatim)
    geocoder_url: str = "https://nominatim.openstreetmap.org/reverse"
    geocoder_timeout: float = 8.0
    admin_contact: str = "mailto:admin@example.com"

    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    cors_allow_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
