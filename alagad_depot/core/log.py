import logging

from alagad_depot.core.config import Settings

def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=settings.log_format)
    logging.getLogger("alagad_depot").setLevel(level)
