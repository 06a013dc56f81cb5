# alagad_depot/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alagad_depot.core.config import settings
from alagad_depot.core.log import configure_logging
from alagad_depot.deps import get_clock, get_feed, get_store
from alagad_depot.routers import donations as donations_router
from alagad_depot.routers import geo as geo_router
from alagad_depot.routers import matching as matching_router
from alagad_depot.routers import notifications as notifications_router

log = logging.getLogger(__name__)

def _resolve(app: FastAPI, dependency):
    # honour app.dependency_overrides outside of a request
    return app.dependency_overrides.get(dependency, dependency)()

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    feed = _resolve(app, get_feed)
    feed.attach()
    # warm the partner catalog cache
    donations = await _resolve(app, get_store).list_donations()
    feed.seed_today(donations, _resolve(app, get_clock))
    log.info("Alagad Depot API ready with %d donations", len(donations))
    yield
    feed.detach()

app = FastAPI(lifespan=lifespan, title="Alagad Depot API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(donations_router.router)      # /api/donations, /api/users
app.include_router(matching_router.router)       # /api/matching
app.include_router(notifications_router.router)  # /api/notifications
app.include_router(geo_router.router)            # /api/geo

@app.get("/health")
def health():
    return {"ok": True}
