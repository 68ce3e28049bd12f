import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request

from reelbridge.api.routes_api import error_response, router as api_router
from reelbridge.core.config import get_settings
from reelbridge.core.errors import ReelbridgeError
from reelbridge.providers import ProviderRegistry
from reelbridge.providers.dramacool_provider import DramaCoolProvider
from reelbridge.services.tmdb import get_tmdb_source

load_dotenv()

logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    try:
        yield
    finally:
        await ProviderRegistry.close_all()
        get_tmdb_source().close()
        get_tmdb_source.cache_clear()


app = FastAPI(
    title="Reelbridge",
    description="TMDB metadata linked to playable catalog episodes",
    version="0.1.0",
    lifespan=app_lifespan,
)


@app.exception_handler(ReelbridgeError)
async def reelbridge_error_handler(request: Request, exc: ReelbridgeError):
    return error_response(exc)


ProviderRegistry.register(DramaCoolProvider())

app.include_router(api_router, prefix="/api")
