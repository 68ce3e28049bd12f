"""API routes returning merged metadata and stream sources as JSON."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from reelbridge.core.errors import (
    ReelbridgeError,
    ServerNotFoundError,
    UnsupportedServerError,
    UpstreamFetchError,
)
from reelbridge.extractors import StreamingServer
from reelbridge.models.catalog import EpisodeServer, StreamSources
from reelbridge.models.media import MediaInfo, MediaType, SearchPage
from reelbridge.providers import ProviderRegistry
from reelbridge.services.aggregator import MetaAggregator
from reelbridge.services.tmdb import get_tmdb_source

router = APIRouter()

_STATUS_CODES = {
    UpstreamFetchError: 502,
    UnsupportedServerError: 400,
    ServerNotFoundError: 404,
}


def error_response(exc: ReelbridgeError) -> JSONResponse:
    """Map a domain error to a JSON response carrying its kind."""
    status_code = next(
        (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 500
    )
    return JSONResponse(
        status_code=status_code,
        content={"kind": exc.kind.value, "detail": str(exc)},
    )


def get_aggregator(provider: str | None = Query(None)) -> MetaAggregator:
    """Pair the requested (or default) provider with the shared TMDB source."""
    catalog = ProviderRegistry.resolve(provider)
    if catalog is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return MetaAggregator(catalog, get_tmdb_source())


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "reelbridge"}


@router.get("/providers")
async def list_providers():
    """List all registered providers."""
    return {"providers": ProviderRegistry.names()}


@router.get("/search", response_model=SearchPage)
async def api_search(
    q: str = Query(..., description="Search query"),
    page: int = Query(1, ge=1),
    aggregator: MetaAggregator = Depends(get_aggregator),
):
    """Search TMDB for movies, series and people."""
    return await aggregator.search(q, page)


@router.get("/trending", response_model=SearchPage)
async def api_trending(
    media_type: str = Query("all", pattern="^(all|movie|tv|person)$"),
    time_period: str = Query("day", pattern="^(day|week)$"),
    page: int = Query(1, ge=1),
    aggregator: MetaAggregator = Depends(get_aggregator),
):
    """Trending titles on TMDB."""
    return await aggregator.fetch_trending(media_type, time_period, page)


@router.get(
    "/info/{media_type}/{media_id}",
    response_model=MediaInfo,
    response_model_exclude_none=True,
)
async def api_media_info(
    media_type: MediaType,
    media_id: str,
    aggregator: MetaAggregator = Depends(get_aggregator),
):
    """TMDB metadata with catalog episode ids merged in.

    Episodes without a playable catalog match have no ``id`` or ``url``.
    """
    if media_type == MediaType.ALL:
        raise HTTPException(status_code=400, detail="media_type must be movie or tv")
    return await aggregator.fetch_media_info(media_id, media_type)


@router.get("/servers/{episode_id:path}", response_model=List[EpisodeServer])
async def api_episode_servers(
    episode_id: str,
    aggregator: MetaAggregator = Depends(get_aggregator),
):
    """Streaming servers offered for a catalog episode."""
    return await aggregator.fetch_episode_servers(episode_id)


@router.get(
    "/sources/{episode_id:path}",
    response_model=StreamSources,
    response_model_exclude_none=True,
)
async def api_episode_sources(
    episode_id: str,
    server: str = Query(StreamingServer.ASIANLOAD.value),
    aggregator: MetaAggregator = Depends(get_aggregator),
):
    """Playable sources for a catalog episode on one server."""
    return await aggregator.fetch_episode_sources(episode_id, server)
