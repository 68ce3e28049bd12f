"""TMDB service: the canonical metadata source."""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict

import requests
import tmdbsimple as tmdb

from reelbridge.core.config import get_settings
from reelbridge.core.errors import TMDBError
from reelbridge.models.media import MediaResult, MediaType, PersonResult, SearchPage

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

APPEND_TO_RESPONSE = ",".join(
    [
        "release_dates",
        "watch/providers",
        "alternative_titles",
        "credits",
        "external_ids",
        "images",
        "keywords",
        "recommendations",
        "reviews",
        "similar",
        "translations",
        "videos",
    ]
)


def image_url(path: str | None, size: str = "original") -> str | None:
    """Build a TMDB image URL, or None when there is no image."""
    if not path:
        return None
    return f"{IMAGE_BASE_URL}/{size}{path}"


def parse_result(result: dict) -> MediaResult | PersonResult:
    """Parse one entry of a TMDB listing (search, trending, similar)."""
    if result.get("media_type") == "person":
        return PersonResult(
            id=result["id"],
            name=result.get("name", "Unknown"),
            rating=result.get("popularity") or 0.0,
            image=image_url(result.get("profile_path")),
            movies=[
                parse_result(known)
                for known in result.get("known_for", [])
                if known.get("media_type") != "person"
            ],
        )

    # Listings on a movie/tv detail page carry no media_type
    is_movie = result.get("media_type") == "movie" or "title" in result
    release_date = result.get("release_date") or result.get("first_air_date") or ""
    return MediaResult(
        id=result["id"],
        title=result.get("title") or result.get("name") or "Unknown",
        image=image_url(result.get("poster_path")),
        type=MediaType.MOVIE if is_movie else MediaType.SERIES,
        rating=result.get("vote_average") or 0.0,
        release_date=release_date[:4] or None,
    )


def parse_page(data: dict, page: int) -> SearchPage:
    """Parse a paged TMDB listing response."""
    total_pages = data.get("total_pages", 0)
    return SearchPage(
        current_page=page,
        has_next_page=page + 1 <= total_pages,
        total_pages=total_pages,
        total_results=data.get("total_results", 0),
        results=[parse_result(r) for r in data.get("results", [])],
    )


class TMDBSource:
    """Async wrapper around tmdbsimple.

    tmdbsimple is blocking, so every call runs in a worker thread. All
    failures surface as TMDBError with the original exception chained.
    """

    def __init__(self, api_key: str | None = None, language: str | None = None):
        settings = get_settings()
        tmdb.API_KEY = api_key or settings.tmdb_api_key
        self.language = language or settings.tmdb_language
        self.session: requests.Session | None = None
        if settings.proxy:
            self.session = requests.Session()
            self.session.proxies = {"http": settings.proxy, "https": settings.proxy}
            tmdb.REQUESTS_SESSION = self.session
        tmdb.REQUESTS_TIMEOUT = settings.request_timeout

    def close(self) -> None:
        """Close the proxy session handed to tmdbsimple, if any."""
        if self.session is None:
            return
        self.session.close()
        if tmdb.REQUESTS_SESSION is self.session:
            tmdb.REQUESTS_SESSION = None
        self.session = None

    def _call(self, description: str, fn, **kwargs) -> Dict[str, Any]:
        try:
            return fn(**kwargs)
        except (requests.exceptions.RequestException, tmdb.APIKeyError) as exc:
            logger.error("Failed to fetch %s: %s", description, exc)
            raise TMDBError(f"Failed to fetch {description}", exc) from exc
        except (KeyError, ValueError, TypeError) as exc:
            logger.exception("Malformed TMDB response for %s: %s", description, exc)
            raise TMDBError(f"Malformed TMDB response for {description}", exc) from exc

    def _fetch_details_sync(self, media_id: str, media_type: MediaType) -> dict:
        if media_type == MediaType.MOVIE:
            api = tmdb.Movies(media_id)
        else:
            api = tmdb.TV(media_id)
        return self._call(
            f"{media_type.value} details for ID {media_id}",
            api.info,
            language=self.language,
            append_to_response=APPEND_TO_RESPONSE,
            include_image_language="en",
        )

    async def fetch_details(self, media_id: str, media_type: MediaType) -> dict:
        """Fetch a movie or series with credits, images, videos and more appended."""
        return await asyncio.to_thread(self._fetch_details_sync, media_id, media_type)

    def _fetch_season_details_sync(self, media_id: str, season_number: int) -> dict:
        api = tmdb.TV_Seasons(media_id, season_number)
        return self._call(
            f"season {season_number} of ID {media_id}",
            api.info,
            language=self.language,
        )

    async def fetch_season_details(self, media_id: str, season_number: int) -> dict:
        """Fetch one season including its episode list."""
        return await asyncio.to_thread(
            self._fetch_season_details_sync, media_id, season_number
        )

    def _search_sync(self, query: str, page: int) -> SearchPage:
        search = tmdb.Search()
        data = self._call(
            f"search results for '{query}'",
            search.multi,
            query=query,
            page=page,
            language=self.language,
        )
        return parse_page(data, page)

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """Search TMDB for movies, series and people."""
        return await asyncio.to_thread(self._search_sync, query, page)

    def _fetch_trending_sync(
        self, media_type: str, time_period: str, page: int
    ) -> SearchPage:
        trending = tmdb.Trending(media_type=media_type, time_window=time_period)
        data = self._call(
            f"trending {media_type} for the {time_period}",
            trending.info,
            page=page,
            language=self.language,
        )
        return parse_page(data, page)

    async def fetch_trending(
        self, media_type: str = "all", time_period: str = "day", page: int = 1
    ) -> SearchPage:
        """Fetch trending titles.

        Args:
            media_type: "movie", "tv", "person" or "all".
            time_period: "day" or "week".
            page: 1-based results page.
        """
        return await asyncio.to_thread(
            self._fetch_trending_sync, media_type, time_period, page
        )


@lru_cache
def get_tmdb_source() -> TMDBSource:
    """The process-wide TMDB source.

    tmdbsimple keeps its key and session in module globals, so it is
    configured once and shared by every request.
    """
    return TMDBSource()
