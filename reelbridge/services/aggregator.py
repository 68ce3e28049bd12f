"""Aggregate TMDB metadata with a catalog provider's playable episodes."""

import asyncio
import logging
from typing import List, Optional

from reelbridge.core.errors import TMDBError
from reelbridge.extractors import StreamingServer
from reelbridge.models.catalog import CatalogEpisode, EpisodeServer, StreamSources
from reelbridge.models.media import (
    Logo,
    Mappings,
    MediaInfo,
    MediaType,
    MergedSeason,
    NextAiringEpisode,
    SearchPage,
    Trailer,
    Translation,
)
from reelbridge.providers.base import CatalogProvider
from reelbridge.services.reconciler import reconcile_season
from reelbridge.services.resolver import SearchHints, resolve_catalog_id
from reelbridge.services.tmdb import TMDBSource, get_tmdb_source, image_url, parse_result

logger = logging.getLogger(__name__)


def _release_year(date: str | None) -> Optional[int]:
    if date and date[:4].isdigit():
        return int(date[:4])
    return None


def _names(entries: list | None) -> List[str]:
    return [entry["name"] for entry in entries or [] if entry.get("name")]


def _crew_names(data: dict, job: str) -> List[str]:
    crew = (data.get("credits") or {}).get("crew") or []
    return _names([member for member in crew if member.get("job") == job])


def _trailer(data: dict) -> Optional[Trailer]:
    videos = (data.get("videos") or {}).get("results") or []
    if not videos:
        return None
    key = videos[0].get("key")
    return Trailer(
        id=key,
        site=videos[0].get("site"),
        url=f"https://www.youtube.com/watch?v={key}" if key else None,
    )


def _next_airing_episode(data: dict) -> Optional[NextAiringEpisode]:
    upcoming = data.get("next_episode_to_air")
    if not upcoming:
        return None
    return NextAiringEpisode(
        season=upcoming.get("season_number"),
        episode=upcoming.get("episode_number"),
        release_date=upcoming.get("air_date"),
        title=upcoming.get("name"),
        description=upcoming.get("overview"),
        runtime=upcoming.get("runtime"),
    )


class MetaAggregator:
    """Public entry point: TMDB metadata with catalog episode ids merged in.

    TMDB is authoritative for titles, descriptions, dates and the season and
    episode structure. The catalog provider only contributes the ids needed to
    resolve streams, so stream lookups are forwarded to it untouched.
    """

    def __init__(self, provider: CatalogProvider, tmdb_source: TMDBSource | None = None):
        self.provider = provider
        self.tmdb = tmdb_source or get_tmdb_source()

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """Search TMDB for movies, series and people."""
        return await self.tmdb.search(query, page)

    async def fetch_trending(
        self, media_type: str = "all", time_period: str = "day", page: int = 1
    ) -> SearchPage:
        """Fetch trending titles from TMDB."""
        return await self.tmdb.fetch_trending(media_type, time_period, page)

    async def fetch_media_info(
        self, media_id: str, media_type: MediaType | str
    ) -> MediaInfo:
        """Fetch a movie or series from TMDB and link it to the catalog.

        When no catalog entry matches, the TMDB metadata is still returned,
        with every catalog id left as None. Upstream errors propagate.
        """
        # Anything that is not a movie is looked up as a series
        media_type = (
            MediaType.MOVIE
            if str(getattr(media_type, "value", media_type)).lower() == "movie"
            else MediaType.SERIES
        )
        is_movie = media_type == MediaType.MOVIE

        data = await self.tmdb.fetch_details(media_id, media_type)
        title = data.get("title") or data.get("name")
        if not title:
            raise TMDBError(f"TMDB returned no title for {media_type.value} {media_id}")

        release_date = data.get("release_date") or data.get("first_air_date")
        total_seasons = None if is_movie else data.get("number_of_seasons")
        hints = SearchHints(
            type=media_type,
            year=_release_year(release_date),
            total_seasons=total_seasons,
            total_episodes=data.get("number_of_episodes"),
        )

        catalog_id = await resolve_catalog_id(self.provider, title, hints)
        catalog_episodes: List[CatalogEpisode] = []
        if catalog_id:
            catalog_info = await self.provider.fetch_media_info(catalog_id)
            catalog_episodes = catalog_info.episodes
        else:
            logger.info(
                f"No {self.provider.name} match for '{title}', returning metadata only"
            )

        episode_id = None
        if is_movie and catalog_episodes:
            episode_id = catalog_episodes[0].id

        seasons: List[MergedSeason] = []
        next_airing = None
        if not is_movie and total_seasons and total_seasons > 0:
            next_airing = _next_airing_episode(data)
            seasons = await self._fetch_seasons(media_id, total_seasons, catalog_episodes)

        runtime = data.get("runtime") or next(iter(data.get("episode_run_time") or []), None)

        return MediaInfo(
            id=str(media_id),
            catalog_id=catalog_id,
            title=title,
            type=media_type,
            translations=[
                Translation(
                    title=(t.get("data") or {}).get("title") or title,
                    description=(t.get("data") or {}).get("overview") or None,
                    language=t.get("english_name"),
                )
                for t in (data.get("translations") or {}).get("translations") or []
            ],
            image=image_url(data.get("poster_path")),
            cover=image_url(data.get("backdrop_path")),
            logos=[
                Logo(
                    url=image_url(logo.get("file_path")),
                    aspect_ratio=logo.get("aspect_ratio"),
                    width=logo.get("width"),
                )
                for logo in (data.get("images") or {}).get("logos") or []
                if logo.get("file_path")
            ],
            rating=data.get("vote_average") or 0.0,
            release_date=release_date,
            description=data.get("overview"),
            genres=_names(data.get("genres")),
            duration=runtime,
            total_episodes=None if is_movie else data.get("number_of_episodes"),
            total_seasons=total_seasons,
            directors=_crew_names(data, "Director"),
            writers=_crew_names(data, "Screenplay"),
            actors=_names((data.get("credits") or {}).get("cast")),
            trailer=_trailer(data),
            mappings=Mappings(
                imdb=(data.get("external_ids") or {}).get("imdb_id") or None,
                tmdb=data.get("id"),
            ),
            similar=[
                parse_result(r)
                for r in (data.get("similar") or {}).get("results") or []
                if r.get("id") is not None
            ],
            recommendations=[
                parse_result(r)
                for r in (data.get("recommendations") or {}).get("results") or []
                if r.get("id") is not None
            ],
            next_airing_episode=next_airing,
            episode_id=episode_id,
            seasons=seasons,
        )

    async def _fetch_seasons(
        self, media_id: str, total_seasons: int, catalog_episodes: List[CatalogEpisode]
    ) -> List[MergedSeason]:
        """Fetch and reconcile every season concurrently.

        All season requests are in flight at once; any failure fails the
        whole batch.
        """
        seasons = await asyncio.gather(
            *[
                self._fetch_season(media_id, number, catalog_episodes)
                for number in range(1, total_seasons + 1)
            ]
        )
        return sorted(seasons, key=lambda season: season.season)

    async def _fetch_season(
        self, media_id: str, season_number: int, catalog_episodes: List[CatalogEpisode]
    ) -> MergedSeason:
        season_data = await self.tmdb.fetch_season_details(media_id, season_number)
        return reconcile_season(season_number, season_data, catalog_episodes)

    async def fetch_episode_servers(self, episode_id: str) -> List[EpisodeServer]:
        """List streaming servers for a catalog episode id."""
        return await self.provider.fetch_episode_servers(episode_id)

    async def fetch_episode_sources(
        self,
        episode_id: str,
        server: StreamingServer | str = StreamingServer.ASIANLOAD,
    ) -> StreamSources:
        """Resolve playable sources for a catalog episode id."""
        return await self.provider.fetch_episode_sources(episode_id, server)
