"""Merge a catalog's episodes into a canonical season."""

from datetime import datetime, timezone
from typing import List, Optional

from reelbridge.models.catalog import CatalogEpisode
from reelbridge.models.media import ImageSet, MergedEpisode, MergedSeason
from reelbridge.services.tmdb import image_url


def image_set(path: str | None) -> Optional[ImageSet]:
    """Build the w300/w780 pair for a TMDB image path."""
    if not path:
        return None
    return ImageSet(mobile=image_url(path, "w300"), hd=image_url(path, "w780"))


def is_season_released(episodes: List[dict], now: datetime | None = None) -> Optional[bool]:
    """Whether the season has started airing.

    Only the first listed episode is checked, which assumes TMDB lists
    episodes in airing order. Dates compare as ISO strings in UTC.
    """
    if not episodes:
        return None
    air_date = episodes[0].get("air_date")
    if not air_date:
        return False
    now = now or datetime.now(timezone.utc)
    return air_date <= now.date().isoformat()


def reconcile_season(
    season_number: int,
    season_data: dict,
    catalog_episodes: List[CatalogEpisode],
    now: datetime | None = None,
) -> MergedSeason:
    """Join one TMDB season with the catalog's episode list.

    Every TMDB episode yields exactly one merged episode. It carries the
    catalog id and url of the first catalog episode with the same season and
    episode number; catalog episodes without a season number count as season
    1. Catalog episodes with no TMDB counterpart are dropped.
    """
    season_episodes = [
        ep for ep in catalog_episodes if ep.effective_season == season_number
    ]

    episodes = []
    for episode in season_data.get("episodes") or []:
        number = episode.get("episode_number")
        match = next((ep for ep in season_episodes if ep.number == number), None)
        episodes.append(
            MergedEpisode(
                id=match.id if match else None,
                url=match.url if match else None,
                title=episode.get("name"),
                episode=number,
                season=episode.get("season_number", season_number),
                release_date=episode.get("air_date"),
                description=episode.get("overview"),
                img=image_set(episode.get("still_path")),
            )
        )

    return MergedSeason(
        season=season_number,
        image=image_set(season_data.get("poster_path")),
        episodes=episodes,
        is_released=is_season_released(season_data.get("episodes") or [], now),
    )
