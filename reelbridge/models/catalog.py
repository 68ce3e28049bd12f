"""Models for data scraped from a catalog provider."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from reelbridge.models.media import MediaType, Trailer


class MediaStatus(str, Enum):
    """Airing status reported by the catalog."""

    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    UNKNOWN = "Unknown"


class CatalogCandidate(BaseModel):
    """A search result from a catalog provider."""

    id: str
    title: str
    url: Optional[str] = None
    image: Optional[str] = None
    type: Optional[MediaType] = None
    release_date: Optional[str] = None
    seasons: Optional[int] = None
    episode_number: Optional[int] = None

    @property
    def release_year(self) -> Optional[str]:
        """Year part of a ``YYYY-MM-DD`` shaped release date."""
        if not self.release_date:
            return None
        return self.release_date.split("-")[0]


class CatalogSearchPage(BaseModel):
    """One page of catalog search or listing results."""

    current_page: int = 1
    has_next_page: bool = False
    total_pages: int = 1
    results: List[CatalogCandidate] = []


class CatalogEpisode(BaseModel):
    """An episode as listed by a catalog provider."""

    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    number: float  # float so that specials like 7.5 survive
    season: Optional[int] = None
    sub_type: Optional[str] = None
    release_date: Optional[str] = None

    @property
    def effective_season(self) -> int:
        """Season number, single-season catalogs count as season 1."""
        return self.season if self.season is not None else 1


class Character(BaseModel):
    """A cast member on a catalog media page."""

    name: str
    role: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None


class CatalogMediaInfo(BaseModel):
    """A catalog media page with its episode list."""

    id: str
    title: str
    other_names: List[str] = []
    genres: List[str] = []
    type: MediaType = MediaType.SERIES
    status: MediaStatus = MediaStatus.UNKNOWN
    image: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[str] = None
    content_rating: Optional[str] = None
    airs_on: Optional[str] = None
    director: Optional[str] = None
    original_network: Optional[str] = None
    duration: Optional[str] = None
    trailer: Optional[Trailer] = None
    characters: List[Character] = []
    episodes: List[CatalogEpisode] = []


class EpisodeServer(BaseModel):
    """A streaming server offered for an episode."""

    name: str
    url: str


class VideoSource(BaseModel):
    """A playable media URL returned by an extractor."""

    url: str
    quality: Optional[str] = None
    is_m3u8: bool = False


class Subtitle(BaseModel):
    """A subtitle track returned by an extractor."""

    url: str
    lang: str


class StreamSources(BaseModel):
    """Playable sources for one episode on one server."""

    sources: List[VideoSource] = []
    subtitles: List[Subtitle] = []
    headers: Dict[str, str] = {}
    download: Optional[str] = None
