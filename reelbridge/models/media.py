"""Media models for canonical and merged metadata."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class MediaType(str, Enum):
    """Media type for lookups and search."""

    MOVIE = "movie"
    SERIES = "tv"
    ALL = "all"


class ImageSet(BaseModel):
    """An image at a small and a large TMDB resolution."""

    model_config = ConfigDict(frozen=True)

    mobile: str
    hd: str


class Trailer(BaseModel):
    id: Optional[str] = None
    site: Optional[str] = None
    url: Optional[str] = None


class Logo(BaseModel):
    url: str
    aspect_ratio: Optional[float] = None
    width: Optional[int] = None


class Translation(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None


class Mappings(BaseModel):
    """Identifiers of the same title on other services."""

    imdb: Optional[str] = None
    tmdb: Optional[int] = None


class NextAiringEpisode(BaseModel):
    season: Optional[int] = None
    episode: Optional[int] = None
    release_date: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    runtime: Optional[int] = None


class MediaResult(BaseModel):
    """A movie or series in a TMDB listing (search, trending, similar)."""

    id: int
    title: str
    image: Optional[str] = None
    type: MediaType
    rating: float = 0.0
    release_date: Optional[str] = None


class PersonResult(BaseModel):
    """A person in a TMDB listing."""

    id: int
    name: str
    rating: float = 0.0
    image: Optional[str] = None
    movies: List[MediaResult] = []


class SearchPage(BaseModel):
    """One page of TMDB search or trending results."""

    current_page: int
    has_next_page: bool
    total_pages: int
    total_results: int
    results: List[MediaResult | PersonResult] = []


class MergedEpisode(BaseModel):
    """A canonical episode, linked to its catalog episode when one matched.

    ``id`` and ``url`` are None when no catalog episode matched; there is no
    playable source for such an episode.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    episode: int
    season: int
    release_date: Optional[str] = None
    description: Optional[str] = None
    img: Optional[ImageSet] = None


class MergedSeason(BaseModel):
    """A canonical season with catalog episode ids merged in."""

    model_config = ConfigDict(frozen=True)

    season: int
    image: Optional[ImageSet] = None
    episodes: List[MergedEpisode] = []
    is_released: Optional[bool] = None


class MediaInfo(BaseModel):
    """A canonical movie or series record merged with catalog data."""

    id: str
    catalog_id: Optional[str] = None
    title: str
    type: MediaType
    translations: List[Translation] = []
    image: Optional[str] = None
    cover: Optional[str] = None
    logos: List[Logo] = []
    rating: float = 0.0
    release_date: Optional[str] = None
    description: Optional[str] = None
    genres: List[str] = []
    duration: Optional[int] = None
    total_episodes: Optional[int] = None
    total_seasons: Optional[int] = None
    directors: List[str] = []
    writers: List[str] = []
    actors: List[str] = []
    trailer: Optional[Trailer] = None
    mappings: Mappings = Mappings()
    similar: List[MediaResult | PersonResult] = []
    recommendations: List[MediaResult | PersonResult] = []
    next_airing_episode: Optional[NextAiringEpisode] = None
    episode_id: Optional[str] = None  # Movies only
    seasons: List[MergedSeason] = []

    @model_validator(mode="after")
    def check_series_fields(self) -> "MediaInfo":
        if self.type != MediaType.SERIES and self.total_seasons is not None:
            raise ValueError("total_seasons is only defined for series")
        return self
