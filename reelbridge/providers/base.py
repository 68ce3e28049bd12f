"""Catalog provider configuration and interface."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import niquests
from pydantic import BaseModel, ConfigDict, Field, PositiveInt
from urllib3.util import Retry

from reelbridge.core.config import get_settings
from reelbridge.extractors import StreamingServer
from reelbridge.models.catalog import (
    CatalogMediaInfo,
    CatalogSearchPage,
    EpisodeServer,
    StreamSources,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class ProviderConfig(BaseModel):
    """Everything a provider needs to talk to its site.

    Pass ``session`` to share one HTTP session between providers or to
    inject a fake one in tests; otherwise the provider builds its own from
    the remaining fields.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_url: str
    proxy: Optional[str] = None
    timeout: PositiveInt = 10
    max_retries: int = 3
    headers: Dict[str, str] = Field(
        default_factory=lambda: {"User-Agent": DEFAULT_USER_AGENT}
    )
    session: Optional[niquests.AsyncSession] = None

    @classmethod
    def from_settings(cls, base_url: str | None = None) -> "ProviderConfig":
        """Build a config from application settings."""
        settings = get_settings()
        return cls(
            base_url=base_url or settings.catalog_base_url,
            proxy=settings.proxy,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )


def create_session(config: ProviderConfig) -> niquests.AsyncSession:
    """Create an async HTTP session with retries and proxy from a config."""
    retry_config = Retry(
        total=config.max_retries,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["HEAD", "GET", "OPTIONS", "POST"],
    )
    session = niquests.AsyncSession(retries=retry_config)
    session.headers.update(config.headers)
    if config.proxy:
        session.proxies = {"http": config.proxy, "https": config.proxy}
    return session


class CatalogProvider(ABC):
    """Interface for scraping-based catalog providers.

    A catalog provider knows which playable episodes a site carries. The
    aggregator matches its search results against canonical titles and
    forwards stream lookups to it using the provider's own episode ids.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this provider."""
        pass

    @abstractmethod
    async def search(self, query: str, page: int = 1) -> CatalogSearchPage:
        """Search the catalog.

        Args:
            query: Free-text title query.
            page: 1-based results page.

        Returns:
            A page of candidates in the site's own ranking order.
        """
        pass

    @abstractmethod
    async def fetch_media_info(self, media_id: str) -> CatalogMediaInfo:
        """Fetch a media page including its episode list."""
        pass

    @abstractmethod
    async def fetch_episode_servers(self, episode_id: str) -> List[EpisodeServer]:
        """List the streaming servers offered for an episode."""
        pass

    @abstractmethod
    async def fetch_episode_sources(
        self, episode_id: str, server: StreamingServer
    ) -> StreamSources:
        """Resolve playable sources for an episode on one server."""
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        pass
