"""Extractor interface shared by all streaming-server extractors."""

import logging
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

import niquests

from reelbridge.core.errors import UpstreamFetchError
from reelbridge.models.catalog import VideoSource

logger = logging.getLogger(__name__)

# file: "https://..." entries of JW Player style setup scripts
FILE_PATTERN = re.compile(r"""file\s*:\s*["']([^"']+)["']""")
SOURCE_TAG_PATTERN = re.compile(r"""<source[^>]+src=["']([^"']+)["']""")


class StreamingServer(str, Enum):
    """Streaming servers the catalog providers may link to."""

    ASIANLOAD = "asianload"
    MIXDROP = "mixdrop"
    STREAMTAPE = "streamtape"
    STREAMSB = "streamsb"


class Extractor(ABC):
    """Turns a streaming server page URL into playable media URLs."""

    def __init__(self, session: niquests.AsyncSession, timeout: int = 10):
        self.session = session
        self.timeout = timeout

    @property
    @abstractmethod
    def server(self) -> StreamingServer:
        """Return the server this extractor handles."""
        pass

    @abstractmethod
    async def extract(self, url: str) -> List[VideoSource]:
        """Extract playable sources from a server page.

        Args:
            url: Absolute URL of the embed page on the streaming server.

        Returns:
            The playable sources found, possibly empty.
        """
        pass

    async def _get(self, url: str, headers: dict | None = None) -> str:
        """GET a page and return its body, raising UpstreamFetchError on failure."""
        try:
            response = await self.session.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except niquests.exceptions.RequestException as exc:
            logger.error("%s failed to fetch %s: %s", self.server.value, url, exc)
            raise UpstreamFetchError(f"Failed to fetch {url}", exc) from exc
        return response.text or ""


def to_source(url: str) -> VideoSource:
    """Build a VideoSource, flagging HLS playlists."""
    if url.startswith("//"):
        url = f"https:{url}"
    is_m3u8 = ".m3u8" in url
    return VideoSource(url=url, is_m3u8=is_m3u8, quality="auto" if is_m3u8 else None)


def find_file_urls(html: str) -> List[str]:
    """Collect media URLs from player setup scripts and <source> tags, in page order."""
    urls: List[str] = []
    for match in FILE_PATTERN.finditer(html):
        if match.group(1) not in urls:
            urls.append(match.group(1))
    for match in SOURCE_TAG_PATTERN.finditer(html):
        if match.group(1) not in urls:
            urls.append(match.group(1))
    # Thumbnails and caption tracks also use "file:"
    return [u for u in urls if not u.endswith((".jpg", ".png", ".vtt", ".srt"))]
