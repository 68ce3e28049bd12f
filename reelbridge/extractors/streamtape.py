"""StreamTape extractor."""

import logging
import re
from typing import List

from reelbridge.extractors.base import Extractor, StreamingServer
from reelbridge.models.catalog import VideoSource

logger = logging.getLogger(__name__)

# document.getElementById('robotlink').innerHTML = '//stream...' + ('xcdtape.com/get_video?...').substring(3)
ROBOTLINK_PATTERN = re.compile(
    r"getElementById\('robotlink'\)\.innerHTML\s*=\s*'([^']*)'\s*\+\s*\('([^']*)'\)"
)


class StreamTape(Extractor):
    """Rebuilds the obfuscated download link of a StreamTape page."""

    @property
    def server(self) -> StreamingServer:
        return StreamingServer.STREAMTAPE

    async def extract(self, url: str) -> List[VideoSource]:
        html = await self._get(url)
        match = ROBOTLINK_PATTERN.search(html)
        if not match:
            logger.warning(f"StreamTape: video link not found on {url}")
            return []

        head, tail = match.groups()
        link = f"{head}{tail[3:]}"
        if link.startswith("//"):
            link = f"https:{link}"
        return [VideoSource(url=link, is_m3u8=False)]
