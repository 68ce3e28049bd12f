"""AsianLoad embed player extractor."""

import logging
from typing import List

from reelbridge.extractors.base import (
    Extractor,
    StreamingServer,
    find_file_urls,
    to_source,
)
from reelbridge.models.catalog import VideoSource

logger = logging.getLogger(__name__)


class AsianLoad(Extractor):
    """Reads the player setup of an AsianLoad embed page."""

    @property
    def server(self) -> StreamingServer:
        return StreamingServer.ASIANLOAD

    async def extract(self, url: str) -> List[VideoSource]:
        html = await self._get(url, headers={"Referer": url})
        sources = [to_source(u) for u in find_file_urls(html)]
        if not sources:
            logger.warning(f"AsianLoad: no sources found on {url}")
        return sources
