"""StreamSB extractor."""

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


class StreamSB(Extractor):
    @property
    def server(self) -> StreamingServer:
        return StreamingServer.STREAMSB

    async def extract(self, url: str) -> List[VideoSource]:
        # Embed pages live under /e/<id>; the player page has the sources
        html = await self._get(url.replace("/e/", "/play/"), headers={"Referer": url})
        sources = [to_source(u) for u in find_file_urls(html)]
        if not sources:
            logger.warning(f"StreamSB: no sources found on {url}")
        return sources
