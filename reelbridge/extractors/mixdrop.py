"""MixDrop extractor."""

import logging
import re
import string
from typing import List

from reelbridge.extractors.base import Extractor, StreamingServer, to_source
from reelbridge.models.catalog import VideoSource

logger = logging.getLogger(__name__)

PACKED_PATTERN = re.compile(
    r"\}\('(.*)',\s*(\d+),\s*(\d+),\s*'(.*?)'\.split\('\|'\)", re.DOTALL
)
WURL_PATTERN = re.compile(r'MDCore\.wurl\s*=\s*"([^"]+)"')
WORD_PATTERN = re.compile(r"\b\w+\b")

ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase


def _unbase(word: str, base: int) -> int:
    if base <= 36:
        return int(word, base)
    value = 0
    for char in word:
        value = value * base + ALPHABET.index(char)
    return value


def unpack(packed: str) -> str:
    """Unpack a Dean Edwards ``eval(function(p,a,c,k,e,d)...)`` script."""
    match = PACKED_PATTERN.search(packed)
    if not match:
        return ""

    payload, base, count, words = match.groups()
    base = int(base)
    keywords = words.split("|")
    if len(keywords) != int(count):
        logger.debug("MixDrop: packer word count mismatch")

    def lookup(word_match: re.Match) -> str:
        word = word_match.group(0)
        try:
            index = _unbase(word, base)
        except ValueError:
            return word
        if index < len(keywords) and keywords[index]:
            return keywords[index]
        return word

    return WORD_PATTERN.sub(lookup, payload.replace("\\'", "'"))


class MixDrop(Extractor):
    """Unpacks the MixDrop player script to find the video URL."""

    @property
    def server(self) -> StreamingServer:
        return StreamingServer.MIXDROP

    async def extract(self, url: str) -> List[VideoSource]:
        html = await self._get(url)
        match = WURL_PATTERN.search(unpack(html))
        if not match:
            logger.warning(f"MixDrop: video link not found on {url}")
            return []
        return [to_source(match.group(1))]
