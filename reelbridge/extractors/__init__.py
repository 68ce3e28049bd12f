"""Streaming-server extractors, looked up by server name."""

from typing import Dict, Type

import niquests

from reelbridge.core.errors import UnsupportedServerError
from reelbridge.extractors.asianload import AsianLoad
from reelbridge.extractors.base import Extractor, StreamingServer
from reelbridge.extractors.mixdrop import MixDrop
from reelbridge.extractors.streamsb import StreamSB
from reelbridge.extractors.streamtape import StreamTape

EXTRACTORS: Dict[StreamingServer, Type[Extractor]] = {
    StreamingServer.ASIANLOAD: AsianLoad,
    StreamingServer.MIXDROP: MixDrop,
    StreamingServer.STREAMTAPE: StreamTape,
    StreamingServer.STREAMSB: StreamSB,
}


def parse_server(name: str | StreamingServer) -> StreamingServer:
    """Return the StreamingServer for a name, case-insensitively."""
    if isinstance(name, StreamingServer):
        return name
    try:
        return StreamingServer(name.strip().lower())
    except ValueError as exc:
        raise UnsupportedServerError(f"Server {name} not supported", exc) from exc


def build_extractors(
    session: niquests.AsyncSession, timeout: int = 10
) -> Dict[StreamingServer, Extractor]:
    """Instantiate one extractor per supported server, sharing a session."""
    return {server: cls(session, timeout) for server, cls in EXTRACTORS.items()}


__all__ = [
    "EXTRACTORS",
    "Extractor",
    "StreamingServer",
    "build_extractors",
    "parse_server",
]
