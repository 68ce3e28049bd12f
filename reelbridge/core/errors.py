"""Domain exceptions.

Only real failures are exceptions. A title that matches no catalog entry, or
a canonical episode with no catalog counterpart, is returned as data (``None``
ids) and never raised.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kind of failure, exposed to API consumers."""

    UPSTREAM_FETCH = "upstream_fetch"
    UNSUPPORTED_SERVER = "unsupported_server"
    SERVER_NOT_FOUND = "server_not_found"


class ReelbridgeError(Exception):
    """Base class for all Reelbridge errors."""

    kind: ErrorKind

    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception


class UpstreamFetchError(ReelbridgeError):
    """A canonical or catalog source could not be fetched or parsed."""

    kind = ErrorKind.UPSTREAM_FETCH


class TMDBError(UpstreamFetchError):
    """Domain exception for TMDB failures."""


class CatalogFetchError(UpstreamFetchError):
    """Domain exception for catalog provider failures."""


class UnsupportedServerError(ReelbridgeError):
    """No extractor is registered for the requested streaming server."""

    kind = ErrorKind.UNSUPPORTED_SERVER


class ServerNotFoundError(ReelbridgeError):
    """The episode page does not offer the requested streaming server."""

    kind = ErrorKind.SERVER_NOT_FOUND
