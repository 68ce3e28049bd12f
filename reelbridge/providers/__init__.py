"""Catalog providers the API can link TMDB titles to."""

import logging
from typing import Dict, List

from reelbridge.providers.base import CatalogProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Catalog providers by name, in registration order.

    The first provider registered is the default for requests that do not
    name one.
    """

    _providers: Dict[str, CatalogProvider] = {}

    @classmethod
    def register(cls, provider: CatalogProvider) -> None:
        cls._providers[provider.name] = provider
        logger.debug(f"Registered catalog provider {provider.name}")

    @classmethod
    def resolve(cls, name: str | None = None) -> CatalogProvider | None:
        """Look up a provider by name, or the default one when no name is given."""
        if name:
            return cls._providers.get(name)
        return next(iter(cls._providers.values()), None)

    @classmethod
    def names(cls) -> List[str]:
        return list(cls._providers)

    @classmethod
    async def close_all(cls) -> None:
        """Close every provider's session; a failing provider does not stop the rest."""
        for provider in cls._providers.values():
            try:
                await provider.aclose()
            except Exception as e:
                logger.error(f"Error closing provider {provider.name}: {e}")
