"""Resolve a canonical title to the matching catalog entry."""

import logging
from typing import List, Optional

from pydantic import BaseModel

from reelbridge.models.catalog import CatalogCandidate
from reelbridge.models.media import MediaType
from reelbridge.providers.base import CatalogProvider
from reelbridge.utils.strings import normalize_title, similarity

logger = logging.getLogger(__name__)

# Catalogs often split or merge seasons differently from TMDB
SEASON_TOLERANCE = 2


class SearchHints(BaseModel):
    """What the canonical source knows about the title being matched."""

    type: MediaType
    year: Optional[int] = None
    total_seasons: Optional[int] = None
    total_episodes: Optional[int] = None


def rank_candidates(
    title: str, candidates: List[CatalogCandidate], hints: SearchHints
) -> List[CatalogCandidate]:
    """Order candidates by title similarity and drop those the hints rule out.

    ``title`` must already be normalized. The sort is stable, so candidates
    with equal scores keep the provider's order. A year that matches no
    candidate yields an empty list; there is no fallback to year-less matches.
    """
    ranked = sorted(
        candidates,
        key=lambda c: similarity(title, (c.title or "").lower()),
        reverse=True,
    )

    ranked = [c for c in ranked if c.type == hints.type]

    if hints.year and hints.type == MediaType.MOVIE:
        ranked = [c for c in ranked if c.release_year == str(hints.year)]

    if hints.total_seasons and hints.type == MediaType.SERIES:
        low = hints.total_seasons - SEASON_TOLERANCE
        high = hints.total_seasons + SEASON_TOLERANCE
        ranked = [c for c in ranked if low <= (c.seasons or 0) <= high]

    return ranked


async def resolve_catalog_id(
    provider: CatalogProvider, title: str, hints: SearchHints
) -> Optional[str]:
    """Find the catalog id for a canonical title.

    Args:
        provider: Catalog to search.
        title: Canonical title, normalized before searching.
        hints: Type, year and season count used to filter candidates.

    Returns:
        The id of the best remaining candidate, or None when nothing matches.
        Errors raised by the provider's search propagate unchanged.
    """
    normalized = normalize_title(title)
    page = await provider.search(normalized)
    if not page.results:
        logger.info(f"{provider.name}: no search results for '{normalized}'")
        return None

    ranked = rank_candidates(normalized, page.results, hints)
    if not ranked:
        logger.info(
            f"{provider.name}: none of {len(page.results)} results for "
            f"'{normalized}' match {hints.model_dump(exclude_none=True)}"
        )
        return None

    logger.debug(f"{provider.name}: resolved '{title}' to {ranked[0].id}")
    return ranked[0].id
