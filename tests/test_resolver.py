import pytest
from unittest.mock import AsyncMock, MagicMock

from reelbridge.core.errors import CatalogFetchError
from reelbridge.models.catalog import CatalogCandidate, CatalogSearchPage
from reelbridge.models.media import MediaType
from reelbridge.services.resolver import SearchHints, rank_candidates, resolve_catalog_id


def make_provider(candidates):
    provider = MagicMock()
    provider.name = "FakeCatalog"
    provider.search = AsyncMock(return_value=CatalogSearchPage(results=candidates))
    return provider


def series(id, title, seasons=None):
    return CatalogCandidate(id=id, title=title, type=MediaType.SERIES, seasons=seasons)


def movie(id, title, release_date=None):
    return CatalogCandidate(
        id=id, title=title, type=MediaType.MOVIE, release_date=release_date
    )


@pytest.mark.asyncio
async def test_resolves_exact_series_match():
    provider = make_provider(
        [
            series("bb", "Breaking Bad", seasons=5),
            series("bb-spin", "Breaking Bad Spin-off", seasons=2),
        ]
    )
    hints = SearchHints(type=MediaType.SERIES, total_seasons=5)

    assert await resolve_catalog_id(provider, "Breaking Bad", hints) == "bb"
    provider.search.assert_awaited_once_with("breaking bad")


@pytest.mark.asyncio
async def test_best_title_wins_over_provider_order():
    provider = make_provider(
        [
            series("spin", "Breaking Bad Spin-off", seasons=5),
            series("bb", "Breaking Bad", seasons=5),
        ]
    )
    hints = SearchHints(type=MediaType.SERIES, total_seasons=5)

    assert await resolve_catalog_id(provider, "Breaking Bad", hints) == "bb"


@pytest.mark.asyncio
async def test_no_results_returns_none():
    provider = make_provider([])
    hints = SearchHints(type=MediaType.MOVIE)

    assert await resolve_catalog_id(provider, "Nothing", hints) is None


@pytest.mark.asyncio
async def test_movie_year_mismatch_returns_none():
    provider = make_provider([movie("old-movie", "Old Movie", "2005-03-01")])
    hints = SearchHints(type=MediaType.MOVIE, year=1990)

    assert await resolve_catalog_id(provider, "Old Movie", hints) is None


@pytest.mark.asyncio
async def test_search_errors_propagate():
    provider = make_provider([])
    provider.search.side_effect = CatalogFetchError("boom")

    with pytest.raises(CatalogFetchError):
        await resolve_catalog_id(provider, "Title", SearchHints(type=MediaType.MOVIE))


def test_never_returns_mismatched_type():
    candidates = [
        movie("m", "Vincenzo"),
        series("s", "Vincenzo Special"),
        CatalogCandidate(id="untyped", title="Vincenzo"),
    ]

    ranked = rank_candidates("vincenzo", candidates, SearchHints(type=MediaType.SERIES))

    assert [c.id for c in ranked] == ["s"]


def test_year_filter_excludes_closest_title():
    candidates = [
        movie("exact-2012", "Inception", "2012-01-01"),
        movie("near-2010", "Inception The Cobol Job", "2010-07-16"),
    ]
    hints = SearchHints(type=MediaType.MOVIE, year=2010)

    ranked = rank_candidates("inception", candidates, hints)

    assert [c.id for c in ranked] == ["near-2010"]


def test_year_filter_only_applies_to_movies():
    candidates = [series("s", "Show")]
    hints = SearchHints(type=MediaType.SERIES, year=2010)

    assert [c.id for c in rank_candidates("show", candidates, hints)] == ["s"]


@pytest.mark.parametrize(
    "seasons, accepted",
    [(2, False), (3, True), (5, True), (7, True), (8, False), (None, False)],
)
def test_season_tolerance(seasons, accepted):
    candidates = [series("s", "Show", seasons=seasons)]
    hints = SearchHints(type=MediaType.SERIES, total_seasons=5)

    ranked = rank_candidates("show", candidates, hints)

    assert bool(ranked) is accepted


def test_missing_season_count_counts_as_zero():
    candidates = [series("s", "Show")]
    hints = SearchHints(type=MediaType.SERIES, total_seasons=1)

    assert [c.id for c in rank_candidates("show", candidates, hints)] == ["s"]


def test_ties_keep_provider_order():
    candidates = [series(str(i), "Same Title") for i in range(5)]
    hints = SearchHints(type=MediaType.SERIES)

    for _ in range(3):
        ranked = rank_candidates("same title", candidates, hints)
        assert [c.id for c in ranked] == ["0", "1", "2", "3", "4"]
