import pytest
from unittest.mock import MagicMock, patch

import requests
import tmdbsimple as tmdb

from reelbridge.core.errors import TMDBError, UpstreamFetchError
from reelbridge.models.media import MediaResult, MediaType, PersonResult
from reelbridge.services.tmdb import (
    TMDBSource,
    get_tmdb_source,
    image_url,
    parse_page,
    parse_result,
)


def test_image_url():
    assert image_url("/a.jpg") == "https://image.tmdb.org/t/p/original/a.jpg"
    assert image_url("/a.jpg", "w300") == "https://image.tmdb.org/t/p/w300/a.jpg"
    assert image_url(None) is None


def test_parse_result_movie_and_series():
    movie = parse_result(
        {"id": 1, "media_type": "movie", "title": "Heat", "release_date": "1995-12-15"}
    )
    series = parse_result(
        {"id": 2, "media_type": "tv", "name": "Lost", "first_air_date": "2004-09-22", "vote_average": 8.1}
    )

    assert isinstance(movie, MediaResult)
    assert movie.type == MediaType.MOVIE
    assert movie.release_date == "1995"
    assert series.type == MediaType.SERIES
    assert series.title == "Lost"
    assert series.rating == 8.1


def test_parse_result_person():
    person = parse_result(
        {
            "id": 3,
            "media_type": "person",
            "name": "Al Pacino",
            "popularity": 20.5,
            "profile_path": "/al.jpg",
            "known_for": [{"id": 1, "media_type": "movie", "title": "Heat"}],
        }
    )

    assert isinstance(person, PersonResult)
    assert person.rating == 20.5
    assert person.movies[0].title == "Heat"


def test_parse_page():
    page = parse_page(
        {"total_pages": 2, "total_results": 21, "results": [{"id": 1, "title": "Heat"}]},
        page=1,
    )

    assert page.has_next_page is True
    assert page.total_results == 21
    assert page.results[0].type == MediaType.MOVIE


@pytest.mark.asyncio
async def test_fetch_details_uses_series_endpoint():
    with patch("reelbridge.services.tmdb.tmdb.TV") as MockTV:
        MockTV.return_value.info.return_value = {"id": 1396, "name": "Breaking Bad"}

        data = await TMDBSource().fetch_details("1396", MediaType.SERIES)

    assert data["name"] == "Breaking Bad"
    MockTV.assert_called_once_with("1396")
    kwargs = MockTV.return_value.info.call_args.kwargs
    assert "credits" in kwargs["append_to_response"]
    assert kwargs["language"] == "en-US"


@pytest.mark.asyncio
async def test_fetch_season_details():
    with patch("reelbridge.services.tmdb.tmdb.TV_Seasons") as MockSeasons:
        MockSeasons.return_value.info.return_value = {"episodes": []}

        data = await TMDBSource().fetch_season_details("1396", 2)

    assert data == {"episodes": []}
    MockSeasons.assert_called_once_with("1396", 2)


def test_tmdb_exception_chaining():
    """TMDBError preserves the original exception."""
    with patch("reelbridge.services.tmdb.tmdb.Movies") as MockMovies:
        original_exc = requests.exceptions.HTTPError("404 Client Error")
        MockMovies.return_value.info.side_effect = original_exc

        with pytest.raises(TMDBError) as excinfo:
            TMDBSource()._fetch_details_sync("999", MediaType.MOVIE)

    assert excinfo.value.__cause__ is original_exc
    assert excinfo.value.original_exception is original_exc
    assert isinstance(excinfo.value, UpstreamFetchError)


@pytest.mark.asyncio
async def test_search_wraps_errors():
    with patch("reelbridge.services.tmdb.tmdb.Search") as MockSearch:
        MockSearch.return_value.multi.side_effect = requests.exceptions.ConnectionError()

        with pytest.raises(TMDBError):
            await TMDBSource().search("heat")


@pytest.mark.asyncio
async def test_fetch_trending():
    with patch("reelbridge.services.tmdb.tmdb.Trending") as MockTrending:
        MockTrending.return_value.info.return_value = {
            "total_pages": 1,
            "total_results": 1,
            "results": [{"id": 1, "media_type": "tv", "name": "Lost"}],
        }

        page = await TMDBSource().fetch_trending("tv", "week")

    MockTrending.assert_called_once_with(media_type="tv", time_window="week")
    assert page.has_next_page is False
    assert page.results[0].title == "Lost"


def test_api_key_from_settings(monkeypatch):
    monkeypatch.setenv("TMDB_API_KEY", "from-env")

    with patch("reelbridge.services.tmdb.tmdb") as mock_tmdb:
        TMDBSource()

    assert mock_tmdb.API_KEY == "from-env"


def test_close_releases_proxy_session(monkeypatch):
    monkeypatch.setenv("PROXY", "http://proxy.test:8080")
    source = TMDBSource()
    session = source.session

    assert tmdb.REQUESTS_SESSION is session
    assert session.proxies["https"] == "http://proxy.test:8080"

    with patch.object(session, "close") as mock_close:
        source.close()

    mock_close.assert_called_once()
    assert tmdb.REQUESTS_SESSION is None
    assert source.session is None


def test_tmdb_source_is_shared():
    get_tmdb_source.cache_clear()
    try:
        assert get_tmdb_source() is get_tmdb_source()
    finally:
        get_tmdb_source.cache_clear()
