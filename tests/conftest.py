import os

import pytest

# Settings require a TMDB key; tests never reach the real API.
os.environ.setdefault("TMDB_API_KEY", "test-key")


@pytest.fixture(autouse=True)
def clear_settings_cache():
    from reelbridge.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
