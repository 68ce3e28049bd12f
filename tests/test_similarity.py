import pytest

from reelbridge.utils.strings import normalize_title, similarity


@pytest.mark.parametrize("text", ["a", "breaking bad", "Vincenzo", "x1"])
def test_similarity_is_reflexive(text):
    assert similarity(text, text) == 1.0


def test_similarity_empty_strings():
    assert similarity("", "") == 1.0
    assert similarity("", "abc") == 0.0
    assert similarity("abc", "") == 0.0


def test_similarity_short_unequal_strings():
    """Single characters have no bigrams, so unequal ones never match."""
    assert similarity("a", "b") == 0.0
    assert similarity("a", "ab") == 0.0


def test_similarity_is_symmetric():
    pairs = [
        ("breaking bad", "breaking bad spin-off"),
        ("healed", "sealed"),
        ("night", "nacht"),
    ]
    for first, second in pairs:
        assert similarity(first, second) == similarity(second, first)


def test_similarity_known_values():
    # he ea al le ed / se ea al le ed -> 4 shared of 5 + 5
    assert similarity("healed", "sealed") == pytest.approx(0.8)
    assert similarity("night", "nacht") == pytest.approx(0.25)
    assert similarity("abc", "xyz") == 0.0


def test_similarity_counts_repeated_bigrams_once_each():
    # "aaaa" has aa x3, "aa" has aa x1 -> only one shared
    assert similarity("aaaa", "aa") == pytest.approx(2 * 1 / (3 + 1))


def test_similarity_ignores_whitespace():
    assert similarity("breaking bad", "breakingbad") == 1.0


def test_closer_title_scores_higher():
    target = "breaking bad"
    assert similarity(target, "breaking bad") > similarity(
        target, "breaking bad spinoff"
    )


def test_normalize_title():
    assert normalize_title("Spider-Man: No Way Home (2021)") == "spiderman no way home 2021"
    assert normalize_title("Amélie") == "amlie"
    assert normalize_title("") == ""
