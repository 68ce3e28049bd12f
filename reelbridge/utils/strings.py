"""String helpers for matching titles across sources."""

import re
from collections import Counter

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9 ]")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Lower-case a title and drop everything but ASCII letters, digits and spaces."""
    return _NON_ALPHANUMERIC.sub("", title).lower()


def _bigrams(text: str) -> Counter:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def similarity(first: str, second: str) -> float:
    """Return the Dice coefficient of the character bigrams of two strings.

    Whitespace is ignored. Each bigram of one string can be matched against
    the other at most once, so the score is ``2 * shared / (len_a + len_b)``
    where the lengths are bigram counts. The result lies in ``[0, 1]`` and is
    symmetric; equal strings (including two empty strings) score 1.
    """
    first = _WHITESPACE.sub("", first)
    second = _WHITESPACE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = _bigrams(first)
    second_bigrams = _bigrams(second)
    shared = sum((first_bigrams & second_bigrams).values())

    return (2.0 * shared) / (len(first) + len(second) - 2)
