"""Random wordset selection and vocabulary merging."""

import random

from src.models import Wordset


class InsufficientWordsets(ValueError):
    """Raised when selecting from a collection that is too small."""

    pass


def pick_one(wordsets: list[Wordset], rng: random.Random | None = None) -> Wordset:
    """Pick one wordset uniformly at random."""
    if not wordsets:
        raise InsufficientWordsets("Cannot pick from an empty wordset collection")
    rng = rng or random.Random()
    return wordsets[rng.randrange(len(wordsets))]


def pick_two_distinct(
    wordsets: list[Wordset], rng: random.Random | None = None
) -> tuple[Wordset, Wordset]:
    """
    Pick two different wordsets uniformly at random.

    The second pick is redrawn until it lands on a different element than
    the first. A single-element collection returns that element twice.

    Args:
        wordsets: Collection to pick from (must be non-empty)
        rng: Random source; a fresh one is used if omitted

    Returns:
        Tuple of (first, second) wordsets
    """
    if not wordsets:
        raise InsufficientWordsets("Cannot pick from an empty wordset collection")
    rng = rng or random.Random()

    first = rng.randrange(len(wordsets))
    second = rng.randrange(len(wordsets))
    while second == first and len(wordsets) > 1:
        second = rng.randrange(len(wordsets))

    return wordsets[first], wordsets[second]


def merge_vocabulary(*wordsets: Wordset) -> list[str]:
    """Union of words across wordsets, duplicates removed, first-seen order."""
    return list(dict.fromkeys(word for wordset in wordsets for word in wordset))
