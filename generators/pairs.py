"""Unordered pair iteration over a catalog."""

from itertools import combinations
from typing import Iterator, Sequence, Tuple, TypeVar

T = TypeVar("T")


def unique_pairs(collection: Sequence[T]) -> Iterator[Tuple[T, T]]:
    """Yield every unordered pair exactly once, in catalog order.

    (a, b) is yielded only when a comes before b in the collection, so no
    pair appears in both orders and no item is paired with itself.
    A collection of n items yields n * (n - 1) / 2 pairs.
    """
    return combinations(collection, 2)


def pair_count(n: int) -> int:
    return n * (n - 1) // 2
