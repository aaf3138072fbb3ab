"""
Title Similarity using Dice's Coefficient
Compares strings by their adjacent-character bigrams

Used by the quality gate to spot course titles copied from other instructors.
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List

_WHITESPACE = re.compile(r"\s+")


@dataclass
class Rating:
    """Similarity of one candidate target"""
    target: str
    rating: float  # 0.0 to 1.0


@dataclass
class BestMatch:
    """Result of matching one string against many"""
    target: str
    rating: float
    index: int
    ratings: List[Rating]


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def compare_two_strings(first: str, second: str) -> float:
    """
    Dice's coefficient over adjacent-character bigrams

    Whitespace is ignored and the comparison is case-sensitive.

    Returns:
        1.0 for identical strings, 0.0 when either string is shorter than
        two characters, otherwise 2 * shared_bigrams / total_bigrams
    """
    first = _WHITESPACE.sub("", first)
    second = _WHITESPACE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    # Multiset intersection: a bigram repeated in both counts once per pair
    shared = sum((_bigrams(first) & _bigrams(second)).values())

    return (2.0 * shared) / (len(first) + len(second) - 2)


def find_best_match(main: str, targets: List[str]) -> BestMatch:
    """
    Rate main against every target and return the highest rated one

    Ties resolve to the earliest target.

    Raises:
        ValueError: targets is empty
    """
    if not targets:
        raise ValueError("find_best_match needs at least one target")

    ratings = [Rating(target=t, rating=compare_two_strings(main, t)) for t in targets]

    best_index = 0
    for i, current in enumerate(ratings):
        if current.rating > ratings[best_index].rating:
            best_index = i

    best = ratings[best_index]
    return BestMatch(target=best.target, rating=best.rating, index=best_index, ratings=ratings)
