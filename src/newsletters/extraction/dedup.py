"""Deduplication of article candidates across and within extraction passes."""

import logging
from collections.abc import Iterable

from src.newsletters.base.models import ArticleCandidate

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.8

EXACT_MATCH_SCORE = 1.0
CONTAINMENT_SCORE = 0.9


def title_similarity(a: str, b: str) -> float:
    """Score how similar two titles are.

    1.0 for a case-insensitive match, 0.9 when one title contains the other,
    otherwise the Jaccard overlap of their lower-cased word sets.

    :param a: First title.
    :param b: Second title.
    :returns: A score between 0.0 and 1.0.
    """
    first = a.strip().lower()
    second = b.strip().lower()
    if not first or not second:
        return 0.0
    if first == second:
        return EXACT_MATCH_SCORE
    if first in second or second in first:
        return CONTAINMENT_SCORE

    first_words = set(first.split())
    second_words = set(second.split())
    union = first_words | second_words
    if not union:
        return 0.0
    return len(first_words & second_words) / len(union)


def dedupe[T: ArticleCandidate](
    candidates: Iterable[T],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[T]:
    """Drop later candidates that repeat an earlier one.

    A candidate is a duplicate when its URL or lower-cased title was already
    seen, or when its title is more than threshold similar to an accepted one.
    The first occurrence wins and order is preserved, so the operation is
    idempotent.

    :param candidates: Candidates in priority order.
    :param threshold: Similarity above which two titles are duplicates.
    :returns: The unique candidates.
    """
    accepted: list[T] = []
    seen_keys: set[str] = set()
    dropped = 0

    for candidate in candidates:
        keys = {f"url:{candidate.url}", f"title:{candidate.title.lower()}"}
        if keys & seen_keys:
            dropped += 1
            continue
        if any(title_similarity(candidate.title, kept.title) > threshold for kept in accepted):
            dropped += 1
            continue

        accepted.append(candidate)
        seen_keys.update(keys)

    if dropped:
        logger.debug(f"Dropped {dropped} duplicate candidate(s), kept {len(accepted)}")
    return accepted
