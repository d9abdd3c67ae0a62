"""Downstream article sink interface and an in-memory implementation."""

import hashlib
import logging
from collections.abc import Sequence
from typing import Protocol

from src.newsletters.base.models import Article

logger = logging.getLogger(__name__)


def compute_url_hash(url: str) -> str:
    """Compute SHA256 hash of a URL for deduplication.

    Normalises the URL by lowercasing, stripping whitespace, and removing
    trailing slashes before hashing.

    :param url: The URL to hash.
    :returns: The hex-encoded SHA256 hash (64 characters).
    """
    normalised = url.lower().strip().rstrip("/")
    return hashlib.sha256(normalised.encode()).hexdigest()


class ArticleSink(Protocol):
    """A downstream collaborator (store, indexer, embedder) receiving articles.

    Implementations treat the article URL as a natural key and silently ignore
    re-submission of an already stored URL.
    """

    def store(self, articles: Sequence[Article]) -> tuple[int, int]:
        """Store articles.

        :param articles: Articles extracted from one message.
        :returns: A tuple of (new_articles_count, duplicate_articles_count).
        """
        ...


class InMemoryArticleStore:
    """Article sink keeping articles in memory, keyed by URL hash."""

    def __init__(self) -> None:
        """Initialise an empty store."""
        self._articles: dict[str, Article] = {}

    def store(self, articles: Sequence[Article]) -> tuple[int, int]:
        """Store articles whose URL has not been seen before.

        :param articles: Articles extracted from one message.
        :returns: A tuple of (new_articles_count, duplicate_articles_count).
        """
        new_count = 0
        dup_count = 0

        for article in articles:
            url_hash = compute_url_hash(article.url)
            if url_hash in self._articles:
                dup_count += 1
                continue
            self._articles[url_hash] = article
            new_count += 1

        logger.debug(f"Stored {new_count} new article(s), ignored {dup_count} duplicate(s)")
        return new_count, dup_count

    def get(self, url: str) -> Article | None:
        """Look up a stored article by URL."""
        return self._articles.get(compute_url_hash(url))

    @property
    def articles(self) -> list[Article]:
        """All stored articles in insertion order."""
        return list(self._articles.values())

    def __len__(self) -> int:
        return len(self._articles)
