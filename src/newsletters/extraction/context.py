"""Shared collaborators and helpers for the extraction strategies."""

import logging
import re
from dataclasses import dataclass

from pydantic import ValidationError

from src.enums import Provenance
from src.newsletters.base.models import ArticleCandidate
from src.newsletters.extraction.classifier import ContentClassifier
from src.newsletters.extraction.config import ExtractionSettings
from src.newsletters.extraction.summary import SummaryNormalizer, collapse_whitespace
from src.newsletters.extraction.urls import UrlResolver

logger = logging.getLogger(__name__)

# Captures the minutes of "(4 minute read)", "5 min read", "12-minute read"
READ_TIME_PATTERN = re.compile(r"(\d{1,3})\s*[- ]?\s*min(?:ute)?s?\s+read\b", re.IGNORECASE)

# Bracketed read-time markers, removed from titles and summaries
BRACKETED_READ_TIME_PATTERN = re.compile(
    r"\s*[\(\[]\s*\d{1,3}\s*[- ]?\s*min(?:ute)?s?\s+read\s*[\)\]]", re.IGNORECASE
)

LEADING_BULLET_PATTERN = re.compile(r"^\s*[-•*·>]+\s*")


@dataclass(frozen=True)
class ExtractionContext:
    """Everything a strategy needs to turn links into candidates."""

    settings: ExtractionSettings
    resolver: UrlResolver
    classifier: ContentClassifier
    normalizer: SummaryNormalizer

    @classmethod
    def from_settings(cls, settings: ExtractionSettings) -> "ExtractionContext":
        """Build the resolver, classifier and normalizer from one settings object.

        :param settings: Extraction settings.
        :returns: A ready-to-use context.
        """
        return cls(
            settings=settings,
            resolver=UrlResolver(settings),
            classifier=ContentClassifier(settings),
            normalizer=SummaryNormalizer(settings),
        )


def clean_title(raw: str) -> str:
    """Remove bullets, read-time markers and stray separators from a title.

    :param raw: The raw title text.
    :returns: The cleaned title.
    """
    title = BRACKETED_READ_TIME_PATTERN.sub("", raw or "")
    title = LEADING_BULLET_PATTERN.sub("", title)
    return collapse_whitespace(title).strip(" -|:–—")


def strip_read_time(text: str) -> str:
    """Remove bracketed read-time markers from text."""
    return BRACKETED_READ_TIME_PATTERN.sub(" ", text or "")


def find_read_time(*texts: str) -> int | None:
    """Return the minutes of the first read-time marker found in the given texts."""
    for text in texts:
        match = READ_TIME_PATTERN.search(text or "")
        if match:
            return int(match.group(1))
    return None


def build_candidate(  # noqa: PLR0913
    *,
    title: str,
    summary: str,
    url: str,
    read_time_minutes: int | None,
    provenance: Provenance,
    context: ExtractionContext,
    position: int | None = None,
) -> ArticleCandidate | None:
    """Create an ArticleCandidate, discarding it if validation fails.

    :param title: Cleaned title.
    :param summary: Normalised summary; the title is used when empty.
    :param url: Canonical URL.
    :param read_time_minutes: Optional read time.
    :param provenance: Pass that produced the candidate.
    :param context: Extraction context, used for topic detection.
    :param position: Index of the source anchor or line within its document.
    :returns: The candidate, or None if it violates the model constraints.
    """
    summary = summary or title[: context.settings.summary_max_length]
    category = context.classifier.detect_category(f"{title} {summary}")

    try:
        return ArticleCandidate(
            title=title,
            summary=summary,
            url=url,
            category=category,
            read_time_minutes=read_time_minutes,
            provenance=provenance,
            position=position,
        )
    except ValidationError as e:
        logger.debug(f"Discarding invalid candidate {title!r}: {e.error_count()} error(s)")
        return None
