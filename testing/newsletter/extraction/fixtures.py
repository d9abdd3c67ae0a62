"""Shared fixtures for extraction tests."""

from urllib.parse import quote

from src.enums import Provenance
from src.newsletters.base.models import ArticleCandidate
from src.newsletters.extraction.config import ExtractionSettings
from src.newsletters.extraction.context import ExtractionContext

TRACKING_PREFIX = "https://tracking.tldrnewsletter.com/CL0/"


def tracking_url(destination: str) -> str:
    """Wrap a destination the way TLDR click tracking does."""
    return f"{TRACKING_PREFIX}{quote(destination, safe='')}/1/0100018d0f7c-a1b2c3/abc=123"


def make_context(**overrides: object) -> ExtractionContext:
    """Build an extraction context from default settings plus overrides."""
    return ExtractionContext.from_settings(ExtractionSettings(_env_file=None, **overrides))


def make_candidate(
    title: str,
    url: str = "https://example.com/article",
    provenance: Provenance = Provenance.HTML,
) -> ArticleCandidate:
    """Build a minimal ArticleCandidate."""
    return ArticleCandidate(title=title, summary="", url=url, provenance=provenance)
