"""Base Pydantic models for newsletter processing."""

import re
from datetime import UTC, datetime
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.enums import NewsletterSource, Provenance, TopicCategory

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f-\x9f]")

MIN_TITLE_LENGTH = 10
MAX_TITLE_LENGTH = 200
MAX_SUMMARY_LENGTH = 500


class RawMessage(BaseModel):
    """A single newsletter email as handed over by the mail intake."""

    model_config = ConfigDict(frozen=True)

    subject: str = ""
    sender: str = ""
    received_at: datetime
    html: str = ""
    text: str = ""
    message_id: str | None = None

    @field_validator("received_at")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC.

        :param value: The parsed timestamp.
        :returns: A timezone-aware timestamp.
        """
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @field_validator("html", "text", "subject", "sender", mode="before")
    @classmethod
    def none_to_empty(cls, value: str | None) -> str:
        """Normalise missing bodies and headers to empty strings."""
        return value or ""


class LinkCandidate(BaseModel):
    """A hyperlink found while walking a document, before any filtering."""

    model_config = ConfigDict(frozen=True)

    href: str
    anchor_text: str = ""
    surrounding_text: str = ""
    provenance: Provenance


class ArticleCandidate(BaseModel):
    """A tentative article extracted by one of the passes."""

    title: str = Field(..., min_length=MIN_TITLE_LENGTH, max_length=MAX_TITLE_LENGTH)
    summary: str = Field(default="", max_length=MAX_SUMMARY_LENGTH)
    url: str
    category: TopicCategory | None = None
    read_time_minutes: int | None = Field(default=None, ge=0)
    provenance: Provenance
    # Index of the source anchor or line within its document, not carried into Article
    position: int | None = Field(default=None, ge=0, exclude=True)

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value: str) -> str:
        """Strip control characters and collapse whitespace in the title."""
        if not isinstance(value, str):
            return value
        cleaned = CONTROL_CHARS_PATTERN.sub(" ", value)
        return re.sub(r"\s+", " ", cleaned).strip()

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Ensure the URL is an absolute http(s) URL.

        :param value: The canonical URL.
        :returns: The URL unchanged.
        :raises ValueError: If the URL is not absolute http(s).
        """
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Not an absolute http(s) URL: {value}")
        return value


class Article(ArticleCandidate):
    """A deduplicated article ready to hand to downstream collaborators."""

    newsletter_source: NewsletterSource = NewsletterSource.TECH
    published_at: datetime


class ProcessingResult(BaseModel):
    """Result of processing a batch of newsletter messages."""

    messages_processed: int = 0
    messages_skipped: int = 0
    articles_extracted: int = 0
    articles_new: int = 0
    articles_duplicate: int = 0
    errors: list[str] = Field(default_factory=list)
    latest_received_at: datetime | None = None
