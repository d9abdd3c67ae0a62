"""Configuration for the newsletter extraction engine using pydantic-settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.enums import NewsletterSource, TopicCategory
from src.newsletters.extraction import rules
from src.paths import ENV_FILE


class ExtractionSettings(BaseSettings):
    """Static configuration for the extraction engine.

    All settings can be overridden from environment variables with the
    NEWSLETTER_ prefix (list and dict values as JSON). Settings are loaded once
    by the caller and passed explicitly into the pipeline.

    :param tracking_host_prefixes: Host prefixes of click-tracking redirects.
    :param tracking_params: Query parameter names stripped from URLs.
    :param tracking_param_prefixes: Query parameter prefixes stripped from URLs.
    :param domain_blocklist: Substrings of host+path that are never articles.
    :param admin_keywords: Anchor text fragments of administrative links.
    :param admin_domains: Destination fragments of administrative links.
    :param navigational_phrases: Exact titles that are navigation, not articles.
    :param sponsor_markers: Markers of paid placements in surrounding text.
    :param promotional_patterns: Regexes removed from summaries.
    :param topic_keywords: Ordered topic to keyword table.
    :param source_patterns: Ordered newsletter source to regex table.
    :param similarity_threshold: Title similarity above which candidates are duplicates.
    :param freshness_window_hours: Maximum message age eligible for processing.
    :param summary_max_length: Hard cap on summary length.
    :param summary_max_sentences: Number of complete sentences kept in a summary.
    :param summary_fallback_length: Length of the fallback summary without sentences.
    :param min_newsletter_body_length: Bodies shorter than this may be non-newsletters.
    :param non_newsletter_subject_keywords: Subject keywords of transactional mail.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEWSLETTER_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tracking_host_prefixes: list[str] = Field(
        default_factory=lambda: list(rules.TRACKING_HOST_PREFIXES)
    )
    tracking_params: list[str] = Field(default_factory=lambda: list(rules.TRACKING_PARAMS))
    tracking_param_prefixes: list[str] = Field(
        default_factory=lambda: list(rules.TRACKING_PARAM_PREFIXES)
    )
    domain_blocklist: list[str] = Field(default_factory=lambda: list(rules.DOMAIN_BLOCKLIST))
    admin_keywords: list[str] = Field(default_factory=lambda: list(rules.ADMIN_KEYWORDS))
    admin_domains: list[str] = Field(default_factory=lambda: list(rules.ADMIN_DOMAINS))
    navigational_phrases: list[str] = Field(
        default_factory=lambda: list(rules.NAVIGATIONAL_PHRASES)
    )
    sponsor_markers: list[str] = Field(default_factory=lambda: list(rules.SPONSOR_MARKERS))
    promotional_patterns: list[str] = Field(
        default_factory=lambda: list(rules.PROMOTIONAL_PATTERNS)
    )
    topic_keywords: dict[TopicCategory, list[str]] = Field(
        default_factory=lambda: {
            topic: list(words) for topic, words in rules.TOPIC_KEYWORDS.items()
        }
    )
    source_patterns: list[tuple[NewsletterSource, list[str]]] = Field(
        default_factory=lambda: [
            (source, list(patterns)) for source, patterns in rules.SOURCE_PATTERNS
        ]
    )

    similarity_threshold: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Title similarity above which two candidates are duplicates",
    )
    freshness_window_hours: int = Field(
        default=24,
        ge=1,
        description="Maximum message age in hours",
    )
    summary_max_length: int = Field(
        default=500,
        ge=50,
        le=500,
        description="Hard cap on summary length in characters",
    )
    summary_max_sentences: int = Field(default=3, ge=1, le=10)
    summary_fallback_length: int = Field(default=300, ge=20, le=500)
    min_newsletter_body_length: int = Field(default=1000, ge=0)
    non_newsletter_subject_keywords: list[str] = Field(
        default_factory=lambda: list(rules.NON_NEWSLETTER_SUBJECT_KEYWORDS)
    )

    @field_validator("tracking_host_prefixes")
    @classmethod
    def strip_schemes(cls, v: list[str]) -> list[str]:
        """Store tracking host prefixes without a scheme.

        :param v: Raw prefixes, possibly including http(s)://.
        :returns: Prefixes with the scheme removed.
        """
        return [prefix.split("://", 1)[-1] for prefix in v if prefix.strip()]
