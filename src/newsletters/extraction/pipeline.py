"""Pipeline orchestrating the extraction passes for a single newsletter message."""

import logging
from datetime import UTC, datetime, timedelta

from src.newsletters.base.models import Article, ArticleCandidate, RawMessage
from src.newsletters.extraction.config import ExtractionSettings
from src.newsletters.extraction.context import ExtractionContext
from src.newsletters.extraction.dedup import dedupe
from src.newsletters.extraction.html_pass import HTML_STRATEGIES, HtmlStrategy, extract_html
from src.newsletters.extraction.text_pass import TEXT_STRATEGIES, TextStrategy, extract_text
from src.newsletters.extraction.tree import parse_document

logger = logging.getLogger(__name__)


class NewsletterPipeline:
    """Turn one raw newsletter message into a deduplicated list of articles.

    The pipeline holds only static configuration, so one instance can process
    any number of messages, including concurrently.
    """

    def __init__(
        self,
        settings: ExtractionSettings | None = None,
        *,
        html_strategies: tuple[HtmlStrategy, ...] = HTML_STRATEGIES,
        text_strategies: tuple[TextStrategy, ...] = TEXT_STRATEGIES,
    ) -> None:
        """Initialise the pipeline.

        :param settings: Extraction settings, loaded from the environment if omitted.
        :param html_strategies: Ordered strategies for the HTML pass.
        :param text_strategies: Ordered strategies for the text pass.
        """
        self._settings = settings or ExtractionSettings()
        self._context = ExtractionContext.from_settings(self._settings)
        self._html_strategies = html_strategies
        self._text_strategies = text_strategies

    @property
    def settings(self) -> ExtractionSettings:
        """The settings this pipeline was built with."""
        return self._settings

    def process(self, message: RawMessage, *, now: datetime | None = None) -> list[Article]:
        """Extract articles from a newsletter message.

        :param message: The raw message.
        :param now: Reference time for the freshness check, defaults to the current time.
        :returns: Articles in order: HTML-sourced first, then text-only additions.
        """
        skip_reason = self.should_skip(message, now=now)
        if skip_reason is not None:
            logger.info(f"Skipping message {message.subject!r}: {skip_reason}")
            return []

        source = self._context.classifier.classify_source(message.sender, message.subject)
        logger.info(f"Processing {source.value} newsletter: {message.subject!r}")

        pool: list[ArticleCandidate] = []
        if message.html:
            pool.extend(self._run_html_pass(message.html))
        pool.extend(self._run_text_pass(message.text))

        unique = dedupe(pool, self._settings.similarity_threshold)
        articles = [
            Article(
                **candidate.model_dump(),
                newsletter_source=source,
                published_at=message.received_at,
            )
            for candidate in unique
        ]

        logger.info(
            f"Extracted {len(articles)} article(s) from {message.subject!r} "
            f"({len(pool)} candidate(s) before deduplication)"
        )
        return articles

    def should_skip(self, message: RawMessage, *, now: datetime | None = None) -> str | None:
        """Decide whether a message is ineligible for extraction.

        :param message: The raw message.
        :param now: Reference time for the freshness check.
        :returns: A human-readable reason to skip, or None to process it.
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)

        window = timedelta(hours=self._settings.freshness_window_hours)
        if now - message.received_at > window:
            return f"older than {self._settings.freshness_window_hours}h"

        if self._looks_transactional(message):
            return "not a newsletter"

        return None

    def _looks_transactional(self, message: RawMessage) -> bool:
        """Detect confirmation/welcome style mail with a short body."""
        subject = message.subject.lower()
        if not any(k in subject for k in self._settings.non_newsletter_subject_keywords):
            return False
        return len(self._visible_body(message)) < self._settings.min_newsletter_body_length

    @staticmethod
    def _visible_body(message: RawMessage) -> str:
        if message.text.strip():
            return message.text.strip()
        document = parse_document(message.html)
        return document.text() if document is not None else ""

    def _run_html_pass(self, html: str) -> list[ArticleCandidate]:
        try:
            return extract_html(html, self._context, self._html_strategies)
        except Exception:
            logger.exception("HTML pass failed, continuing with text pass")
            return []

    def _run_text_pass(self, text: str) -> list[ArticleCandidate]:
        try:
            return extract_text(text, self._context, self._text_strategies)
        except Exception:
            logger.exception("Text pass failed")
            return []
