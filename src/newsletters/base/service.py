"""Service running the extraction pipeline over batches of newsletter messages."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from src.newsletters.base.models import ProcessingResult, RawMessage

if TYPE_CHECKING:
    from src.newsletters.base.store import ArticleSink
    from src.newsletters.extraction.pipeline import NewsletterPipeline

logger = logging.getLogger(__name__)


class NewsletterIngestionService:
    """Feed raw messages through the pipeline and hand articles to downstream sinks."""

    def __init__(self, pipeline: NewsletterPipeline, sinks: Sequence[ArticleSink] = ()) -> None:
        """Initialise the ingestion service.

        :param pipeline: The extraction pipeline.
        :param sinks: Downstream collaborators; the first sink's counts are reported.
        """
        self._pipeline = pipeline
        self._sinks = list(sinks)

    def process_messages(
        self,
        messages: Iterable[RawMessage],
        *,
        now: datetime | None = None,
    ) -> ProcessingResult:
        """Extract and store articles from a batch of messages.

        A failure on one message is recorded and does not stop the batch.

        :param messages: Raw messages from the mail intake.
        :param now: Reference time for freshness checks.
        :returns: A ProcessingResult with statistics.
        """
        result = ProcessingResult()

        for message in messages:
            try:
                self._process_single_message(message, result, now=now)
            except Exception as e:
                error_msg = f"Failed to process newsletter {message.subject!r}: {e}"
                logger.exception(error_msg)
                result.errors.append(error_msg)

        logger.info(
            f"Processing complete: {result.messages_processed} messages "
            f"({result.messages_skipped} skipped), {result.articles_extracted} articles "
            f"({result.articles_new} new, {result.articles_duplicate} duplicate)"
        )

        return result

    def _process_single_message(
        self,
        message: RawMessage,
        result: ProcessingResult,
        *,
        now: datetime | None,
    ) -> None:
        """Process a single message.

        :param message: The raw message.
        :param result: The ProcessingResult to update.
        :param now: Reference time for the freshness check.
        """
        if self._pipeline.should_skip(message, now=now) is not None:
            result.messages_skipped += 1
            return

        articles = self._pipeline.process(message, now=now)

        result.messages_processed += 1
        result.articles_extracted += len(articles)

        if result.latest_received_at is None or message.received_at > result.latest_received_at:
            result.latest_received_at = message.received_at

        if not articles:
            logger.debug(f"No articles in {message.subject!r}")
            return

        for index, sink in enumerate(self._sinks):
            new_count, dup_count = sink.store(articles)
            if index == 0:
                result.articles_new += new_count
                result.articles_duplicate += dup_count
