"""Application wiring for newsletter ingestion."""

import logging
from collections.abc import Sequence

from src.newsletters.base.service import NewsletterIngestionService
from src.newsletters.base.store import ArticleSink, InMemoryArticleStore
from src.newsletters.extraction.config import ExtractionSettings
from src.newsletters.extraction.pipeline import NewsletterPipeline
from src.observability.sentry import init_sentry
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def create_ingestion_service(
    settings: ExtractionSettings | None = None,
    sinks: Sequence[ArticleSink] | None = None,
) -> NewsletterIngestionService:
    """Build an ingestion service around a freshly configured pipeline.

    :param settings: Extraction settings, loaded from the environment if omitted.
    :param sinks: Downstream collaborators, an in-memory store if omitted.
    :returns: The ingestion service.
    """
    pipeline = NewsletterPipeline(settings or ExtractionSettings())
    return NewsletterIngestionService(
        pipeline,
        sinks if sinks is not None else [InMemoryArticleStore()],
    )


def bootstrap(
    settings: ExtractionSettings | None = None,
    sinks: Sequence[ArticleSink] | None = None,
) -> NewsletterIngestionService:
    """Configure logging and Sentry, then build the ingestion service.

    Entry points (schedulers, workers) call this once at start-up.

    :param settings: Extraction settings, loaded from the environment if omitted.
    :param sinks: Downstream collaborators.
    :returns: The ingestion service.
    """
    configure_logging()
    if init_sentry():
        logger.info("Sentry initialised")

    return create_ingestion_service(settings, sinks)
