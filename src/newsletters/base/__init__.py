"""Base models, intake adapters and services for newsletter processing."""

from src.newsletters.base.intake import (
    parse_datetime,
    raw_message_from_graph,
    raw_message_from_mime,
)
from src.newsletters.base.models import (
    Article,
    ArticleCandidate,
    LinkCandidate,
    ProcessingResult,
    RawMessage,
)
from src.newsletters.base.service import NewsletterIngestionService
from src.newsletters.base.store import ArticleSink, InMemoryArticleStore, compute_url_hash

__all__ = [
    "Article",
    "ArticleCandidate",
    "ArticleSink",
    "InMemoryArticleStore",
    "LinkCandidate",
    "NewsletterIngestionService",
    "ProcessingResult",
    "RawMessage",
    "compute_url_hash",
    "parse_datetime",
    "raw_message_from_graph",
    "raw_message_from_mime",
]
