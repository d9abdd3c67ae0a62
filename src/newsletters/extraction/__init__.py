"""Heuristic newsletter article extraction engine."""

from src.newsletters.extraction.classifier import ContentClassifier
from src.newsletters.extraction.config import ExtractionSettings
from src.newsletters.extraction.dedup import dedupe, title_similarity
from src.newsletters.extraction.html_pass import HTML_STRATEGIES, extract_html
from src.newsletters.extraction.pipeline import NewsletterPipeline
from src.newsletters.extraction.summary import SummaryNormalizer
from src.newsletters.extraction.text_pass import TEXT_STRATEGIES, extract_text
from src.newsletters.extraction.urls import UrlResolver

__all__ = [
    "HTML_STRATEGIES",
    "TEXT_STRATEGIES",
    "ContentClassifier",
    "ExtractionSettings",
    "NewsletterPipeline",
    "SummaryNormalizer",
    "UrlResolver",
    "dedupe",
    "extract_html",
    "extract_text",
    "title_similarity",
]
