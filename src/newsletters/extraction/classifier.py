"""Heuristic classification of links, newsletter sources and article topics."""

import logging
import re

from src.enums import ContentLabel, NewsletterSource, TopicCategory
from src.newsletters.extraction.config import ExtractionSettings

logger = logging.getLogger(__name__)

# Matches "(4 minute read)", "5 min read", "12-minute read"
READ_TIME_MARKER_PATTERN = re.compile(r"\b\d{1,3}\s*[- ]?\s*min(?:ute)?s?\s+read\b", re.IGNORECASE)


def has_read_time_marker(text: str) -> bool:
    """Check whether text carries an "N minute read" counter.

    :param text: Any text span.
    :returns: True if a read-time marker is present.
    """
    return bool(READ_TIME_MARKER_PATTERN.search(text or ""))


def _word_pattern(phrases: list[str]) -> re.Pattern[str] | None:
    """Compile a case-insensitive alternation of whole-word phrases."""
    escaped = [re.escape(phrase.lower()) for phrase in phrases if phrase.strip()]
    if not escaped:
        return None
    return re.compile(r"\b(?:" + "|".join(escaped) + r")\b", re.IGNORECASE)


class ContentClassifier:
    """Label a link as article-worthy, administrative, navigational or sponsored."""

    def __init__(self, settings: ExtractionSettings) -> None:
        """Initialise the classifier.

        :param settings: Extraction settings holding the keyword tables.
        """
        self._admin_keywords = [k.lower() for k in settings.admin_keywords]
        self._admin_domains = [d.lower() for d in settings.admin_domains]
        self._navigational = {p.lower().strip() for p in settings.navigational_phrases}
        self._sponsor_markers = [m.lower() for m in settings.sponsor_markers]
        self._topics = [
            (topic, pattern)
            for topic, keywords in settings.topic_keywords.items()
            if (pattern := _word_pattern(keywords)) is not None
        ]
        self._sources = [
            (source, [re.compile(p, re.IGNORECASE) for p in patterns])
            for source, patterns in settings.source_patterns
        ]

    def classify(  # noqa: PLR0911
        self,
        title: str,
        href: str,
        surrounding_text: str,
        *,
        min_title_length: int = 3,
        max_title_length: int | None = 200,
    ) -> ContentLabel:
        """Classify a candidate link.

        Administrative links are checked first, then sponsor markers in the
        surrounding text. A read-time marker in the surrounding text overrides
        sponsor-looking language.

        :param title: The candidate title (usually the anchor text).
        :param href: The candidate destination.
        :param surrounding_text: Text of the enclosing block.
        :param min_title_length: Minimum accepted title length.
        :param max_title_length: Maximum accepted title length, None for unbounded.
        :returns: The classification label.
        """
        try:
            if self.is_admin(title, href):
                return ContentLabel.REJECT_ADMIN
            if self.is_sponsored(surrounding_text):
                return ContentLabel.REJECT_SPONSORED

            clean_title = (title or "").strip()
            if clean_title.lower() in self._navigational:
                return ContentLabel.REJECT_NAVIGATIONAL
            if len(clean_title) < min_title_length:
                return ContentLabel.REJECT_NAVIGATIONAL
            if max_title_length is not None and len(clean_title) > max_title_length:
                return ContentLabel.REJECT_NAVIGATIONAL
            return ContentLabel.ACCEPT
        except Exception:
            logger.warning(f"Classification failed for {title!r}", exc_info=True)
            return ContentLabel.REJECT_NAVIGATIONAL

    def is_admin(self, title: str, href: str) -> bool:
        """Check whether a link is an unsubscribe/manage/feedback style link.

        :param title: The anchor text.
        :param href: The link destination.
        :returns: True if the link is administrative.
        """
        title_lower = (title or "").lower()
        href_lower = (href or "").lower()
        if any(keyword in title_lower for keyword in self._admin_keywords):
            return True
        return any(domain in href_lower for domain in self._admin_domains)

    def is_sponsored(self, surrounding_text: str) -> bool:
        """Check whether surrounding text marks a paid placement.

        :param surrounding_text: Text of the enclosing block.
        :returns: True if a sponsor marker is present without a read-time marker.
        """
        text_lower = (surrounding_text or "").lower()
        if not any(marker in text_lower for marker in self._sponsor_markers):
            return False
        return not has_read_time_marker(text_lower)

    def detect_category(self, text: str) -> TopicCategory | None:
        """Tag text with the first topic whose keywords appear in it.

        :param text: Title and summary of an article.
        :returns: The matching topic, or None.
        """
        for topic, pattern in self._topics:
            if pattern.search(text or ""):
                return topic
        return None

    def classify_source(self, sender: str, subject: str) -> NewsletterSource:
        """Determine the newsletter family from sender and subject.

        :param sender: Sender name and/or address.
        :param subject: Message subject.
        :returns: The newsletter source, TECH when nothing matches.
        """
        haystack = f"{sender} {subject}"
        for source, patterns in self._sources:
            if any(pattern.search(haystack) for pattern in patterns):
                return source
        return NewsletterSource.TECH
