"""Turn raw trailing text into a bounded, sentence-complete summary."""

import logging
import re

from src.newsletters.extraction.config import ExtractionSettings

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

SENTENCE_SPLIT_PATTERN = re.compile(r"(?:(?<=[.!?])|(?<=[.!?][\"')\]]))\s+")
TERMINAL_PATTERN = re.compile(r"[.!?][\"')\]]?$")
WORD_PATTERN = re.compile(r"[A-Za-z']+")

MIN_SENTENCE_LENGTH = 20

VERB_INDICATORS: frozenset[str] = frozenset(
    {
        "is",
        "are",
        "was",
        "were",
        "will",
        "has",
        "have",
        "had",
        "can",
        "could",
        "would",
        "should",
        "may",
        "might",
        "must",
        "does",
        "do",
        "did",
        "be",
        "been",
        "being",
        "makes",
        "gets",
        "lets",
        "uses",
        "says",
        "shows",
        "allows",
        "helps",
    }
)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return re.sub(r"\s+", " ", text or "").strip()


def truncate_at_word(text: str, max_length: int) -> str:
    """Truncate text at a word boundary and append an ellipsis.

    The result, ellipsis included, is never longer than max_length.

    :param text: Text to truncate.
    :param max_length: Maximum length including the ellipsis.
    :returns: The text unchanged if short enough, else the truncated text.
    """
    if len(text) <= max_length:
        return text

    truncated = text[: max_length - len(ELLIPSIS)]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return truncated.rstrip(" ,;:-") + ELLIPSIS


def is_complete_sentence(sentence: str) -> bool:
    """Check whether a sentence looks complete.

    A complete sentence starts with an uppercase letter, ends with terminal
    punctuation, is at least 20 characters long and contains a verb-like word.

    :param sentence: A single candidate sentence.
    :returns: True if the sentence is complete.
    """
    if len(sentence) < MIN_SENTENCE_LENGTH:
        return False
    if not sentence[0].isupper():
        return False
    if not TERMINAL_PATTERN.search(sentence):
        return False

    for word in WORD_PATTERN.findall(sentence.lower()):
        if word in VERB_INDICATORS:
            return True
        if len(word) > 4 and (word.endswith("ing") or word.endswith("ed")):
            return True
    return False


class SummaryNormalizer:
    """Clean promotional noise out of text and keep the first few sentences."""

    def __init__(self, settings: ExtractionSettings) -> None:
        """Initialise the normalizer.

        :param settings: Extraction settings with promotional patterns and limits.
        """
        self._promotional = [
            re.compile(pattern, re.IGNORECASE) for pattern in settings.promotional_patterns
        ]
        self._max_length = settings.summary_max_length
        self._max_sentences = settings.summary_max_sentences
        self._fallback_length = settings.summary_fallback_length

    def clean(self, raw: str) -> str:
        """Collapse whitespace and strip promotional phrases.

        :param raw: Raw text.
        :returns: The cleaned text.
        """
        text = collapse_whitespace(raw)
        for pattern in self._promotional:
            text = pattern.sub(" ", text)
        text = collapse_whitespace(text)
        # Leftover separators from removed phrases
        return text.lstrip(" .,;:|-").rstrip(" ,;:|-")

    def normalize(self, raw_trailing_text: str) -> str:
        """Build a summary of up to three complete sentences.

        Incomplete fragments are merged into the nearest preceding complete
        sentence. Without any complete sentence the first part of the text is
        used instead.

        :param raw_trailing_text: Text following an article title.
        :returns: The summary, at most summary_max_length characters.
        """
        text = self.clean(raw_trailing_text)
        if not text:
            return ""

        groups = _group_sentences(SENTENCE_SPLIT_PATTERN.split(text))
        if not groups:
            return truncate_at_word(text, self._fallback_length)

        summary = " ".join(groups[: self._max_sentences])
        return truncate_at_word(summary, self._max_length)


def _group_sentences(parts: list[str]) -> list[str]:
    """Attach incomplete fragments to complete sentences.

    :param parts: Sentence-split text.
    :returns: Complete sentences with their fragments, empty if none is complete.
    """
    groups: list[str] = []
    leading: list[str] = []

    for part in (p.strip() for p in parts):
        if not part:
            continue
        if is_complete_sentence(part):
            groups.append(" ".join([*leading, part]))
            leading = []
        elif groups:
            groups[-1] = f"{groups[-1]} {part}"
        else:
            leading.append(part)

    return groups
