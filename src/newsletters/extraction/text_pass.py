"""Plaintext extraction pass: find "<title> (N minute read)" lines and their links."""

import logging
import re
from collections.abc import Callable, Sequence

from src.enums import ContentLabel, Provenance
from src.newsletters.base.models import ArticleCandidate
from src.newsletters.extraction.context import ExtractionContext, build_candidate, clean_title
from src.newsletters.extraction.summary import collapse_whitespace

logger = logging.getLogger(__name__)

_MINUTES = r"(?P<{name}>\d{{1,3}})\s*[- ]?\s*min(?:ute)?s?\s+read"

# "Title (5 minute read)", "Title [5 min read]", "Title - 5-minute read",
# "TITLE (5 MINUTE READ) [3]"
READ_TIME_LINE_PATTERN = re.compile(
    r"^(?P<title>.+?)\s*"
    r"(?:[\(\[]\s*" + _MINUTES.format(name="bracketed") + r"\s*[\)\]]"
    r"|[-–—|:]\s*" + _MINUTES.format(name="separated") + r")"
    r"\s*(?:\[(?P<footnote>\d+)\])?\s*$",
    re.IGNORECASE,
)

URL_PATTERN = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)

# "[3] https://..." reference lists at the bottom of plaintext newsletters
FOOTNOTE_PATTERN = re.compile(r"^\[(\d+)\]\s*(https?://\S+)", re.IGNORECASE)

# Lines searched for a URL: the matched line, the two after, then the two before
URL_WINDOW_OFFSETS: tuple[int, ...] = (0, 1, 2, -1, -2)

SUMMARY_TARGET_LENGTH = 200
MIN_TEXT_TITLE_LENGTH = 10

TextStrategy = Callable[[list[str], ExtractionContext], list[ArticleCandidate]]


def read_time_line_sweep(lines: list[str], context: ExtractionContext) -> list[ArticleCandidate]:
    """Build candidates from lines carrying a read-time counter.

    :param lines: Non-empty, stripped lines of the plaintext body.
    :param context: Extraction context.
    :returns: Candidates in line order.
    """
    footnotes = _collect_footnotes(lines)
    candidates: list[ArticleCandidate] = []

    for index, line in enumerate(lines):
        match = READ_TIME_LINE_PATTERN.match(line)
        if not match:
            continue
        try:
            candidate = _candidate_from_line(lines, index, match, footnotes, context)
        except Exception:
            logger.warning(f"Discarding text candidate after unexpected error: {line[:80]!r}")
            logger.debug("Text candidate failure details", exc_info=True)
            continue
        if candidate is not None:
            candidates.append(candidate)

    return candidates


TEXT_STRATEGIES: tuple[TextStrategy, ...] = (read_time_line_sweep,)


def extract_text(
    text: str,
    context: ExtractionContext,
    strategies: Sequence[TextStrategy] = TEXT_STRATEGIES,
) -> list[ArticleCandidate]:
    """Run every plaintext strategy and pool the results.

    :param text: Plaintext body of the newsletter.
    :param context: Extraction context.
    :param strategies: Ordered strategies to run.
    :returns: Candidates from all strategies.
    """
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return []

    pooled: list[ArticleCandidate] = []
    for strategy in strategies:
        try:
            pooled.extend(strategy(lines, context))
        except Exception:
            logger.exception(f"Text strategy {strategy.__name__} failed")

    logger.info(f"Text pass extracted {len(pooled)} candidate(s)")
    return pooled


def _candidate_from_line(
    lines: list[str],
    index: int,
    match: re.Match[str],
    footnotes: dict[str, str],
    context: ExtractionContext,
) -> ArticleCandidate | None:
    """Build a candidate anchored on a matched read-time line."""
    title = clean_title(match.group("title"))
    read_time = int(match.group("bracketed") or match.group("separated"))

    if len(title) < MIN_TEXT_TITLE_LENGTH:
        logger.debug(f"Skipping short text title: {title!r}")
        return None

    raw_url = _find_url(lines, index)
    if raw_url is None and match.group("footnote"):
        raw_url = footnotes.get(match.group("footnote"))
    if raw_url is None:
        logger.debug(f"No URL near text title: {title!r}")
        return None

    url = context.resolver.resolve(raw_url)
    if url is None:
        return None

    summary = context.normalizer.normalize(_summary_text(lines, index))

    # The matched line keeps its read-time marker, which outweighs sponsor wording
    label = context.classifier.classify(
        title,
        url,
        f"{lines[index]} {summary}",
        min_title_length=MIN_TEXT_TITLE_LENGTH,
        max_title_length=None,
    )
    if label is not ContentLabel.ACCEPT:
        logger.debug(f"Skipping {label.value} text candidate: {title!r}")
        return None

    return build_candidate(
        title=title,
        summary=summary,
        url=url,
        read_time_minutes=read_time,
        provenance=Provenance.TEXT,
        context=context,
        position=index,
    )


def _find_url(lines: list[str], index: int) -> str | None:
    """Return the first URL in the window around a matched line."""
    for offset in URL_WINDOW_OFFSETS:
        position = index + offset
        if not 0 <= position < len(lines):
            continue
        match = URL_PATTERN.search(lines[position])
        if match:
            return _strip_url_punctuation(match.group(0))
    return None


def _summary_text(lines: list[str], index: int) -> str:
    """Gather the lines following a title until enough text is collected."""
    parts: list[str] = []
    length = 0

    for line in lines[index + 1 :]:
        if READ_TIME_LINE_PATTERN.match(line) or FOOTNOTE_PATTERN.match(line):
            break
        cleaned = collapse_whitespace(URL_PATTERN.sub(" ", line))
        if not cleaned:
            continue
        parts.append(cleaned)
        length += len(cleaned)
        if length > SUMMARY_TARGET_LENGTH:
            break

    return " ".join(parts)


def _collect_footnotes(lines: list[str]) -> dict[str, str]:
    """Map footnote numbers to URLs from a trailing reference list."""
    footnotes: dict[str, str] = {}
    for line in lines:
        match = FOOTNOTE_PATTERN.match(line)
        if match:
            footnotes.setdefault(match.group(1), _strip_url_punctuation(match.group(2)))
    return footnotes


def _strip_url_punctuation(url: str) -> str:
    while url and url[-1] in ".,;:!?)]}'\"":
        url = url[:-1]
    return url
