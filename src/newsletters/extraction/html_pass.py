"""HTML extraction pass: sweep a newsletter document for article links."""

import logging
from collections.abc import Callable, Iterable, Sequence

from src.enums import ContentLabel, Provenance
from src.newsletters.base.models import ArticleCandidate, LinkCandidate
from src.newsletters.extraction.context import (
    ExtractionContext,
    build_candidate,
    clean_title,
    find_read_time,
    strip_read_time,
)
from src.newsletters.extraction.tree import DocumentNode, is_block, parse_document

logger = logging.getLogger(__name__)

# Anchor text shorter than this is replaced by a line from the enclosing block
MIN_ANCHOR_TITLE_LENGTH = 5

# Bounds for a title taken from the enclosing block
MIN_BLOCK_TITLE_LENGTH = 15
MAX_BLOCK_TITLE_LENGTH = 200

# How far past the title a read-time marker is looked for
READ_TIME_LOOKAHEAD = 100

HtmlStrategy = Callable[[DocumentNode, ExtractionContext], list[ArticleCandidate]]


def anchor_sweep(document: DocumentNode, context: ExtractionContext) -> list[ArticleCandidate]:
    """Primary sweep over anchors pointing at tracking redirects."""
    anchors = [
        anchor
        for anchor in document.find_all("a")
        if context.resolver.is_tracking_url(anchor.attr("href") or "")
    ]
    return _candidates_from_anchors(document, anchors, context)


def table_cell_sweep(document: DocumentNode, context: ExtractionContext) -> list[ArticleCandidate]:
    """Structural fallback over links inside table cells."""
    anchors = [anchor for cell in document.find_all("td", "th") for anchor in cell.find_all("a")]
    return _candidates_from_anchors(document, anchors, context)


def bold_sweep(document: DocumentNode, context: ExtractionContext) -> list[ArticleCandidate]:
    """Structural fallback over links wrapping or wrapped by bold text."""
    anchors: list[DocumentNode] = []
    for bold in document.find_all("b", "strong"):
        anchors.extend(bold.find_all("a"))
        wrapping = bold.nearest_ancestor(lambda node: node.tag == "a")
        if wrapping is not None:
            anchors.append(wrapping)
    return _candidates_from_anchors(document, anchors, context)


HTML_STRATEGIES: tuple[HtmlStrategy, ...] = (anchor_sweep, table_cell_sweep, bold_sweep)


def extract_html(
    html: str,
    context: ExtractionContext,
    strategies: Sequence[HtmlStrategy] = HTML_STRATEGIES,
) -> list[ArticleCandidate]:
    """Run every HTML strategy over a document and pool the results.

    The pool is not deduplicated; the same article is usually found by more
    than one strategy.

    :param html: Raw HTML body of the newsletter.
    :param context: Extraction context.
    :param strategies: Ordered strategies to run.
    :returns: Candidates from all strategies in document order, ties kept in strategy order.
    """
    document = parse_document(html)
    if document is None:
        logger.info("No parseable HTML body, skipping HTML pass")
        return []

    pooled: list[ArticleCandidate] = []
    for strategy in strategies:
        try:
            found = strategy(document, context)
        except Exception:
            logger.exception(f"HTML strategy {strategy.__name__} failed")
            continue
        logger.debug(f"HTML strategy {strategy.__name__} found {len(found)} candidate(s)")
        pooled.extend(found)

    # Stable sort, so an anchor found by several strategies keeps strategy order
    pooled.sort(key=_document_order)
    logger.info(f"HTML pass extracted {len(pooled)} candidate(s)")
    return pooled


def _document_order(candidate: ArticleCandidate) -> tuple[bool, int]:
    return candidate.position is None, candidate.position or 0


def _candidates_from_anchors(
    document: DocumentNode,
    anchors: Iterable[DocumentNode],
    context: ExtractionContext,
) -> list[ArticleCandidate]:
    """Turn anchors into candidates, isolating failures per anchor."""
    positions = {id(node.element): index for index, node in enumerate(document.find_all("a"))}
    candidates: list[ArticleCandidate] = []
    seen: set[int] = set()

    for anchor in anchors:
        if id(anchor.element) in seen:
            continue
        seen.add(id(anchor.element))

        try:
            candidate = _candidate_from_anchor(anchor, context, positions.get(id(anchor.element)))
        except Exception:
            logger.warning(f"Discarding anchor after unexpected error: {anchor.attr('href')}")
            logger.debug("Anchor failure details", exc_info=True)
            continue

        if candidate is not None:
            candidates.append(candidate)

    return candidates


def _candidate_from_anchor(  # noqa: PLR0911
    anchor: DocumentNode,
    context: ExtractionContext,
    position: int | None = None,
) -> ArticleCandidate | None:
    """Extract a single candidate from an anchor and its enclosing block.

    :param anchor: An <a> node.
    :param context: Extraction context.
    :param position: Index of the anchor among all anchors of the document.
    :returns: The candidate, or None if the anchor is not an article.
    """
    href = (anchor.attr("href") or "").strip()
    if not href:
        return None

    anchor_text = anchor.text()
    if context.classifier.is_admin(anchor_text, href):
        logger.debug(f"Skipping administrative link: {anchor_text!r}")
        return None

    container = anchor.nearest_ancestor(is_block) or anchor.parent or anchor
    link = LinkCandidate(
        href=href,
        anchor_text=anchor_text,
        surrounding_text=container.text(),
        provenance=Provenance.HTML,
    )

    title_source = link.anchor_text
    title = clean_title(title_source)
    if len(title) < MIN_ANCHOR_TITLE_LENGTH:
        title_source = _title_from_block(container, context) or ""
        title = clean_title(title_source)
        if not title:
            logger.debug(f"Skipping link without usable title: {href}")
            return None

    url = context.resolver.resolve(link.href)
    if url is None:
        return None

    # Sponsor markers usually sit beside the link, so classify the whole block
    label = context.classifier.classify(title, url, link.surrounding_text)
    if label is not ContentLabel.ACCEPT:
        logger.debug(f"Skipping {label.value} link: {title!r}")
        return None

    following = _text_after(link.surrounding_text, title_source)
    read_time = find_read_time(title_source, following[:READ_TIME_LOOKAHEAD])
    summary = context.normalizer.normalize(strip_read_time(following))

    return build_candidate(
        title=title,
        summary=summary,
        url=url,
        read_time_minutes=read_time,
        provenance=link.provenance,
        context=context,
        position=position,
    )


def _title_from_block(container: DocumentNode, context: ExtractionContext) -> str | None:
    """Pick the first plausible title line from an enclosing block.

    :param container: The block enclosing a link with too little anchor text.
    :param context: Extraction context.
    :returns: A line of 15-200 characters that is not boilerplate, or None.
    """
    for line in container.lines():
        if not MIN_BLOCK_TITLE_LENGTH <= len(line) <= MAX_BLOCK_TITLE_LENGTH:
            continue
        if context.classifier.is_sponsored(line) or context.classifier.is_admin(line, ""):
            continue
        return line
    return None


def _text_after(text: str, marker: str) -> str:
    """Return the part of text that follows marker, or all of it if absent."""
    if marker:
        index = text.find(marker)
        if index >= 0:
            return text[index + len(marker) :]
    return text
