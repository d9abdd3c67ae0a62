"""Generic document tree used by the HTML extraction strategies.

Wraps BeautifulSoup so that strategies are written as tree queries (find by
tag, find by predicate, nearest ancestor) instead of library-specific calls.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

logger = logging.getLogger(__name__)

PARSER_FEATURES: tuple[str, ...] = ("lxml", "html.parser")

NOISE_TAGS: tuple[str, ...] = ("script", "style", "noscript", "head", "nav", "footer", "iframe")

AD_TOKENS: frozenset[str] = frozenset({"ad", "ads", "advert", "adverts", "advertisement"})

# Elements that start a new line of visible text
LINE_BREAK_TAGS: frozenset[str] = frozenset(
    {
        "article",
        "blockquote",
        "br",
        "dd",
        "div",
        "dt",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "li",
        "p",
        "section",
        "table",
        "tbody",
        "td",
        "th",
        "tr",
    }
)

# Elements treated as the container of an article block
BLOCK_TAGS: frozenset[str] = frozenset(
    {"article", "blockquote", "div", "li", "p", "section", "td", "th", "tr"}
)

NodePredicate = Callable[["DocumentNode"], bool]


@dataclass(frozen=True)
class DocumentNode:
    """A node of a parsed HTML document."""

    element: Tag

    @property
    def tag(self) -> str:
        """Lower-cased tag name."""
        return (self.element.name or "").lower()

    @property
    def attrs(self) -> dict[str, str]:
        """Attributes with multi-valued attributes joined by spaces."""
        return {
            key: " ".join(value) if isinstance(value, list) else str(value)
            for key, value in self.element.attrs.items()
        }

    def attr(self, name: str) -> str | None:
        """Return a single attribute value, or None if absent."""
        return self.attrs.get(name)

    @property
    def parent(self) -> DocumentNode | None:
        """The enclosing node, None for the document root."""
        parent = self.element.parent
        return DocumentNode(parent) if isinstance(parent, Tag) else None

    @property
    def children(self) -> list[DocumentNode]:
        """Direct element children."""
        return [DocumentNode(child) for child in self.element.children if isinstance(child, Tag)]

    def iter_descendants(self) -> Iterator[DocumentNode]:
        """Yield all element descendants in document order."""
        for element in self.element.descendants:
            if isinstance(element, Tag):
                yield DocumentNode(element)

    def find_all(self, *tags: str) -> list[DocumentNode]:
        """Find descendants by tag name, in document order."""
        wanted = {tag.lower() for tag in tags}
        return [node for node in self.iter_descendants() if node.tag in wanted]

    def find_all_by(self, predicate: NodePredicate) -> list[DocumentNode]:
        """Find descendants matching a predicate, in document order."""
        return [node for node in self.iter_descendants() if predicate(node)]

    def nearest_ancestor(self, predicate: NodePredicate) -> DocumentNode | None:
        """Return the closest enclosing node matching a predicate."""
        current = self.parent
        while current is not None:
            if predicate(current):
                return current
            current = current.parent
        return None

    def text(self) -> str:
        """Visible text with whitespace collapsed to single spaces."""
        return re.sub(r"\s+", " ", self._raw_text()).strip()

    def lines(self) -> list[str]:
        """Visible text split at block boundaries, empty lines removed."""
        lines = (re.sub(r"\s+", " ", line).strip() for line in self._raw_text().split("\n"))
        return [line for line in lines if line]

    def _raw_text(self) -> str:
        parts: list[str] = []
        for element in self.element.descendants:
            if isinstance(element, Tag):
                if element.name in LINE_BREAK_TAGS:
                    parts.append("\n")
            elif isinstance(element, NavigableString) and not isinstance(
                element, PreformattedString
            ):
                parts.append(str(element).replace("\n", " "))
        return "".join(parts)


def is_block(node: DocumentNode) -> bool:
    """Check whether a node can act as an article container."""
    return node.tag in BLOCK_TAGS


def parse_document(html: str) -> DocumentNode | None:
    """Parse HTML into a document tree with non-content subtrees removed.

    Falls back to the stdlib parser if lxml cannot handle the input.

    :param html: Raw HTML.
    :returns: The document root, or None if the HTML could not be parsed.
    """
    if not html or not html.strip():
        return None

    for features in PARSER_FEATURES:
        try:
            soup = BeautifulSoup(html, features)
        except Exception:
            logger.warning(f"Failed to parse HTML with {features}", exc_info=True)
            continue
        _drop_noise(soup)
        return DocumentNode(soup)

    return None


def _drop_noise(soup: BeautifulSoup) -> None:
    """Remove scripts, styles, navigation, footers and ad containers in place."""
    noisy = [tag for tag in soup.find_all(NOISE_TAGS) if isinstance(tag, Tag)]
    noisy.extend(tag for tag in soup.find_all(True) if isinstance(tag, Tag) and _is_ad(tag))

    for tag in noisy:
        if not tag.decomposed:
            tag.decompose()


def _is_ad(tag: Tag) -> bool:
    """Check whether class or id tokens mark an element as an advert."""
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    identifier = tag.get("id") or ""
    tokens: set[str] = set()
    for value in [*classes, str(identifier)]:
        tokens.update(token for token in re.split(r"[-_\s]+", str(value).lower()) if token)
    return bool(tokens & AD_TOKENS)
