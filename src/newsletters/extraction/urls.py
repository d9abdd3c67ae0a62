"""Resolve raw newsletter hyperlinks into canonical article URLs."""

import logging
import re
from urllib.parse import unquote, unquote_plus, urlparse, urlunparse

from src.newsletters.extraction.config import ExtractionSettings

logger = logging.getLogger(__name__)

HTTP_URL_PATTERN = re.compile(r"https?://[^\s\"'<>]+", re.IGNORECASE)
SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


class UrlResolver:
    """Decode tracking redirects, strip tracking parameters and apply the blocklist."""

    def __init__(self, settings: ExtractionSettings) -> None:
        """Initialise the resolver.

        :param settings: Extraction settings holding the URL rule tables.
        """
        self._tracking_prefixes = [p.lower() for p in settings.tracking_host_prefixes]
        self._tracking_params = {p.lower() for p in settings.tracking_params}
        self._tracking_param_prefixes = tuple(p.lower() for p in settings.tracking_param_prefixes)
        self._blocklist = [entry.lower() for entry in settings.domain_blocklist]

    def is_tracking_url(self, href: str) -> bool:
        """Check whether a link has the tracking-redirect shape.

        :param href: The raw hyperlink target.
        :returns: True if the link starts with a configured tracking prefix.
        """
        return self._tracking_remainder(href) is not None

    def resolve(self, href: str) -> str | None:
        """Turn a raw hyperlink target into a canonical destination URL.

        :param href: The raw hyperlink target.
        :returns: The canonical URL, or None if the link is rejected.
        """
        try:
            return self._resolve(href)
        except Exception:
            logger.debug(f"Failed to resolve href: {href!r}", exc_info=True)
            return None

    def is_blocked(self, url: str) -> bool:
        """Check a URL against the domain blocklist.

        :param url: An absolute URL.
        :returns: True if host+path contains any blocklisted substring.
        """
        parsed = urlparse(url)
        target = f"{parsed.netloc}{parsed.path}".lower()
        return any(entry in target for entry in self._blocklist)

    def _resolve(self, href: str) -> str | None:
        href = (href or "").strip()
        if not href:
            return None

        remainder = self._tracking_remainder(href)
        if remainder is not None:
            destination = _decode_destination(remainder)
            if destination is None:
                logger.debug(f"No destination embedded in tracking link: {href}")
                return None
        elif SCHEME_PATTERN.match(href):
            destination = href
        else:
            return None

        canonical = self._strip_tracking_params(destination)
        if canonical is None:
            return None

        if self.is_blocked(canonical):
            logger.debug(f"Skipping blocklisted URL: {canonical}")
            return None

        return canonical

    def _tracking_remainder(self, href: str) -> str | None:
        stripped = SCHEME_PATTERN.sub("", (href or "").strip())
        lowered = stripped.lower()
        for prefix in self._tracking_prefixes:
            if lowered.startswith(prefix):
                return stripped[len(prefix) :]
        return None

    def _strip_tracking_params(self, url: str) -> str | None:
        parsed = urlparse(url)
        if parsed.scheme.lower() not in {"http", "https"} or not parsed.netloc:
            return None

        # Untouched segments keep their original encoding
        kept = [
            segment
            for segment in parsed.query.split("&")
            if segment and not self._is_tracking_param(unquote_plus(segment.split("=", 1)[0]))
        ]
        cleaned = urlunparse(
            (
                parsed.scheme.lower(),
                parsed.netloc.lower(),
                parsed.path,
                parsed.params,
                "&".join(kept),
                parsed.fragment,
            )
        )
        if cleaned.endswith("/"):
            cleaned = cleaned[:-1]
        return cleaned

    def _is_tracking_param(self, key: str) -> bool:
        lowered = key.lower()
        return lowered in self._tracking_params or lowered.startswith(self._tracking_param_prefixes)


def _decode_destination(remainder: str) -> str | None:
    """Extract the destination embedded in a tracking path.

    The destination is the first path segment after the tracking prefix and
    is percent-encoded twice by most senders.

    :param remainder: The tracking link with its host prefix removed.
    :returns: The first http(s) URL found after decoding, or None.
    """
    segment = remainder.split("/", 1)[0]
    try:
        decoded = unquote(unquote(segment, errors="strict"), errors="strict")
    except UnicodeDecodeError:
        logger.debug(f"Double decode failed, falling back to raw segment: {segment}")
        decoded = unquote(segment)

    for candidate in (decoded, unquote(remainder)):
        match = HTTP_URL_PATTERN.search(candidate)
        if match:
            return match.group(0)
    return None
