"""Adapters from mail intake formats to RawMessage records."""

import logging
from datetime import UTC, datetime
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any

from dateutil import parser as dateparser

from src.newsletters.base.models import RawMessage

logger = logging.getLogger(__name__)


def parse_datetime(dt_string: str | None) -> datetime:
    """Parse a message timestamp into a timezone-aware datetime.

    Accepts ISO 8601 strings from the Graph API (e.g. "2024-01-15T10:30:00Z")
    as well as RFC 2822 Date headers. Naive values are treated as UTC.

    :param dt_string: The timestamp string.
    :returns: A timezone-aware datetime, or the current time if the string is missing.
    :raises ValueError: If the string cannot be parsed.
    """
    if not dt_string:
        return datetime.now(UTC)

    try:
        parsed = dateparser.parse(dt_string)
    except (dateparser.ParserError, OverflowError) as e:
        raise ValueError(f"Unparseable message timestamp: {dt_string}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def raw_message_from_graph(message: dict[str, Any]) -> RawMessage:
    """Convert a Microsoft Graph API message into a RawMessage.

    :param message: The raw message dict from Graph API.
    :returns: The RawMessage, with the body placed in html or text by content type.
    """
    sender_info = message.get("from", {}).get("emailAddress", {})
    sender = " ".join(
        part for part in (sender_info.get("name", ""), sender_info.get("address", "")) if part
    )

    body = message.get("body", {})
    content = body.get("content", "") or ""
    is_text = body.get("contentType", "html").lower() == "text"

    return RawMessage(
        message_id=message.get("id") or None,
        subject=message.get("subject", ""),
        sender=sender,
        received_at=parse_datetime(message.get("receivedDateTime")),
        html="" if is_text else content,
        text=content if is_text else "",
    )


def raw_message_from_mime(raw: bytes) -> RawMessage:
    """Parse an RFC 822 message into a RawMessage.

    Both the text/html and text/plain alternatives are kept when present.

    :param raw: The raw message bytes as fetched from the mailbox.
    :returns: The RawMessage.
    """
    email_message = BytesParser(policy=policy.default).parsebytes(raw)
    if not isinstance(email_message, EmailMessage):
        raise ValueError("Unsupported message object")

    return RawMessage(
        message_id=str(email_message.get("Message-ID", "")).strip() or None,
        subject=str(email_message.get("Subject", "")),
        sender=str(email_message.get("From", "")),
        received_at=parse_datetime(email_message.get("Date")),
        html=_body_content(email_message, "html"),
        text=_body_content(email_message, "plain"),
    )


def _body_content(email_message: EmailMessage, subtype: str) -> str:
    """Return the decoded body part of the given text subtype, or an empty string."""
    part = email_message.get_body(preferencelist=(subtype,))
    if part is None:
        return ""
    try:
        return str(part.get_content())
    except (LookupError, UnicodeDecodeError):
        logger.warning(f"Failed to decode text/{subtype} part, using raw payload")
        payload = part.get_payload(decode=True)
        return payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else ""
