"""Tests for mail intake adapters."""

import unittest
from datetime import UTC, datetime, timedelta
from email.message import EmailMessage

from src.newsletters.base.intake import (
    parse_datetime,
    raw_message_from_graph,
    raw_message_from_mime,
)


class TestParseDatetime(unittest.TestCase):
    """Tests for parse_datetime function."""

    def test_parses_iso_format(self) -> None:
        """Test parsing ISO 8601 format from the Graph API."""
        result = parse_datetime("2024-01-15T10:30:00Z")

        self.assertEqual(result, datetime(2024, 1, 15, 10, 30, tzinfo=UTC))

    def test_parses_rfc_2822(self) -> None:
        """Test parsing an RFC 2822 Date header."""
        result = parse_datetime("Mon, 15 Jan 2024 10:30:00 +0200")

        self.assertEqual(result.utcoffset(), timedelta(hours=2))
        self.assertEqual(result, datetime(2024, 1, 15, 8, 30, tzinfo=UTC))

    def test_naive_value_is_utc(self) -> None:
        """Test that values without an offset are treated as UTC."""
        result = parse_datetime("2024-01-15 10:30:00")

        self.assertEqual(result.tzinfo, UTC)

    def test_missing_value_is_now(self) -> None:
        """Test that a missing timestamp falls back to the current time."""
        before = datetime.now(UTC)
        result = parse_datetime(None)

        self.assertGreaterEqual(result, before)

    def test_invalid_value_raises(self) -> None:
        """Test that garbage raises ValueError."""
        with self.assertRaises(ValueError):
            parse_datetime("not a date at all")


class TestRawMessageFromGraph(unittest.TestCase):
    """Tests for raw_message_from_graph function."""

    def test_html_body(self) -> None:
        """Test converting a Graph message with an HTML body."""
        message = raw_message_from_graph(
            {
                "id": "msg-123",
                "subject": "TLDR AI 2024-01-15",
                "from": {"emailAddress": {"name": "TLDR AI", "address": "dan@tldrnewsletter.com"}},
                "receivedDateTime": "2024-01-15T10:30:00Z",
                "body": {"contentType": "html", "content": "<p>Hello</p>"},
            }
        )

        self.assertEqual(message.message_id, "msg-123")
        self.assertEqual(message.subject, "TLDR AI 2024-01-15")
        self.assertEqual(message.sender, "TLDR AI dan@tldrnewsletter.com")
        self.assertEqual(message.received_at, datetime(2024, 1, 15, 10, 30, tzinfo=UTC))
        self.assertEqual(message.html, "<p>Hello</p>")
        self.assertEqual(message.text, "")

    def test_text_body(self) -> None:
        """Test that plaintext bodies land in the text field."""
        message = raw_message_from_graph(
            {
                "id": "msg-456",
                "subject": "Plain",
                "receivedDateTime": "2024-01-15T10:30:00Z",
                "body": {"contentType": "Text", "content": "Hello"},
            }
        )

        self.assertEqual(message.html, "")
        self.assertEqual(message.text, "Hello")
        self.assertEqual(message.sender, "")

    def test_missing_fields(self) -> None:
        """Test that a sparse Graph message still converts."""
        message = raw_message_from_graph({"receivedDateTime": "2024-01-15T10:30:00Z"})

        self.assertIsNone(message.message_id)
        self.assertEqual(message.subject, "")
        self.assertEqual(message.html, "")


class TestRawMessageFromMime(unittest.TestCase):
    """Tests for raw_message_from_mime function."""

    def _build(self, *, html: str | None, text: str | None) -> bytes:
        email_message = EmailMessage()
        email_message["Subject"] = "TLDR 2024-01-15"
        email_message["From"] = "TLDR <dan@tldrnewsletter.com>"
        email_message["Date"] = "Mon, 15 Jan 2024 10:30:00 +0000"
        email_message["Message-ID"] = "<abc@tldrnewsletter.com>"
        if text is not None:
            email_message.set_content(text)
        if html is not None:
            if text is None:
                email_message.set_content(html, subtype="html")
            else:
                email_message.add_alternative(html, subtype="html")
        return email_message.as_bytes()

    def test_multipart_alternative(self) -> None:
        """Test that both alternatives are kept."""
        message = raw_message_from_mime(
            self._build(html="<p>Hello world</p>", text="Hello world")
        )

        self.assertEqual(message.subject, "TLDR 2024-01-15")
        self.assertEqual(message.sender, "TLDR <dan@tldrnewsletter.com>")
        self.assertEqual(message.message_id, "<abc@tldrnewsletter.com>")
        self.assertEqual(message.received_at, datetime(2024, 1, 15, 10, 30, tzinfo=UTC))
        self.assertIn("<p>Hello world</p>", message.html)
        self.assertEqual(message.text.strip(), "Hello world")

    def test_html_only(self) -> None:
        """Test a single-part HTML message."""
        message = raw_message_from_mime(self._build(html="<p>Only HTML</p>", text=None))

        self.assertIn("Only HTML", message.html)
        self.assertEqual(message.text, "")

    def test_text_only(self) -> None:
        """Test a single-part plaintext message."""
        message = raw_message_from_mime(self._build(html=None, text="Only text"))

        self.assertEqual(message.html, "")
        self.assertEqual(message.text.strip(), "Only text")


if __name__ == "__main__":
    unittest.main()
