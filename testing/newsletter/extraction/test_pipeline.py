"""Tests for newsletter pipeline module."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from src.enums import NewsletterSource, Provenance
from src.newsletters.base.models import Article, RawMessage
from src.newsletters.extraction.config import ExtractionSettings
from src.newsletters.extraction.html_pass import table_cell_sweep
from src.newsletters.extraction.pipeline import NewsletterPipeline
from testing.newsletter.extraction.fixtures import tracking_url

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)

TOOL_HTML = f"""
<html><body>
<table><tr><td>
<a href="{tracking_url("https://example.com/tool")}">Tool Launches New Feature</a>
(4 minute read). Also: signup link.
</td></tr></table>
</body></html>
"""

SECOND_ARTICLE_HREF = tracking_url("https://second.example.com/b")

ORDERED_HTML = f"""
<html><body>
<table><tr>
<td><a href="https://first.example.com/a">First Article In The Document Order</a></td>
<td><a href="{SECOND_ARTICLE_HREF}">Second Article Appearing Later On</a></td>
</tr></table>
</body></html>
"""

TOOL_AND_APPLE_TEXT = """
Tool Launches New Feature (4 minute read)
https://example.com/tool

Apple Unveils M4 Chips For Mac (4 minute read)
https://www.apple.com/m4
Apple has announced a new generation of chips. The chips are faster than before.
"""


def _message(
    *,
    received_at: datetime = NOW - timedelta(hours=1),
    html: str = TOOL_HTML,
    text: str = "",
    subject: str = "TLDR 2024-01-15",
    sender: str = "TLDR <dan@tldrnewsletter.com>",
) -> RawMessage:
    return RawMessage(
        subject=subject,
        sender=sender,
        received_at=received_at,
        html=html,
        text=text,
        message_id="msg-1",
    )


class TestNewsletterPipelineProcess(unittest.TestCase):
    """Tests for NewsletterPipeline.process."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.pipeline = NewsletterPipeline(ExtractionSettings(_env_file=None))

    def test_end_to_end_table_cell(self) -> None:
        """Test that a table cell newsletter yields one clean article."""
        articles = self.pipeline.process(_message(), now=NOW)

        self.assertEqual(len(articles), 1)
        article = articles[0]
        self.assertIsInstance(article, Article)
        self.assertEqual(article.title, "Tool Launches New Feature")
        self.assertEqual(article.read_time_minutes, 4)
        self.assertEqual(article.url, "https://example.com/tool")
        self.assertNotIn("signup", article.summary.lower())

    def test_attaches_source_and_published_at(self) -> None:
        """Test that the source and message timestamp are attached."""
        message = _message(sender="TLDR AI <dan@tldrnewsletter.com>")

        article = self.pipeline.process(message, now=NOW)[0]

        self.assertEqual(article.newsletter_source, NewsletterSource.AI)
        self.assertEqual(article.published_at, message.received_at)

    def test_html_first_then_text_additions(self) -> None:
        """Test that text candidates supplement HTML ones after deduplication."""
        articles = self.pipeline.process(_message(text=TOOL_AND_APPLE_TEXT), now=NOW)

        self.assertEqual(
            [(a.url, a.provenance) for a in articles],
            [
                ("https://example.com/tool", Provenance.HTML),
                ("https://www.apple.com/m4", Provenance.TEXT),
            ],
        )

    def test_html_articles_in_document_order(self) -> None:
        """Test that a plain link before a tracking link stays first."""
        articles = self.pipeline.process(_message(html=ORDERED_HTML), now=NOW)

        self.assertEqual(
            [a.url for a in articles],
            ["https://first.example.com/a", "https://second.example.com/b"],
        )
        self.assertTrue(all(a.position is None for a in articles))

    def test_text_only_message(self) -> None:
        """Test that the text pass runs without an HTML body."""
        articles = self.pipeline.process(_message(html="", text=TOOL_AND_APPLE_TEXT), now=NOW)

        self.assertEqual(len(articles), 2)
        self.assertTrue(all(a.provenance == Provenance.TEXT for a in articles))

    def test_freshness_filter(self) -> None:
        """Test that a message from 48 hours ago yields nothing."""
        message = _message(received_at=NOW - timedelta(hours=48), text=TOOL_AND_APPLE_TEXT)

        self.assertEqual(self.pipeline.process(message, now=NOW), [])

    def test_malformed_input(self) -> None:
        """Test that garbage bodies yield nothing without raising."""
        message = _message(html="<<<not <html", text="\x00\x01 ???")

        self.assertEqual(self.pipeline.process(message, now=NOW), [])

    @patch("src.newsletters.extraction.pipeline.extract_html")
    def test_failing_html_pass_is_isolated(self, mock_extract_html: MagicMock) -> None:
        """Test that an HTML pass crash leaves the text pass running."""
        mock_extract_html.side_effect = RuntimeError("parser exploded")

        with self.assertLogs("src.newsletters.extraction.pipeline", level="ERROR"):
            articles = self.pipeline.process(_message(text=TOOL_AND_APPLE_TEXT), now=NOW)

        self.assertEqual(len(articles), 2)
        self.assertTrue(all(a.provenance == Provenance.TEXT for a in articles))

    def test_custom_strategies(self) -> None:
        """Test that strategies are injected at construction."""
        pipeline = NewsletterPipeline(
            ExtractionSettings(_env_file=None),
            html_strategies=(table_cell_sweep,),
            text_strategies=(),
        )

        articles = pipeline.process(_message(text=TOOL_AND_APPLE_TEXT), now=NOW)

        self.assertEqual([a.url for a in articles], ["https://example.com/tool"])

    def test_reusable_across_messages(self) -> None:
        """Test that one pipeline instance processes many messages identically."""
        first = self.pipeline.process(_message(), now=NOW)
        second = self.pipeline.process(_message(), now=NOW)

        self.assertEqual(first, second)


class TestNewsletterPipelineShouldSkip(unittest.TestCase):
    """Tests for NewsletterPipeline.should_skip."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.pipeline = NewsletterPipeline(ExtractionSettings(_env_file=None))

    def test_fresh_message(self) -> None:
        """Test that a recent newsletter is processed."""
        self.assertIsNone(self.pipeline.should_skip(_message(), now=NOW))

    def test_stale_message(self) -> None:
        """Test the freshness window boundary."""
        inside = _message(received_at=NOW - timedelta(hours=24))
        outside = _message(received_at=NOW - timedelta(hours=24, seconds=1))

        self.assertIsNone(self.pipeline.should_skip(inside, now=NOW))
        self.assertEqual(self.pipeline.should_skip(outside, now=NOW), "older than 24h")

    def test_configured_window(self) -> None:
        """Test that the window comes from settings."""
        pipeline = NewsletterPipeline(ExtractionSettings(freshness_window_hours=72, _env_file=None))

        message = _message(received_at=NOW - timedelta(hours=48))

        self.assertIsNone(pipeline.should_skip(message, now=NOW))

    def test_naive_now_treated_as_utc(self) -> None:
        """Test that a naive reference time is accepted."""
        naive_now = NOW.replace(tzinfo=None)

        self.assertIsNone(self.pipeline.should_skip(_message(), now=naive_now))

    def test_confirmation_email_skipped(self) -> None:
        """Test that short transactional mail is not treated as a newsletter."""
        message = _message(
            subject="Please confirm your subscription",
            html="<p>Click the button below to confirm.</p>",
        )

        self.assertEqual(self.pipeline.should_skip(message, now=NOW), "not a newsletter")
        self.assertEqual(self.pipeline.process(message, now=NOW), [])

    def test_long_welcome_issue_processed(self) -> None:
        """Test that a full-length issue with a welcome subject is processed."""
        message = _message(subject="Welcome to TLDR 2024-01-15", text="Real content. " * 100)

        self.assertIsNone(self.pipeline.should_skip(message, now=NOW))

    def test_short_regular_issue_processed(self) -> None:
        """Test that a short body alone does not mark a message as transactional."""
        message = _message(html="<p>Short issue today.</p>")

        self.assertIsNone(self.pipeline.should_skip(message, now=NOW))


if __name__ == "__main__":
    unittest.main()
