"""Tests for extraction configuration module."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from src.enums import NewsletterSource, TopicCategory
from src.newsletters.extraction import rules
from src.newsletters.extraction.config import ExtractionSettings


class TestExtractionSettings(unittest.TestCase):
    """Tests for ExtractionSettings class."""

    def test_defaults(self) -> None:
        """Test the default limits and rule tables."""
        settings = ExtractionSettings(_env_file=None)

        self.assertEqual(settings.similarity_threshold, 0.8)
        self.assertEqual(settings.freshness_window_hours, 24)
        self.assertEqual(settings.summary_max_length, 500)
        self.assertEqual(settings.summary_max_sentences, 3)
        self.assertEqual(settings.summary_fallback_length, 300)
        self.assertEqual(settings.min_newsletter_body_length, 1000)
        self.assertEqual(settings.tracking_host_prefixes, ["tracking.tldrnewsletter.com/CL0/"])
        self.assertEqual(settings.domain_blocklist, rules.DOMAIN_BLOCKLIST)
        self.assertEqual(list(settings.topic_keywords)[0], TopicCategory.AI)
        self.assertEqual(settings.source_patterns[-1][0], NewsletterSource.AI)

    def test_defaults_are_copies(self) -> None:
        """Test that mutating one settings object leaves the rule tables untouched."""
        settings = ExtractionSettings(_env_file=None)
        settings.domain_blocklist.append("example.org")

        self.assertNotIn("example.org", rules.DOMAIN_BLOCKLIST)
        self.assertNotIn("example.org", ExtractionSettings(_env_file=None).domain_blocklist)

    def test_strips_scheme_from_tracking_prefixes(self) -> None:
        """Test that tracking prefixes are stored without a scheme."""
        settings = ExtractionSettings(
            tracking_host_prefixes=["https://click.example.net/r/", "http://t.example.com/", " "],
            _env_file=None,
        )

        self.assertEqual(
            settings.tracking_host_prefixes, ["click.example.net/r/", "t.example.com/"]
        )

    def test_invalid_threshold_raises_error(self) -> None:
        """Test that the similarity threshold must be in (0, 1]."""
        for value in (0, -0.1, 1.5):
            with self.subTest(value=value), self.assertRaises(ValidationError) as context:
                ExtractionSettings(similarity_threshold=value, _env_file=None)
            errors = context.exception.errors()
            self.assertTrue(any(e["loc"] == ("similarity_threshold",) for e in errors))

    def test_invalid_limits_raise_error(self) -> None:
        """Test the bounds on the window and summary limits."""
        cases = {
            "freshness_window_hours": 0,
            "summary_max_length": 10,
            "summary_max_sentences": 0,
        }
        for field, value in cases.items():
            with self.subTest(field=field), self.assertRaises(ValidationError):
                ExtractionSettings(**{field: value, "_env_file": None})

    @patch.dict(
        os.environ,
        {
            "NEWSLETTER_SIMILARITY_THRESHOLD": "0.9",
            "NEWSLETTER_FRESHNESS_WINDOW_HOURS": "48",
            "NEWSLETTER_DOMAIN_BLOCKLIST": '["example.org/ads"]',
        },
    )
    def test_environment_overrides(self) -> None:
        """Test loading overrides from NEWSLETTER_ environment variables."""
        settings = ExtractionSettings(_env_file=None)

        self.assertEqual(settings.similarity_threshold, 0.9)
        self.assertEqual(settings.freshness_window_hours, 48)
        self.assertEqual(settings.domain_blocklist, ["example.org/ads"])

    @patch.dict(os.environ, {"SIMILARITY_THRESHOLD": "0.1"})
    def test_ignores_unprefixed_variables(self) -> None:
        """Test that variables without the prefix are ignored."""
        settings = ExtractionSettings(_env_file=None)

        self.assertEqual(settings.similarity_threshold, 0.8)


if __name__ == "__main__":
    unittest.main()
