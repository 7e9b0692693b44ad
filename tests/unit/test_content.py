"""Tests for the quote and joke repository."""

import random

import pytest

from grout.content import ContentKind, ContentRepository
from grout.exceptions import ConfigurationError, ContentNotFoundError


class TestContentRepository:
    """Test random content selection."""

    def test_pick_from_category(self, content):
        assert content.get_random(ContentKind.QUOTE, "wisdom") == "Know thyself."

    def test_kind_accepts_plain_string(self, content):
        assert content.get_random("joke", "programming") == "It works on my machine."

    def test_empty_category_picks_from_all(self):
        repo = ContentRepository(
            quotes={"a": ["one"], "b": ["two"]},
            jokes={},
            rng=random.Random(7),
        )

        picks = {repo.get_random(ContentKind.QUOTE) for _ in range(50)}

        assert picks == {"one", "two"}

    def test_unknown_category_raises(self, content):
        with pytest.raises(ContentNotFoundError, match="not found"):
            content.get_random(ContentKind.QUOTE, "nope")

    def test_empty_category_raises(self, content):
        with pytest.raises(ContentNotFoundError):
            content.get_random(ContentKind.QUOTE, "empty")

    def test_unknown_kind_raises(self, content):
        with pytest.raises(ContentNotFoundError, match="invalid content type"):
            content.get_random("riddle")

    def test_no_content_at_all_raises(self):
        repo = ContentRepository(quotes={}, jokes={})

        with pytest.raises(ContentNotFoundError):
            repo.get_random(ContentKind.JOKE)

    def test_categories(self, content):
        assert content.get_categories(ContentKind.QUOTE) == ["wisdom", "empty"]
        assert content.get_categories("riddle") == []


class TestLoading:
    """Test YAML loading."""

    def test_bundled_data(self):
        repo = ContentRepository.load_default()

        assert set(repo.get_categories("quote")) == {
            "inspirational",
            "motivational",
            "life",
            "success",
            "wisdom",
            "love",
            "happiness",
            "technology",
        }
        assert set(repo.get_categories("joke")) == {
            "programming",
            "science",
            "dad",
            "puns",
            "technology",
            "work",
            "animals",
            "general",
        }
        assert repo.get_random("joke", "dad")

    def test_custom_files(self, tmp_path):
        quotes = tmp_path / "quotes.yaml"
        quotes.write_text("custom:\n  - Hello there.\n")
        jokes = tmp_path / "jokes.yaml"
        jokes.write_text("custom:\n  - Knock knock.\n")

        repo = ContentRepository.from_files(quotes, jokes)

        assert repo.get_random("quote", "custom") == "Hello there."
        assert repo.get_random("joke", "custom") == "Knock knock."

    def test_missing_file_raises_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ContentRepository.from_files(tmp_path / "missing.yaml")

    def test_malformed_file_raises_configuration_error(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            ContentRepository.from_files(bad)
