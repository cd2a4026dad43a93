"""Tests for short code generation."""

import pytest
from shortener.shortcode import ShortCodeGenerator
from shortener.common.validators import RESERVED_CODES, is_valid_short_code


class TestShortCodeGenerator:
    """Test short code generation."""

    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate()
        assert len(code) == 6
        assert is_valid_short_code(code)[0]

    def test_generate_random_custom_length(self):
        """Test random code with custom length."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random(length=10)
        assert len(code) == 10
        assert is_valid_short_code(code)[0]

    def test_random_codes_vary(self):
        generator = ShortCodeGenerator(default_length=8)

        codes = {generator.generate() for _ in range(200)}
        assert len(codes) > 190

    def test_generate_sequential(self):
        """Test sequential generation."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_sequential(123)
        assert len(code) == 6
        assert is_valid_short_code(code)[0]

    def test_sequential_strategy_is_monotonic_and_distinct(self):
        generator = ShortCodeGenerator(default_length=4, strategy="sequential")

        codes = [generator.generate() for _ in range(100)]
        assert codes[0] == "aaaa"
        assert codes[1] == "aaab"
        assert len(set(codes)) == 100

    def test_sequential_start(self):
        generator = ShortCodeGenerator(default_length=2, strategy="sequential", start=62)

        assert generator.generate() == "ba"

    def test_sequential_grows_past_default_length(self):
        generator = ShortCodeGenerator(default_length=1)

        assert generator.generate_sequential(62) == "ba"

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValueError, match="Unknown code strategy"):
            ShortCodeGenerator(strategy="hash")

    def test_reserved_words_skipped(self, monkeypatch):
        generator = ShortCodeGenerator(default_length=3)
        candidates = iter(["api", "API", "xyz"])
        monkeypatch.setattr(generator, "generate_random", lambda length=None: next(candidates))

        assert "api" in RESERVED_CODES
        assert generator.generate() == "xyz"
