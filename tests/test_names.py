"""
Tests for identifier sanitization (proofpatch/core/names.py)
"""

import pytest
from proofpatch.core.names import sanitize_name


SAMPLES = [
    "n", "h.1", "x'", "2x", "", "   ", "a-b", "α₁", "_", "0", "Nat.succ", "n✝", "9lives", "x_1",
]


class TestSanitizeName:
    """Test sanitize_name function"""

    def test_plain_identifier_unchanged(self):
        """Plain identifiers pass through"""
        assert sanitize_name("n") == "n"
        assert sanitize_name("x_1") == "x_1"

    def test_punctuation_becomes_underscore(self):
        """Dots, primes and dashes are replaced with underscores"""
        assert sanitize_name("h.1") == "h_1"
        assert sanitize_name("x'") == "x_"
        assert sanitize_name("a-b") == "a_b"

    def test_empty_falls_back_to_x(self):
        """An empty fragment becomes x"""
        assert sanitize_name("") == "x"

    def test_leading_digit_prefixed(self):
        """A leading decimal digit gets an underscore prefix"""
        assert sanitize_name("2x") == "_2x"
        assert sanitize_name("0") == "_0"

    def test_unicode_letters_kept(self):
        """Unicode letters count as alphanumeric"""
        assert sanitize_name("α") == "α"

    @pytest.mark.parametrize("text", SAMPLES)
    def test_output_is_valid_name(self, text):
        """Output is non-empty, has no leading digit and only alnum/underscore"""
        out = sanitize_name(text)
        assert out
        assert not ("0" <= out[0] <= "9")
        assert all(ch.isalnum() or ch == "_" for ch in out)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        """Sanitizing a sanitized name changes nothing"""
        once = sanitize_name(text)
        assert sanitize_name(once) == once
