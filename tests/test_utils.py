"""Tests for utility functions."""

from models import ServiceKey
from utils import format_keys, is_public, normalize_domain


class TestIsPublic:
    """Tests for is_public function."""

    def test_true_value(self):
        assert is_public({"public": "true"}) is True

    def test_false_value(self):
        assert is_public({"public": "false"}) is False

    def test_empty_value(self):
        assert is_public({"public": ""}) is False

    def test_case_sensitive(self):
        assert is_public({"public": "True"}) is False

    def test_missing_label(self):
        assert is_public({"app": "api"}) is False

    def test_no_labels(self):
        assert is_public({}) is False
        assert is_public(None) is False


class TestNormalizeDomain:
    """Tests for normalize_domain function."""

    def test_plain_domain(self):
        assert normalize_domain("example.com") == "example.com"

    def test_strips_wildcard(self):
        assert normalize_domain("*.example.com") == "example.com"

    def test_strips_dots_and_whitespace(self):
        assert normalize_domain(" .example.com. ") == "example.com"

    def test_empty(self):
        assert normalize_domain("") == ""


class TestFormatKeys:
    """Tests for format_keys function."""

    def test_sorted(self):
        keys = [ServiceKey("ns2", "b"), ServiceKey("ns1", "a")]
        assert format_keys(keys) == "[ns1/a, ns2/b]"

    def test_empty(self):
        assert format_keys([]) == "[]"
