"""Tests for payload validation helpers."""

from __future__ import annotations

import pytest

from jiractl.validation import parse_field_pairs, parse_points, sanitize_comment, sanitize_labels, sanitize_user_query


class TestSanitizeUserQuery:
    def test_strips(self) -> None:
        assert sanitize_user_query("  jane ") == ("jane", None)

    def test_empty(self) -> None:
        assert sanitize_user_query("   ")[1] == "user must not be empty"

    def test_control_characters(self) -> None:
        _, err = sanitize_user_query("ja\x00ne")
        assert err is not None
        assert "U+0000" in err

    def test_too_long(self) -> None:
        _, err = sanitize_user_query("a" * 129)
        assert err is not None
        assert "at most 128" in err


class TestSanitizeLabels:
    def test_dedupes_keeping_order(self) -> None:
        assert sanitize_labels(["b", "a", "b"]) == (["b", "a"], None)

    def test_whitespace_rejected(self) -> None:
        _, err = sanitize_labels(["two words"])
        assert err is not None
        assert "whitespace" in err

    def test_none_provided(self) -> None:
        assert sanitize_labels([]) == ([], "no labels provided")


class TestSanitizeComment:
    def test_keeps_newlines(self) -> None:
        assert sanitize_comment("line one\nline two") == ("line one\nline two", None)

    def test_blank(self) -> None:
        assert sanitize_comment("  \n ")[1] == "comment text required"


class TestParseFieldPairs:
    def test_parses(self) -> None:
        assert parse_field_pairs(["Team=Core", "Story Points = 5"]) == ({"Team": "Core", "Story Points": "5"}, None)

    def test_value_may_contain_equals(self) -> None:
        assert parse_field_pairs(["Formula=a=b"]) == ({"Formula": "a=b"}, None)

    @pytest.mark.parametrize("pair", ["noequals", "=value"])
    def test_invalid_format(self, pair: str) -> None:
        _, err = parse_field_pairs([pair])
        assert err is not None
        assert "invalid field format" in err

    def test_none(self) -> None:
        assert parse_field_pairs([]) == ({}, "at least one field=value pair is required")


class TestParsePoints:
    def test_number(self) -> None:
        assert parse_points("3.5") == (3.5, None)

    @pytest.mark.parametrize("raw", ["abc", "nan", "inf", ""])
    def test_invalid(self, raw: str) -> None:
        _, err = parse_points(raw)
        assert err is not None
        assert "invalid story points value" in err
