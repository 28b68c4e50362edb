"""Tests for setlist field validation."""

import pytest

from setlist_share.components.setlists import validate_setlist_fields
from setlist_share.rules.models import SetlistRules


@pytest.fixture
def rules():
    return SetlistRules(title_max_length=20, description_max_length=50)


def _codes(errors):
    return [e.code for e in errors]


def test_valid_fields(rules):
    assert validate_setlist_fields(rules, "Show 1", "Friday gig", "public") == []


def test_description_optional(rules):
    assert validate_setlist_fields(rules, "Show 1", None, "private") == []


@pytest.mark.parametrize("title", [None, "", "   "])
def test_title_required(rules, title):
    assert _codes(validate_setlist_fields(rules, title, None, "private")) == ["title_required"]


def test_title_too_long(rules):
    errors = validate_setlist_fields(rules, "x" * 21, None, "private")
    assert _codes(errors) == ["title_too_long"]
    assert errors[0].field == "title"


def test_title_at_limit(rules):
    assert validate_setlist_fields(rules, "x" * 20, None, "private") == []


def test_description_too_long(rules):
    assert _codes(validate_setlist_fields(rules, "Show", "d" * 51, "private")) == [
        "description_too_long"
    ]


def test_description_must_be_text(rules):
    assert _codes(validate_setlist_fields(rules, "Show", 42, "private")) == [
        "description_invalid"
    ]


@pytest.mark.parametrize("visibility", [None, "unlisted", "PUBLIC"])
def test_visibility_invalid(rules, visibility):
    assert _codes(validate_setlist_fields(rules, "Show", None, visibility)) == [
        "visibility_invalid"
    ]


def test_partial_checks_skip_absent_fields(rules):
    errors = validate_setlist_fields(
        rules, None, "ok", None, check_title=False, check_visibility=False
    )
    assert errors == []


def test_multiple_errors_collected(rules):
    errors = validate_setlist_fields(rules, "", "d" * 51, "secret")
    assert set(_codes(errors)) == {"title_required", "description_too_long", "visibility_invalid"}
