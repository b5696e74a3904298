"""Tests for outline and title reply parsing."""
import pytest

from app.services.parsing import (
    FALLBACK_CONTENT,
    clean_title,
    content_or_fallback,
    parse_outline,
)


def test_outline_json_array():
    parsed = parse_outline('["Introduction", "Setup", "Conclusion"]')
    assert parsed.kind == "structured"
    assert parsed.sections == ["Introduction", "Setup", "Conclusion"]


def test_outline_json_in_code_fence():
    parsed = parse_outline('```json\n["Intro", "Usage"]\n```')
    assert parsed.kind == "structured"
    assert parsed.sections == ["Intro", "Usage"]


def test_outline_json_inside_prose():
    parsed = parse_outline('Here is your outline:\n["Intro", "Usage", "Next steps"]\nEnjoy!')
    assert parsed.kind == "structured"
    assert parsed.sections == ["Intro", "Usage", "Next steps"]


def test_outline_freeform_list_markers_stripped():
    reply = "1. Introduction\n\n- Installing Docker\n* Running containers\n2.Conclusion\n   \n"
    parsed = parse_outline(reply)
    assert parsed.kind == "freeform"
    assert parsed.sections == [
        "Introduction",
        "Installing Docker",
        "Running containers",
        "Conclusion",
    ]


def test_outline_json_of_non_strings_is_not_structured():
    parsed = parse_outline('{"sections": 3}')
    assert parsed.kind == "freeform"
    assert parsed.sections == ['{"sections": 3}']


@pytest.mark.parametrize("reply", [None, "", "   \n\n", "- \n* \n"])
def test_outline_fallback(reply):
    parsed = parse_outline(reply)
    assert parsed.kind == "fallback"
    assert parsed.sections == ["Introduction", "Main Content", "Conclusion"]


@pytest.mark.parametrize(
    "reply, expected",
    [
        ('"Docker Basics Explained"', "Docker Basics Explained"),
        ("'Docker Basics Explained'\n", "Docker Basics Explained"),
        ("  Docker Basics Explained  ", "Docker Basics Explained"),
    ],
)
def test_clean_title_strips_quotes(reply, expected):
    assert clean_title(reply, "Docker") == expected


@pytest.mark.parametrize("reply", [None, "", '""'])
def test_clean_title_fallback(reply):
    assert clean_title(reply, "Docker basics") == "Complete Guide to Docker basics"


def test_content_fallback():
    assert content_or_fallback(None) == FALLBACK_CONTENT == "Failed to generate content."
    assert content_or_fallback("## Body") == "## Body"
