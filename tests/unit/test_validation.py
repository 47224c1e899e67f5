"""Unit tests for shared form validation helpers."""

import pytest

from libs.common.validation import (
    format_phone,
    is_valid_zip,
    normalize_phone,
    phone_variants,
    require_text,
    to_e164,
)


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "raw",
        ["5735550142", "(573) 555-0142", "573.555.0142", "+1 573 555 0142", "1-573-555-0142"],
    )
    def test_accepts_us_formats(self, raw):
        assert normalize_phone(raw) == "5735550142"

    @pytest.mark.parametrize("raw", ["", None, "555-0142", "25735550142", "57355501420"])
    def test_rejects_wrong_length(self, raw):
        assert normalize_phone(raw) is None


class TestFormatPhone:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("573", "573"),
            ("5735", "(573) 5"),
            ("573555", "(573) 555"),
            ("5735550", "(573) 555-0"),
            ("5735550142", "(573) 555-0142"),
            ("573555014299", "(573) 555-0142"),
            ("(573) 555-0142", "(573) 555-0142"),
        ],
    )
    def test_progressive_format(self, raw, expected):
        assert format_phone(raw) == expected


def test_to_e164():
    assert to_e164("(573) 555-0142") == "+15735550142"
    assert to_e164("555-0142") is None


def test_phone_variants_cover_stored_forms():
    assert phone_variants("573-555-0142") == [
        "5735550142",
        "(573) 555-0142",
        "+15735550142",
    ]
    assert phone_variants("12") == []


@pytest.mark.parametrize(
    "zip_code,valid",
    [("65201", True), ("65201-1234", True), ("6520", False), ("65201-12", False), ("abcde", False)],
)
def test_is_valid_zip(zip_code, valid):
    assert is_valid_zip(zip_code) is valid


def test_require_text_strips_and_rejects_blank():
    assert require_text("  Jordan  ", "Name is required") == "Jordan"
    with pytest.raises(ValueError, match="Name is required"):
        require_text("   ", "Name is required")
