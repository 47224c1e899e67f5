"""Field validation shared by the registration, check-in and subscribe forms.

Email addresses are validated by pydantic ``EmailStr`` in the schemas.

Phone numbers are US numbers. Identity resolution compares the 10-digit
form, so every stored or searched phone goes through ``normalize_phone``.
"""

import re
from typing import Optional

ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")
_NON_DIGIT_RE = re.compile(r"\D")

PHONE_ERROR = "Please enter a valid 10-digit phone number"
ZIP_ERROR = "Please enter a valid ZIP code"


def digits_only(value: Optional[str]) -> str:
    return _NON_DIGIT_RE.sub("", value or "")


def normalize_phone(value: Optional[str]) -> Optional[str]:
    """Return the 10-digit form of a US phone number, or None.

    A leading country code on an 11-digit number is dropped.
    """
    digits = digits_only(value)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        return None
    return digits


def format_phone(value: Optional[str]) -> str:
    """Progressive display format used by the phone inputs.

    "5551234567" -> "(555) 123-4567"; partial input formats as far as it goes.
    """
    digits = digits_only(value)[:10]
    area, prefix, line = digits[:3], digits[3:6], digits[6:10]

    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({area}) {prefix}"
    return f"({area}) {prefix}-{line}"


def to_e164(value: Optional[str]) -> Optional[str]:
    digits = normalize_phone(value)
    if digits is None:
        return None
    return f"+1{digits}"


def phone_variants(value: Optional[str]) -> list[str]:
    """Stored representations a phone number may have been saved under."""
    digits = normalize_phone(value)
    if digits is None:
        return []
    return [digits, format_phone(digits), f"+1{digits}"]


def is_valid_zip(value: Optional[str]) -> bool:
    return bool(value) and ZIP_RE.match(value.strip()) is not None


def require_text(value: Optional[str], message: str) -> str:
    """Strip a required free-text field, raising ValueError when blank."""
    if value is None or not value.strip():
        raise ValueError(message)
    return value.strip()
