"""Contact Field Validation — messages for bad names, phones and emails."""

import math

import pytest

from urbanestate.core.validation import (
    as_finite_number, normalize_phone, validate_email, validate_name,
    validate_phone_number, validate_uuid,
)


@pytest.mark.parametrize("name, error", [
    ("", "Name is required"),
    ("   ", "Name is required"),
    ("A", "Name must be at least 2 characters"),
    ("x" * 101, "Name must be less than 100 characters"),
    ("Robert'); DROP", "Name contains invalid characters"),
    ("Mary-Jane O'Neil", None),
])
def test_validate_name(name, error):
    assert validate_name(name) == error


def test_normalize_phone_strips_separators():
    assert normalize_phone(" +971 (50) 123-4567 ") == "+971501234567"


@pytest.mark.parametrize("phone, error", [
    (None, "Phone number is required"),
    ("12345", "Phone number must be between 7 and 20 digits"),
    ("+97150abc4567", "Invalid phone number format"),
    ("+971 50 123 4567", None),
])
def test_validate_phone(phone, error):
    assert validate_phone_number(phone) == error


def test_email_optional_but_checked():
    assert validate_email(None) is None
    assert validate_email("  ") is None
    assert validate_email("not-an-email") == "Invalid email format"
    assert validate_email("a@b.co") is None


def test_validate_uuid():
    assert validate_uuid("0b7f1c1e-2f3a-4d5b-9c6d-7e8f9a0b1c2d")
    assert not validate_uuid("not-a-uuid")


@pytest.mark.parametrize("value, expected", [
    (3, 3.0),
    (2.5, 2.5),
    (math.nan, None),
    (math.inf, None),
    (-math.inf, None),
    (True, None),
    ("7", None),
    (None, None),
])
def test_as_finite_number(value, expected):
    assert as_finite_number(value) == expected
