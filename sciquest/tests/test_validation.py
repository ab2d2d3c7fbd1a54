from __future__ import annotations

import pytest

from sciquest.identity_access.validation import (
    ValidationError,
    check_captcha,
    is_valid_email,
    validate_credentials,
    validate_profile_age,
    validate_signup_age,
)


@pytest.mark.parametrize("email", ["kid@example.com", "a.b+c@school.co.uk"])
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", ["", "kid@example", "kid example@x.com", "@example.com", "kid@.com@"])
def test_invalid_emails(email):
    assert not is_valid_email(email)


def test_credentials_checks_run_in_order():
    with pytest.raises(ValidationError, match="Please fill in all fields"):
        validate_credentials("  ", "secret1")
    with pytest.raises(ValidationError, match="Please fill in all fields"):
        validate_credentials("kid@example.com", "")
    with pytest.raises(ValidationError, match="Please enter a valid email address"):
        validate_credentials("not-an-email", "x")
    with pytest.raises(ValidationError, match="Password must be at least 6 characters long"):
        validate_credentials("kid@example.com", "12345")
    assert validate_credentials(" kid@example.com ", "123456") == ("kid@example.com", "123456")


@pytest.mark.parametrize("age", ["4", "13", "0013", "-5", "4.5", "12abc", "13.0", "ten"])
def test_profile_age_out_of_range_is_rejected(age):
    with pytest.raises(ValidationError, match="Age must be between 5 and 12"):
        validate_profile_age(age)


@pytest.mark.parametrize("age,expected", [("5", 5), ("12", 12), (" 8 ", 8)])
def test_profile_age_bounds_are_inclusive(age, expected):
    assert validate_profile_age(age) == expected


@pytest.mark.parametrize("age", [None, "", "  ", "0"])
def test_profile_age_blank_or_zero_is_absent(age):
    assert validate_profile_age(age) is None


def test_signup_age_is_required():
    with pytest.raises(ValidationError, match="Please select your age"):
        validate_signup_age("")
    assert validate_signup_age("7") == 7


@pytest.mark.parametrize("answer", ["7", " 8", "8 ", "eight", "", None, "08"])
def test_captcha_rejects_everything_but_eight(answer):
    assert check_captcha(answer) is False


def test_captcha_accepts_eight():
    assert check_captcha("8") is True
