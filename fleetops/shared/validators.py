"""Shared validation utilities"""

import re
from typing import Iterable, Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number to digits with an optional leading +.

    North American 10 digit numbers are stored in E.164 form (+1XXXXXXXXXX); other
    numbers keep their country code as entered.
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    if 7 <= len(digits) <= 15:
        return f"+{digits}" if phone.strip().startswith("+") else digits
    raise ValueError("Phone number must contain between 7 and 15 digits")


def validate_choice(value: Optional[str], choices: Iterable[str], field: str) -> Optional[str]:
    """Reject values outside an enumerated set; None passes through"""
    if value is None:
        return value
    choices = tuple(choices)
    if value not in choices:
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    return value


def validate_non_negative(value, field: str):
    if value is not None and value < 0:
        raise ValueError(f"{field} cannot be negative")
    return value


def validate_positive(value, field: str):
    if value is not None and value <= 0:
        raise ValueError(f"{field} must be greater than 0")
    return value


def clean_text(value: Optional[str], max_length: int = 500) -> Optional[str]:
    """
    Strip whitespace and control characters from free text.

    Raises:
        ValueError: If input exceeds max_length
    """
    if value is None:
        return None
    value = _CONTROL_CHARS.sub("", str(value).strip())
    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")
    return value
