"""Shared validation utilities"""

import math
import re
from typing import Optional

from ..exceptions import ValidationFailed

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_text(value: Optional[str], message: str) -> str:
    """
    Trim a required text field.

    Raises:
        ValidationFailed: If the value is missing or blank
    """
    if value is None or not str(value).strip():
        raise ValidationFailed(message)
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_minutes(value) -> Optional[int]:
    """
    Parse a duration typed into a form field.

    Empty, non-numeric or non-finite input counts as absent. Decimal input
    is truncated to whole minutes.

    Args:
        value: Raw form value (text, number or None)

    Returns:
        Whole minutes, or None when absent
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def parse_price(value) -> Optional[float]:
    """Parse a price field; empty, non-numeric or non-finite input counts as absent"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    text = str(value).strip().lstrip("$")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def validate_hex_color(color: Optional[str]) -> Optional[str]:
    """
    Validate a #RRGGBB color.

    Raises:
        ValidationFailed: If the color is not a six-digit hex code
    """
    if not color:
        return None
    color = color.strip()
    if not HEX_COLOR_PATTERN.match(color):
        raise ValidationFailed("Color must be a hex code like #9333ea")
    return color.lower()


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """
    Validate an HH:MM scheduled time.

    Raises:
        ValidationFailed: If the value is not a 24-hour HH:MM time
    """
    value = optional_text(value)
    if value is None:
        return None
    if not TIME_OF_DAY_PATTERN.match(value):
        raise ValidationFailed("Scheduled time must be in HH:MM format")
    return value


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a customer phone number to E.164 (+1XXXXXXXXXX).

    Raises:
        ValueError: If the number does not have 10 digits after an optional leading 1
    """
    if not phone or not phone.strip():
        return None

    digits = re.sub(r"\D", "", phone)
    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]
    if len(digits) != 10:
        raise ValueError("Phone number must be 10 digits")
    return f"+1{digits}"
