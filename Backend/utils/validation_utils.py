from typing import Any, Dict, Optional
import re

from utils.datetime_utils import parse_clock_time


def validate_clock_format(time_str: str) -> bool:
    """Validate an "HH:MM" clock string."""
    return parse_clock_time(time_str) is not None


def require_text(value: Optional[str], field_name: str) -> str:
    """Strip a required text value, rejecting empty or whitespace-only input."""
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} is required")
    return str(value).strip()


def validate_password_strength(password: str) -> Dict[str, Any]:
    """
    Validate password strength.
    Returns a dictionary with validation results and requirements.
    """
    min_length = 8
    is_long_enough = len(password) >= min_length

    return {
        "is_valid": is_long_enough,
        "requirements": {
            "min_length": min_length,
            "is_long_enough": is_long_enough
        }
    }


def validate_username(username: str) -> Dict[str, Any]:
    """
    Validate username format.
    Returns a dictionary with validation results and requirements.
    """
    min_length = 3
    max_length = 30
    pattern = r'^[a-zA-Z0-9_.-]+$'

    is_valid = (
        len(username) >= min_length and
        len(username) <= max_length and
        bool(re.match(pattern, username))
    )

    return {
        "is_valid": is_valid,
        "requirements": {
            "min_length": min_length,
            "max_length": max_length,
            "allowed_characters": "letters, numbers, dot, underscore, and hyphen"
        }
    }


def validate_url(url: str) -> bool:
    """Validate URL format."""
    pattern = r'^https?:\/\/(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_\+.~#?&//=]*)$'
    return bool(re.match(pattern, url))
