"""
Shared helper functions for Ignition.

Provides the small value checks and coercions used by request validation and
the settings layer.
"""

import re
from typing import Any, Optional


# Same shape of address accepted by most mail servers; case-insensitive
EMAIL_RE = re.compile(
    r"^[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$",
    re.IGNORECASE,
)

NON_BLANK_ERROR = "value must be a non-blank string."
EMAIL_ERROR = "value must be a valid email address."
MAP_ERROR = "value must be a map."
BOOLEAN_ERROR = 'Invalid value for string: must be either "true" or "false" (case-insensitive).'


def is_non_blank_string(value: Any) -> bool:
    """True for a str with at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())


def is_email(value: Any) -> bool:
    """True if value looks like an email address."""
    return isinstance(value, str) and EMAIL_RE.match(value) is not None


def coerce_boolean(value: Any) -> Optional[bool]:
    """
    Coerce a boolean or a "true"/"false" string (any case) to bool.

    None passes through unchanged.

    Raises:
        ValueError: For any other value.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ValueError(BOOLEAN_ERROR)


def as_map(value: Any) -> dict:
    """value if it is a dict, else an empty dict."""
    return value if isinstance(value, dict) else {}
