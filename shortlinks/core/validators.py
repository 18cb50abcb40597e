"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.

- validate_url: the URL format rule enforced before a link is created
- sanitize_short_code: normalizes a short code taken from a request path
"""

import re
from typing import Optional

from shortlinks.core.exceptions import ValidationError

URL_PATTERN = re.compile(r"^(https?|ftp)://[^\s/$.?#].[^\s]*$")
SHORT_CODE_PATTERN = re.compile(r"^[0-9a-zA-Z]+$")

URL_FIELD = "url"
INVALID_URL_MESSAGE = "Url is not valid"

MAX_SHORT_CODE_LENGTH = 20


def is_valid_url(url: str) -> bool:
    """
    Check a URL against the format rule.

    The URL must use the http, https or ftp scheme followed by "://" and a
    host/path with no whitespace. The first host character may not be one
    of "/", "$", ".", "?" or "#".

    Args:
        url: The URL string to check

    Returns:
        True if the URL matches the rule, False otherwise
    """
    if not isinstance(url, str):
        return False
    return URL_PATTERN.fullmatch(url) is not None


def validate_url(url: str) -> None:
    """
    Validate a URL before it is persisted.

    Raises:
        ValidationError: field "url", message "Url is not valid"
    """
    if not is_valid_url(url):
        raise ValidationError(URL_FIELD, INVALID_URL_MESSAGE)


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize and validate short code format.

    Generated short codes only contain [0-9a-zA-Z], so anything else can
    never match a stored code.

    Args:
        short_code: The short code to sanitize

    Returns:
        Sanitized short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    if not SHORT_CODE_PATTERN.match(short_code):
        return None

    return short_code
