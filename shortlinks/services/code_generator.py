"""
Short Code Generator

Produces the random alphanumeric alias assigned to a new link.

Codes are drawn uniformly from [A-Za-z0-9] with the random module. They are
short and not unique by construction; LinkService checks each candidate
against the store and the database enforces a unique index on short_url.
"""

import random
import string

ALPHABET = string.ascii_letters + string.digits


def generate_short_code(length: int) -> str:
    """
    Generate a random short code.

    Args:
        length: Number of characters to produce (0 yields an empty string)

    Returns:
        A string of exactly `length` alphanumeric characters

    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError(f"Short code length must be >= 0, got {length}")
    return "".join(random.choices(ALPHABET, k=length))
