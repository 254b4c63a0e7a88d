"""Shortcode generation utility

Shortcodes are random tokens: 5 bytes from the OS CSPRNG rendered as 10
lowercase hex characters (~1.1e12 possible codes). Uniqueness is not
guaranteed here; it is enforced by the store when the code is reserved
(see previewlinks.services.slug_allocator).

Functions:
    generate_shortcode(nbytes=5) -> str:
        Generate a random shortcode.
    is_valid_shortcode(shortcode) -> bool:
        Check that a string has the shape of a generated shortcode.

Example:
    >>> from previewlinks.utils import generate_shortcode, is_valid_shortcode
    >>> code = generate_shortcode()
    >>> len(code)
    10
    >>> is_valid_shortcode(code)
    True
"""

import re
import secrets

from previewlinks.constants import Shortcode


SHORTCODE_RE = re.compile(Shortcode.PATTERN)


def generate_shortcode(nbytes: int = Shortcode.NBYTES) -> str:
    """Generate a random hex shortcode of 2 * nbytes characters.

    Raises:
        ValueError: If nbytes is not a positive integer.
    """
    if not isinstance(nbytes, int) or nbytes <= 0:
        raise ValueError(f'Number of bytes must be a positive integer (given value: {nbytes!r}).')
    return secrets.token_hex(nbytes)


def is_valid_shortcode(shortcode: str) -> bool:
    return isinstance(shortcode, str) and SHORTCODE_RE.fullmatch(shortcode) is not None
