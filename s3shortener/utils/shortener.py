"""Shortcode generation utility

This module provides a helper function for generating short, random,
non-sequential codes used as keys of URL records.

Functions:
    generate_shortcode(length=8, alphabet=ALPHABET):
        Generate a random code suitable for use as a URL slug.

Example:
    >>> from s3shortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q3ZrT0bX'
"""

import secrets
import string

from s3shortener.constants import Shortcode


# Base62: 26 lowercase + 26 uppercase + 10 digits
ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def generate_shortcode(length: int = Shortcode.LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random, fixed-length URL code.

    Every character is drawn independently from `alphabet` with the `secrets`
    CSPRNG, so codes are neither sequential nor predictable. With the default
    Base62 alphabet and length 8 the code space holds 62^8 (~2.18e14) values.

    Args:
        length (int, optional):
            Exact length of the resulting code.
            Defaults to 8.

        alphabet (str, optional):
            Characters to draw from.
            Defaults to the Base62 alphabet [a-zA-Z0-9].

    Returns:
        str: A random code of exactly `length` characters.

    Raises:
        TypeError: If `length` is not an integer or `alphabet` is not a string.
        ValueError: If `length` is smaller than 1 or `alphabet` is empty.

    NOTE:
        - Uniqueness is not guaranteed here. Callers must commit codes with a
          create-if-absent write and regenerate on conflict.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(alphabet, str):
        raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
    if not alphabet:
        raise ValueError('Alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
