"""Shorten URLs: validate input, pick a free code and persist the record

Classes:
    ShortenerService:
        Orchestrates input validation, code generation and the conditional
        record write against a UrlRecordBaseDAO.

Functions:
    validate_original_url(value) -> str
    parse_expiration_time(value) -> int

Example:
    >>> service = ShortenerService(dao)
    >>> service.shorten('https://example.com', '9999999999')
    'q3ZrT0bX'
"""

import re
import logging
from typing import Any

from s3shortener.constants import Shortcode, MIN_TIMESTAMP, MAX_TIMESTAMP
from s3shortener.exceptions import InvalidInputError, ShortcodeExhaustedError
from s3shortener.models import UrlRecordModel
from s3shortener.dao.base import UrlRecordBaseDAO
from s3shortener.dao.exceptions import UrlRecordAlreadyExistsError
from s3shortener.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)

EXPIRATION_TIME_PATTERN = re.compile(r'([+-]?)0*(\d+)', re.ASCII)
MAX_TIMESTAMP_DIGITS = len(str(MAX_TIMESTAMP))


def validate_original_url(value: Any) -> str:
    """Return `value` unchanged if it is a non-blank string, raise InvalidInputError otherwise."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError("'originalUrl' must be a non-empty string.")
    return value


def parse_expiration_time(value: Any) -> int:
    """Parse an expiration timestamp given as integer seconds or as a string of digits

    Args:
        value (Any):
            `9999999999`, `'9999999999'`, `' -5 '`, ...

    Returns:
        int: seconds since the Unix epoch.

    Raises:
        InvalidInputError:
            If the value is missing, not an integer (floats, booleans, '1.5', '1e9',
            '1_000' are all rejected) or outside the signed 64-bit range.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        seconds = value
    elif isinstance(value, str) and (match := EXPIRATION_TIME_PATTERN.fullmatch(value.strip())):
        # int() refuses strings past a few thousand digits; anything this long is out of range anyway
        sign, digits = match.groups()
        if len(digits) > MAX_TIMESTAMP_DIGITS:
            raise InvalidInputError(f"'expirationTime' is out of range (given {len(digits)} digits).")
        seconds = int(sign + digits)
    else:
        raise InvalidInputError(f"'expirationTime' must be an integer number of seconds (given value: {value!r}).")

    if not MIN_TIMESTAMP <= seconds <= MAX_TIMESTAMP:
        raise InvalidInputError(f"'expirationTime' is out of range (given value: {seconds}).")
    return seconds


class ShortenerService:
    """Create short codes for URLs

    The service holds no per-request state; one instance can serve every
    invocation of a warm lambda container.

    Attributes:
        dao (UrlRecordBaseDAO):
            Record store the codes are committed to.
        max_attempts (int):
            How many codes to try before giving up on collisions.
        code_length (int):
            Length of generated codes.
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        max_attempts: int = Shortcode.MAX_ATTEMPTS,
        code_length: int = Shortcode.LENGTH,
    ):
        if not isinstance(max_attempts, int) or isinstance(max_attempts, bool) or max_attempts < 1:
            raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts!r}).')
        if not isinstance(code_length, int) or isinstance(code_length, bool) or not 1 <= code_length <= Shortcode.MAX_LENGTH:
            raise ValueError(f'code_length must be an integer between 1 and {Shortcode.MAX_LENGTH} (given value: {code_length!r}).')

        self.dao = dao
        self.max_attempts = max_attempts
        self.code_length = code_length

    def shorten(self, original_url: Any, expiration_time: Any) -> str:
        """Shorten `original_url` until `expiration_time`

        Steps:
            - Validate both inputs (no storage I/O happens for invalid input)
            - Generate a candidate code
            - Commit the record with a create-if-absent write
            - On collision, regenerate and retry up to `max_attempts` times

        Args:
            original_url (str):
                Target URL, stored unchanged.
            expiration_time (int | str):
                Absolute expiry as seconds since the Unix epoch.

        Returns:
            str: the committed code.

        Raises:
            InvalidInputError:
                If either input is invalid.
            ShortcodeExhaustedError:
                If every generated code was already taken.
            DataStoreError:
                If the record store is unavailable. The write may or may not
                have been applied when the failure was a timeout.
        """
        original_url = validate_original_url(original_url)
        expiration_time = parse_expiration_time(expiration_time)

        last_error = None
        for attempt in range(1, self.max_attempts + 1):
            code = generate_shortcode(self.code_length)
            record = UrlRecordModel(code=code, original_url=original_url, expiration_time=expiration_time)

            try:
                self.dao.insert(record)
            except UrlRecordAlreadyExistsError as e:
                last_error = e
                logger.warning('Shortcode collision. Regenerating code.', extra={'code': code, 'attempt': attempt})
                continue

            logger.info('Stored new URL record.', extra={'code': code, 'expirationTime': expiration_time, 'attempt': attempt})
            return code

        raise ShortcodeExhaustedError(f'Could not find a free shortcode after {self.max_attempts} attempts.') from last_error
