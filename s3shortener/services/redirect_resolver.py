"""Resolve short codes back to their original URLs

A record moves through three states: active (from creation until its
expiration time), expired (reads never return its URL anymore) and deleted.
Expiry is decided at query time; nothing is removed at the expiration instant.

Classes:
    ResolutionStatus:
        Outcome of a resolution (ACTIVE, EXPIRED, NOT_FOUND).
    Resolution:
        Result object; carries the URL only for ACTIVE records.
    RedirectResolver:
        Looks up records and applies the expiry check.

Example:
    >>> resolver = RedirectResolver(dao)
    >>> resolution = resolver.resolve('q3ZrT0bX')
    >>> resolution.status, resolution.original_url
    (<ResolutionStatus.ACTIVE: 'active'>, 'https://example.com')
"""

import re
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from s3shortener.constants import Shortcode
from s3shortener.exceptions import InvalidInputError
from s3shortener.dao.base import UrlRecordBaseDAO
from s3shortener.dao.exceptions import DataStoreError, UrlRecordNotFoundError
from s3shortener.utils.shortener import ALPHABET


logger = logging.getLogger(__name__)

# Anything else was never handed out, so there is nothing to look up
CODE_PATTERN = re.compile(f'[{re.escape(ALPHABET)}]{{1,{Shortcode.MAX_LENGTH}}}')


class ResolutionStatus(StrEnum):
    ACTIVE = 'active'
    EXPIRED = 'expired'
    NOT_FOUND = 'not_found'


@dataclass(frozen=True)
class Resolution:
    code: str
    status: ResolutionStatus
    original_url: str | None = None  # Only set for ACTIVE records


class RedirectResolver:
    """Resolve codes against a record store

    Attributes:
        dao (UrlRecordBaseDAO):
            Record store to read from.
        delete_expired (bool):
            Lazily delete records found expired during resolution.
        clock (Callable[[], float] | None):
            Source of the current time in epoch seconds. Defaults to time.time().
    """

    def __init__(self, dao: UrlRecordBaseDAO, delete_expired: bool = False, clock: Callable[[], float] | None = None):
        self.dao = dao
        self.delete_expired = delete_expired
        self.clock = clock

    def resolve(self, code: str) -> Resolution:
        """Resolve a code to its original URL

        Args:
            code (str):
                The short code to resolve.

        Returns:
            Resolution:
                NOT_FOUND if no record exists or the code could never have been
                generated, EXPIRED once the current time has reached the record's
                expiration time, ACTIVE with the original URL otherwise.

        Raises:
            InvalidInputError:
                If the code is empty.
            DataStoreError:
                If the record store is unavailable.
        """
        if not isinstance(code, str) or not code:
            raise InvalidInputError('Code must be a non-empty string.')

        if not CODE_PATTERN.fullmatch(code):
            logger.debug('Malformed code. Skipping lookup.', extra={'code': code[:Shortcode.MAX_LENGTH]})
            return Resolution(code=code, status=ResolutionStatus.NOT_FOUND)

        try:
            record = self.dao.get(code)
        except UrlRecordNotFoundError:
            logger.debug('URL record not found.', extra={'code': code})
            return Resolution(code=code, status=ResolutionStatus.NOT_FOUND)

        now = self.clock() if self.clock is not None else None
        if record.is_expired(now=now):
            logger.debug('URL record expired.', extra={'code': code, 'expirationTime': record.expiration_time})
            if self.delete_expired:
                self._delete_expired(code)
            return Resolution(code=code, status=ResolutionStatus.EXPIRED)

        return Resolution(code=code, status=ResolutionStatus.ACTIVE, original_url=record.original_url)

    def _delete_expired(self, code: str) -> None:
        # The record is expired either way; a failed cleanup is retried on the next resolution
        try:
            self.dao.delete(code)
        except DataStoreError:
            logger.warning('Failed to delete expired URL record.', extra={'code': code}, exc_info=True)
        else:
            logger.info('Deleted expired URL record.', extra={'code': code})
