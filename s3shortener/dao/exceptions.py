"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    UrlRecordNotFoundError:
        Raised when a UrlRecordModel is not found in the data store.

    UrlRecordAlreadyExistsError:
        Raised when attempting to insert a UrlRecordModel under an occupied code.

    DataStoreError:
        Raised when the data store is unreachable, times out, or misbehaves.

Example:
    >>> from s3shortener.dao.exceptions import UrlRecordNotFoundError
    >>> raise UrlRecordNotFoundError("URL record with code 'aZ3kP9xQ' not found.")
    Traceback (most recent call last):
        ...
    s3shortener.dao.exceptions.UrlRecordNotFoundError: URL record with code 'aZ3kP9xQ' not found.
"""

from s3shortener.exceptions import S3ShortenerError


class DAOError(S3ShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class UrlRecordNotFoundError(DAOError):
    """Raised when a UrlRecordModel is not found in the data store."""

    error_code = 'dao:url_record_not_found_error'


class UrlRecordAlreadyExistsError(DAOError):
    """Raised when inserting a UrlRecordModel whose code is already occupied."""

    error_code = 'dao:url_record_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, throttling and unreadable documents.
    """

    error_code = 'dao:data_store_error'
