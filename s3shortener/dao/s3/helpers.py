import functools
from typing import Any
from collections.abc import Callable

from botocore.exceptions import BotoCoreError, ClientError

from s3shortener.dao.exceptions import DataStoreError


__all__ = []

# S3 answers a lost create-if-absent race with 412, or 409 while a concurrent
# conditional write on the same key is still in flight
CONDITIONAL_WRITE_CONFLICT_CODES = frozenset({'PreconditionFailed', 'ConditionalRequestConflict', '412', '409'})
NOT_FOUND_CODES = frozenset({'NoSuchKey', 'NotFound', '404'})


def client_error_code(error: ClientError) -> str:
    """Return the S3 error code of a ClientError (e.g. 'NoSuchKey'), or '' if absent."""
    return str(error.response.get('Error', {}).get('Code', ''))


def handle_s3_client_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap S3-interacting DAO methods to translate botocore failures

    Any `ClientError` the method itself didn't translate (throttling, access
    denied, 5xx, ...) and any `BotoCoreError` (endpoint unreachable, connect or
    read timeout) becomes a DataStoreError.

    Args:
        method (Callable[..., Any]):
            DAO method performing S3 operations.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on S3 failures.

    Example:
        >>> @handle_s3_client_error
        ... def delete(self, code):
        ...     self.s3.delete_object(Bucket=self.bucket, Key=self.keys.record_key(code))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ClientError as e:
            raise DataStoreError(f"S3 request to bucket '{self.bucket}' failed ({client_error_code(e) or 'unknown error'}).") from e
        except BotoCoreError as e:
            raise DataStoreError(f"Can't reach S3 bucket '{self.bucket}' ({type(e).__name__}).") from e

    return wrapper
