import functools
from typing import Any
from collections.abc import Callable

from s3shortener.dao.exceptions import DataStoreError
from s3shortener.dao.redis.mixins import REDIS_ERRORS


__all__ = []


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Turn connection errors and timeouts of a RedisClientMixin method into DataStoreError

    Other Redis errors (e.g. WRONGTYPE replies) are bugs, not outages, and propagate unchanged.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except REDIS_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {self._endpoint()}.") from e

    return wrapper
