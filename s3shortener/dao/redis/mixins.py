"""Redis client setup shared by Redis-backed DAOs

Classes:
    RedisClientMixin:
        Builds (or adopts) a redis.Redis client, attaches the key schema and
        PINGs the server once so a misconfigured backend fails at cold start
        instead of on the first request.

Example:
    >>> class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    ...     ...
    >>> dao = UrlRecordRedisDAO(redis_host='cache.internal', redis_ssl=True, prefix='s3shortener:prod')
"""

from typing import Optional

import redis

from s3shortener.constants import Storage
from s3shortener.dao.redis.redis_key_schema import RedisKeySchema
from s3shortener.dao.exceptions import DataStoreError


REDIS_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


class RedisClientMixin:
    """Redis client and key schema for Redis-backed DAOs

    Attributes:
        redis (redis.Redis): client shared by every call of the DAO.
        keys (RedisKeySchema): record key builder.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_ssl: Optional[bool] = False,
        redis_timeout: Optional[float] = Storage.TIMEOUT_SECONDS,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis, or adopt `redis_client` when one is given

        `redis_timeout` bounds both connecting and every command, so an
        unreachable server surfaces as DataStoreError within seconds.

        Raises:
            DataStoreError:
                If the server doesn't answer the initial PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=redis_port,
                db=redis_db,
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                ssl=redis_ssl,
                socket_connect_timeout=redis_timeout,
                socket_timeout=redis_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _endpoint(self) -> str:
        """host:port/db of the client, for error messages."""
        info = self.redis.connection_pool.connection_kwargs
        return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; False (or DataStoreError if `raise_error`) when it's unreachable."""
        try:
            self.redis.ping()
        except REDIS_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {self._endpoint()}. Check the provided configuration parameters.") from e
        return True
