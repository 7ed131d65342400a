"""Data Access Object (DAO) implementation for managing URL records in Redis

This module provides a Redis-based implementation of UrlRecordBaseDAO, an
alternative backend to S3 selected via the `active_backend` AppConfig setting.

Records are stored as the same JSON document S3 holds:

    <prefix>:links:<code>:record -> {"originalUrl": "...", "expirationTime": 9999999999}

Unlike S3, Redis garbage collects records by itself: every key expires a
retention window after the record's expiration time, so expired records stay
observable as expired for a while before disappearing.

Classes:
    UrlRecordRedisDAO:
        DAO for storing and retrieving UrlRecordModel in a Redis datastore.
"""

import json
import time

from beartype import beartype

from s3shortener.constants import TTL
from s3shortener.models import UrlRecordModel
from s3shortener.dao.base import UrlRecordBaseDAO
from s3shortener.dao.redis.mixins import RedisClientMixin
from s3shortener.dao.redis.helpers import handle_redis_connection_error
from s3shortener.dao.exceptions import DataStoreError, UrlRecordAlreadyExistsError, UrlRecordNotFoundError


# Redis rejects absurd expiry timestamps; records expiring past 9999-12-31 are kept without TTL
MAX_EXPIRE_AT = 253_402_300_799


class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL records

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(record: UrlRecordModel, **kwargs) -> UrlRecordRedisDAO:
            SET NX the record document with an absolute expiry.
            Raises UrlRecordAlreadyExistsError when the code is occupied.
            Raises DataStoreError on connectivity issues with Redis.

        get(code: str, **kwargs) -> UrlRecordModel:
            GET and deserialize the record document.
            Raises UrlRecordNotFoundError when the code doesn't exist.
            Raises DataStoreError on connectivity issues or an unreadable document.

        delete(code: str, **kwargs) -> UrlRecordRedisDAO:
            DEL the record key (no-op for missing keys).
            Raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> dao = UrlRecordRedisDAO(redis_host='localhost', prefix='s3shortener:test')
        >>> record = UrlRecordModel(code='aZ3kP9xQ', original_url='https://example.com', expiration_time=9999999999)
        >>> dao.insert(record)
        <UrlRecordRedisDAO>
        >>> dao.get('aZ3kP9xQ').original_url
        'https://example.com'
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, record: UrlRecordModel, **kwargs) -> 'UrlRecordRedisDAO':
        """Insert a URL record into Redis

        SET with NX makes the existence check and the write a single atomic
        command, so concurrent inserts of the same code can't overwrite each other.

        Args:
            record (UrlRecordModel):
                The record to persist.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            UrlRecordRedisDAO: self (for method chaining)

        Raises:
            UrlRecordAlreadyExistsError:
                If a record with the same code already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        key = self.keys.record_key(record.code)
        document = json.dumps(record.to_document())

        expire_at = max(record.expiration_time, int(time.time())) + TTL.EXPIRED_RECORD_RETENTION
        if expire_at > MAX_EXPIRE_AT:
            created = self.redis.set(key, document, nx=True)
        else:
            created = self.redis.set(key, document, nx=True, exat=expire_at)

        if not created:
            raise UrlRecordAlreadyExistsError(f"URL record with code '{record.code}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, code: str, **kwargs) -> UrlRecordModel:
        """Retrieve a stored URL record by code

        Args:
            code (str):
                The code identifier of the record.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            UrlRecordModel:
                The retrieved record (possibly already expired).

        Raises:
            UrlRecordNotFoundError:
                If the record does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur or the stored value isn't a valid record.
        """
        key = self.keys.record_key(code)
        document = self.redis.get(key)

        if document is None:
            raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.")

        try:
            return UrlRecordModel.from_document(code, json.loads(document))
        except ValueError as e:
            raise DataStoreError(f"Redis key '{key}' does not hold a valid URL record.") from e

    @handle_redis_connection_error
    @beartype
    def delete(self, code: str, **kwargs) -> 'UrlRecordRedisDAO':
        """Delete a stored URL record by code (no-op if missing).

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        self.redis.delete(self.keys.record_key(code))
        return self
