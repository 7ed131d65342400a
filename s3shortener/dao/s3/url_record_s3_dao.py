"""Data Access Object (DAO) implementation for managing URL records in S3

This module provides an S3-based implementation of UrlRecordBaseDAO. Each record
is one JSON object in the bucket:

    s3://<bucket>/[<prefix>/]<code>.json
    {"originalUrl": "https://example.com/page", "expirationTime": 9999999999}

Responsibilities:
    - Create records with a conditional (create-if-absent) PutObject;
    - Retrieve and deserialize records;
    - Delete records;
    - Translate S3 errors into the appropriate DAO exceptions.

Classes:
    UrlRecordS3DAO:
        DAO for storing and retrieving UrlRecordModel in an S3 bucket.

Example:
    >>> from s3shortener.models import UrlRecordModel
    >>> from s3shortener.dao.s3 import UrlRecordS3DAO

    >>> dao = UrlRecordS3DAO(s3_bucket='daguer-url-shortener-storage', prefix='app:dev')

    >>> record = UrlRecordModel(code='aZ3kP9xQ', original_url='https://example.com/page', expiration_time=9999999999)
    >>> dao.insert(record)
    <UrlRecordS3DAO>

    >>> dao.get('aZ3kP9xQ').original_url
    'https://example.com/page'
"""

import json

from beartype import beartype
from botocore.exceptions import ClientError

from s3shortener.constants import Storage
from s3shortener.models import UrlRecordModel
from s3shortener.dao.base import UrlRecordBaseDAO
from s3shortener.dao.s3.mixins import S3ClientMixin
from s3shortener.dao.s3.helpers import (
    handle_s3_client_error,
    client_error_code,
    CONDITIONAL_WRITE_CONFLICT_CODES,
    NOT_FOUND_CODES,
)
from s3shortener.dao.exceptions import DataStoreError, UrlRecordAlreadyExistsError, UrlRecordNotFoundError


class UrlRecordS3DAO(S3ClientMixin, UrlRecordBaseDAO):
    """S3-based Data Access Object (DAO) for managing URL records

    This class implements the UrlRecordBaseDAO interface using an S3 bucket as a data store.

    Attributes (see S3ClientMixin):
        s3 (botocore.client.BaseClient):
            boto3 S3 client used to communicate with S3.
        bucket (str):
            Bucket holding the record objects.
        keys (S3KeySchema):
            Key schema helper for generating namespaced object keys.

    Methods:
        insert(record: UrlRecordModel, **kwargs) -> UrlRecordS3DAO:
            Write the record object only if its key is free.
            Raises UrlRecordAlreadyExistsError when the code is occupied.
            Raises DataStoreError on connectivity issues with S3.

        get(code: str, **kwargs) -> UrlRecordModel:
            Read and deserialize the record object.
            Raises UrlRecordNotFoundError when the code doesn't exist.
            Raises DataStoreError on connectivity issues or an unreadable object.

        delete(code: str, **kwargs) -> UrlRecordS3DAO:
            Delete the record object (no-op for missing objects).
            Raises DataStoreError on connectivity issues with S3.
    """

    @handle_s3_client_error
    @beartype
    def insert(self, record: UrlRecordModel, **kwargs) -> 'UrlRecordS3DAO':
        """Insert a URL record into S3

        The write carries `If-None-Match: *`, so S3 itself rejects it when an
        object already exists under the key. Two concurrent inserts of the same
        code can therefore never overwrite each other: exactly one wins, the other
        gets 412 Precondition Failed (or 409 if both are still in flight).

        Args:
            record (UrlRecordModel):
                The record to persist.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            UrlRecordS3DAO: self (for method chaining)

        Raises:
            UrlRecordAlreadyExistsError:
                If a record with the same code already exists.
            DataStoreError:
                If the S3 request fails or times out.
        """
        key = self.keys.record_key(record.code)
        body = json.dumps(record.to_document()).encode('utf-8')

        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=Storage.RECORD_CONTENT_TYPE,
                IfNoneMatch='*',
            )
        except ClientError as e:
            if client_error_code(e) in CONDITIONAL_WRITE_CONFLICT_CODES:
                raise UrlRecordAlreadyExistsError(f"URL record with code '{record.code}' already exists.") from e
            raise
        return self

    @handle_s3_client_error
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
                If no object exists under the code's key.
            DataStoreError:
                If the S3 request fails, times out, or the object isn't a valid record.
        """
        key = self.keys.record_key(code)

        try:
            response = self.s3.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if client_error_code(e) in NOT_FOUND_CODES:
                raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.") from e
            raise

        payload = response['Body'].read()
        try:
            return UrlRecordModel.from_document(code, json.loads(payload))
        except ValueError as e:
            raise DataStoreError(f"Object '{key}' in S3 bucket '{self.bucket}' is not a valid URL record.") from e

    @handle_s3_client_error
    @beartype
    def delete(self, code: str, **kwargs) -> 'UrlRecordS3DAO':
        """Delete a stored URL record by code

        S3 DeleteObject succeeds for missing keys, which makes this idempotent.

        Args:
            code (str):
                The code identifier of the record.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            UrlRecordS3DAO: self (for method chaining)

        Raises:
            DataStoreError:
                If the S3 request fails or times out.
        """
        self.s3.delete_object(Bucket=self.bucket, Key=self.keys.record_key(code))
        return self
