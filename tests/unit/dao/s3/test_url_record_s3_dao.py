"""Unit tests for the UrlRecordS3DAO

Test coverage includes:

1. Insertion behavior
   - Validates inserting a record issues a conditional PutObject with the JSON document.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms occupied codes (412 / 409) raise UrlRecordAlreadyExistsError.
   - Confirms other S3 failures raise DataStoreError.

2. Retrieval behavior
   - Ensures fetching an existing code returns a populated UrlRecordModel.
   - Confirms missing objects raise UrlRecordNotFoundError.
   - Confirms unreadable objects and S3 failures raise DataStoreError.

3. Deletion behavior
"""

import json

import pytest
from beartype.roar import BeartypeCallHintParamViolation
from botocore.exceptions import ConnectTimeoutError, EndpointConnectionError, ReadTimeoutError

from s3shortener.models import UrlRecordModel
from s3shortener.dao.exceptions import DataStoreError, UrlRecordAlreadyExistsError, UrlRecordNotFoundError
from s3shortener.dao.s3 import UrlRecordS3DAO


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(s3_client, app_prefix):
    """Create a UrlRecordS3DAO instance with a mocked S3 client."""
    return UrlRecordS3DAO(s3_bucket='test-bucket', s3_client=s3_client, prefix=app_prefix)


@pytest.fixture
def record():
    return UrlRecordModel(code='aZ3kP9xQ', original_url='https://example.com/page', expiration_time=9999999999)


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_insert_record(dao, s3_client, record):
    """Ensure insert writes the JSON document with If-None-Match: *."""
    assert dao.insert(record) is dao

    s3_client.put_object.assert_called_once()
    kwargs = s3_client.put_object.call_args.kwargs
    assert kwargs['Bucket'] == 'test-bucket'
    assert kwargs['Key'] == 'testapp/test/aZ3kP9xQ.json'
    assert kwargs['ContentType'] == 'application/json'
    assert kwargs['IfNoneMatch'] == '*'
    assert json.loads(kwargs['Body']) == {'originalUrl': 'https://example.com/page', 'expirationTime': 9999999999}


def test_insert_record_without_prefix(s3_client, record):
    dao = UrlRecordS3DAO(s3_bucket='test-bucket', s3_client=s3_client)
    dao.insert(record)
    assert s3_client.put_object.call_args.kwargs['Key'] == 'aZ3kP9xQ.json'


def test_insert_record_with_invalid_type(dao, s3_client):
    """Ensure inserting invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert({'originalUrl': 'https://example.com/page', 'expirationTime': 1})
    s3_client.put_object.assert_not_called()


@pytest.mark.parametrize('code', ['PreconditionFailed', 'ConditionalRequestConflict', '412', '409'])
def test_insert_record_already_exists(dao, s3_client, record, client_error, code):
    """Ensure a lost conditional write raises UrlRecordAlreadyExistsError."""
    s3_client.put_object.side_effect = client_error(code)

    with pytest.raises(UrlRecordAlreadyExistsError, match="URL record with code 'aZ3kP9xQ' already exists."):
        dao.insert(record)


@pytest.mark.parametrize('code', ['AccessDenied', 'SlowDown', 'InternalError', 'NoSuchBucket'])
def test_insert_record_with_s3_error(dao, s3_client, record, client_error, code):
    """Ensure other S3 errors raise DataStoreError naming the error code."""
    s3_client.put_object.side_effect = client_error(code)

    with pytest.raises(DataStoreError, match=f"S3 request to bucket 'test-bucket' failed \\({code}\\)."):
        dao.insert(record)


@pytest.mark.parametrize(
    'error',
    [
        EndpointConnectionError(endpoint_url='https://s3.amazonaws.com'),
        ConnectTimeoutError(endpoint_url='https://s3.amazonaws.com'),
        ReadTimeoutError(endpoint_url='https://s3.amazonaws.com'),
    ],
)
def test_insert_record_with_connection_error(dao, s3_client, record, error):
    """Ensure timeouts and unreachable endpoints raise DataStoreError."""
    s3_client.put_object.side_effect = error

    with pytest.raises(DataStoreError, match="Can't reach S3 bucket 'test-bucket'"):
        dao.insert(record)


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_record(dao, s3_client, s3_body, record):
    """Ensure get deserializes the stored JSON document."""
    s3_client.get_object.return_value = s3_body({'originalUrl': 'https://example.com/page', 'expirationTime': 9999999999})

    assert dao.get('aZ3kP9xQ') == record
    s3_client.get_object.assert_called_once_with(Bucket='test-bucket', Key='testapp/test/aZ3kP9xQ.json')


def test_get_expired_record(dao, s3_client, s3_body):
    """Expired records are returned as-is; expiry is the caller's decision."""
    s3_client.get_object.return_value = s3_body({'originalUrl': 'https://example.com/old', 'expirationTime': 1})

    result = dao.get('oldcode1')
    assert result.expiration_time == 1
    assert result.is_expired() is True


def test_get_record_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(12345678)


@pytest.mark.parametrize('code', ['NoSuchKey', 'NotFound', '404'])
def test_get_record_not_found(dao, s3_client, client_error, code):
    s3_client.get_object.side_effect = client_error(code, 'GetObject')

    with pytest.raises(UrlRecordNotFoundError, match="URL record with code 'missing1' not found."):
        dao.get('missing1')


def test_get_record_with_s3_error(dao, s3_client, client_error):
    s3_client.get_object.side_effect = client_error('AccessDenied', 'GetObject')

    with pytest.raises(DataStoreError, match='AccessDenied'):
        dao.get('aZ3kP9xQ')


def test_get_record_with_timeout(dao, s3_client):
    s3_client.get_object.side_effect = ReadTimeoutError(endpoint_url='https://s3.amazonaws.com')

    with pytest.raises(DataStoreError, match='ReadTimeoutError'):
        dao.get('aZ3kP9xQ')


@pytest.mark.parametrize(
    'payload',
    [
        b'not json at all',
        b'\xff\xfe',
        b'[1, 2, 3]',
        b'{"originalUrl": "https://example.com/page"}',
        b'{"originalUrl": "https://example.com/page", "expirationTime": "soon"}',
    ],
)
def test_get_record_with_corrupted_object(dao, s3_client, s3_body, payload):
    """Unreadable objects surface as DataStoreError, not as missing records."""
    s3_client.get_object.return_value = s3_body(payload)

    with pytest.raises(DataStoreError, match="Object 'testapp/test/aZ3kP9xQ.json' in S3 bucket 'test-bucket' is not a valid URL record."):
        dao.get('aZ3kP9xQ')


# -------------------------------
# 3. Deletion behavior
# -------------------------------


def test_delete_record(dao, s3_client):
    assert dao.delete('aZ3kP9xQ') is dao
    s3_client.delete_object.assert_called_once_with(Bucket='test-bucket', Key='testapp/test/aZ3kP9xQ.json')


def test_delete_record_with_s3_error(dao, s3_client, client_error):
    s3_client.delete_object.side_effect = client_error('AccessDenied', 'DeleteObject')

    with pytest.raises(DataStoreError):
        dao.delete('aZ3kP9xQ')
