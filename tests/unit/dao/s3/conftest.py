import io
import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError


@pytest.fixture
def app_prefix():
    """Provide a consistent application prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def s3_client():
    """Mock a boto3 S3 client with a reachable bucket."""
    _s3_client = MagicMock()
    _s3_client.head_bucket.return_value = {}
    return _s3_client


@pytest.fixture
def client_error():
    """Build a botocore ClientError carrying the given S3 error code."""

    def _client_error(code, operation='PutObject'):
        return ClientError({'Error': {'Code': code, 'Message': code}}, operation)

    return _client_error


@pytest.fixture
def s3_body():
    """Build a GetObject response whose streaming body holds the given JSON document (or raw bytes)."""

    def _s3_body(document):
        payload = document if isinstance(document, bytes) else json.dumps(document).encode('utf-8')
        return {'Body': io.BytesIO(payload), 'ContentType': 'application/json'}

    return _s3_body
