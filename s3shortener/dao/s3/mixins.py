"""S3 mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Initialize a boto3 S3 client with bounded timeouts and retries
    - Point the client at LocalStack when running locally
    - Healthcheck access to the configured bucket

Classes:
    - S3ClientMixin: Base mixin to inject S3 key management, client setup & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class UrlRecordS3DAO(S3ClientMixin, UrlRecordBaseDAO):
        ...     pass
        ...
        >>> dao = UrlRecordS3DAO(s3_bucket='daguer-url-shortener-storage', prefix='myapp:prod')
        >>> dao._healthcheck()
        True
"""

from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3shortener.constants import Storage
from s3shortener.exceptions import BadConfigurationError
from s3shortener.types import S3Client
from s3shortener.dao.exceptions import DataStoreError
from s3shortener.dao.s3.s3_key_schema import S3KeySchema
from s3shortener.dao.s3.helpers import client_error_code
from s3shortener.utils.runtime import localstack_endpoint


class S3ClientMixin:
    """Mixin S3 client setup and health check for S3-backed DAOs.

    Attributes:
        s3 (botocore.client.BaseClient):
            Active boto3 S3 client instance used by subclasses.

        bucket (str):
            Name of the bucket holding the records.

        keys (S3KeySchema):
            Helper class for generating namespaced object keys.

    Methods:
        _healthcheck(raise_error: bool = True) -> bool:
            HEAD the bucket to verify connectivity and permissions.
            Optionally raise a DataStoreError if unreachable.
    """

    def __init__(
        self,
        s3_bucket: Optional[str] = None,
        s3_timeout: Optional[float] = Storage.TIMEOUT_SECONDS,
        s3_max_attempts: Optional[int] = Storage.MAX_ATTEMPTS,
        s3_region: Optional[str] = None,
        s3_endpoint_url: Optional[str] = None,
        s3_client: Optional[S3Client] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize an S3-based DAO for URL record management

        The option is given to either use an existing S3 client instance or
        create one via the appropriate connection parameters.

        Args:
            s3_bucket (str):
                Name of the bucket holding the records. Required.

            s3_timeout (Optional[float]):
                Connect and read timeout in seconds for every S3 call. Defaults to 3.

            s3_max_attempts (Optional[int]):
                Total attempts per S3 call (first one included) in botocore's
                standard retry mode. Defaults to 3.

            s3_region (Optional[str]):
                AWS region of the bucket. Defaults to the Lambda's region.

            s3_endpoint_url (Optional[str]):
                Custom S3 endpoint. Defaults to LOCALSTACK_ENDPOINT when running
                locally, otherwise the AWS endpoint.

            s3_client (Optional[BaseClient]):
                Pre-initialized boto3 S3 client. If None, a new client is created.

            prefix (Optional[str]):
                Namespace prefix for all object keys, e.g. 'app:env'.

        Raises:
            BadConfigurationError:
                If no bucket name is given.
            DataStoreError:
                If the bucket can't be reached.
        """
        if not s3_bucket or not isinstance(s3_bucket, str):
            raise BadConfigurationError(f'S3 bucket name must be a non-empty string (given value: {s3_bucket!r}).')

        if s3_client is None:
            if s3_endpoint_url is None:
                s3_endpoint_url = localstack_endpoint()

            config = Config(
                connect_timeout=s3_timeout,
                read_timeout=s3_timeout,
                retries={'total_max_attempts': s3_max_attempts, 'mode': 'standard'},
            )
            s3_client = boto3.client('s3', region_name=s3_region, endpoint_url=s3_endpoint_url, config=config)

        self.s3 = s3_client
        self.bucket = s3_bucket
        self.keys = S3KeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """HEAD the bucket to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if the bucket is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If the bucket can't be reached and raise_error=True.
        """
        try:
            self.s3.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            if raise_error:
                raise DataStoreError(
                    f"Can't access S3 bucket '{self.bucket}' ({client_error_code(e) or 'unknown error'}). "
                    'Check the provided configuration parameters.'
                ) from e
            return False
        except BotoCoreError as e:
            if raise_error:
                raise DataStoreError(f"Can't reach S3 bucket '{self.bucket}'. Check the provided configuration parameters.") from e
            return False
        else:
            return True
