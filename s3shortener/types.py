from typing import Any

from botocore.client import BaseClient


# API Gateway (Lambda Proxy) payloads
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type HttpHeaders = dict[str, str]

# AppConfig: the full document, and one lambda's section of it
type AppConfig = dict[str, Any]
type LambdaConfiguration = dict[str, Any]

# Persisted record JSON ({"originalUrl": ..., "expirationTime": ...})
type RecordDocument = dict[str, Any]

# boto3 clients are generated at runtime; BaseClient is the closest static type
type AppConfigDataClient = BaseClient
type S3Client = BaseClient
