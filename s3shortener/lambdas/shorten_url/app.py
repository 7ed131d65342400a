import json
import base64
import binascii
import functools
import logging

from s3shortener.types import LambdaEvent, LambdaContext, LambdaResponse
from s3shortener.constants import Shortcode, Storage, INVALID_INPUT, SHORTCODE_EXHAUSTED, STORAGE_UNAVAILABLE, CONFIGURATION_ERROR
from s3shortener.exceptions import BadConfigurationError, ConfigurationError, InfrastructureError, InvalidInputError, ShortcodeExhaustedError
from s3shortener.dao.exceptions import DataStoreError
from s3shortener.dao.factory import build_record_dao
from s3shortener.services import ShortenerService, parse_expiration_time, validate_original_url
from s3shortener.utils import load_config, get_short_url, app_prefix
from s3shortener.utils.helpers import guarantee_500_response
from s3shortener.utils.responses import json_response, response_400, response_409, response_500, response_503


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'shorten_url'


@functools.cache
def shortener_service() -> ShortenerService:
    """Build the shortener service once per lambda container

    The DAO (and the boto3/redis client inside it) is reused by every warm
    invocation. Failures are not cached, so the next invocation retries.

    Raises:
        ConfigurationError / InfrastructureError:
            If the configuration can't be loaded or is invalid.
        DataStoreError:
            If the configured record store can't be reached.
    """
    app_config = load_config(LAMBDA_NAME)
    options = app_config.get('options') or {}
    dao = build_record_dao(app_config, prefix=app_prefix())

    try:
        return ShortenerService(dao, max_attempts=options.get('max_attempts', Shortcode.MAX_ATTEMPTS))
    except ValueError as e:
        raise BadConfigurationError(f"Invalid options for lambda '{LAMBDA_NAME}': {e}") from e


def _request_body(event: LambdaEvent) -> str:
    body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body, validate=True).decode('utf-8')
    return body


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract original URL and expiration time from request body
    - Step 2: Validate both (no storage I/O happens for invalid input)
    - Step 3: Get the shortener service (built once per container)
    - Step 4: Generate a code and store the record (create-if-absent)
    - Step 5: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            code: newly generated code
            short_url: newly generated short url
        400: Bad client request (errorCode INVALID_INPUT)
            message: invalid JSON, missing/blank originalUrl or non-integer expirationTime
        409: Conflict (errorCode SHORTCODE_EXHAUSTED)
            message: no free code found after the configured attempts
        500: Internal server error (errorCode CONFIGURATION_ERROR or UNKNOWN_INTERNAL_SERVER_ERROR)
        503: Service unavailable (errorCode STORAGE_UNAVAILABLE), with Retry-After header

    Args:
        event (dict):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"originalUrl": "https://example.com", "expirationTime": "9999999999"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['code']
        'q3ZrT0bX'
    """
    # 1- Extract original URL and expiration time from request body
    try:
        request_body = json.loads(_request_body(event))
    except (ValueError, binascii.Error):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_INPUT})
        return response_400(message='invalid JSON body', error_code=INVALID_INPUT)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_INPUT})
        return response_400(message='JSON body must be an object', error_code=INVALID_INPUT)

    # 2- Validate input before touching the record store
    try:
        original_url = validate_original_url(request_body.get('originalUrl'))
        expiration_time = parse_expiration_time(request_body.get('expirationTime'))
    except InvalidInputError as e:
        logger.info('Invalid shorten request. Responding with 400.', extra={'event': INVALID_INPUT, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_INPUT)

    # 3- Get the shortener service
    try:
        service = shortener_service()
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to configure shorten URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=CONFIGURATION_ERROR)
    except DataStoreError:
        logger.exception('Record store unreachable. Responding with 503.', extra={'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=Storage.RETRY_AFTER_SECONDS, message='record store unavailable', error_code=STORAGE_UNAVAILABLE)

    # 4- Generate a code and store the record
    try:
        code = service.shorten(original_url, expiration_time)
    except ShortcodeExhaustedError:
        logger.error('No free shortcode found. Responding with 409.', extra={'event': SHORTCODE_EXHAUSTED})
        return response_409(message='could not allocate a unique code, try again', error_code=SHORTCODE_EXHAUSTED)
    except DataStoreError:
        logger.exception('Failed to store URL record. Responding with 503.', extra={'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=Storage.RETRY_AFTER_SECONDS, message='record store unavailable', error_code=STORAGE_UNAVAILABLE)

    # 5- Return successful response to user
    short_url = get_short_url(code, event)
    logger.info('Shortened URL. Responding with 200.', extra={'code': code, 'shortUrl': short_url})
    return json_response(200, {'code': code, 'short_url': short_url})
