import functools
import logging

from s3shortener.types import LambdaEvent, LambdaContext, LambdaResponse
from s3shortener.constants import Storage, STORAGE_UNAVAILABLE, CONFIGURATION_ERROR
from s3shortener.exceptions import ConfigurationError, InfrastructureError
from s3shortener.dao.exceptions import DataStoreError
from s3shortener.dao.factory import build_record_dao
from s3shortener.services import RedirectResolver, ResolutionStatus
from s3shortener.utils import load_config, get_short_url, app_prefix
from s3shortener.utils.helpers import guarantee_500_response
from s3shortener.utils.responses import response_302, response_400, response_404, response_410, response_500, response_503
from s3shortener.lambdas.redirect_url.constants import (
    MISSING_CODE,
    RECORD_NOT_FOUND,
    RECORD_EXPIRED,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'redirect_url'


@functools.cache
def redirect_resolver() -> RedirectResolver:
    """Build the redirect resolver once per lambda container

    Failures are not cached, so the next invocation retries.

    Raises:
        ConfigurationError / InfrastructureError:
            If the configuration can't be loaded or is invalid.
        DataStoreError:
            If the configured record store can't be reached.
    """
    app_config = load_config(LAMBDA_NAME)
    options = app_config.get('options') or {}
    dao = build_record_dao(app_config, prefix=app_prefix())
    return RedirectResolver(dao, delete_expired=bool(options.get('delete_expired', False)))


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract code from request path
    - Step 2: Get the redirect resolver (built once per container)
    - Step 3: Resolve the code (record lookup + expiry check)
    - Step 4: Redirect client to original URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Missing code in path parameters (errorCode MISSING_CODE)
        404: No record for the code (errorCode RECORD_NOT_FOUND)
        410: Record expired (errorCode RECORD_EXPIRED)
        500: Internal server error (errorCode CONFIGURATION_ERROR or UNKNOWN_INTERNAL_SERVER_ERROR)
        503: Service unavailable (errorCode STORAGE_UNAVAILABLE), with Retry-After header

    Args:
        event (dict):
            API Gateway event payload containing the code path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'code': 'q3ZrT0bX'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract code from request's path
    code = (event.get('pathParameters') or {}).get('code')
    if not code:
        logger.info('Missing "code" in path. Responding with 400.', extra={'event': MISSING_CODE})
        return response_400(message="missing 'code' in path", error_code=MISSING_CODE)
    logger.debug('Client requested short URL %s.', get_short_url(code, event))

    # 2- Get the redirect resolver
    try:
        resolver = redirect_resolver()
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to configure redirect URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=CONFIGURATION_ERROR)
    except DataStoreError:
        logger.exception('Record store unreachable. Responding with 503.', extra={'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=Storage.RETRY_AFTER_SECONDS, message='record store unavailable', error_code=STORAGE_UNAVAILABLE)

    # 3- Resolve the code
    try:
        resolution = resolver.resolve(code)
    except DataStoreError:
        logger.exception('Failed to read URL record. Responding with 503.', extra={'code': code, 'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=Storage.RETRY_AFTER_SECONDS, message='record store unavailable', error_code=STORAGE_UNAVAILABLE)

    if resolution.status is ResolutionStatus.NOT_FOUND:
        logger.info('URL record not found. Responding with 404.', extra={'code': code, 'event': RECORD_NOT_FOUND})
        return response_404(message=f"short url {get_short_url(code, event)} doesn't exist", error_code=RECORD_NOT_FOUND)

    if resolution.status is ResolutionStatus.EXPIRED:
        logger.info('URL record expired. Responding with 410.', extra={'code': code, 'event': RECORD_EXPIRED})
        return response_410(message=f'short url {get_short_url(code, event)} has expired', error_code=RECORD_EXPIRED)

    # 4- Redirect client to original URL
    logger.info('Redirecting client to original URL. Responding with 302.', extra={'code': code, 'event': REDIRECT_SUCCESS})
    return response_302(location=resolution.original_url)
