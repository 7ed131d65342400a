"""Helpers shared by the lambda handlers

Functions:
    base_url(event) -> str
        Public origin the request came in through.
    get_short_url(code, event) -> str
        Short URL handed out for `code`.
    require_environment(*names) -> decorator
        Fail fast with MissingEnvironmentVariableError when variables are unset.
    guarantee_500_response(handler) -> handler
        Never let an exception escape a handler deployed to AWS.
"""

import os
import logging
import functools
from collections.abc import Callable

from s3shortener.types import LambdaEvent, LambdaContext, LambdaResponse
from s3shortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from s3shortener.exceptions import MissingEnvironmentVariableError
from s3shortener.utils.responses import response_500
from s3shortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_BASE_URL = 'http://localhost:3000'  # sam local start-api


def base_url(event: LambdaEvent) -> str:
    """Public origin of the API, derived from the API Gateway request context

    Default execute-api domains need the stage in the path, custom domains map
    the stage through a base path mapping and don't:

        >>> base_url({'requestContext': {'domainName': 'abc123.execute-api.eu-central-1.amazonaws.com', 'stage': 'Prod'}})
        'https://abc123.execute-api.eu-central-1.amazonaws.com/Prod'
        >>> base_url({'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}})
        'https://sho.rt'
        >>> base_url({})
        'http://localhost:3000'
    """
    context = event.get('requestContext') or {}
    domain = context.get('domainName')
    if not domain:
        return LOCAL_BASE_URL
    if 'execute-api' in domain:
        return f'https://{domain}/{context.get("stage", "")}'
    return f'https://{domain}'


def get_short_url(code: str, event: LambdaEvent) -> str:
    return f'{base_url(event).rstrip("/")}/{code}'


def require_environment(*names: str) -> Callable:
    """Decorator: raise MissingEnvironmentVariableError if any of `names` is unset or empty at call time."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = ', '.join(repr(name) for name in names if not os.environ.get(name))
            if missing:
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: answer 500 UNKNOWN_INTERNAL_SERVER_ERROR for any exception escaping `handler`

    The traceback is logged either way. Under `sam local` the exception is
    re-raised instead, so it shows up in the terminal.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            if running_locally():
                raise
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
