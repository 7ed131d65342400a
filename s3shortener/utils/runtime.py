"""Where is this lambda running?

`sam local` sets AWS_SAM_LOCAL=true inside the function container; developer
shells and CI set APP_ENV=local instead. Either one means AWS services must be
replaced by their local stand-ins (LocalStack for S3, the AppConfig agent for
configuration).
"""

import os

from s3shortener.constants import ENV


def running_locally() -> bool:
    if os.getenv(ENV.App.APP_ENV, '').lower() == 'local':
        return True
    return os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def localstack_endpoint() -> str | None:
    """LocalStack endpoint to use instead of AWS, or None outside local runs."""
    return os.getenv(ENV.LocalStack.ENDPOINT) if running_locally() else None
