"""Build the URL record DAO selected by the application configuration

`load_config()` returns a lambda's configuration keyed by the active backend:

    {'s3': {'bucket': 'daguer-url-shortener-storage', 'timeout': 3}, 'options': {...}}

The backend block is forwarded to the backend's DAO constructor with every
setting prefixed by the backend name ('bucket' -> 's3_bucket', 'host' -> 'redis_host').

Example:
    >>> from s3shortener.dao.factory import build_record_dao
    >>> dao = build_record_dao({'s3': {'bucket': 'daguer-url-shortener-storage'}}, prefix='s3shortener:dev')
    >>> type(dao).__name__
    'UrlRecordS3DAO'
"""

import logging

from s3shortener.types import LambdaConfiguration
from s3shortener.exceptions import BadConfigurationError
from s3shortener.dao.base import UrlRecordBaseDAO
from s3shortener.dao.s3 import UrlRecordS3DAO
from s3shortener.dao.redis import UrlRecordRedisDAO


logger = logging.getLogger(__name__)

BACKENDS: dict[str, type[UrlRecordBaseDAO]] = {
    's3': UrlRecordS3DAO,
    'redis': UrlRecordRedisDAO,
}

# Lambda-level settings living next to the backend block
NON_BACKEND_SECTIONS = frozenset({'options'})


def build_record_dao(app_config: LambdaConfiguration, prefix: str | None = None) -> UrlRecordBaseDAO:
    """Instantiate the DAO of the configured backend

    Args:
        app_config (dict):
            A lambda's configuration as returned by `load_config()`.
        prefix (str | None):
            Namespace prefix for record keys (see `app_prefix()`).

    Returns:
        UrlRecordBaseDAO: a ready-to-use DAO (its healthcheck already passed).

    Raises:
        BadConfigurationError:
            If the configuration doesn't name exactly one supported backend or
            carries settings the backend doesn't understand.
        DataStoreError:
            If the backend can't be reached.
    """
    backends = [name for name in app_config if name not in NON_BACKEND_SECTIONS]
    if len(backends) != 1:
        raise BadConfigurationError(f'Expected exactly one storage backend in configuration (given: {backends}).')

    backend = backends[0]
    if backend not in BACKENDS:
        raise BadConfigurationError(f"Unsupported storage backend '{backend}' (supported: {sorted(BACKENDS)}).")

    settings = app_config[backend] or {}
    if not isinstance(settings, dict):
        raise BadConfigurationError(f"Configuration of storage backend '{backend}' must be an object.")

    kwargs = {f'{backend}_{key}': value for key, value in settings.items()}
    logger.debug('Building URL record DAO.', extra={'backend': backend, 'settings': sorted(settings)})

    try:
        return BACKENDS[backend](**kwargs, prefix=prefix)
    except TypeError as e:
        raise BadConfigurationError(f"Invalid settings for storage backend '{backend}': {e}") from e
