"""Application configuration from AWS AppConfig

All lambdas of one environment share a single JSON document, deployed to the
AppConfig environment `APP_ENV` of the application `APP_NAME`:

    {
        "build": 7,
        "active_backend": "s3",
        "configs": {
            "shorten_url": {
                "s3": {"bucket": "daguer-url-shortener-storage", "timeout": 3},
                "redis": {"host": "cache.internal", "ssl": true},
                "options": {"max_attempts": 5}
            },
            "redirect_url": {
                "s3": {"bucket": "daguer-url-shortener-storage"},
                "options": {"delete_expired": true}
            }
        }
    }

`load_config(lambda_name)` hands each lambda only the block of the active
backend plus its optional "options":

    >>> load_config('redirect_url')
    {'s3': {'bucket': 'daguer-url-shortener-storage'}, 'options': {'delete_expired': True}}

Under `sam local`, setting APPCONFIG_AGENT_URL reads the document from a local
AppConfig agent container instead of AWS.
"""

import os
import json
import logging
import urllib.parse
import urllib.request

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from s3shortener.constants import ENV
from s3shortener.exceptions import AppConfigError, BadConfigurationError
from s3shortener.types import AppConfig, AppConfigDataClient, LambdaConfiguration
from s3shortener.utils.helpers import require_environment
from s3shortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal'})
AGENT_PORT = 2772
AGENT_TIMEOUT_SECONDS = 5
DEFAULT_PROFILE_NAME = 'backend-config'


def app_env() -> str:
    """APP_ENV, lowercased; 'local' when unset."""
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Key prefix for DAOs, '<app name>:<app env>' (e.g. 's3shortener:prod'), or None without APP_NAME."""
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def select_lambda_config(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Cut one lambda's configuration out of the full document

    Raises:
        BadConfigurationError:
            If the document names no active backend, has no section for the
            lambda, or the section lacks the active backend's block.
    """
    try:
        backend = document['active_backend']
        section = document['configs'][lambda_name]
        data = {backend: section[backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no usable configuration for lambda '{lambda_name}'.") from e

    if 'options' in section:
        data['options'] = section['options']
    return data


def _local_agent_url() -> str | None:
    """Validated APPCONFIG_AGENT_URL when running locally, None otherwise.

    Only loopback and Docker host addresses on the agent port are accepted.
    """
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url or not running_locally():
        return None

    parts = urllib.parse.urlparse(url)
    if parts.scheme not in {'http', 'https'} or parts.hostname not in AGENT_HOSTS or parts.port not in {AGENT_PORT, None}:
        raise BadConfigurationError(f'Refusing to load AppConfig from {url!r}: not a local AppConfig agent.')
    return url.rstrip('/')


def _fetch_from_agent(agent_url: str) -> AppConfig:
    profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

    logger.debug('Loading AppConfig from local agent.', extra={'agentUrl': url})
    try:
        with urllib.request.urlopen(url, timeout=AGENT_TIMEOUT_SECONDS) as response:  # noqa: S310
            return json.load(response)
    except (OSError, ValueError) as e:
        raise AppConfigError(f'Failed to load AppConfig from local agent at {url}.') from e


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> AppConfig:
    try:
        client: AppConfigDataClient = boto3.client('appconfigdata')
        token = client.start_configuration_session(
            ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
            EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
            ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
        )['InitialConfigurationToken']
        content = client.get_latest_configuration(ConfigurationToken=token)['Configuration'].read()
    except (BotoCoreError, ClientError) as e:
        raise AppConfigError('Failed to fetch configuration from AWS AppConfig.') from e

    try:
        return json.loads(content)
    except ValueError as e:
        raise AppConfigError('AWS AppConfig returned a document that is not valid JSON.') from e


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load the configuration of `lambda_name` ('shorten_url', 'redirect_url')

    Raises:
        MissingEnvironmentVariableError:
            If APPCONFIG_APP_ID, APPCONFIG_ENV_ID or APPCONFIG_PROFILE_ID is unset.
        AppConfigError:
            If AppConfig (or the local agent) is unreachable or serves invalid JSON.
        BadConfigurationError:
            If the document has nothing usable for this lambda, or the agent URL isn't local.
    """
    agent_url = _local_agent_url()
    document = _fetch_from_agent(agent_url) if agent_url else _fetch_from_appconfig()

    data = select_lambda_config(document, lambda_name)
    logger.debug('Loaded AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build'), 'source': agent_url or 'appconfig'})
    return data
