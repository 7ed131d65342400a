"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix() correctly read environment variables.

2. Lambda section selection
   - Ensures select_lambda_config() returns the active backend block and options.
   - Ensures malformed documents raise BadConfigurationError.

3. Configuration loading behavior (AWS AppConfig)
   - Ensures load_config() correctly returns parsed AppConfig configuration data.
   - Ensures AWS failures and non-JSON documents raise AppConfigError.
   - Ensures missing environment variables raise MissingEnvironmentVariableError.

4. Local AppConfig agent
   - Ensures the local agent is used only when running locally with a safe URL.
   - Ensures unsafe agent URLs are rejected.
"""

import os
import json
from io import BytesIO
from unittest.mock import MagicMock

import pytest
import botocore

from s3shortener.utils import config
from s3shortener.exceptions import AppConfigError, BadConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Set up environment variables for testing."""
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')
    monkeypatch.delenv('APPCONFIG_AGENT_URL', raising=False)
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.setenv('APP_ENV', 'dev')
    monkeypatch.setenv('APP_NAME', 's3shortener')


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'active_backend': 's3',
        'configs': {
            'test_lambda': {
                's3': {
                    'bucket': 'monkey-bucket',
                    'timeout': 2,
                },
                'redis': {
                    'host': 'monkey',
                    'port': 6379,
                },
                'options': {
                    'max_attempts': 7,
                },
            },
        },
    }
    # fmt: on


@pytest.fixture
def mock_appconfig(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client returned by boto3.client."""
    client = MagicMock()
    client.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    client.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)
    return client


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    """Ensure app_env() returns the lowercased value of APP_ENV"""
    monkeypatch.setitem(os.environ, 'APP_ENV', 'Test')
    assert config.app_env() == 'test'


def test_app_env_defaults_to_local(monkeypatch):
    monkeypatch.delitem(os.environ, 'APP_ENV', raising=False)
    assert config.app_env() == 'local'


def test_app_name_not_set(monkeypatch):
    """Ensure app_name() returns None when APP_NAME is not set"""
    monkeypatch.delitem(os.environ, 'APP_NAME', raising=False)
    assert config.app_name() is None
    assert config.app_prefix() is None


def test_app_prefix(monkeypatch):
    """Ensure app_prefix() joins APP_NAME and APP_ENV"""
    monkeypatch.setitem(os.environ, 'APP_NAME', 'test-app')
    monkeypatch.setitem(os.environ, 'APP_ENV', 'test')
    assert config.app_prefix() == 'test-app:test'


# -------------------------------
# 2. Lambda section selection
# -------------------------------


def test_select_lambda_config(appconfig_payload):
    """Only the active backend block and options are returned."""
    result = config.select_lambda_config(appconfig_payload, 'test_lambda')
    assert result == {
        's3': {'bucket': 'monkey-bucket', 'timeout': 2},
        'options': {'max_attempts': 7},
    }


def test_select_lambda_config_without_options(appconfig_payload):
    del appconfig_payload['configs']['test_lambda']['options']
    assert config.select_lambda_config(appconfig_payload, 'test_lambda') == {'s3': {'bucket': 'monkey-bucket', 'timeout': 2}}


@pytest.mark.parametrize(
    'document',
    [
        {},
        {'active_backend': 's3'},
        {'active_backend': 's3', 'configs': {}},
        {'active_backend': 'dynamodb', 'configs': {'test_lambda': {'s3': {}}}},
        {'active_backend': 's3', 'configs': None},
        [],
    ],
)
def test_select_lambda_config_bad_document(document):
    with pytest.raises(BadConfigurationError, match="lambda 'test_lambda'"):
        config.select_lambda_config(document, 'test_lambda')


# -------------------------------
# 3. Configuration loading behavior
# -------------------------------


def test_load_config(mock_appconfig):
    """Ensure load_config() fetches the document and returns the lambda section."""
    result = config.load_config('test_lambda')

    assert result['s3'] == {'bucket': 'monkey-bucket', 'timeout': 2}
    assert result['options'] == {'max_attempts': 7}

    mock_appconfig.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    mock_appconfig.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')


def test_load_config_client_error(monkeypatch):
    """Ensure load_config() wraps ClientError into AppConfigError."""
    client = MagicMock()
    client.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)

    with pytest.raises(AppConfigError) as exc_info:
        config.load_config('test_lambda')

    assert isinstance(exc_info.value.__cause__, botocore.exceptions.ClientError)


def test_load_config_connection_error(monkeypatch):
    client = MagicMock()
    client.start_configuration_session.side_effect = botocore.exceptions.EndpointConnectionError(endpoint_url='https://appconfigdata')
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)

    with pytest.raises(AppConfigError):
        config.load_config('test_lambda')


def test_load_config_invalid_json(mock_appconfig):
    mock_appconfig.get_latest_configuration.return_value = {'Configuration': BytesIO(b'{not json')}

    with pytest.raises(AppConfigError, match='not valid JSON'):
        config.load_config('test_lambda')


def test_load_config_missing_environment(monkeypatch, mock_appconfig):
    monkeypatch.delenv('APPCONFIG_PROFILE_ID')

    with pytest.raises(MissingEnvironmentVariableError, match='APPCONFIG_PROFILE_ID'):
        config.load_config('test_lambda')

    mock_appconfig.start_configuration_session.assert_not_called()


def test_load_config_unknown_lambda(mock_appconfig):
    with pytest.raises(BadConfigurationError):
        config.load_config('other_lambda')


# -------------------------------
# 4. Local AppConfig agent
# -------------------------------


def test_load_config_from_local_agent(monkeypatch, mock_appconfig, appconfig_payload):
    """Running locally with an agent URL reads the document from the agent."""
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('APPCONFIG_AGENT_URL', 'http://host.docker.internal:2772')

    requested = []

    def fake_urlopen(url, timeout):
        requested.append((url, timeout))
        return BytesIO(json.dumps(appconfig_payload).encode('utf-8'))

    monkeypatch.setattr(config.urllib.request, 'urlopen', fake_urlopen)

    result = config.load_config('test_lambda')

    assert result['s3']['bucket'] == 'monkey-bucket'
    assert requested == [
        ('http://host.docker.internal:2772/applications/s3shortener/environments/local/configurations/backend-config', 5),
    ]
    mock_appconfig.start_configuration_session.assert_not_called()


def test_local_agent_ignored_outside_local(monkeypatch, mock_appconfig):
    """The agent URL is ignored when not running locally."""
    monkeypatch.setenv('APPCONFIG_AGENT_URL', 'http://localhost:2772')
    monkeypatch.setattr(config.urllib.request, 'urlopen', MagicMock(side_effect=AssertionError('must not be called')))

    assert config.load_config('test_lambda')['s3']['bucket'] == 'monkey-bucket'


def test_local_agent_unreachable(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('APPCONFIG_AGENT_URL', 'http://localhost:2772')
    monkeypatch.setattr(config.urllib.request, 'urlopen', MagicMock(side_effect=ConnectionRefusedError()))

    with pytest.raises(AppConfigError, match='local agent'):
        config.load_config('test_lambda')


@pytest.mark.parametrize(
    'url',
    [
        'ftp://localhost:2772',
        'http://evil.example.com:2772',
        'http://localhost:8080',
    ],
)
def test_local_agent_rejects_unsafe_urls(monkeypatch, url):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('APPCONFIG_AGENT_URL', url)

    with pytest.raises(BadConfigurationError):
        config.load_config('test_lambda')
