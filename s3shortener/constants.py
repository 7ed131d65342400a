from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Retention window of an expired record before the backend may drop it (30 days in seconds)
    EXPIRED_RECORD_RETENTION = 2_592_000  # 60 * 60 * 24 * 30


class Shortcode:
    """Shortcode generation defaults."""

    LENGTH = 8  # Characters per generated shortcode
    MAX_ATTEMPTS = 5  # Conditional-write attempts before giving up on collisions
    MAX_LENGTH = 64  # Longest code a deployment may be configured to generate


class Storage:
    """Storage client defaults."""

    TIMEOUT_SECONDS = 3  # Connect/read timeout for a single store call
    MAX_ATTEMPTS = 3  # Total attempts (first call included) in botocore's standard retry mode
    RECORD_CONTENT_TYPE = 'application/json'
    RETRY_AFTER_SECONDS = 5  # Retry-After hint sent to clients when the store is unavailable


# Signed 64-bit range accepted for expiration timestamps
MIN_TIMESTAMP = -(2**63)
MAX_TIMESTAMP = 2**63 - 1


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
INVALID_INPUT = 'INVALID_INPUT'
SHORTCODE_EXHAUSTED = 'SHORTCODE_EXHAUSTED'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
