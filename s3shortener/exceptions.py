class S3ShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:s3shortener_error'


class InvalidInputError(S3ShortenerError):
    """Raised when a request carries malformed or missing input."""

    error_code = 'app:invalid_input_error'


class ShortcodeExhaustedError(S3ShortenerError):
    """Raised when every generated shortcode candidate collided with an existing record."""

    error_code = 'app:shortcode_exhausted_error'


class ConfigurationError(S3ShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class InfrastructureError(S3ShortenerError):
    """Base exception for all infrastructure (AWS) errors."""

    error_code = 'infra:infrastructure_error'


class AppConfigError(InfrastructureError):
    """Raised when AppConfig can't be reached or responds with erroneous data."""

    error_code = 'infra:appconfig_error'
