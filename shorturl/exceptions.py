class ShortURLError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shorturl_error'


class ParameterError(ShortURLError):
    """Raised when a client supplies an empty URL or a malformed short code."""

    error_code = 'app:parameter_error'


class ConfigurationError(ShortURLError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
