class PreviewLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:previewlinks_error'


class InvalidArgumentError(PreviewLinksError):
    """Raised when caller input is missing or malformed."""

    error_code = 'app:invalid_argument_error'


class NotFoundError(PreviewLinksError):
    """Raised when no record exists for a shortcode."""

    error_code = 'app:not_found_error'


class DataCorruptionError(PreviewLinksError):
    """Raised when more than one record is indexed for the same canonical URL."""

    error_code = 'app:data_corruption_error'


class AllocationExhaustedError(PreviewLinksError):
    """Raised when no free shortcode was found within the attempt bound."""

    error_code = 'app:allocation_exhausted_error'


class MalformedResponseError(PreviewLinksError):
    """Raised when a response is malformed."""

    error_code = 'app:malformed_response_error'


class UpstreamFailureError(PreviewLinksError):
    """Base exception for unreachable or failing collaborators (store, render service)."""

    error_code = 'infra:upstream_failure_error'


class ScreenshotError(UpstreamFailureError):
    """Raised when the screenshot pipeline cannot produce a hosted image."""

    error_code = 'infra:screenshot_error'


class ConfigurationError(PreviewLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
