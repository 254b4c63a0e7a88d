"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    public_base_url() -> str
        Configured public base URL, falling back to base_url()
    normalize_url() -> str
        Case-fold the case-insensitive parts of a URL
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn uncaught handler exceptions into a sanitized 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from previewlinks.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from typing import Any
from collections.abc import Callable
from urllib.parse import urlsplit, urlunsplit

from previewlinks.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from previewlinks.exceptions import MissingEnvironmentVariableError
from previewlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://go.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def public_base_url(event: dict[str, Any]) -> str:
    """Return PUBLIC_BASE_URL when configured, else the base URL of the event."""
    return (os.environ.get(ENV.App.PUBLIC_BASE_URL) or base_url(event)).rstrip('/')


def normalize_url(url: str) -> str:
    """Normalize a URL for equality checks.

    Scheme and host are case-insensitive (RFC 3986 §6.2.2.1), so they are
    lowercased. Path, query and userinfo are left untouched.

    Example:
        >>> normalize_url('  HTTPS://Example.COM/Path?Q=1 ')
        'https://example.com/Path?Q=1'
    """
    parts = urlsplit(url.strip())
    netloc = parts.netloc
    if netloc:
        userinfo, at, hostport = netloc.rpartition('@')
        netloc = f'{userinfo}{at}{hostport.lower()}'
    return urlunsplit((parts.scheme.lower(), netloc, parts.path, parts.query, parts.fragment))


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('SCREENSHOT_BUCKET')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: "Missing required environment variables: 'SCREENSHOT_BUCKET'"
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a sanitized 500 if the handler raises.

    The exception is logged with its traceback but never serialized into the
    response body. When running locally the exception is re-raised instead, so
    SAM shows the real error.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
