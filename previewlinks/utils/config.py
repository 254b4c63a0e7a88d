"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "register_url": {
                "redis": { "host": ..., "port": ..., "db": ... }
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"register_url"`) from this AppConfig
document, determined by the current application environment.

Plain settings that are not tied to a data store backend (public base URL,
registration timeout, screenshot pipeline) are read from environment variables
instead, see previewlinks.constants.ENV.

Typical usage inside a Lambda handler:
    >>> from previewlinks.utils.config import load_config
    >>> config = load_config('register_url')
    >>> print(config['redis']['host'])
    redis-15501.host.docker.internal
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from collections.abc import Callable

import boto3

from previewlinks.types import LambdaConfiguration
from previewlinks.constants import ENV, Limits
from previewlinks.utils.helpers import require_environment
from previewlinks.utils.runtime import running_locally
from previewlinks.exceptions import BadConfigurationError, MalformedResponseError


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def registration_timeout() -> float:
    """Return the registration time budget in seconds.

    Raises:
        BadConfigurationError: If REGISTRATION_TIMEOUT_SECONDS is not a positive number.
    """
    raw = os.environ.get(ENV.App.REGISTRATION_TIMEOUT)
    if not raw:
        return Limits.REGISTRATION_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError as e:
        raise BadConfigurationError(f'{ENV.App.REGISTRATION_TIMEOUT} must be a number (given value: {raw!r}).') from e
    if timeout <= 0:
        raise BadConfigurationError(f'{ENV.App.REGISTRATION_TIMEOUT} must be positive (given value: {raw!r}).')
    return timeout


def _backend_section(document: dict, lambda_name: str) -> LambdaConfiguration:
    try:
        backend = document['active_backend']
        return {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise MalformedResponseError(f"AppConfig document has no '{lambda_name}' section for its active backend.") from e


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    # ruff: noqa: E701
    def __validate_appconfig_url(url: str) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            config = json.load(r)

        data = _backend_section(config, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'register_url', 'redirect_url').

    Raises:
        MissingEnvironmentVariableError:
            If the AppConfig identifiers are not set.
        MalformedResponseError:
            If the document is not JSON or lacks the requested section.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    try:
        config = json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedResponseError('AppConfig returned a document that is not valid JSON.') from e

    data = _backend_section(config, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
    return data
