from enum import StrEnum


class Shortcode:
    """Shortcode generation parameters."""

    NBYTES = 5  # 5 random bytes -> 10 lowercase hex characters
    LENGTH = NBYTES * 2
    PATTERN = r'^[0-9a-f]{%d}$' % LENGTH


class Limits:
    """Retry bounds and time budgets."""

    MAX_ALLOCATION_ATTEMPTS = 10  # Fresh tokens tried before giving up on allocation
    MAX_CLAIM_ATTEMPTS = 5  # WATCH/MULTI retries on the canonical URL index
    REGISTRATION_TIMEOUT_SECONDS = 10.0  # Whole register() budget, screenshot included
    WRITE_RESERVE_SECONDS = 1.0  # Part of the budget kept for the final store write
    RESERVATION_TTL_SECONDS = 3_600  # Abandoned slug placeholders expire after 1 hour


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        PUBLIC_BASE_URL = 'PUBLIC_BASE_URL'
        REGISTRATION_TIMEOUT = 'REGISTRATION_TIMEOUT_SECONDS'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Screenshot(StrEnum):
        RENDER_URL = 'SCREENSHOT_RENDER_URL'  # e.g. https://render.internal/capture
        BUCKET = 'SCREENSHOT_BUCKET'
        PUBLIC_URL = 'SCREENSHOT_PUBLIC_URL'  # e.g. https://cdn.example.com
        KEY_PREFIX = 'SCREENSHOT_KEY_PREFIX'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
