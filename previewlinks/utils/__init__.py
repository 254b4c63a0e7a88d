from previewlinks.utils.config import app_env, app_name, app_prefix, load_config, registration_timeout
from previewlinks.utils.helpers import (
    base_url,
    public_base_url,
    normalize_url,
    require_environment,
    guarantee_500_response,
)
from previewlinks.utils.shortener import generate_shortcode, is_valid_shortcode
from previewlinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'is_valid_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'registration_timeout',
    'base_url',
    'public_base_url',
    'normalize_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
