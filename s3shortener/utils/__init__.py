from s3shortener.utils.config import app_env, app_name, app_prefix, load_config
from s3shortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from s3shortener.utils.shortener import generate_shortcode
from s3shortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
