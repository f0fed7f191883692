from shorturl.utils.config import app_env, app_name, app_prefix, load_config
from shorturl.utils.helpers import query_parameter, require_environment, guarantee_500_response
from shorturl.utils.shortener import encode, decode, with_sequence, partition_of
from shorturl.utils.logging import initialize_logging


__all__ = [
    'encode',
    'decode',
    'with_sequence',
    'partition_of',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'query_parameter',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
