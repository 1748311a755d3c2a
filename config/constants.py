import os
from typing import Dict, Any, Mapping, Optional

__version__ = "1.0.0"

DEFAULT_CONFIG = {
    'parallel_workers': 6,
    'request_timeout': 15,
    'max_retries': 2,
    'default_method': 'GET',
    'default_output_format': 'text',
    'display_truncate_length': 100,
    'enable_colors': True,
    'log_level': 'INFO',
    'user_agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36 hdrscope/1.0.0',
    'default_headers': {
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.9',
        'Connection': 'keep-alive',
    }
}

LIMITS = {
    'max_parallel_workers': 50,
    'min_timeout': 1,
    'max_timeout': 300,
    'max_retries': 10,
    'max_targets_per_run': 10000,
}

HTTP_CONFIG = {
    'retry_status_codes': [408, 425, 429, 500, 502, 503, 504],
    'retry_backoff_factor': 0.6,
    'retry_methods': ['GET', 'HEAD'],
    'pool_connections': 10,
    'pool_maxsize': 20,
}

OUTPUT_FORMATS = ('text', 'tsv', 'csv', 'json', 'jsonl')

HTTP_METHODS = ('GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'OPTIONS', 'HEAD')

STATUS_CLASSES = ('2xx', '3xx', '4xx', '5xx')

# Keys shared between checks through the evaluation context
CONTEXT_KEYS = {
    'csp': 'csp',
    'cookies': 'cookies',
    'request_origin': 'requestOrigin',
}

EXIT_CODES = {
    'SUCCESS': 0,
    'USAGE_ERROR': 1,
    'NETWORK_ERROR': 2,
    'CONFIG_ERROR': 3,
    'ISSUES_FOUND': 5,
    'UNKNOWN_ERROR': 255
}

ENV_VARS = {
    'HDRSCOPE_TIMEOUT': 'timeout',
    'HDRSCOPE_PARALLEL': 'parallel',
    'HDRSCOPE_RETRIES': 'max_retries',
    'HDRSCOPE_USER_AGENT': 'user_agent',
    'HDRSCOPE_ORIGIN': 'origin',
    'HDRSCOPE_PROXY': 'proxy',
    'HDRSCOPE_OUTPUT_FORMAT': 'output_format',
    'HDRSCOPE_LOG_LEVEL': 'log_level',
    'HDRSCOPE_LOG_FILE': 'log_file',
}

def get_version() -> str:
    return __version__

def get_user_agent() -> str:
    return DEFAULT_CONFIG['user_agent']

def get_default_headers() -> Dict[str, str]:
    return DEFAULT_CONFIG['default_headers'].copy()

def read_env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Map the HDRSCOPE_* variables that are set to their config field names."""
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for var, field_name in ENV_VARS.items():
        value = env.get(var)
        if value is None or value.strip() == "":
            continue
        out[field_name] = value.strip()
    return out

def is_valid_parallel_count(count: int) -> bool:
    return 1 <= count <= LIMITS['max_parallel_workers']

def is_valid_timeout(timeout: int) -> bool:
    return LIMITS['min_timeout'] <= timeout <= LIMITS['max_timeout']

def is_valid_retry_count(retries: int) -> bool:
    return 0 <= retries <= LIMITS['max_retries']
