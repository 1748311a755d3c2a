from .constants import (
    DEFAULT_CONFIG,
    LIMITS,
    EXIT_CODES,
    ENV_VARS,
    CONTEXT_KEYS,
    get_version,
)

__all__ = [
    "DEFAULT_CONFIG",
    "LIMITS",
    "EXIT_CODES",
    "ENV_VARS",
    "CONTEXT_KEYS",
    "get_version",
]
