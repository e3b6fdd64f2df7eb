"""
Configuration constants for the Vault token auth client

This module contains the API paths and tunable defaults used throughout the library.
Each numeric constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Token auth backend paths
AUTH_PREFIX = "/v1/auth"
TOKEN_CREATE_PATH = "/v1/auth/token/create"
TOKEN_LOOKUP_PATH = "/v1/auth/token/lookup"
TOKEN_LOOKUP_SELF_PATH = "/v1/auth/token/lookup-self"
TOKEN_RENEW_SUBPATH = "token/renew"
TOKEN_RENEW_SELF_SUBPATH = "token/renew-self"
TOKEN_ROLES_PATH = "/v1/auth/token/roles"
INCREMENT_PARAM = "increment"

# Default server address (VAULT_ADDR overrides at config load time)
DEFAULT_VAULT_ADDR = "http://127.0.0.1:8200"
TOKEN_HELPER_FILENAME = ".vault-token"  # Token file written by the vault CLI login

# Network/HTTP constants
HTTP_REQUEST_TIMEOUT_SECONDS = _get_env_float(
    "HTTP_REQUEST_TIMEOUT_SECONDS", 30.0
)  # Default per-request timeout

# Retry/backoff constants (read verbs only)
DEFAULT_MAX_RETRY_ATTEMPTS = _get_env_int(
    "DEFAULT_MAX_RETRY_ATTEMPTS", 3
)  # Default maximum attempts for GET/LIST
RETRY_BACKOFF_MULTIPLIER = _get_env_float(
    "RETRY_BACKOFF_MULTIPLIER", 0.5
)  # Exponential backoff multiplier
RETRY_MAX_BACKOFF_SECONDS = _get_env_int(
    "RETRY_MAX_BACKOFF_SECONDS", 10
)  # Maximum backoff time in seconds

# Error aggregation
ERROR_HISTORY_PER_TYPE = _get_env_int(
    "ERROR_HISTORY_PER_TYPE", 1000
)  # Errors retained per category by the aggregator
ERROR_ALERT_RATE_PER_HOUR = _get_env_float(
    "ERROR_ALERT_RATE_PER_HOUR", 10.0
)  # Hourly error rate that triggers a critical log
