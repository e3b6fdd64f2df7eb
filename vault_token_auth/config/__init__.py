"""Configuration package exports."""

from .config_loader import (
    CONFIG_FILE_ENV,
    env_overrides,
    load_config,
    load_config_file,
    read_token_helper,
)
from .model import ClientConfig

__all__ = [
    "CONFIG_FILE_ENV",
    "ClientConfig",
    "env_overrides",
    "load_config",
    "load_config_file",
    "read_token_helper",
]
