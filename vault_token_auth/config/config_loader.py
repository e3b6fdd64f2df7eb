"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..constants import TOKEN_HELPER_FILENAME
from ..errors.internal import ConfigError
from .model import ClientConfig

CONFIG_FILE_ENV = "VAULT_TOKEN_AUTH_CONF"

# Environment variable -> config field
_ENV_FIELDS = {
    "VAULT_ADDR": "address",
    "VAULT_TOKEN": "token",
    "VAULT_NAMESPACE": "namespace",
    "VAULT_CLIENT_TIMEOUT": "timeout",
    "VAULT_MAX_RETRIES": "max_retries",
    "VAULT_CACERT": "ca_cert",
}
_TRUTHY = ("true", "1", "yes")


def load_config_file(config_file: str | os.PathLike[str]) -> dict[str, Any]:
    """Read a JSON object of config fields from ``config_file``.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    path = Path(config_file)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise ConfigError(f"config file unreadable: {path}: {type(e).__name__}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"config file must contain a JSON object: {path}")
    return raw


def read_token_helper(home: Path | None = None) -> str | None:
    """Return the token stored by ``vault login`` in ``~/.vault-token``, if any."""
    path = (home or Path.home()) / TOKEN_HELPER_FILENAME
    try:
        token = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    except OSError as e:
        logging.warning(f"⚠️ Could not read token helper file {path}: {type(e).__name__}")
        return None
    return token or None


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect config fields set through environment variables."""
    values: dict[str, Any] = {}
    for env_name, field in _ENV_FIELDS.items():
        value = environ.get(env_name)
        if value is not None and value.strip():
            values[field] = value
    skip_verify = environ.get("VAULT_SKIP_VERIFY")
    if skip_verify is not None and skip_verify.strip():
        values["tls_verify"] = skip_verify.strip().lower() not in _TRUTHY
    return values


def load_config(
    config_file: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
    *,
    home: Path | None = None,
) -> ClientConfig:
    """Build a ClientConfig from defaults, an optional JSON file and the environment.

    Precedence, lowest first: built-in defaults, the JSON file (``config_file``
    or the path in ``VAULT_TOKEN_AUTH_CONF``), environment variables. When no
    token is configured anywhere, the ``~/.vault-token`` helper file is used.

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    file_name = config_file or env.get(CONFIG_FILE_ENV)
    if file_name:
        data.update(load_config_file(file_name))
    data.update(env_overrides(env))
    if not data.get("token"):
        token = read_token_helper(home)
        if token:
            data["token"] = token
    config = ClientConfig.from_dict(data)
    logging.debug(
        f"Vault client config loaded address={config.address} namespace={config.namespace} "
        f"token_set={config.token is not None} tls_verify={config.tls_verify}"
    )
    return config
