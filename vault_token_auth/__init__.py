"""Async client for the token auth backend of a Vault server.

Typical use::

    from vault_token_auth import TokenOptions, VaultClient

    async with VaultClient() as client:
        created = await client.auth.create_token(TokenOptions(policies=["dev"], ttl=3600))
"""

from .api import (
    Auth,
    CreatedToken,
    LookedUpToken,
    LookedUpTokenRole,
    RenewedToken,
    TokenAuth,
    TokenOptions,
    TokenRoleOptions,
)
from .client import VaultClient
from .config import ClientConfig, load_config
from .errors import (
    ConfigError,
    InternalError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    ParsingError,
    PermissionDeniedError,
    ProtocolError,
    RateLimitError,
    ResponseError,
    SerializationError,
    ServerError,
    TokenOperationError,
)
from .http_client import Transport, VaultHTTPClient

__version__ = "0.1.0"

__all__ = [
    "Auth",
    "ClientConfig",
    "ConfigError",
    "CreatedToken",
    "InternalError",
    "InvalidRequestError",
    "LookedUpToken",
    "LookedUpTokenRole",
    "NetworkError",
    "NotFoundError",
    "ParsingError",
    "PermissionDeniedError",
    "ProtocolError",
    "RateLimitError",
    "RenewedToken",
    "ResponseError",
    "SerializationError",
    "ServerError",
    "TokenAuth",
    "TokenOperationError",
    "TokenOptions",
    "TokenRoleOptions",
    "Transport",
    "VaultClient",
    "VaultHTTPClient",
    "load_config",
]
