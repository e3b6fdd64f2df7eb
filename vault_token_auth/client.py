"""Session-owning entry point wiring configuration, transport and token facade."""

from __future__ import annotations

import ssl
from typing import Any

import aiohttp

from .api.auth import TokenAuth
from .config.config_loader import load_config
from .config.model import ClientConfig
from .errors.internal import ConfigError
from .http_client import VaultHTTPClient
from .logs import logger


def build_ssl_context(config: ClientConfig) -> ssl.SSLContext | bool:
    """Return the ``ssl`` argument for the aiohttp connector.

    ``False`` disables verification; otherwise a default context that
    trusts ``config.ca_cert`` when one is configured.
    """
    if not config.tls_verify:
        return False
    try:
        return ssl.create_default_context(cafile=config.ca_cert)
    except (OSError, ssl.SSLError) as e:
        raise ConfigError(f"cannot load CA bundle {config.ca_cert}: {type(e).__name__}") from e


class VaultClient:
    """Async Vault client exposing the token auth backend as ``auth``.

    Usage::

        async with VaultClient() as client:
            token = await client.auth.create_token(TokenOptions(policies=["dev"]))

    When ``session`` is supplied the caller keeps ownership and it is not
    closed by :meth:`close`.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ):
        self.config = config or load_config()
        self._session = session
        self._owns_session = session is None
        self._auth: TokenAuth | None = None
        if session is not None:
            self._auth = TokenAuth(VaultHTTPClient(session, self.config))

    async def __aenter__(self) -> VaultClient:
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        """Create the HTTP session if the client owns one."""
        if self._session is None or (self._owns_session and self._session.closed):
            connector = aiohttp.TCPConnector(ssl=build_ssl_context(self.config))
            self._session = aiohttp.ClientSession(connector=connector)
            self._owns_session = True
            self._auth = TokenAuth(VaultHTTPClient(self._session, self.config))
            logger.log_event("client", "open", address=self.config.address)

    async def close(self) -> None:
        """Close the HTTP session if the client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.log_event("client", "close")

    @property
    def auth(self) -> TokenAuth:
        """The token auth facade; requires :meth:`connect` or ``async with``."""
        if self._auth is None:
            raise RuntimeError("VaultClient is not connected; use 'async with' or connect()")
        return self._auth
