"""
HTTP transport for the Vault API.

Provides the four verbs the token facade relies on (``get``, ``post``,
``list``, ``delete``) over an aiohttp session. Authentication headers,
base URL resolution and status-code mapping live here so the facade only
deals with paths and JSON documents.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from .config.model import ClientConfig
from .errors.internal import (
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    ParsingError,
    PermissionDeniedError,
    RateLimitError,
    ResponseError,
    ServerError,
)
from .logs import logger
from .utils.retry import retry_async

APPLICATION_JSON = "application/json"
JSONObject = dict[str, Any]

# Failures worth another attempt on read-only verbs
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (NetworkError, ServerError)


class Transport(Protocol):
    """The HTTP primitives consumed by the token facade."""

    async def get(self, path: str) -> JSONObject | None: ...

    async def post(self, path: str, body: str | None = None) -> JSONObject | None: ...

    async def list(self, path: str) -> JSONObject | None: ...

    async def delete(self, path: str) -> JSONObject | None: ...


def error_for_status(
    method: str, path: str, status: int, errors: list[str]
) -> ResponseError:
    """Build the ResponseError subclass matching ``status``."""
    message = f"{method} {path} returned HTTP {status}"
    if errors:
        message = f"{message}: {'; '.join(errors)}"
    if status == 400:
        cls: type[ResponseError] = InvalidRequestError
    elif status in (401, 403):
        cls = PermissionDeniedError
    elif status == 404:
        cls = NotFoundError
    elif status == 429:
        cls = RateLimitError
    elif status >= 500:
        cls = ServerError
    else:
        cls = ResponseError
    return cls(message, status=status, errors=errors)


def _server_errors(raw: bytes) -> list[str]:
    """Extract Vault's ``{"errors": [...]}`` list from an error body.

    Bodies that are not UTF-8 JSON yield no server errors.
    """
    try:
        text = raw.decode("utf-8")
        payload = json.loads(text) if text.strip() else None
    except ValueError:
        return []
    if isinstance(payload, dict) and isinstance(payload.get("errors"), list):
        return [str(e) for e in payload["errors"]]
    return []


class VaultHTTPClient:
    """aiohttp-backed implementation of :class:`Transport`.

    Attributes:
        config: Connection settings (address, token, namespace, timeouts).
    """

    def __init__(self, session: aiohttp.ClientSession, config: ClientConfig):
        """Initialize the transport.

        Args:
            session: The aiohttp session to use for requests.
            config: Connection settings.

        Raises:
            ValueError: If session is not provided.
        """
        if session is None:
            raise ValueError("aiohttp session required")
        self._session = session
        self.config = config

    async def get(self, path: str) -> JSONObject | None:
        return await self._read("GET", path)

    async def list(self, path: str) -> JSONObject | None:
        return await self._read("LIST", path)

    async def post(self, path: str, body: str | None = None) -> JSONObject | None:
        return await self.request("POST", path, body=body)

    async def delete(self, path: str) -> JSONObject | None:
        return await self.request("DELETE", path)

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.config.token:
            headers["X-Vault-Token"] = self.config.token
        if self.config.namespace:
            headers["X-Vault-Namespace"] = self.config.namespace
        if has_body:
            headers["Content-Type"] = APPLICATION_JSON
        return headers

    async def _read(self, method: str, path: str) -> JSONObject | None:
        """Idempotent request retried on transient failures."""

        def on_retry(attempt: int) -> None:
            logger.log_event(
                "http", "retry", level=logging.WARNING, method=method, path=path, attempt=attempt
            )

        return await retry_async(
            lambda: self.request(method, path),
            retry_on=TRANSIENT_ERRORS,
            max_attempts=self.config.max_retries,
            on_retry=on_retry,
        )

    async def request(
        self, method: str, path: str, *, body: str | None = None
    ) -> JSONObject | None:
        """Perform one HTTP request against the configured server.

        Args:
            method: HTTP method ('GET', 'POST', 'LIST', 'DELETE').
            path: Absolute API path, including any query string.
            body: Pre-encoded JSON request body.

        Returns:
            The decoded JSON object, or None for 204 / empty responses.

        Raises:
            NetworkError: If the server could not be reached or timed out.
            ResponseError: If the server answered with a non-2xx status.
            ParsingError: If a 2xx body is not a JSON object.
        """
        url = f"{self.config.address}{path}"
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        try:
            async with self._session.request(
                method,
                url,
                headers=self._headers(body is not None),
                data=body,
                timeout=timeout,
            ) as resp:
                logger.log_event(
                    "http", "response", level=logging.DEBUG, method=method, path=path, status=resp.status
                )
                if resp.status == 204:
                    return None
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    raise error_for_status(method, path, resp.status, _server_errors(raw))
        except TimeoutError as e:
            raise NetworkError(f"{method} {path} timed out") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"{method} {path} failed: {type(e).__name__}") from e
        except OSError as e:
            raise NetworkError(f"{method} {path} failed: {type(e).__name__}") from e
        return self._decode(method, path, raw)

    @staticmethod
    def _decode(method: str, path: str, raw: bytes) -> JSONObject | None:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParsingError(f"{method} {path} returned a body that is not UTF-8") from e
        if not text.strip():
            return None
        try:
            payload = json.loads(text)
        except ValueError as e:
            raise ParsingError(f"{method} {path} returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise ParsingError(f"{method} {path} returned {type(payload).__name__}, expected object")
        return payload
