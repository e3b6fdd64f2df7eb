"""Token auth backend facade.

Manages what may authenticate to Vault through the built-in token auth
method: creating, looking up and renewing tokens, and maintaining the token
roles that constrain tokens issued under them. Background on the backend:
https://developer.hashicorp.com/vault/docs/auth/token

Every call is a single request/response round-trip. Nothing is cached and
nothing is retried at this layer.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Protocol

from pydantic import ValidationError

from ..constants import (
    AUTH_PREFIX,
    INCREMENT_PARAM,
    TOKEN_CREATE_PATH,
    TOKEN_LOOKUP_PATH,
    TOKEN_LOOKUP_SELF_PATH,
    TOKEN_RENEW_SELF_SUBPATH,
    TOKEN_RENEW_SUBPATH,
    TOKEN_ROLES_PATH,
)
from ..errors.handling import handle_api_error
from ..errors.internal import ProtocolError, SerializationError
from ..http_client import JSONObject, Transport
from ..logs import logger
from ..utils.helpers import build_path, format_duration, whole_seconds
from .models import (
    CreatedToken,
    LookedUpToken,
    LookedUpTokenRole,
    RenewedToken,
    TokenOptions,
    TokenRoleOptions,
)

Increment = timedelta | int | float


class Auth(Protocol):
    """Token management operations offered by the token auth backend."""

    async def create_token(self, opts: TokenOptions | Mapping[str, Any]) -> CreatedToken: ...

    async def lookup_token(self, token_id: str) -> LookedUpToken: ...

    async def lookup_self_token(self) -> LookedUpToken: ...

    async def renew_token(self, token_id: str, increment: Increment) -> RenewedToken: ...

    async def renew_self_token(self, increment: Increment) -> RenewedToken: ...

    async def list_token_roles(self) -> list[str]: ...

    async def create_token_role(self, role: TokenRoleOptions | Mapping[str, Any]) -> None: ...

    async def lookup_token_role(self, name: str) -> LookedUpTokenRole: ...

    async def delete_token_role(self, name: str) -> None: ...


def _section(payload: JSONObject | None, key: str) -> dict[str, Any]:
    """Return the ``auth`` / ``data`` envelope of a response, or an empty dict."""
    if not payload:
        return {}
    section = payload.get(key)
    return section if isinstance(section, dict) else {}


def role_path(name: str) -> str:
    """Path of a named token role; the name is used as given."""
    return f"{TOKEN_ROLES_PATH}/{name}"


class TokenAuth:
    """:class:`Auth` implementation backed by a :class:`Transport`."""

    def __init__(self, transport: Transport):
        if transport is None:
            raise ValueError("transport required")
        self._transport = transport

    async def create_token(self, opts: TokenOptions | Mapping[str, Any]) -> CreatedToken:
        """Create a token with the given options.

        Args:
            opts: Token options, or a mapping using attribute or wire names.

        Returns:
            The created token; ``id`` holds the new secret token value.

        Raises:
            SerializationError: If the options cannot be encoded.
            TokenOperationError: If the request or response decoding failed.
            ProtocolError: If the server returned an empty token id.
        """
        try:
            options = opts if isinstance(opts, TokenOptions) else TokenOptions.model_validate(opts)
            payload = options.to_payload()
            body = json.dumps(payload)
        except (ValidationError, TypeError, ValueError) as e:
            raise SerializationError(f"token options could not be encoded: {type(e).__name__}") from e
        logger.log_event("token", "create_request", level=logging.DEBUG, payload=body)

        async def operation() -> CreatedToken:
            response = await self._transport.post(TOKEN_CREATE_PATH, body)
            return CreatedToken.model_validate(_section(response, "auth"))

        created = await handle_api_error(operation, "failed to create token")
        if not created.id:
            # most likely a response shape we failed to parse
            raise ProtocolError("create token returned empty id")
        logger.log_event(
            "token",
            "created",
            policies=created.policies,
            lease=format_duration(created.lease_duration),
        )
        return created

    async def lookup_token(self, token_id: str) -> LookedUpToken:
        """Look up the properties of the token ``token_id``.

        The id is sent only in the request body; it never appears in
        errors or logs.
        """
        body = self._token_body(token_id)

        async def operation() -> LookedUpToken:
            response = await self._transport.post(TOKEN_LOOKUP_PATH, body)
            return LookedUpToken.model_validate(_section(response, "data"))

        token = await handle_api_error(operation, "failed to lookup token")
        logger.log_event("token", "lookup", level=logging.DEBUG, accessor=token.accessor)
        return token

    async def lookup_self_token(self) -> LookedUpToken:
        """Look up the token the client authenticates with."""

        async def operation() -> LookedUpToken:
            response = await self._transport.get(TOKEN_LOOKUP_SELF_PATH)
            return LookedUpToken.model_validate(_section(response, "data"))

        token = await handle_api_error(operation, "failed to lookup self token")
        logger.log_event("token", "lookup_self", level=logging.DEBUG, accessor=token.accessor)
        return token

    async def renew_token(self, token_id: str, increment: Increment) -> RenewedToken:
        """Renew ``token_id`` asking for ``increment`` more lease time.

        Args:
            token_id: The token to renew.
            increment: Requested extension; fractional seconds are truncated.

        Raises:
            SerializationError: If the id or increment cannot be encoded.
            TokenOperationError: If the request or response decoding failed.
        """
        body = self._token_body(token_id)
        path = self._renew_path(TOKEN_RENEW_SUBPATH, increment)

        async def operation() -> RenewedToken:
            response = await self._transport.post(path, body)
            return RenewedToken.model_validate(_section(response, "auth"))

        renewed = await handle_api_error(operation, "failed to renew token")
        logger.log_event("token", "renewed", lease=format_duration(renewed.lease_duration))
        return renewed

    async def renew_self_token(self, increment: Increment) -> RenewedToken:
        """Renew the client's own token; the request carries no body."""
        path = self._renew_path(TOKEN_RENEW_SELF_SUBPATH, increment)

        async def operation() -> RenewedToken:
            response = await self._transport.post(path, None)
            return RenewedToken.model_validate(_section(response, "auth"))

        renewed = await handle_api_error(operation, "failed to self-renew token")
        logger.log_event("token", "renewed_self", lease=format_duration(renewed.lease_duration))
        return renewed

    async def list_token_roles(self) -> list[str]:
        """Return the names of all token roles in ascending order.

        The server does not promise any ordering, so the keys are sorted here.
        """

        async def operation() -> list[str]:
            response = await self._transport.list(TOKEN_ROLES_PATH)
            keys = _section(response, "data").get("keys") or []
            return sorted(str(k) for k in keys)

        roles = await handle_api_error(
            operation, f"failed to list token roles at {TOKEN_ROLES_PATH!r}"
        )
        logger.log_event("role", "listed", level=logging.DEBUG, count=len(roles))
        return roles

    async def create_token_role(self, role: TokenRoleOptions | Mapping[str, Any]) -> None:
        """Create or update a token role.

        ``role.name`` is sent as ``role_name`` and also names the role path.

        Raises:
            SerializationError: If the role data cannot be encoded.
            TokenOperationError: If the request failed.
        """
        try:
            options = role if isinstance(role, TokenRoleOptions) else TokenRoleOptions.model_validate(role)
            body = json.dumps(options.to_payload())
        except (ValidationError, TypeError, ValueError) as e:
            raise SerializationError(
                f"marshalling role data to JSON request body: {type(e).__name__}"
            ) from e
        logger.log_event("role", "create_request", level=logging.DEBUG, payload=body)

        path = role_path(options.name)

        async def operation() -> None:
            await self._transport.post(path, body)

        await handle_api_error(operation, f"creating role at {path!r}")
        logger.log_event("role", "created", name=options.name)

    async def lookup_token_role(self, name: str) -> LookedUpTokenRole:
        """Read the token role ``name``."""

        async def operation() -> LookedUpTokenRole:
            response = await self._transport.get(role_path(name))
            return LookedUpTokenRole.model_validate(_section(response, "data"))

        role = await handle_api_error(operation, "failed to look up role")
        logger.log_event("role", "lookup", level=logging.DEBUG, name=name)
        return role

    async def delete_token_role(self, name: str) -> None:
        """Delete the token role ``name``."""

        async def operation() -> None:
            await self._transport.delete(role_path(name))

        await handle_api_error(operation, f"failed to delete role {name!r}")
        logger.log_event("role", "deleted", name=name)

    @staticmethod
    def _token_body(token_id: str) -> str:
        if not isinstance(token_id, str):
            raise SerializationError(f"token id must be a string, got {type(token_id).__name__}")
        return json.dumps({"token": token_id})

    @staticmethod
    def _renew_path(sub_path: str, increment: Increment) -> str:
        try:
            seconds = whole_seconds(increment)
        except TypeError as e:
            raise SerializationError(
                f"increment must be a duration or seconds, got {type(increment).__name__}"
            ) from e
        return build_path(AUTH_PREFIX, sub_path, (INCREMENT_PARAM, str(seconds)))
