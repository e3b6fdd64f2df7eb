from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from tests.fixtures.api_responses import (
    PERMISSION_DENIED,
    SECRET_TOKEN,
    TOKEN_CREATE_EMPTY_ID,
    TOKEN_CREATE_SUCCESS,
)
from vault_token_auth.api.models import CreatedToken, TokenOptions
from vault_token_auth.errors.internal import (
    NetworkError,
    PermissionDeniedError,
    ProtocolError,
    SerializationError,
    TokenOperationError,
)


@pytest.mark.asyncio
async def test_create_token_posts_to_create_path(auth, transport):
    transport.queue(TOKEN_CREATE_SUCCESS)
    created = await auth.create_token(TokenOptions(policies=["web"], renewable=True))
    assert isinstance(created, CreatedToken)
    assert created.id == SECRET_TOKEN
    assert created.policies == ["default", "web"]
    assert created.metadata == {"user": "armon"}
    assert created.lease_duration == 3600
    assert created.renewable is True
    verb, path, _ = transport.calls[0]
    assert (verb, path) == ("post", "/v1/auth/token/create")


@pytest.mark.asyncio
async def test_create_token_body_round_trips_to_equal_options(auth, transport):
    opts = TokenOptions(
        policies=["web", "stage"],
        no_default_policy=True,
        orphan=True,
        renewable=True,
        display_name="ci-runner",
        max_uses=5,
        ttl=timedelta(hours=1),
        max_ttl=timedelta(hours=24),
        period=timedelta(minutes=30),
    )
    transport.queue(TOKEN_CREATE_SUCCESS)
    await auth.create_token(opts)
    body = transport.last_body()
    assert body == {
        "policies": ["web", "stage"],
        "no_default_policy": True,
        "no_parent": True,
        "renewable": True,
        "display_name": "ci-runner",
        "num_uses": 5,
        "ttl": 3600,
        "explicit_max_ttl": 86400,
        "period": 1800,
    }
    assert TokenOptions.model_validate(body) == opts


@pytest.mark.asyncio
async def test_create_token_omits_empty_options(auth, transport):
    transport.queue(TOKEN_CREATE_SUCCESS)
    await auth.create_token(TokenOptions(policies=["web"]))
    assert transport.last_body() == {"policies": ["web"]}


@pytest.mark.asyncio
async def test_create_token_accepts_mapping_with_wire_names(auth, transport):
    transport.queue(TOKEN_CREATE_SUCCESS)
    await auth.create_token({"no_parent": True, "ttl": 90.9})
    assert transport.last_body() == {"no_parent": True, "ttl": 90}


@pytest.mark.asyncio
async def test_create_token_empty_id_is_protocol_error(auth, transport):
    transport.queue(TOKEN_CREATE_EMPTY_ID)
    with pytest.raises(ProtocolError, match="create token returned empty id"):
        await auth.create_token(TokenOptions())


@pytest.mark.asyncio
async def test_create_token_missing_auth_block_is_protocol_error(auth, transport):
    transport.queue({"data": {}})
    with pytest.raises(ProtocolError):
        await auth.create_token(TokenOptions())


@pytest.mark.asyncio
async def test_create_token_invalid_options_raise_serialization_error(auth, transport):
    with pytest.raises(SerializationError) as excinfo:
        await auth.create_token({"num_uses": "lots"})
    assert not isinstance(excinfo.value, TokenOperationError)
    assert transport.calls == []


@pytest.mark.asyncio
async def test_create_token_transport_failure_is_wrapped(auth, transport):
    denied = PermissionDeniedError(
        "POST /v1/auth/token/create returned HTTP 403: permission denied",
        status=403,
        errors=PERMISSION_DENIED["errors"],
    )
    transport.queue(denied)
    with pytest.raises(TokenOperationError) as excinfo:
        await auth.create_token(TokenOptions())
    err = excinfo.value
    assert str(err).startswith("failed to create token: ")
    assert err.__cause__ is denied
    assert err.status == 403


@pytest.mark.asyncio
async def test_create_token_network_failure_has_no_status(auth, transport):
    transport.queue(NetworkError("POST /v1/auth/token/create timed out"))
    with pytest.raises(TokenOperationError) as excinfo:
        await auth.create_token(TokenOptions())
    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, NetworkError)


@pytest.mark.asyncio
async def test_create_token_logs_request_payload_at_debug(auth, transport, caplog):
    caplog.set_level(logging.DEBUG, logger="vault_token_auth")
    transport.queue(TOKEN_CREATE_SUCCESS)
    await auth.create_token(TokenOptions(display_name="ci-runner"))
    messages = [r.getMessage() for r in caplog.records]
    assert any('token create request: {"display_name": "ci-runner"}' in m for m in messages)
    assert not any(SECRET_TOKEN in m for m in messages)
