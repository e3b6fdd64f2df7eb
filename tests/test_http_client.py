from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp
import pytest

from tests.fixtures.api_responses import CALLER_TOKEN, PERMISSION_DENIED, TOKEN_LOOKUP_SUCCESS
from vault_token_auth.config.model import ClientConfig
from vault_token_auth.errors.internal import (
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    ParsingError,
    PermissionDeniedError,
    RateLimitError,
    ResponseError,
    ServerError,
)
from vault_token_auth.http_client import VaultHTTPClient, error_for_status


class _Resp:
    def __init__(self, status: int, payload: Any = None, *, text: str | bytes | None = None):
        self.status = status
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self._body = text if isinstance(text, bytes) else text.encode("utf-8")

    async def read(self) -> bytes:
        await asyncio.sleep(0)
        return self._body


class _Session:
    def __init__(self):
        self.requests: list[tuple[str, str, dict[str, Any]]] = []
        self._queue: list[_Resp | BaseException] = []

    def queue(self, outcome: _Resp | BaseException) -> None:
        self._queue.append(outcome)

    def request(self, method: str, url: str, headers=None, data=None, timeout=None):
        self.requests.append((method, url, {"headers": headers, "data": data, "timeout": timeout}))
        outcome = self._queue.pop(0)

        class _CM:
            async def __aenter__(self_inner):  # noqa: ANN001
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome

            async def __aexit__(self_inner, exc_type, exc, tb):  # noqa: ANN001
                return False

        return _CM()


def _client(session: _Session, **overrides: Any) -> VaultHTTPClient:
    config = ClientConfig(
        address="https://vault.example.com:8200/",
        token=CALLER_TOKEN,
        **overrides,
    )
    return VaultHTTPClient(session, config)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_get_sends_auth_headers_and_decodes_json():
    session = _Session()
    session.queue(_Resp(200, TOKEN_LOOKUP_SUCCESS))
    client = _client(session, namespace="team-a", timeout=5)
    data = await client.get("/v1/auth/token/lookup-self")
    assert data == TOKEN_LOOKUP_SUCCESS
    method, url, meta = session.requests[0]
    assert method == "GET"
    assert url == "https://vault.example.com:8200/v1/auth/token/lookup-self"
    assert meta["headers"] == {"X-Vault-Token": CALLER_TOKEN, "X-Vault-Namespace": "team-a"}
    assert meta["data"] is None
    assert meta["timeout"].total == 5


@pytest.mark.asyncio
async def test_post_sends_body_as_json():
    session = _Session()
    session.queue(_Resp(200, {"auth": {}}))
    client = _client(session)
    await client.post("/v1/auth/token/create", '{"policies": ["web"]}')
    method, _, meta = session.requests[0]
    assert method == "POST"
    assert meta["data"] == '{"policies": ["web"]}'
    assert meta["headers"]["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_list_uses_list_verb():
    session = _Session()
    session.queue(_Resp(200, {"data": {"keys": ["a"]}}))
    await _client(session).list("/v1/auth/token/roles")
    assert session.requests[0][0] == "LIST"


@pytest.mark.asyncio
async def test_no_token_header_when_unconfigured():
    session = _Session()
    session.queue(_Resp(200, {}))
    client = VaultHTTPClient(session, ClientConfig())  # type: ignore[arg-type]
    await client.get("/v1/sys/health")
    assert "X-Vault-Token" not in session.requests[0][2]["headers"]


@pytest.mark.asyncio
@pytest.mark.parametrize("resp", [_Resp(204), _Resp(200, text=""), _Resp(200, text="  \n")])
async def test_empty_responses_decode_to_none(resp):
    session = _Session()
    session.queue(resp)
    assert await _client(session).delete("/v1/auth/token/roles/r") is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (400, InvalidRequestError),
        (401, PermissionDeniedError),
        (403, PermissionDeniedError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServerError),
        (412, ResponseError),
    ],
)
async def test_non_2xx_maps_to_response_errors(status, error_type):
    session = _Session()
    session.queue(_Resp(status, PERMISSION_DENIED))
    with pytest.raises(error_type) as excinfo:
        await _client(session).post("/v1/auth/token/lookup", '{"token": "secret"}')
    err = excinfo.value
    assert err.status == status
    assert err.errors == ["permission denied"]
    assert str(err) == f"POST /v1/auth/token/lookup returned HTTP {status}: permission denied"
    assert "secret" not in str(err)
    assert CALLER_TOKEN not in str(err)


@pytest.mark.asyncio
async def test_error_body_that_is_not_json_still_maps_status():
    session = _Session()
    session.queue(_Resp(502, text="<html>bad gateway</html>"))
    with pytest.raises(ServerError) as excinfo:
        await _client(session, max_retries=1).get("/v1/auth/token/lookup-self")
    assert excinfo.value.errors == []
    assert str(excinfo.value) == "GET /v1/auth/token/lookup-self returned HTTP 502"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["not json", "[1, 2]"])
async def test_malformed_success_body_is_parsing_error(text):
    session = _Session()
    session.queue(_Resp(200, text=text))
    with pytest.raises(ParsingError):
        await _client(session).post("/v1/auth/token/create", "{}")


@pytest.mark.asyncio
async def test_success_body_that_is_not_utf8_is_parsing_error():
    session = _Session()
    session.queue(_Resp(200, text=b"\xff\xfe{}"))
    with pytest.raises(ParsingError, match="not UTF-8"):
        await _client(session).get("/v1/auth/token/lookup-self")
    assert len(session.requests) == 1


@pytest.mark.asyncio
async def test_error_body_that_is_not_utf8_still_maps_status():
    session = _Session()
    session.queue(_Resp(403, text=b"\xff denied"))
    with pytest.raises(PermissionDeniedError) as excinfo:
        await _client(session).post("/v1/auth/token/lookup", "{}")
    assert excinfo.value.errors == []
    assert str(excinfo.value) == "POST /v1/auth/token/lookup returned HTTP 403"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [aiohttp.ClientConnectionError("refused"), TimeoutError(), ConnectionResetError()],
)
async def test_transport_exceptions_become_network_errors(exc):
    session = _Session()
    session.queue(exc)
    with pytest.raises(NetworkError) as excinfo:
        await _client(session).post("/v1/auth/token/create", "{}")
    assert excinfo.value.__cause__ is exc


@pytest.mark.asyncio
async def test_get_retries_transient_failures():
    session = _Session()
    session.queue(aiohttp.ClientConnectionError("refused"))
    session.queue(_Resp(503, {"errors": ["Vault is sealed"]}))
    session.queue(_Resp(200, TOKEN_LOOKUP_SUCCESS))
    data = await _client(session, max_retries=3).get("/v1/auth/token/lookup-self")
    assert data == TOKEN_LOOKUP_SUCCESS
    assert len(session.requests) == 3


@pytest.mark.asyncio
async def test_get_gives_up_after_max_retries():
    session = _Session()
    for _ in range(2):
        session.queue(_Resp(500, {"errors": ["internal"]}))
    with pytest.raises(ServerError):
        await _client(session, max_retries=2).list("/v1/auth/token/roles")
    assert len(session.requests) == 2


@pytest.mark.asyncio
async def test_get_does_not_retry_client_errors():
    session = _Session()
    session.queue(_Resp(403, PERMISSION_DENIED))
    with pytest.raises(PermissionDeniedError):
        await _client(session, max_retries=3).get("/v1/auth/token/lookup-self")
    assert len(session.requests) == 1


@pytest.mark.asyncio
async def test_post_is_never_retried():
    session = _Session()
    session.queue(aiohttp.ClientConnectionError("refused"))
    session.queue(_Resp(200, {}))
    with pytest.raises(NetworkError):
        await _client(session, max_retries=3).post("/v1/auth/token/create", "{}")
    assert len(session.requests) == 1


def test_session_required():
    with pytest.raises(ValueError):
        VaultHTTPClient(None, ClientConfig())  # type: ignore[arg-type]


def test_error_for_status_without_server_errors():
    err = error_for_status("GET", "/v1/x", 404, [])
    assert isinstance(err, NotFoundError)
    assert str(err) == "GET /v1/x returned HTTP 404"
