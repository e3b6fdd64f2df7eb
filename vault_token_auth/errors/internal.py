"""Centralized internal error hierarchy.

These exceptions give semantic categories to everything that can go wrong
between building a request and handing a typed response back to the caller.
Raw aiohttp / JSON / pydantic errors never escape the library; they are
wrapped in one of the classes below with the original kept as ``__cause__``.

Classes:
  InternalError         – Base for all library errors.
  NetworkError          – Connection / timeout failures talking to the server.
  ResponseError         – Non-2xx HTTP response (status + server ``errors``).
  InvalidRequestError   – HTTP 400.
  PermissionDeniedError – HTTP 401 / 403.
  NotFoundError         – HTTP 404.
  RateLimitError        – HTTP 429.
  ServerError           – HTTP 5xx.
  ParsingError          – Response body malformed or not matching the schema.
  SerializationError    – Request options could not be encoded.
  ProtocolError         – Success reported but a response invariant was broken.
  TokenOperationError   – A facade operation failed; carries operation context.
  ConfigError           – Invalid client configuration.

Messages must never contain token ids, bearer tokens or request bodies.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence


class InternalError(Exception):
    """Base class for all library errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    This includes connection refusals, resets and timeouts. Read-only
    verbs may be retried by the transport on this error.
    """


class ResponseError(InternalError):
    """Exception raised when the server answers with a non-2xx status.

    Attributes:
        status: The HTTP status code.
        errors: Error strings reported by the server in its ``errors`` list.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        errors: Sequence[str] | None = None,
    ) -> None:
        self.status = status
        self.errors = list(errors or [])
        super().__init__(message, data={"status": status, "errors": self.errors})


class InvalidRequestError(ResponseError):
    """HTTP 400: the server rejected the request parameters."""


class PermissionDeniedError(ResponseError):
    """HTTP 401/403: missing, expired or insufficiently privileged token."""


class NotFoundError(ResponseError):
    """HTTP 404: the path or named object does not exist."""


class RateLimitError(ResponseError):
    """HTTP 429: the server is rate limiting this client."""


class ServerError(ResponseError):
    """HTTP 5xx: the server failed, is sealed or is in standby."""


class ParsingError(InternalError):
    """Exception raised for response parsing or schema validation errors."""


class SerializationError(InternalError):
    """Exception raised when request options cannot be encoded to JSON."""


class ProtocolError(InternalError):
    """Exception raised when a successful response breaks a required invariant.

    Example: a token create call that returns an empty ``client_token``.
    """


class TokenOperationError(InternalError):
    """Exception raised when a token facade operation fails.

    The message is ``"<operation context>: <cause>"`` and the underlying
    transport or parsing error is available as ``__cause__``.

    Attributes:
        operation: The operation context message.
        cause: The wrapped error.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        data: dict[str, object] = {"operation": operation}
        if isinstance(cause, InternalError):
            data.update(cause.data)
        super().__init__(f"{operation}: {cause}", data=data)

    @property
    def status(self) -> int | None:
        """HTTP status of the underlying response error, if there was one."""
        if isinstance(self.cause, ResponseError):
            return self.cause.status
        return None


class ConfigError(InternalError):
    """Exception raised for invalid client configuration."""


__all__ = [
    "InternalError",
    "NetworkError",
    "ResponseError",
    "InvalidRequestError",
    "PermissionDeniedError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "ParsingError",
    "SerializationError",
    "ProtocolError",
    "TokenOperationError",
    "ConfigError",
]
