"""Error hierarchy and facade error wrapping."""

from .handling import classify_error, handle_api_error, log_error
from .internal import (
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

__all__ = [
    "ConfigError",
    "InternalError",
    "InvalidRequestError",
    "NetworkError",
    "NotFoundError",
    "ParsingError",
    "PermissionDeniedError",
    "ProtocolError",
    "RateLimitError",
    "ResponseError",
    "SerializationError",
    "ServerError",
    "TokenOperationError",
    "classify_error",
    "handle_api_error",
    "log_error",
]
