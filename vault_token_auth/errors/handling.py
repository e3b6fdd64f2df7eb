from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import ValidationError

from ..logging_config import log_structured_error
from .internal import (
    InternalError,
    NetworkError,
    ParsingError,
    PermissionDeniedError,
    RateLimitError,
    ResponseError,
    SerializationError,
    TokenOperationError,
)

T = TypeVar("T")


def classify_error(error: Exception) -> str:
    """Return the log category for an exception."""
    if isinstance(error, NetworkError | OSError | ConnectionError):
        return "network"
    if isinstance(error, PermissionDeniedError):
        return "auth"
    if isinstance(error, RateLimitError):
        return "ratelimit"
    if isinstance(error, ParsingError | ValidationError):
        return "parsing"
    if isinstance(error, ResponseError):
        return "response"
    return "internal"


def log_error(
    message: str, error: Exception, context: dict = None, level: int = logging.DEBUG
) -> None:
    """Logs an error message with the associated exception details.

    Records go to the package logger, at DEBUG unless ``level`` says otherwise.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level for the record.
    """
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
        level=level,
    )


async def handle_api_error(operation: Callable[[], Awaitable[T]], context: str) -> T:
    """Run a facade operation and wrap its failures with operation context.

    Transport errors, response schema mismatches and any other failure of
    the operation are logged with structured context and re-raised as
    ``TokenOperationError(context)`` with the original error chained.
    ``context`` is part of the message the caller sees, so it must never
    contain token ids.

    Args:
        operation: The async API operation to execute.
        context: Operation-specific message (e.g., "failed to lookup token").

    Returns:
        The result of the operation if successful.

    Raises:
        SerializationError: Passed through unchanged.
        TokenOperationError: If the operation failed for any other reason.
    """
    try:
        return await operation()
    except ValidationError as e:
        # The pydantic message echoes input values; keep only field locations.
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        parsing = ParsingError(f"unexpected response shape (fields: {fields or 'root'})")
        parsing.__cause__ = e
        log_error(f"API operation failed in {context}", parsing, context={"operation": context})
        raise TokenOperationError(context, parsing) from parsing
    except SerializationError:
        raise
    except InternalError as e:
        error_context: dict[str, object] = {"operation": context, "timestamp": time.time()}
        if isinstance(e, ResponseError):
            error_context["http_status"] = e.status
        log_error(f"API operation failed in {context}", e, context=error_context)
        raise TokenOperationError(context, e) from e
    except Exception as e:
        log_error(f"API operation failed in {context}", e, context={"operation": context})
        raise TokenOperationError(context, e) from e
