r"""
Logging configuration module for the Vault token auth client.

Provides an opt-in colorlog setup for applications embedding the client,
structured error logging, error aggregation, and a filter that keeps
token material out of log output.
"""

import atexit
import logging
import os
import re
import sys
import threading
import time
from collections import defaultdict
from typing import Any

import colorlog

from .constants import ERROR_ALERT_RATE_PER_HOUR, ERROR_HISTORY_PER_TYPE

_logger = logging.getLogger("vault_token_auth")
_summary_registered = False

_REDACTED = "<redacted>"
_TOKEN_PATTERNS = (
    # JSON bodies: "token": "...", "client_token": "..."
    re.compile(r'("(?:client_)?token"\s*:\s*")[^"]*(")'),
    # Header dumps: X-Vault-Token: ... / X-Vault-Token=...
    re.compile(r"(X-Vault-Token['\"]?\s*[:=]\s*['\"]?)[^\s'\",}]+()", re.IGNORECASE),
)


def redact(text: str) -> str:
    """Mask token values in ``text``."""
    for pattern in _TOKEN_PATTERNS:
        text = pattern.sub(rf"\g<1>{_REDACTED}\g<2>", text)
    return text


class RedactionFilter(logging.Filter):
    """Filter that masks token values in log records before they are emitted."""

    def filter(self, record):
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


class ErrorAggregator:
    """Aggregates and reports error patterns for monitoring and alerting.

    Tracks error frequencies per category and provides summary reports.
    High-rate alerts stay off until an application opts in through
    ``LoggerConfigurator.configure()``.
    """

    def __init__(self):
        self.errors: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.lock = threading.Lock()
        self.start_time = time.time()
        self.alerts_enabled = False

    def record_error(self, error_type: str, message: str, context: dict[str, Any] = None) -> None:
        """Record an error occurrence with context."""
        with self.lock:
            error_entry = {
                "timestamp": time.time(),
                "message": message,
                "context": context or {},
            }
            self.errors[error_type].append(error_entry)

            # Keep only recent errors per type
            if len(self.errors[error_type]) > ERROR_HISTORY_PER_TYPE:
                self.errors[error_type] = self.errors[error_type][-ERROR_HISTORY_PER_TYPE:]

    def get_error_summary(self) -> dict[str, Any]:
        """Get a summary of error patterns."""
        with self.lock:
            summary = {}
            current_time = time.time()
            runtime_hours = (current_time - self.start_time) / 3600

            for error_type, occurrences in self.errors.items():
                recent_count = len([e for e in occurrences if current_time - e["timestamp"] < 3600])  # last hour
                total_count = len(occurrences)
                rate_per_hour = total_count / max(runtime_hours, 1)

                summary[error_type] = {
                    "total_count": total_count,
                    "recent_count": recent_count,
                    "rate_per_hour": rate_per_hour,
                    "last_occurrence": occurrences[-1] if occurrences else None,
                }

            return summary

    def should_alert(self, error_type: str, threshold_rate: float = ERROR_ALERT_RATE_PER_HOUR) -> bool:
        """Check if an error type should trigger an alert based on rate."""
        summary = self.get_error_summary()
        if error_type not in summary:
            return False
        return summary[error_type]["rate_per_hour"] > threshold_rate

    def reset(self) -> None:
        """Forget all recorded errors and restart the rate window."""
        with self.lock:
            self.errors.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        """Log a summary report of error patterns."""
        summary = self.get_error_summary()
        if not summary:
            _logger.info("No Vault client errors recorded in current session")
            return

        _logger.warning("🚨 VAULT CLIENT ERROR SUMMARY")
        for error_type, stats in summary.items():
            _logger.warning(
                f"  {error_type}: {stats['total_count']} total, "
                f"{stats['recent_count']} in last hour, "
                f"{stats['rate_per_hour']:.1f}/hour"
            )
            if stats["last_occurrence"]:
                _logger.warning(f"    Last: {stats['last_occurrence']['message']}")


# Global error aggregator instance
error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception = None,
    context: dict[str, Any] = None,
    level: int = logging.WARNING
) -> None:
    """Log an error with structured context and aggregation.

    Args:
        error_type: Category of the error (e.g., 'network', 'auth', 'parsing')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: WARNING)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {str(exception)}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    _logger.log(level, redact(structured_message))

    error_aggregator.record_error(error_type, message, context)

    if error_aggregator.alerts_enabled and error_aggregator.should_alert(error_type):
        _logger.critical(
            f"🚨 HIGH ERROR RATE ALERT: {error_type} occurring at "
            f"{error_aggregator.get_error_summary()[error_type]['rate_per_hour']:.1f}/hour"
        )


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional config dict; ``level`` overrides the environment.
        """
        self.config = config or {}

    def resolve_level(self) -> int:
        """Return the log level from config or the DEBUG environment variable."""
        if "level" in self.config:
            return self.config["level"]
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self):
        """Configure root logging with colored, redacted output on stderr.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
        """
        log_level = self.resolve_level()
        formatter = self.build_formatter()

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        handler.addFilter(RedactionFilter())

        logging.basicConfig(
            level=log_level,
            handlers=[handler],
            format="%(message)s",
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # aiohttp access/client chatter is noise at DEBUG
        logging.getLogger("aiohttp").setLevel(logging.INFO)

        for h in root_logger.handlers:
            h.setFormatter(formatter)
            if not any(isinstance(f, RedactionFilter) for f in h.filters):
                h.addFilter(RedactionFilter())

        error_aggregator.alerts_enabled = True

        global _summary_registered  # noqa: PLW0603
        if not _summary_registered:
            atexit.register(self._log_final_error_summary)
            _summary_registered = True

    def _log_final_error_summary(self):
        """Log final error summary on application exit."""
        try:
            _logger.info("📊 Final Vault client error summary:")
            error_aggregator.log_summary_report()
        except Exception as e:
            _logger.error(f"Failed to log final error summary: {e}")
