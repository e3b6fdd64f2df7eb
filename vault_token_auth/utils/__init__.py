"""Utility functions package for the Vault token auth client.

Exposed functions:
    build_path: Joins API path segments and appends query parameters.
    whole_seconds: Truncates a duration to whole seconds.
    format_duration: Formats time durations into human-readable strings.
    retry_async: Tenacity-backed retry for transient transport failures.
"""

from .helpers import build_path, format_duration, whole_seconds
from .retry import retry_async

__all__ = ["build_path", "format_duration", "retry_async", "whole_seconds"]
