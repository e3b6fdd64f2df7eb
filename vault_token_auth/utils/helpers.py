"""General utility helper functions."""

from __future__ import annotations

from datetime import timedelta
from urllib.parse import urlencode

__all__ = ["build_path", "format_duration", "whole_seconds"]


def whole_seconds(value: timedelta | int | float) -> int:
    """Convert a duration to whole seconds, truncating any fraction.

    ``timedelta`` values and plain numbers of seconds are accepted.

    Examples:
      timedelta(seconds=90.9) -> 90
      90.9 -> 90
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"duration must be timedelta or seconds, got {type(value).__name__}")
    return int(value)


def build_path(base: str, sub_path: str, *query: tuple[str, str]) -> str:
    """Join ``base`` and ``sub_path`` and append ``query`` pairs.

    No escaping is applied to the path segments; callers supply URL-safe
    names. Query values are form-encoded.

    Examples:
      build_path("/v1/auth", "token/renew", ("increment", "90"))
        -> "/v1/auth/token/renew?increment=90"
      build_path("/v1/auth/", "/token/lookup-self") -> "/v1/auth/token/lookup-self"
    """
    path = f"{base.rstrip('/')}/{sub_path.lstrip('/')}"
    if query:
        path = f"{path}?{urlencode(list(query))}"
    return path


def format_duration(total_seconds: int | float | None) -> str:
    """Return a human-friendly Hh Mm Ss string for a duration in seconds.

    Examples:
      65 -> "1m 5s"
      3605 -> "1h 0m 5s" (hours, minutes, seconds)
      59 -> "59s"
    """
    if total_seconds is None:
        return "unknown"
    seconds = int(total_seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, sec = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {sec}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m {sec}s"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h {minutes}m {sec}s"
