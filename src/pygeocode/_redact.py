"""Helpers for safe debug logging.

Request URLs carry the API key as a query parameter. This module masks it
(and any other sensitive field) before anything is logged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "api_key",
        "apikey",
        "credential",
        "client_secret",
        "signature",
    }
)

_REDACTED = "<redacted>"


def redact_url(url: str) -> str:
    """Return *url* with sensitive query parameter values masked."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (name, _REDACTED if name.lower() in _SENSITIVE_KEYS else value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="<>")))


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a redacted copy of a mapping suitable for debug logs."""
    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED if str(k).lower() in _SENSITIVE_KEYS else redact_for_log(v, max_string=max_string)
            for k, v in value.items()
        }

    return value
