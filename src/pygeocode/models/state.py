"""Durable rate/quota state record.

The record is persisted as four newline-separated lines:

1. credential
2. last request time
3. quota exceeded flag (``true``/``false``)
4. quota reset instant

Timestamps use extended ISO-8601 with microseconds and a UTC offset.
Shorter files are accepted; missing trailing fields keep their zero value.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator

_logger = logging.getLogger(__name__)

#: Zero timestamp, meaning "never" / "unset".
ZERO_TIME = datetime.min.replace(tzinfo=UTC)

_FIELD_COUNT = 4
_TRUE_VALUES = frozenset({"1", "t", "true", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "f", "false", "no", "n", "off"})


def format_timestamp(value: datetime) -> str:
    """Serialize an aware datetime for the state file."""
    return value.isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    """Parse a state file timestamp.

    Raises :class:`ValueError` for malformed or offset-less values.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {value!r}")
    return parsed


def parse_bool(value: str) -> bool:
    """Parse a state file boolean, raising :class:`ValueError` when unknown."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


class StateRecord(BaseModel):
    """Rate and quota state for one API key.

    Parameters
    ----------
    credential : str
        Opaque API key. Empty until acquired.
    last_request_time : datetime
        Initiation instant of the most recent admitted request.
        :data:`ZERO_TIME` when no request was ever made.
    quota_exceeded : bool
        Whether the daily quota was observed exhausted and has not reset.
    quota_reset_at : datetime
        Instant at which an exhausted quota resets. Only meaningful while
        ``quota_exceeded`` is true.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    credential: str = ""
    last_request_time: datetime = ZERO_TIME
    quota_exceeded: bool = False
    quota_reset_at: datetime = ZERO_TIME

    @field_validator("credential", mode="before")
    @classmethod
    def _strip_credential(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("last_request_time", "quota_reset_at")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def to_text(self) -> str:
        """Render the four-line persisted form."""
        lines = [
            self.credential,
            format_timestamp(self.last_request_time),
            "true" if self.quota_exceeded else "false",
            format_timestamp(self.quota_reset_at),
        ]
        return "\n".join(lines)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> StateRecord:
        """Build a record from persisted lines.

        Fields are read positionally down to the last line present; the
        rest keep their defaults. A field that fails to parse is logged
        and left at its default, it never fails the whole record.
        """
        fields = list(lines[:_FIELD_COUNT])
        record = cls()

        if len(fields) > 0:
            record.credential = fields[0]

        if len(fields) > 1 and fields[1].strip():
            try:
                record.last_request_time = parse_timestamp(fields[1])
            except ValueError:
                _logger.warning("Ignoring unparseable last request time %r", fields[1])

        if len(fields) > 2 and fields[2].strip():
            try:
                record.quota_exceeded = parse_bool(fields[2])
            except ValueError:
                _logger.warning("Ignoring unparseable quota flag %r", fields[2])

        if len(fields) > 3 and fields[3].strip():
            try:
                record.quota_reset_at = parse_timestamp(fields[3])
            except ValueError:
                _logger.warning("Ignoring unparseable quota reset time %r", fields[3])

        return record

    @classmethod
    def from_text(cls, text: str) -> StateRecord:
        """Parse the persisted form produced by :meth:`to_text`."""
        return cls.from_lines(text.split("\n"))
