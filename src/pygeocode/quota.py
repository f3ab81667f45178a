"""Pacing and daily quota gate.

``QuotaGate`` is a two-state machine over a :class:`StateRecord`:

* **Clear** -> **Exceeded** when :meth:`QuotaGate.observe` sees
  ``OVER_QUERY_LIMIT``.
* **Exceeded** -> **Clear** when :meth:`QuotaGate.admit` runs at or after
  the recorded reset instant.

The gate never sleeps or locks by itself. Callers serialize access and
honour the ``wait`` of an admitted decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from pygeocode._constants import MIN_REQUEST_INTERVAL, QUOTA_RESET_TIMEZONE, STATUS_OVER_QUERY_LIMIT
from pygeocode.models.state import StateRecord

_logger = logging.getLogger(__name__)


def next_reset(now: datetime, zone: tzinfo) -> datetime:
    """Return the first local midnight in *zone* strictly after *now*.

    The boundary follows calendar days, so on daylight-saving transition
    days the result is 23 or 25 hours after the previous midnight rather
    than a fixed 24 hours.
    """
    local_day = now.astimezone(zone).date()
    return datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=zone)


@dataclass(frozen=True, slots=True)
class AdmitDecision:
    """Outcome of :meth:`QuotaGate.admit`.

    ``admitted_at`` is the instant the request may start, ``wait`` the
    suspension needed to reach it. Rejected decisions carry the quota
    reset instant in ``reset_at``.
    """

    admitted: bool
    admitted_at: datetime | None = None
    wait: timedelta = timedelta(0)
    reset_at: datetime | None = None
    reason: str = ""

    @property
    def wait_seconds(self) -> float:
        return max(self.wait.total_seconds(), 0.0)


class QuotaGate:
    """Decide whether a request may start and track quota exhaustion."""

    def __init__(
        self,
        record: StateRecord,
        *,
        min_interval: float = MIN_REQUEST_INTERVAL,
        zone: tzinfo | None = None,
    ) -> None:
        self._record = record
        self._min_interval = timedelta(seconds=min_interval)
        self._zone = zone if zone is not None else ZoneInfo(QUOTA_RESET_TIMEZONE)

    @property
    def record(self) -> StateRecord:
        return self._record

    @property
    def min_interval(self) -> timedelta:
        return self._min_interval

    @property
    def is_exceeded(self) -> bool:
        return self._record.quota_exceeded

    def admit(self, now: datetime) -> AdmitDecision:
        """Admit, pace or reject a request proposed at *now*.

        ``now`` is recorded as the last request time, so pacing is measured
        between request initiations rather than from when a response
        arrives. The decision's ``admitted_at`` adds any pacing wait.
        """
        record = self._record
        if record.quota_exceeded:
            if now < record.quota_reset_at:
                return AdmitDecision(
                    admitted=False,
                    reset_at=record.quota_reset_at,
                    reason=f"daily quota exceeded, resets at {record.quota_reset_at.isoformat()}",
                )
            _logger.info("Daily quota reset at %s; admitting requests again", record.quota_reset_at.isoformat())
            record.quota_exceeded = False

        wait = timedelta(0)
        elapsed = now - record.last_request_time
        if elapsed < self._min_interval:
            wait = self._min_interval - elapsed

        record.last_request_time = now
        return AdmitDecision(admitted=True, admitted_at=now + wait, wait=wait)

    def observe(self, status: str, now: datetime) -> None:
        """Update quota state from a response ``status`` seen at *now*."""
        if status != STATUS_OVER_QUERY_LIMIT:
            return
        reset_at = next_reset(now, self._zone)
        self._record.quota_exceeded = True
        self._record.quota_reset_at = reset_at
        _logger.info("Daily quota exhausted; requests blocked until %s", reset_at.isoformat())
