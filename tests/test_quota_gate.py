"""Tests for request pacing and the daily quota state machine."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from pygeocode.models.state import ZERO_TIME, StateRecord
from pygeocode.quota import QuotaGate, next_reset

_LA = ZoneInfo("America/Los_Angeles")
_T0 = datetime(2026, 10, 19, 17, 0, tzinfo=UTC)
_MS = timedelta(milliseconds=1)


def _gate(record: StateRecord | None = None) -> QuotaGate:
    return QuotaGate(record if record is not None else StateRecord(credential="k"), min_interval=0.02, zone=_LA)


# ------------------------------------------------------------------
# Pacing
# ------------------------------------------------------------------


class TestPacing:
    def test_first_request_is_never_delayed(self) -> None:
        decision = _gate().admit(_T0)
        assert decision.admitted
        assert decision.wait == timedelta(0)
        assert decision.admitted_at == _T0

    def test_requests_spaced_by_interval_are_not_delayed(self) -> None:
        gate = _gate()
        for step in (0, 20, 45, 1000):
            decision = gate.admit(_T0 + step * _MS)
            assert decision.admitted
            assert decision.wait_seconds == 0.0

    def test_close_request_waits_for_remaining_interval(self) -> None:
        gate = _gate()
        gate.admit(_T0)

        decision = gate.admit(_T0 + 5 * _MS)

        assert decision.admitted
        assert decision.wait == 15 * _MS
        assert decision.admitted_at == _T0 + 20 * _MS

    def test_serialized_callers_are_spaced_from_previous_admission(self) -> None:
        # Each caller proposes its time only after the previous one finished sleeping.
        gate = _gate()
        first = gate.admit(_T0)
        assert first.admitted_at is not None
        second = gate.admit(_T0 + 1 * _MS)
        assert second.admitted_at is not None
        third = gate.admit(second.admitted_at)
        assert third.admitted_at is not None

        assert second.admitted_at >= _T0 + 20 * _MS
        assert third.admitted_at >= (_T0 + 1 * _MS) + 20 * _MS
        assert third.wait == 1 * _MS

    def test_proposal_time_is_recorded_not_time_after_sleeping(self) -> None:
        record = StateRecord(credential="k")
        gate = _gate(record)
        gate.admit(_T0)
        decision = gate.admit(_T0 + 5 * _MS)

        assert decision.admitted_at == _T0 + 20 * _MS
        assert record.last_request_time == _T0 + 5 * _MS

    def test_zero_interval_disables_pacing(self) -> None:
        gate = QuotaGate(StateRecord(credential="k"), min_interval=0.0, zone=_LA)
        gate.admit(_T0)
        assert gate.admit(_T0).wait == timedelta(0)


# ------------------------------------------------------------------
# Quota
# ------------------------------------------------------------------


class TestQuota:
    def test_over_query_limit_sets_exceeded_and_reset(self) -> None:
        record = StateRecord(credential="k")
        gate = _gate(record)

        gate.observe("OVER_QUERY_LIMIT", _T0)

        assert record.quota_exceeded
        # 10:00 PDT on Oct 19 -> midnight PDT on Oct 20.
        assert record.quota_reset_at == datetime(2026, 10, 20, 7, tzinfo=UTC)

    @pytest.mark.parametrize("status", ["OK", "ZERO_RESULTS", "REQUEST_DENIED", "INVALID_REQUEST"])
    def test_other_statuses_do_not_change_quota(self, status: str) -> None:
        record = StateRecord(credential="k")
        _gate(record).observe(status, _T0)

        assert not record.quota_exceeded
        assert record.quota_reset_at == ZERO_TIME

    def test_rejected_until_reset_then_admitted(self) -> None:
        record = StateRecord(credential="k")
        gate = _gate(record)
        gate.admit(_T0)
        gate.observe("OVER_QUERY_LIMIT", _T0)
        reset_at = record.quota_reset_at

        for probe in (_T0 + _MS, _T0 + timedelta(hours=10), reset_at - _MS):
            decision = gate.admit(probe)
            assert not decision.admitted
            assert decision.reset_at == reset_at
            assert "daily quota exceeded" in decision.reason

        decision = gate.admit(reset_at)
        assert decision.admitted
        assert not record.quota_exceeded

    def test_rejection_does_not_touch_last_request_time(self) -> None:
        record = StateRecord(credential="k")
        gate = _gate(record)
        gate.admit(_T0)
        gate.observe("OVER_QUERY_LIMIT", _T0)

        gate.admit(_T0 + timedelta(minutes=5))

        assert record.last_request_time == _T0

    def test_persisted_exceeded_state_is_honoured(self) -> None:
        record = StateRecord(
            credential="k",
            quota_exceeded=True,
            quota_reset_at=_T0 + timedelta(hours=1),
        )
        assert not _gate(record).admit(_T0).admitted

    def test_stale_reset_is_cleared_on_admit(self) -> None:
        record = StateRecord(
            credential="k",
            quota_exceeded=True,
            quota_reset_at=_T0 - timedelta(days=2),
        )
        gate = _gate(record)

        assert gate.admit(_T0).admitted
        assert not gate.is_exceeded


# ------------------------------------------------------------------
# Reset boundary
# ------------------------------------------------------------------


class TestNextReset:
    def test_just_before_local_midnight(self) -> None:
        # 23:59:59.999 PDT on June 15.
        now = datetime(2026, 6, 16, 6, 59, 59, 999000, tzinfo=UTC)
        assert next_reset(now, _LA) == datetime(2026, 6, 16, 7, tzinfo=UTC)

    def test_exactly_at_local_midnight_moves_to_next_day(self) -> None:
        now = datetime(2026, 6, 16, 7, tzinfo=UTC)
        assert next_reset(now, _LA) == datetime(2026, 6, 17, 7, tzinfo=UTC)

    def test_just_after_local_midnight(self) -> None:
        now = datetime(2026, 6, 16, 7, 0, 0, 1000, tzinfo=UTC)
        assert next_reset(now, _LA) == datetime(2026, 6, 17, 7, tzinfo=UTC)

    def test_uses_calendar_day_not_rolling_window(self) -> None:
        # 23:00 PDT: the reset is one hour away, not 24.
        now = datetime(2026, 6, 16, 6, tzinfo=UTC)
        assert next_reset(now, _LA) - now == timedelta(hours=1)

    def test_spring_forward_day_is_23_hours(self) -> None:
        # 01:30 PST on March 8 2026, before clocks jump to PDT.
        now = datetime(2026, 3, 8, 9, 30, tzinfo=UTC)
        reset = next_reset(now, _LA)
        assert reset == datetime(2026, 3, 9, 7, tzinfo=UTC)
        assert reset.astimezone(_LA).hour == 0

    def test_fall_back_day_is_25_hours(self) -> None:
        # 00:30 PDT on November 1 2026, before clocks fall back to PST.
        now = datetime(2026, 11, 1, 7, 30, tzinfo=UTC)
        reset = next_reset(now, _LA)
        assert reset == datetime(2026, 11, 2, 8, tzinfo=UTC)
        assert reset.astimezone(_LA).hour == 0

    def test_input_timezone_does_not_matter(self) -> None:
        now_utc = datetime(2026, 10, 19, 17, tzinfo=UTC)
        now_tokyo = now_utc.astimezone(ZoneInfo("Asia/Tokyo"))
        assert next_reset(now_utc, _LA) == next_reset(now_tokyo, _LA)
