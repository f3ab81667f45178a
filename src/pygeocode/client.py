"""High-level async client for the Google Geocoding API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlencode

import aiohttp
from pydantic import ValidationError

from pygeocode._constants import STATUS_OK, STATUS_OVER_QUERY_LIMIT
from pygeocode._transport import HttpTransport, Transport
from pygeocode.config import GeocoderConfig
from pygeocode.credentials import CredentialProvider, PromptCredentialProvider
from pygeocode.exceptions import (
    CredentialAcquisitionError,
    GeocodeDecodeError,
    GeocodeError,
    QuotaExceededError,
)
from pygeocode.models.results import GeocodeResponse
from pygeocode.models.state import StateRecord
from pygeocode.quota import QuotaGate
from pygeocode.storage import StateStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _decode_payload(body: bytes) -> dict[str, Any]:
    """JSON-decode a response body and check it carries a ``status``."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise GeocodeDecodeError(f"Geocoder response is not JSON: {body[:64]!r}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("status"), str):
        raise GeocodeDecodeError(f"Geocoder response has no 'status' field: {body[:64]!r}")
    return payload


class GeocodeClient:
    """Async client enforcing request pacing and the daily query quota.

    One client owns one persisted :class:`StateRecord`. Requests from any
    number of tasks are serialized so that pacing and quota decisions never
    race, and the state file is rewritten after every request.

    Usage::

        async with GeocodeClient(GeocoderConfig.from_env()) as client:
            response = await client.get_results("1600 Amphitheatre Parkway, Mountain View, CA")
    """

    def __init__(
        self,
        config: GeocoderConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        store: StateStore | None = None,
        credential_provider: CredentialProvider | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config if config is not None else GeocoderConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._store = store if store is not None else StateStore(self._config.state_path)
        self._credential_provider = credential_provider
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._gate: QuotaGate | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GeocodeClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        try:
            await self.open()
        except BaseException:
            await self._close_owned_session()
            raise
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._close_owned_session()

    async def _close_owned_session(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    async def open(self) -> None:
        """Load persisted state and make sure an API key is available.

        File access and the credential provider (which may prompt) run in a
        worker thread so the event loop keeps serving other tasks. Safe to
        call more than once; only the first call reads the store.
        """
        if self._gate is not None:
            return
        record = await asyncio.to_thread(self._store.load)
        if self._config.api_key:
            record.credential = self._config.api_key
        if not record.credential:
            record.credential = await asyncio.to_thread(self._acquire_credential)
        await asyncio.to_thread(self._store.save, record)
        self._gate = QuotaGate(
            record,
            min_interval=self._config.min_interval,
            zone=self._config.zone(),
        )
        _logger.debug(
            "Geocoder state loaded from %s (quota exceeded: %s)",
            self._store.path,
            record.quota_exceeded,
        )

    def _acquire_credential(self) -> str:
        provider = self._credential_provider or PromptCredentialProvider()
        credential = provider.provide_credential().strip()
        if not credential:
            raise CredentialAcquisitionError("Credential provider returned an empty API key")
        return credential

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_gate(self) -> QuotaGate:
        if self._gate is None:
            raise GeocodeError("Client not initialized. Use 'async with GeocodeClient(...) as client:'")
        return self._gate

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise GeocodeError("Client not initialized. Use 'async with GeocodeClient(...) as client:'")
        return self._transport

    def _build_url(self, address: str, credential: str) -> str:
        return f"{self._config.base_url}?{urlencode({'address': address, 'key': credential})}"

    @property
    def state(self) -> StateRecord:
        """A copy of the current rate/quota state."""
        return self._require_gate().record.model_copy()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_results(self, address: str) -> GeocodeResponse:
        """Geocode *address*.

        Raises
        ------
        QuotaExceededError
            The daily quota is exhausted, either already known (no request
            is sent) or reported by this response.
        GeocodeTransportError
            The HTTP request failed.
        GeocodeDecodeError
            The response did not match the expected schema.
        PersistenceError
            The state file could not be rewritten.
        """
        gate = self._require_gate()
        transport = self._require_transport()

        async with self._lock:
            try:
                return await self._request(gate, transport, address)
            finally:
                await asyncio.to_thread(self._store.save, gate.record)

    async def _request(self, gate: QuotaGate, transport: Transport, address: str) -> GeocodeResponse:
        decision = gate.admit(self._clock())
        if not decision.admitted:
            raise QuotaExceededError(
                f"The maximum daily queries have been exceeded; {decision.reason}",
                reset_at=gate.record.quota_reset_at,
            )
        if decision.wait_seconds > 0:
            await self._sleep(decision.wait_seconds)

        body = await transport.get(self._build_url(address, gate.record.credential))
        payload = _decode_payload(body)

        status = payload["status"]
        gate.observe(status, self._clock())
        if status == STATUS_OVER_QUERY_LIMIT:
            reset_at = gate.record.quota_reset_at
            raise QuotaExceededError(
                f"The maximum daily queries have been exceeded; the limit resets at {reset_at.isoformat()}",
                reset_at=reset_at,
            )
        if status != STATUS_OK:
            _logger.debug("Geocoder returned status %s for %r", status, address)

        try:
            return GeocodeResponse.model_validate(payload)
        except ValidationError as exc:
            raise GeocodeDecodeError(f"Unexpected geocoder response shape: {exc}") from exc
