"""Custom exception hierarchy for pygeocode."""

from __future__ import annotations

from datetime import datetime


class GeocodeError(Exception):
    """Base exception for all pygeocode errors."""


class GeocodeConfigError(GeocodeError):
    """Invalid or missing configuration."""


class QuotaExceededError(GeocodeError):
    """The daily query quota is exhausted.

    ``reset_at`` is the instant after which requests are admitted again.
    Callers can recover by waiting until then.
    """

    def __init__(self, message: str, *, reset_at: datetime) -> None:
        self.reset_at = reset_at
        super().__init__(message)


class GeocodeTransportError(GeocodeError):
    """HTTP-level failure (network error, non-200 status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class GeocodeDecodeError(GeocodeError):
    """Response body is not JSON or does not match the response schema."""


class PersistenceError(GeocodeError):
    """Reading or writing the durable rate/quota state failed.

    Continuing without durable state risks breaking the service's quota
    contract, so this is never swallowed by the client.
    """


class CredentialAcquisitionError(GeocodeError):
    """An API key could not be obtained from the credential provider."""
