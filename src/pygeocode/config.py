"""Client configuration for pygeocode."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pygeocode._constants import GEOCODE_URL, MIN_REQUEST_INTERVAL, QUOTA_RESET_TIMEZONE, STATE_FILENAME
from pygeocode.exceptions import GeocodeConfigError


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise GeocodeConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class GeocoderConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str or None
        Geocoding API key. When set it replaces the key stored in the
        state file. When ``None`` the stored key is used, and a missing
        stored key is obtained from the credential provider.
    state_path : Path
        File holding the persisted rate/quota state. Relative paths are
        resolved against the process working directory.
    base_url : str
        Geocoding JSON endpoint.
    min_interval : float
        Minimum spacing between request initiations, in seconds.
    reset_timezone : str
        IANA timezone whose local midnight resets the daily quota.
    request_timeout : float or None
        Total timeout for one HTTP round trip in seconds. ``None`` waits
        indefinitely.
    """

    api_key: str | None = None
    state_path: Path = Path(STATE_FILENAME)
    base_url: str = GEOCODE_URL
    min_interval: float = MIN_REQUEST_INTERVAL
    reset_timezone: str = QUOTA_RESET_TIMEZONE
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.min_interval < 0:
            raise GeocodeConfigError(f"min_interval must be >= 0, got {self.min_interval}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise GeocodeConfigError(f"request_timeout must be > 0, got {self.request_timeout}")
        if not self.base_url:
            raise GeocodeConfigError("base_url must not be empty")
        # Fail at construction rather than on the first OVER_QUERY_LIMIT.
        self.zone()

    def zone(self) -> ZoneInfo:
        """Return the quota reset timezone."""
        try:
            return ZoneInfo(self.reset_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise GeocodeConfigError(
                f"Could not find the timezone {self.reset_timezone!r} needed to compute quota resets"
            ) from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> GeocoderConfig:
        """Create configuration from environment variables.

        Reads ``GEOCODER_API_KEY``, ``GEOCODER_STATE_PATH``,
        ``GEOCODER_BASE_URL``, ``GEOCODER_MIN_INTERVAL``,
        ``GEOCODER_RESET_TIMEZONE`` and ``GEOCODER_REQUEST_TIMEOUT``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        GeocoderConfig
            Populated configuration.
        """
        env = os.environ
        # None means "not given", matching the env branch skipping unset values.
        explicit = {key: value for key, value in overrides.items() if value is not None}

        _ENV_CONFIG_MAP = {
            "GEOCODER_API_KEY": "api_key",
            "GEOCODER_BASE_URL": "base_url",
            "GEOCODER_RESET_TIMEZONE": "reset_timezone",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        state_env = env.get("GEOCODER_STATE_PATH")
        if state_env:
            config_kwargs["state_path"] = Path(state_env)

        interval_env = env.get("GEOCODER_MIN_INTERVAL")
        if interval_env is not None and "min_interval" not in explicit:
            config_kwargs["min_interval"] = _env_float("GEOCODER_MIN_INTERVAL", interval_env)

        timeout_env = env.get("GEOCODER_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in explicit:
            config_kwargs["request_timeout"] = _env_float("GEOCODER_REQUEST_TIMEOUT", timeout_env)

        if "state_path" in explicit:
            explicit["state_path"] = Path(explicit["state_path"])

        config_kwargs.update(explicit)

        return cls(**config_kwargs)
