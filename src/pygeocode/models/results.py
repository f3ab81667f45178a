"""Geocoding API response models.

Only ``status`` is interpreted by the client. Everything else is parsed
into typed models for convenience and kept verbatim in ``raw``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pygeocode._constants import STATUS_OK


class _ResponseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )


class LatLng(_ResponseModel):
    """A latitude/longitude pair in degrees."""

    lat: float
    lng: float


class Viewport(_ResponseModel):
    """Recommended viewport for displaying a result."""

    northeast: LatLng
    southwest: LatLng


class Geometry(_ResponseModel):
    """Location information for a result.

    Parameters
    ----------
    location : LatLng
        Geocoded latitude/longitude.
    location_type : str or None
        Precision of the location (``ROOFTOP``, ``APPROXIMATE`` ...).
    viewport : Viewport or None
        Recommended viewport.
    """

    location: LatLng
    location_type: str | None = None
    viewport: Viewport | None = None


class AddressComponent(_ResponseModel):
    long_name: str = ""
    short_name: str = ""
    types: list[str] = Field(default_factory=list)


class GeocodeResult(_ResponseModel):
    """One candidate match for the queried address."""

    address_components: list[AddressComponent] = Field(default_factory=list)
    formatted_address: str = ""
    geometry: Geometry | None = None
    place_id: str = ""
    types: list[str] = Field(default_factory=list)


class GeocodeResponse(_ResponseModel):
    """Top-level geocoding response.

    Parameters
    ----------
    status : str
        Service status code (``OK``, ``ZERO_RESULTS``,
        ``OVER_QUERY_LIMIT`` ...).
    results : list of GeocodeResult
        Candidate matches, empty unless ``status`` is ``OK``.
    error_message : str or None
        Human readable detail the service attaches to failures.
    raw : dict
        Full decoded response dict.
    """

    status: str
    results: list[GeocodeResult] = Field(default_factory=list)
    error_message: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "raw" in values:
            return values
        stashed = dict(values)
        stashed["raw"] = values
        return stashed

    @property
    def is_ok(self) -> bool:
        return self.status == STATUS_OK

    @property
    def first(self) -> GeocodeResult | None:
        """The best match, or ``None`` when there are no results."""
        return self.results[0] if self.results else None
