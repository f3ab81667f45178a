"""Data models for persisted state and geocoding responses."""

from pygeocode.models.results import (
    AddressComponent,
    GeocodeResponse,
    GeocodeResult,
    Geometry,
    LatLng,
    Viewport,
)
from pygeocode.models.state import ZERO_TIME, StateRecord, format_timestamp, parse_timestamp

__all__ = [
    "AddressComponent",
    "GeocodeResponse",
    "GeocodeResult",
    "Geometry",
    "LatLng",
    "StateRecord",
    "Viewport",
    "ZERO_TIME",
    "format_timestamp",
    "parse_timestamp",
]
