"""pygeocode - Async Python client for the Google Geocoding API with durable pacing and quota state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygeocode")
except PackageNotFoundError:
    __version__ = "0+local"
from pygeocode.client import GeocodeClient
from pygeocode.config import GeocoderConfig
from pygeocode.credentials import CredentialProvider, PromptCredentialProvider, StaticCredentialProvider
from pygeocode.exceptions import (
    CredentialAcquisitionError,
    GeocodeConfigError,
    GeocodeDecodeError,
    GeocodeError,
    GeocodeTransportError,
    PersistenceError,
    QuotaExceededError,
)
from pygeocode.models import (
    AddressComponent,
    GeocodeResponse,
    GeocodeResult,
    Geometry,
    LatLng,
    StateRecord,
    Viewport,
)
from pygeocode.quota import AdmitDecision, QuotaGate, next_reset
from pygeocode.storage import StateStore

__all__ = [
    "__version__",
    "AddressComponent",
    "AdmitDecision",
    "CredentialAcquisitionError",
    "CredentialProvider",
    "GeocodeClient",
    "GeocodeConfigError",
    "GeocodeDecodeError",
    "GeocodeError",
    "GeocodeResponse",
    "GeocodeResult",
    "GeocodeTransportError",
    "GeocoderConfig",
    "Geometry",
    "LatLng",
    "PersistenceError",
    "PromptCredentialProvider",
    "QuotaExceededError",
    "QuotaGate",
    "StateRecord",
    "StateStore",
    "StaticCredentialProvider",
    "Viewport",
    "next_reset",
]
