"""File-backed persistence for the rate/quota state record."""

from __future__ import annotations

import logging
from pathlib import Path

from pygeocode.exceptions import PersistenceError
from pygeocode.models.state import StateRecord

_logger = logging.getLogger(__name__)


class StateStore:
    """Load and overwrite a :class:`StateRecord` in a plain-text file.

    A missing file is not an error: it yields the default record. Every
    :meth:`save` truncates and rewrites the whole file, so the file never
    grows beyond the four serialized lines.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StateRecord:
        """Read the persisted record, defaulting absent or malformed fields."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _logger.debug("No state file at %s; starting from defaults", self._path)
            return StateRecord()
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Could not read geocoder state from {self._path}: {exc}") from exc
        return StateRecord.from_text(text)

    def save(self, record: StateRecord) -> None:
        """Overwrite the file with *record*."""
        try:
            with self._path.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(record.to_text())
        except OSError as exc:
            raise PersistenceError(f"Could not write geocoder state to {self._path}: {exc}") from exc
