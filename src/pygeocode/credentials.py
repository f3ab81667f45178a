"""API key acquisition.

The client asks a :class:`CredentialProvider` for a key only when neither
the configuration nor the persisted state supplies one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from pygeocode.exceptions import CredentialAcquisitionError

_logger = logging.getLogger(__name__)

PROMPT = "Enter your API key for the Google Geocoding API: "


class CredentialProvider(Protocol):
    def provide_credential(self) -> str:
        ...


class StaticCredentialProvider:
    """Return a fixed key; for tests and non-interactive callers."""

    def __init__(self, credential: str) -> None:
        self._credential = credential

    def provide_credential(self) -> str:
        credential = self._credential.strip()
        if not credential:
            raise CredentialAcquisitionError("No API key configured")
        return credential


class PromptCredentialProvider:
    """Interactively ask for a key until a non-blank answer is given."""

    def __init__(self, prompt: str = PROMPT, *, reader: Callable[[str], str] = input) -> None:
        self._prompt = prompt
        self._reader = reader

    def provide_credential(self) -> str:
        while True:
            try:
                answer = self._reader(self._prompt)
            except (EOFError, OSError) as exc:
                raise CredentialAcquisitionError(
                    f"An error occurred reading the response to the prompt {self._prompt.strip()!r}"
                ) from exc
            credential = answer.strip()
            if credential:
                return credential
            _logger.debug("Blank API key entered; asking again")
