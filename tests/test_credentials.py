from __future__ import annotations

import pytest

from pygeocode.credentials import PromptCredentialProvider, StaticCredentialProvider
from pygeocode.exceptions import CredentialAcquisitionError


def test_prompt_asks_again_on_blank_answers() -> None:
    answers = iter(["", "   ", "  api-key-1 "])
    prompts: list[str] = []

    def reader(prompt: str) -> str:
        prompts.append(prompt)
        return next(answers)

    provider = PromptCredentialProvider(reader=reader)

    assert provider.provide_credential() == "api-key-1"
    assert len(prompts) == 3
    assert prompts[0].startswith("Enter your API key")


def test_prompt_eof_raises_acquisition_error() -> None:
    def reader(_prompt: str) -> str:
        raise EOFError

    with pytest.raises(CredentialAcquisitionError):
        PromptCredentialProvider(reader=reader).provide_credential()


def test_static_provider() -> None:
    assert StaticCredentialProvider(" key ").provide_credential() == "key"


def test_static_provider_rejects_empty_key() -> None:
    with pytest.raises(CredentialAcquisitionError):
        StaticCredentialProvider("").provide_credential()
