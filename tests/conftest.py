"""
Pytest configuration for Instagres Python SDK tests
"""

from typing import Generator

import pytest  # type: ignore


@pytest.fixture(autouse=True)  # type: ignore
def clean_instagres_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep INSTAGRES_* variables from the shell out of the tests"""
    monkeypatch.delenv("INSTAGRES_HOST", raising=False)
    monkeypatch.delenv("INSTAGRES_REFERRER", raising=False)
    yield
