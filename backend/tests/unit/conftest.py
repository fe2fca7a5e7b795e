"""Unit test configuration.

Unit tests use in-memory adapters and mocks only; they never need a
database or gateway credentials.
"""

import pytest


@pytest.fixture(autouse=True)
def _in_memory_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    """Default every unit test to the in-memory backend."""
    monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")
