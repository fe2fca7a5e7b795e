"""Shared test fixtures.

Loads ``.env`` / ``.env.test`` so integration tests see the same
configuration as the service; unit tests never rely on it.
"""

from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv

from infrastructure.persistence.factory import reset_repositories

# Load .env first (default environment variables)
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Load .env.test for integration tests (overrides .env values)
env_test_path = Path(__file__).parent.parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)


@pytest.fixture(autouse=True)
def _fresh_repositories() -> Generator[None, None, None]:
    """Drop factory singletons so each test re-reads REPOSITORY_BACKEND."""
    reset_repositories()
    yield
    reset_repositories()
