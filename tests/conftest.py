import os
import sys

import pytest


# Ensure project root is on sys.path so `import app` works in tests
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.cache_store import CacheStore  # noqa: E402
from app.context import AppContext  # noqa: E402
from app.settings import Settings  # noqa: E402
from fakes import FakeFred  # noqa: E402


@pytest.fixture
def store(tmp_path):
    s = CacheStore.from_url(f"sqlite:///{tmp_path / 'fred_observations.db'}")
    s.initialize()
    yield s
    s.dispose()


@pytest.fixture
def fake_fred():
    return FakeFred()


@pytest.fixture
def test_settings():
    return Settings(fred_api_key="test-key")


@pytest.fixture
def ctx(test_settings, fake_fred, store):
    return AppContext.build(test_settings, client=fake_fred, store=store)
