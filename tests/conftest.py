import os

from tests.test_utils import TEST_SECRET, FakeClock

# Must be set before ribaunt.config builds its settings
os.environ.setdefault("RIBAUNT_SECRET", TEST_SECRET)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ribaunt.main import app  # noqa: E402
from ribaunt.middleware.rate_limit import limiter  # noqa: E402
from ribaunt.services.challenge_service import ChallengeEngine, get_engine  # noqa: E402


@pytest.fixture
def clock():
    """A controllable clock starting at a fixed Unix time."""
    return FakeClock(1_700_000_000)


@pytest.fixture
def engine(clock):
    """An engine with its own secret and a controllable clock."""
    return ChallengeEngine(TEST_SECRET, clock=clock)


@pytest.fixture
def client(engine):
    """Create a test client using the test engine and disabled rate limiting."""
    app.dependency_overrides[get_engine] = lambda: engine

    # Disable rate limiting for tests
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    limiter.enabled = True
