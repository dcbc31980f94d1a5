import asyncio
import inspect
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

# Settings must be loadable before any import that builds the app
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only-do-not-use-in-production")

import pytest  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blogapp.core.config import Settings  # noqa: E402
from blogapp.core.security import PasswordHasher  # noqa: E402
from blogapp.jwt.blocklist import RevocationRegistry  # noqa: E402
from blogapp.jwt.token_codec import TokenCodec  # noqa: E402

TEST_SECRET = "404E635266556A586E3272357538782F413F4428472B4B6250645367566B5970"


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames
            if name in pyfuncitem.funcargs
        }
        asyncio.run(pyfuncitem.obj(**call_kwargs))
        return True
    return None


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as async")


class FrozenClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def registry():
    return RevocationRegistry()


@pytest.fixture
def codec(registry, clock):
    return TokenCodec(TEST_SECRET, timedelta(hours=24), registry, clock=clock)


@pytest.fixture
def principal():
    return SimpleNamespace(id="11111111-1111-1111-1111-111111111111", username="testuser")


@pytest.fixture
def other_principal():
    return SimpleNamespace(id="22222222-2222-2222-2222-222222222222", username="differentuser")


@pytest.fixture
def fast_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        JWT_SECRET_KEY=TEST_SECRET,
        JWT_ACCESS_TOKEN_EXPIRES_MINUTES=60,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'blogapp_test.db'}",
    )


@pytest.fixture
def client(app_settings, fast_hasher):
    from fastapi.testclient import TestClient

    from blogapp.main import create_app

    app = create_app(app_settings)
    app.state.password_hasher = fast_hasher
    with TestClient(app) as test_client:
        yield test_client
