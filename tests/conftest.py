"""
Pytest fixtures for the leafmint SDK tests.
"""
import asyncio

import pytest

from leafmint_sdk._rate_limited_log import reset_rate_limits
from leafmint_sdk.models import PreparedTransaction

from tests.test_helpers import FakeLedger, make_identity


# Make asyncio.sleep instantaneous so retry delays don't slow the suite down
@pytest.fixture
def fast_sleep(monkeypatch):
    """Replace asyncio.sleep and record every requested delay (seconds)."""
    delays = []

    async def _sleep(delay, result=None):
        delays.append(delay)
        return result

    monkeypatch.setattr(asyncio, "sleep", _sleep)
    return delays


@pytest.fixture(autouse=True)
def _reset_rate_limited_log():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def identity():
    return make_identity(1)


@pytest.fixture
def prepared_tx():
    return PreparedTransaction(label="mint").add({"program": "bubblegum", "data": b"\x01"})


@pytest.fixture
def ledger():
    return FakeLedger()
