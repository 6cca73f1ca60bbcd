"""Pytest fixtures for all tests."""

import pytest
from httpx import AsyncClient, ASGITransport

from ui.app import create_app
from config import Config, UidConfig


@pytest.fixture
def uid_config():
    """Create test uid config."""
    return UidConfig(max_batch=20, padded=False)


@pytest.fixture
def frozen_clock(monkeypatch):
    """Pin the identifier clock; returns a setter for the current millis."""
    now = [1700000000000]
    monkeypatch.setattr("smalluid.uid.now_millis", lambda: now[0])

    def set_now(millis):
        now[0] = millis
    return set_now


@pytest.fixture
def fixed_entropy(monkeypatch):
    """Pin the identifier random source; returns a setter for the next draw."""
    draw = [0xABCDE]
    monkeypatch.setattr("smalluid.uid.next_u64", lambda: draw[0])

    def set_draw(value):
        draw[0] = value
    return set_draw


@pytest.fixture
async def app(uid_config):
    """Create test FastAPI app."""
    return create_app(Config(uid=uid_config))


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
