"""Shared fixtures: record backoff waits instead of sleeping."""

import pytest


@pytest.fixture
def sleeps(monkeypatch):
    """Replace asyncio.sleep used by the retry executor; returns recorded delays."""
    recorded: list[float] = []

    async def fake_sleep(delay):
        recorded.append(delay)

    monkeypatch.setattr("edge_clients.retry.backoff.asyncio.sleep", fake_sleep)
    return recorded


@pytest.fixture
def sync_sleeps(monkeypatch):
    """Replace time.sleep used by the sync decorator; returns recorded delays."""
    recorded: list[float] = []
    monkeypatch.setattr("edge_clients.retry.backoff.time.sleep", recorded.append)
    return recorded
