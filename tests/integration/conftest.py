"""Integration-test fixtures.

ASGITransport does not run the app lifespan, so each test installs a
SessionManager wired to in-memory ledger and submitter fakes.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.tw_session.application.session import SessionManager
from tests.factories import make_asset, make_balance


@pytest_asyncio.fixture
async def fake_ledger() -> AsyncMock:
    mock = AsyncMock()
    mock.fetch_balances.return_value = [
        make_balance(500_000_000),
        make_balance(7, make_asset("usd", "usd", 2)),
    ]
    mock.fetch_history.return_value = []
    return mock


@pytest_asyncio.fixture
async def fake_submitter() -> AsyncMock:
    return AsyncMock()


@pytest_asyncio.fixture
async def client(
    fake_ledger: AsyncMock, fake_submitter: AsyncMock
) -> AsyncGenerator[AsyncClient, None]:
    app.state.sessions = SessionManager(fake_ledger, fake_submitter)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.sessions.deactivate()


@pytest_asyncio.fixture
async def wallet_client(client: AsyncClient) -> AsyncClient:
    """Client with acc-1 active and its balances loaded."""
    await client.post("/api/v1/wallet/session", json={"account_id": "acc-1"})
    await client.post("/api/v1/wallet/balances/refresh")
    return client
