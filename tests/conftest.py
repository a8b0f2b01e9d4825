"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest

from tests.factories import make_balance


@pytest.fixture
def ledger() -> AsyncMock:
    """Ledger client fake: 500 CHR (6 decimals), empty history."""
    mock = AsyncMock()
    mock.fetch_balances.return_value = [make_balance(500_000_000)]
    mock.fetch_history.return_value = []
    return mock


@pytest.fixture
def submitter() -> AsyncMock:
    mock = AsyncMock()
    return mock
