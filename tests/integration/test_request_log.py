"""Request logging middleware over the wallet API."""

import logging

import pytest
from httpx import AsyncClient


class TestRequestLog:
    async def test_echoes_request_id(self, client: AsyncClient) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "req_fixed"})
        assert resp.headers["X-Request-ID"] == "req_fixed"

    async def test_generated_id_matches_body(self, wallet_client: AsyncClient) -> None:
        resp = await wallet_client.get("/api/v1/wallet/balances")
        assert resp.headers["X-Request-ID"] == resp.json()["request_id"]

    async def test_logs_active_account(
        self, wallet_client: AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="tw.request"):
            await wallet_client.get("/api/v1/wallet/history")
        assert any("acct=acc-1" in r.getMessage() for r in caplog.records)
