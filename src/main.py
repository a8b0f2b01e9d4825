"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.tw_common.errors import AppError
from src.tw_common.response import error_response
from src.tw_gateway.middleware.request_log import RequestLogMiddleware
from src.tw_ledger.infrastructure.http_client import (
    HttpLedgerClient,
    HttpTransferSubmitter,
    PatternAddressValidator,
)
from src.tw_session.api.router import router as wallet_router
from src.tw_session.application.session import SessionManager, TransferPolicy

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


def build_session_manager(
    ledger_http: httpx.AsyncClient, submitter_http: httpx.AsyncClient
) -> SessionManager:
    return SessionManager(
        ledger=HttpLedgerClient(ledger_http),
        submitter=HttpTransferSubmitter(submitter_http),
        address_validator=PatternAddressValidator(settings.RECIPIENT_PATTERN),
        policy=TransferPolicy(
            max_amount=settings.MAX_TRANSFER_AMOUNT,
            submit_timeout=settings.SUBMIT_TIMEOUT_SECONDS,
            compact_size=settings.COMPACT_LIST_SIZE,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: open ledger HTTP clients. Shutdown: close session and clients."""
    timeout = httpx.Timeout(settings.LEDGER_HTTP_TIMEOUT_SECONDS)
    async with (
        httpx.AsyncClient(base_url=settings.LEDGER_API_URL, timeout=timeout) as ledger_http,
        httpx.AsyncClient(base_url=settings.SUBMITTER_API_URL, timeout=None) as submitter_http,
    ):
        app.state.sessions = build_session_manager(ledger_http, submitter_http)
        yield
        app.state.sessions.deactivate()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    data = {"field": exc.field} if exc.field else None
    resp = error_response(exc.code, exc.message, data)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(wallet_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
