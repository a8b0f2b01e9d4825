"""tw_session REST API — balances, history and transfers of the active account."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.tw_common.amounts import format_amount, parse_amount, to_raw
from src.tw_common.enums import DisplayMode
from src.tw_common.errors import SUBMISSION_ERRORS
from src.tw_common.response import ApiResponse, success_response
from src.tw_session.application.schemas import (
    ActivateSessionRequest,
    BalanceListResponse,
    BalancesResponse,
    HistoryResponse,
    MaxAmountResponse,
    SessionResponse,
    TransferBody,
    TransferResponse,
)
from src.tw_session.application.session import AccountSession, SessionManager
from src.tw_transfer.domain.models import Failure, TransferRequest

router = APIRouter(prefix="/wallet", tags=["wallet"])


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_account_session(
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> AccountSession:
    return manager.current


def _respond(request: Request, data: object) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/session")
async def activate_session(
    body: ActivateSessionRequest,
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    request: Request,
) -> ApiResponse:
    session = manager.activate(body.account_id)
    return _respond(request, SessionResponse(account_id=session.account_id).model_dump())


@router.delete("/session")
async def deactivate_session(
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    request: Request,
) -> ApiResponse:
    manager.deactivate()
    return _respond(request, None)


@router.get("/balances")
async def get_balances(
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
) -> ApiResponse:
    data = BalancesResponse.from_state(session.account_id, session.get_balances())
    return _respond(request, data.model_dump())


@router.post("/balances/refresh")
async def refresh_balances(
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
) -> ApiResponse:
    state = await session.balances.refresh()
    return _respond(request, BalancesResponse.from_state(session.account_id, state).model_dump())


@router.get("/balances/list")
async def list_balances(
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
    mode: DisplayMode = Query(DisplayMode.COMPACT, description="compact or full"),
) -> ApiResponse:
    view = session.present_list(mode)
    data = BalanceListResponse.from_view(view, session.get_balances().is_loading)
    return _respond(request, data.model_dump())


@router.get("/history")
async def get_history(
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
) -> ApiResponse:
    data = HistoryResponse.from_state(session.account_id, session.get_history())
    return _respond(request, data.model_dump())


@router.post("/history/refresh")
async def refresh_history(
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
) -> ApiResponse:
    state = await session.history.refresh()
    return _respond(request, HistoryResponse.from_state(session.account_id, state).model_dump())


@router.get("/assets/{asset_id}/max")
async def max_amount(
    asset_id: str,
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
) -> ApiResponse:
    asset = session.asset_by_id(asset_id)
    amount: Decimal = session.max_transferable(asset_id)
    data = MaxAmountResponse(
        asset_id=asset_id,
        amount=str(amount),
        amount_display=format_amount(
            to_raw(amount, asset.decimals), asset.decimals, asset.display_symbol
        ),
    )
    return _respond(request, data.model_dump())


@router.post("/transfers")
async def submit_transfer(
    body: TransferBody,
    session: Annotated[AccountSession, Depends(get_account_session)],
    request: Request,
) -> ApiResponse:
    transfer = TransferRequest(
        recipient=body.recipient,
        amount=parse_amount(body.amount),
        asset=session.asset_by_id(body.asset_id),
    )
    outcome = await session.submit_transfer(transfer)
    if isinstance(outcome, Failure):
        # Rendered through the AppError handler: opaque reason code + message
        error_cls = SUBMISSION_ERRORS[outcome.reason]
        raise error_cls(outcome.message) if outcome.message else error_cls()
    return _respond(request, TransferResponse(status="SUCCEEDED", tx_ref=outcome.tx_ref).model_dump())
