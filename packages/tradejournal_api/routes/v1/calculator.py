"""
Position Size Calculator API Routes
"""
from fastapi import APIRouter, Query, Request

from tradejournal_api.dependencies import APIKey, ActiveAccount, AIServiceFactory
from tradejournal_api.middleware.rate_limiter import limiter, AI_LIMIT
from tradejournal_api.schemas.base import APIResponse
from tradejournal_api.schemas.calculator import (
    PositionSizeRequest,
    PositionSizeResult,
    PositionSizeResponse,
)
from tradejournal_core.services.risk_calculator import calculate_position_size

router = APIRouter(prefix="/calculator", tags=["Calculator"])


@router.post("/position-size", response_model=APIResponse[PositionSizeResponse])
@limiter.limit(AI_LIMIT)
async def position_size(
    request: Request,
    body: PositionSizeRequest,
    api_key: APIKey,
    account: ActiveAccount,
    ai_service_factory: AIServiceFactory,
    with_ai: bool = Query(False, description="Ask the AI for a sanity check and layering plan"),
):
    """
    Calculate lot size from risk percentage and stop loss
    
    Balance defaults to the active account's start balance.
    """
    balance = body.balance if body.balance is not None else account.start_balance
    result = calculate_position_size(
        balance=balance,
        risk_percentage=body.risk_percentage,
        stop_loss_pips=body.stop_loss_pips,
        pip_value=body.pip_value,
    )
    
    ai_analysis = None
    if with_ai:
        ai_analysis = await ai_service_factory().risk_analysis(
            currency=account.currency,
            balance=balance,
            risk_percentage=body.risk_percentage,
            stop_loss_pips=result.stop_loss_pips,
            lot_size=result.lot_size,
            pair=body.pair,
        )
    
    return APIResponse(
        data=PositionSizeResponse(
            result=PositionSizeResult.model_validate(result),
            ai_analysis=ai_analysis,
        )
    )
