"""
Position Size Calculator Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional


class PositionSizeRequest(BaseModel):
    """Position size calculator input"""
    pair: Optional[str] = Field(None, examples=["EUR/USD"])
    risk_percentage: float = Field(1.0, gt=0, le=100)
    stop_loss_pips: float = Field(..., description="Stop loss distance in pips")
    entry_price: Optional[float] = None
    direction: Literal["buy", "sell"] = "buy"
    pip_value: float = Field(10.0, gt=0, description="Value of one pip per standard lot")
    balance: Optional[float] = Field(
        None,
        description="Balance to size against (defaults to the active account's start balance)"
    )


class PositionSizeResult(BaseModel):
    """Position size calculator output"""
    model_config = ConfigDict(from_attributes=True)
    
    risk_amount: float
    lot_size: float
    potential_loss: float
    stop_loss_pips: float


class PositionSizeResponse(BaseModel):
    result: PositionSizeResult
    ai_analysis: Optional[str] = None
