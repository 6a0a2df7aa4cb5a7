"""
Trade-related API Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, List
from datetime import datetime


class TradeRecord(BaseModel):
    """Journal trade (or withdrawal) record"""
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    account_id: int
    pair: str
    lot_size: float
    strategy: str
    position: str  # 'buy' / 'sell' / 'wd'
    pl: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class TradeCreateRequest(BaseModel):
    """Log a manual trade"""
    pair: str = Field(..., min_length=1, examples=["EUR/USD"])
    lot_size: float = Field(..., ge=0, examples=[0.1])
    strategy: str = Field("", examples=["Breakout"])
    position: Literal["buy", "sell"]
    pl: float = Field(..., examples=[50.0, -25.0])
    notes: Optional[str] = None


class TradeUpdateRequest(BaseModel):
    """Edit a trade; omitted fields are unchanged"""
    pair: Optional[str] = Field(None, min_length=1)
    lot_size: Optional[float] = Field(None, ge=0)
    strategy: Optional[str] = None
    position: Optional[Literal["buy", "sell"]] = None
    pl: Optional[float] = None
    notes: Optional[str] = None


class WithdrawalRequest(BaseModel):
    """Record a cash withdrawal"""
    amount: float = Field(..., gt=0)


class ImportResult(BaseModel):
    """CSV import summary"""
    imported: int
    trades: List[TradeRecord] = Field(default_factory=list)
