"""
Account API Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class AccountRecord(BaseModel):
    """Trading account"""
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    name: str
    currency: str
    start_balance: float
    created_at: datetime
    is_active: bool = False


class AccountCreateRequest(BaseModel):
    """Create a trading account"""
    name: str = Field(..., min_length=1, max_length=100)
    currency: str = Field("USD", min_length=3, max_length=3, description="ISO currency code")
    start_balance: float = Field(0.0, ge=0)


class ActiveAccountRequest(BaseModel):
    """Select the active account"""
    account_id: int


class ActiveAccountResponse(BaseModel):
    """Active account (None when the user has no accounts)"""
    account: Optional[AccountRecord] = None
