# packages/tradejournal_core/data/models/account.py
"""
交易账户模型
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from tradejournal_core.utils import utc_now


class Account(SQLModel, table=True):
    """
    交易账户
    每个用户可以拥有多个账户，所有交易查询都限定在活跃账户内
    """
    __tablename__ = "accounts"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    
    name: str
    currency: str = Field(default="USD")  # ISO 货币代码
    start_balance: float = Field(default=0.0, ge=0)
    
    created_at: datetime = Field(default_factory=utc_now)


class ActiveAccount(SQLModel, table=True):
    """
    用户当前选中的活跃账户（每个用户最多一个）
    """
    __tablename__ = "active_accounts"
    
    user_id: str = Field(primary_key=True)
    account_id: int = Field(foreign_key="accounts.id")
    updated_at: datetime = Field(default_factory=utc_now)
