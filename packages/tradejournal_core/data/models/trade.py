# packages/tradejournal_core/data/models/trade.py
"""
交易记录模型
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

# 提现记录使用的哨兵值：计入余额，但不计入任何交易统计
WITHDRAWAL_PAIR = "WITHDRAWAL"
WITHDRAWAL_POSITION = "wd"
WITHDRAWAL_STRATEGY = "Withdrawal"

TRADE_POSITIONS = ("buy", "sell")


class Trade(SQLModel, table=True):
    """
    交易记录
    一条手动记录的交易，或一条提现流水
    """
    __tablename__ = "trades"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: int = Field(foreign_key="accounts.id", index=True)
    
    pair: str = Field(index=True)  # 'EUR/USD' / 'WITHDRAWAL'
    lot_size: float = Field(default=0.0, ge=0)
    strategy: str = Field(default="")
    position: str  # 'buy' / 'sell' / 'wd'
    
    # 盈亏（账户货币，提现为负数）
    pl: float = Field(default=0.0)
    notes: Optional[str] = None
    
    # 由存储层在写入时赋值；尚未确认的写入可能为空
    created_at: Optional[datetime] = Field(default=None, index=True)
    
    @property
    def is_withdrawal(self) -> bool:
        return self.pair == WITHDRAWAL_PAIR
