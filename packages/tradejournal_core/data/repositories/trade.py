# packages/tradejournal_core/data/repositories/trade.py
"""
交易记录仓储
"""
from sqlmodel import select, Session
from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime

from tradejournal_core.data.models.trade import (
    Trade,
    TRADE_POSITIONS,
    WITHDRAWAL_PAIR,
    WITHDRAWAL_POSITION,
    WITHDRAWAL_STRATEGY,
)
from tradejournal_core.errors import InvalidInputError, NotFoundError
from tradejournal_core.utils import as_utc, get_logger, utc_now

logger = get_logger("trade_repository")

# update() 允许修改的字段；created_at 和 account_id 永远不变
UPDATABLE_FIELDS = ("pair", "lot_size", "strategy", "position", "pl", "notes")


def _validate_trade_fields(fields: Dict[str, Any]):
    """校验交易字段"""
    if "pair" in fields:
        pair = fields["pair"]
        if not pair or not str(pair).strip():
            raise InvalidInputError("Trade pair is required")
        if str(pair).strip().upper() == WITHDRAWAL_PAIR:
            raise InvalidInputError("Use add_withdrawal() to record withdrawals")
    if "position" in fields and fields["position"] not in TRADE_POSITIONS:
        raise InvalidInputError(
            f"Invalid position: {fields['position']} (expected one of {', '.join(TRADE_POSITIONS)})"
        )
    if "lot_size" in fields:
        lot_size = fields["lot_size"]
        if lot_size is None or lot_size < 0:
            raise InvalidInputError(f"Invalid lot size: {lot_size}")
    if "pl" in fields and fields["pl"] is None:
        raise InvalidInputError("Trade P/L is required")


class TradeRepository:
    """交易记录仓储"""
    
    def __init__(self, session: Session):
        self.session = session
    
    def create(
        self,
        account_id: int,
        pair: str,
        lot_size: float,
        strategy: str,
        position: str,
        pl: float,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Trade:
        """
        创建交易记录
        
        Args:
            account_id: 账户ID
            pair: 交易品种（如 EUR/USD）
            lot_size: 手数
            strategy: 策略名称
            position: 方向 ('buy' / 'sell')
            pl: 盈亏
            notes: 备注
            created_at: 创建时间（默认由存储层赋值为当前时间）
        """
        trade = self._build(
            account_id=account_id,
            pair=pair,
            lot_size=lot_size,
            strategy=strategy,
            position=position,
            pl=pl,
            notes=notes,
            created_at=created_at,
        )
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)
        logger.info(f"✅ Created trade: {trade.pair} {trade.position} P/L: {trade.pl:+.2f}")
        return trade
    
    def bulk_create(self, account_id: int, trades: Iterable[Dict[str, Any]]) -> List[Trade]:
        """
        批量创建交易（用于 CSV 导入）
        任一记录校验失败时整体不写入
        """
        created = [self._build(account_id=account_id, **fields) for fields in trades]
        for trade in created:
            self.session.add(trade)
        self.session.commit()
        for trade in created:
            self.session.refresh(trade)
        logger.info(f"📥 Imported {len(created)} trades into account {account_id}")
        return created
    
    def _build(
        self,
        account_id: int,
        pair: str,
        lot_size: float,
        strategy: str,
        position: str,
        pl: float,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Trade:
        _validate_trade_fields({
            "pair": pair,
            "lot_size": lot_size,
            "position": position,
            "pl": pl,
        })
        return Trade(
            account_id=account_id,
            pair=pair.strip(),
            lot_size=float(lot_size),
            strategy=(strategy or "").strip(),
            position=position,
            pl=float(pl),
            notes=notes,
            created_at=as_utc(created_at) or utc_now(),
        )
    
    def add_withdrawal(self, account_id: int, amount: float) -> Trade:
        """
        记录提现
        提现以负盈亏存储，只影响余额，不参与交易统计
        """
        if amount is None or amount <= 0:
            raise InvalidInputError(f"Invalid withdrawal amount: {amount}")
        
        trade = Trade(
            account_id=account_id,
            pair=WITHDRAWAL_PAIR,
            lot_size=0.0,
            strategy=WITHDRAWAL_STRATEGY,
            position=WITHDRAWAL_POSITION,
            pl=-float(amount),
            notes=f"Withdrawal of {amount}",
            created_at=utc_now(),
        )
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)
        logger.info(f"💸 Recorded withdrawal of {amount} for account {account_id}")
        return trade
    
    def get_by_id(self, trade_id: int) -> Optional[Trade]:
        """通过ID获取交易"""
        statement = select(Trade).where(Trade.id == trade_id)
        return self.session.exec(statement).first()
    
    def get_for_account(self, trade_id: int, account_id: int) -> Trade:
        """获取属于该账户的交易，不存在时抛出 NotFoundError"""
        trade = self.get_by_id(trade_id)
        if not trade or trade.account_id != account_id:
            raise NotFoundError(f"Trade with id {trade_id} not found")
        return trade
    
    def update(self, trade_id: int, account_id: int, **fields) -> Trade:
        """
        更新交易字段
        提现记录不可编辑为普通交易
        """
        trade = self.get_for_account(trade_id, account_id)
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS and v is not None}
        if trade.is_withdrawal:
            raise InvalidInputError("Withdrawal records cannot be edited")
        _validate_trade_fields(changes)
        
        for key, value in changes.items():
            setattr(trade, key, value.strip() if isinstance(value, str) else value)
        
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)
        logger.info(f"✏️ Updated trade {trade_id}: {sorted(changes)}")
        return trade
    
    def delete(self, trade_id: int, account_id: int):
        """删除交易"""
        trade = self.get_for_account(trade_id, account_id)
        self.session.delete(trade)
        self.session.commit()
        logger.info(f"🗑️ Deleted trade {trade_id}")
    
    def list_for_account(
        self,
        account_id: int,
        descending: bool = True,
    ) -> List[Trade]:
        """
        获取账户的全部交易
        
        Args:
            account_id: 账户ID
            descending: True 时最新的在前
        """
        statement = select(Trade).where(Trade.account_id == account_id)
        if descending:
            statement = statement.order_by(Trade.created_at.desc(), Trade.id.desc())
        else:
            statement = statement.order_by(Trade.created_at, Trade.id)
        return list(self.session.exec(statement).all())
