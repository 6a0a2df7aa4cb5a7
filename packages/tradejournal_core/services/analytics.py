# packages/tradejournal_core/services/analytics.py
"""
交易绩效聚合服务
资金曲线、品种/策略统计、最佳/最差表现、汇总指标

所有计算都是纯函数：输入交易快照，返回新的值，不修改输入
"""
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlmodel import Session

from tradejournal_core.data.models.trade import WITHDRAWAL_PAIR
from tradejournal_core.data.models.account import Account
from tradejournal_core.data.repositories.account import AccountRepository
from tradejournal_core.data.repositories.trade import TradeRepository
from tradejournal_core.errors import NoActiveAccountError
from tradejournal_core.utils import as_utc, get_logger, LogContext, utc_now

logger = get_logger("analytics_service")


# =============================================================================
# 交易记录字段读取（兼容模型对象和字典）
# =============================================================================

_FIELD_ALIASES = {
    "created_at": ("created_at", "createdAt"),
    "lot_size": ("lot_size", "lotSize"),
}


def _field(trade: Any, name: str, default: Any = None) -> Any:
    """读取交易字段，支持 Trade 模型、dataclass 和 dict"""
    for key in _FIELD_ALIASES.get(name, (name,)):
        if isinstance(trade, Mapping):
            if key in trade:
                return trade[key]
        elif hasattr(trade, key):
            return getattr(trade, key)
    return default


def _pl(trade: Any) -> float:
    return float(_field(trade, "pl", 0) or 0)


def is_withdrawal(trade: Any) -> bool:
    """是否为提现记录"""
    return _field(trade, "pair") == WITHDRAWAL_PAIR


def trading_trades(trades: Iterable[Any]) -> List[Any]:
    """过滤掉提现记录，只保留真实交易"""
    return [t for t in trades if not is_withdrawal(t)]


# =============================================================================
# 结果类型
# =============================================================================

@dataclass(frozen=True)
class EquityPoint:
    """资金曲线上的一个点"""
    timestamp: datetime
    balance: float


@dataclass
class GroupStats:
    """按品种或策略分组的统计"""
    total_pl: float = 0.0
    trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    average_pl: float = 0.0

    @property
    def zeros(self) -> int:
        """盈亏为 0 的交易数（既不算赢也不算输）"""
        return self.trades - self.wins - self.losses


@dataclass(frozen=True)
class Performer:
    """最佳/最差表现条目"""
    name: str
    stats: GroupStats


@dataclass(frozen=True)
class PerformerSummary:
    """品种维度和策略维度各一个表现条目"""
    pair: Optional[Performer] = None
    strategy: Optional[Performer] = None


@dataclass
class SummaryMetrics:
    """账户汇总指标"""
    total_pl: float = 0.0
    current_balance: float = 0.0
    win_rate: float = 0.0
    profit_percentage: float = 0.0
    total_trades: int = 0

    def to_prompt_text(self, currency: str = "") -> str:
        """转换为 prompt 文本"""
        suffix = f" {currency}" if currency else ""
        if self.total_trades == 0:
            text = "No trades recorded yet.\n"
            text += f"  Current Balance: {self.current_balance:.2f}{suffix}\n"
            return text

        text = "Account Performance:\n"
        text += "-------------------\n"
        text += f"  Total Trades: {self.total_trades}\n"
        text += f"  Win Rate: {self.win_rate:.1f}%\n"
        text += f"  Total P/L: {self.total_pl:+.2f}{suffix}\n"
        text += f"  Current Balance: {self.current_balance:.2f}{suffix}\n"
        text += f"  Return on Start Balance: {self.profit_percentage:+.2f}%\n"
        text += "-------------------\n"
        return text


@dataclass
class AnalyticsReport:
    """一次完整的账户分析结果"""
    summary: SummaryMetrics
    equity_curve: List[EquityPoint] = field(default_factory=list)
    pair_performance: Dict[str, GroupStats] = field(default_factory=dict)
    strategy_performance: Dict[str, GroupStats] = field(default_factory=dict)
    best: PerformerSummary = field(default_factory=PerformerSummary)
    worst: PerformerSummary = field(default_factory=PerformerSummary)


# =============================================================================
# 资金曲线
# =============================================================================

def calculate_equity_curve(
    trades: Iterable[Any],
    start_balance: float,
    now: Optional[datetime] = None,
) -> List[EquityPoint]:
    """
    计算资金曲线

    按 created_at 稳定排序（时间相同的保持输入顺序），提现也计入余额。
    没有 created_at 的记录（尚未被存储确认的写入）被跳过。

    Args:
        trades: 交易快照（任意顺序）
        start_balance: 初始余额
        now: 没有任何记录时起点使用的时间（默认当前时间）

    Returns:
        [起点, 每笔交易后的余额...]
    """
    dated = [t for t in trades if _field(t, "created_at") is not None]
    # 不带时区的时间按 UTC 比较
    dated.sort(key=lambda t: as_utc(_field(t, "created_at")))

    start = float(start_balance or 0)
    origin = _field(dated[0], "created_at") if dated else (now or utc_now())
    curve = [EquityPoint(timestamp=origin, balance=start)]

    running_balance = start
    for trade in dated:
        running_balance += _pl(trade)
        curve.append(EquityPoint(timestamp=_field(trade, "created_at"), balance=running_balance))

    return curve


# =============================================================================
# 分组统计
# =============================================================================

def group_performance(
    trades: Iterable[Any],
    key: Callable[[Any], str],
) -> Dict[str, GroupStats]:
    """
    按 key 分组统计交易表现（提现记录不参与）

    Args:
        trades: 交易快照
        key: 从交易中取分组键的函数

    Returns:
        {分组键: GroupStats}，每个出现过的键恰好一条，trades 至少为 1
    """
    groups: Dict[str, GroupStats] = {}

    for trade in trading_trades(trades):
        stats = groups.setdefault(key(trade), GroupStats())
        pl = _pl(trade)
        stats.total_pl += pl
        stats.trades += 1
        if pl > 0:
            stats.wins += 1
        elif pl < 0:
            stats.losses += 1

    for stats in groups.values():
        stats.win_rate = stats.wins / stats.trades * 100
        stats.average_pl = stats.total_pl / stats.trades

    return groups


def pair_performance(trades: Iterable[Any]) -> Dict[str, GroupStats]:
    """按交易品种统计"""
    return group_performance(trades, lambda t: _field(t, "pair"))


def strategy_performance(trades: Iterable[Any]) -> Dict[str, GroupStats]:
    """按策略统计"""
    return group_performance(trades, lambda t: _field(t, "strategy") or "")


# =============================================================================
# 最佳/最差表现
# =============================================================================

def best_performer(stats: Mapping[str, GroupStats]) -> Optional[Performer]:
    """总盈亏最高的条目；并列时取名称字典序最小的"""
    if not stats:
        return None
    name = min(stats, key=lambda k: (-stats[k].total_pl, k))
    return Performer(name=name, stats=stats[name])


def worst_performer(stats: Mapping[str, GroupStats]) -> Optional[Performer]:
    """总盈亏最低的条目；并列时取名称字典序最小的"""
    if not stats:
        return None
    name = min(stats, key=lambda k: (stats[k].total_pl, k))
    return Performer(name=name, stats=stats[name])


def best_performers(trades: Sequence[Any]) -> PerformerSummary:
    return PerformerSummary(
        pair=best_performer(pair_performance(trades)),
        strategy=best_performer(strategy_performance(trades)),
    )


def worst_performers(trades: Sequence[Any]) -> PerformerSummary:
    return PerformerSummary(
        pair=worst_performer(pair_performance(trades)),
        strategy=worst_performer(strategy_performance(trades)),
    )


# =============================================================================
# 汇总指标
# =============================================================================

def summary_metrics(trades: Sequence[Any], start_balance: float) -> SummaryMetrics:
    """
    计算汇总指标

    total_pl 包含提现；胜率只统计真实交易；
    初始余额为 0 时收益率返回 0
    """
    start = float(start_balance or 0)
    actual = trading_trades(trades)
    total_pl = sum(_pl(t) for t in trades)
    wins = sum(1 for t in actual if _pl(t) > 0)

    return SummaryMetrics(
        total_pl=total_pl,
        current_balance=start + total_pl,
        win_rate=(wins / len(actual) * 100) if actual else 0.0,
        profit_percentage=(total_pl / start * 100) if start > 0 else 0.0,
        total_trades=len(actual),
    )


def build_report(
    trades: Sequence[Any],
    start_balance: float,
    now: Optional[datetime] = None,
) -> AnalyticsReport:
    """对一个交易快照做完整分析"""
    pairs = pair_performance(trades)
    strategies = strategy_performance(trades)
    return AnalyticsReport(
        summary=summary_metrics(trades, start_balance),
        equity_curve=calculate_equity_curve(trades, start_balance, now=now),
        pair_performance=pairs,
        strategy_performance=strategies,
        best=PerformerSummary(pair=best_performer(pairs), strategy=best_performer(strategies)),
        worst=PerformerSummary(pair=worst_performer(pairs), strategy=worst_performer(strategies)),
    )


class AnalyticsService:
    """
    账户分析服务
    从仓储读取活跃账户的交易快照，交给纯函数计算
    调用方负责在数据变化后重新调用（没有订阅）
    """

    def __init__(self, session: Session):
        self.session = session
        self.accounts = AccountRepository(session)
        self.trades = TradeRepository(session)

    def active_account(self, user_id: str) -> Account:
        account = self.accounts.get_active(user_id)
        if account is None:
            raise NoActiveAccountError(f"User {user_id} has no active account")
        return account

    def snapshot(self, account: Account) -> List[Any]:
        """账户交易快照（按时间升序）"""
        return self.trades.list_for_account(account.id, descending=False)

    def report_for_user(self, user_id: str) -> AnalyticsReport:
        """
        计算用户活跃账户的分析报告

        Raises:
            NoActiveAccountError: 用户没有任何账户
        """
        account = self.active_account(user_id)
        with LogContext(logger, account_id=account.id):
            report = build_report(self.snapshot(account), account.start_balance)
            logger.info(
                f"📊 Analytics for account {account.id}: "
                f"trades={report.summary.total_trades}, "
                f"win_rate={report.summary.win_rate:.1f}%, "
                f"total_pl={report.summary.total_pl:+.2f}"
            )
        return report
