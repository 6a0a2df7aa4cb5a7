# packages/tradejournal_core/services/risk_calculator.py
"""
仓位计算器
根据账户余额、风险百分比和止损点数计算手数
"""
from dataclasses import dataclass
from typing import Optional

from tradejournal_core.errors import InvalidInputError
from tradejournal_core.utils import get_logger

logger = get_logger("risk_calculator")

# 标准手 = 100,000 单位，USD 报价货币对 1 pip = $10
DEFAULT_PIP_VALUE = 10.0


@dataclass(frozen=True)
class PositionSize:
    """仓位计算结果"""
    risk_amount: float
    lot_size: float
    potential_loss: float
    stop_loss_pips: float


def calculate_position_size(
    balance: float,
    risk_percentage: float,
    stop_loss_pips: Optional[float],
    pip_value: float = DEFAULT_PIP_VALUE,
) -> PositionSize:
    """
    计算仓位大小

    lot_size = (balance × risk% / 100) / (|stop_loss| × pip_value)

    Args:
        balance: 账户余额
        risk_percentage: 单笔风险百分比（如 1 表示 1%）
        stop_loss_pips: 止损点数（取绝对值）
        pip_value: 每标准手每点价值

    Returns:
        PositionSize（金额保留两位小数）

    Raises:
        InvalidInputError: 止损为空或 0、余额非正、风险百分比不在 (0, 100]
    """
    if balance is None or balance <= 0:
        raise InvalidInputError(f"Account balance must be positive, got {balance}")
    if risk_percentage is None or not 0 < risk_percentage <= 100:
        raise InvalidInputError(f"Risk percentage must be in (0, 100], got {risk_percentage}")
    if not stop_loss_pips:
        raise InvalidInputError("Please enter a valid stop loss")
    if pip_value is None or pip_value <= 0:
        raise InvalidInputError(f"Pip value must be positive, got {pip_value}")

    stop_loss_pips = abs(float(stop_loss_pips))
    risk_amount = balance * (risk_percentage / 100)
    lot_size = risk_amount / (stop_loss_pips * pip_value)

    result = PositionSize(
        risk_amount=round(risk_amount, 2),
        lot_size=round(lot_size, 2),
        potential_loss=round(-risk_amount, 2),
        stop_loss_pips=stop_loss_pips,
    )

    logger.debug(
        f"💰 Position size: balance={balance:.2f}, risk={risk_percentage}%, "
        f"sl={stop_loss_pips} pips -> {result.lot_size} lots"
    )
    return result
