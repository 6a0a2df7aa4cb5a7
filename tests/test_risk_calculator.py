# tests/test_risk_calculator.py
"""
测试仓位计算器
"""
import pytest

from tradejournal_core.errors import InvalidInputError
from tradejournal_core.services.risk_calculator import calculate_position_size


def test_standard_position_size():
    """$10,000 账户，1% 风险，20 点止损 -> 0.5 手"""
    result = calculate_position_size(10000, 1, 20)

    assert result.risk_amount == 100.0
    assert result.lot_size == 0.5
    assert result.potential_loss == -100.0
    assert result.stop_loss_pips == 20


def test_negative_stop_loss_uses_distance():
    result = calculate_position_size(10000, 1, -20)

    assert result.stop_loss_pips == 20
    assert result.lot_size == 0.5


def test_rounded_to_two_decimals():
    result = calculate_position_size(1234.56, 1.5, 33)

    assert result.risk_amount == 18.52
    assert result.lot_size == 0.06


def test_custom_pip_value():
    result = calculate_position_size(10000, 2, 50, pip_value=1.0)

    assert result.lot_size == 4.0


@pytest.mark.parametrize("stop_loss", [0, None])
def test_missing_stop_loss_rejected(stop_loss):
    with pytest.raises(InvalidInputError, match="stop loss"):
        calculate_position_size(10000, 1, stop_loss)


@pytest.mark.parametrize("balance", [0, -100])
def test_non_positive_balance_rejected(balance):
    with pytest.raises(InvalidInputError, match="balance"):
        calculate_position_size(balance, 1, 20)


@pytest.mark.parametrize("risk", [0, -1, 101])
def test_risk_percentage_out_of_range(risk):
    with pytest.raises(InvalidInputError, match="Risk percentage"):
        calculate_position_size(10000, risk, 20)


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        calculate_position_size(10000, 1, 20, pip_value=0)
