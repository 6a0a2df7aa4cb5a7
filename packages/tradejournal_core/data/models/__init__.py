# packages/tradejournal_core/data/models/__init__.py
from .account import Account, ActiveAccount
from .trade import (
    Trade,
    WITHDRAWAL_PAIR,
    WITHDRAWAL_POSITION,
    WITHDRAWAL_STRATEGY,
    TRADE_POSITIONS,
)
from .llm_config import LLMConfig

__all__ = [
    'Account',
    'ActiveAccount',
    'Trade',
    'WITHDRAWAL_PAIR',
    'WITHDRAWAL_POSITION',
    'WITHDRAWAL_STRATEGY',
    'TRADE_POSITIONS',
    'LLMConfig',
]
