# packages/tradejournal_core/data/repositories/__init__.py
from .account import AccountRepository
from .trade import TradeRepository
from .llm_config import LLMConfigRepository

__all__ = ["AccountRepository", "TradeRepository", "LLMConfigRepository"]
