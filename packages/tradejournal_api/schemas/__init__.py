"""
API Schemas - Pydantic models for request/response
"""
from tradejournal_api.schemas.base import (
    APIResponse,
    PaginatedResponse,
    ErrorResponse,
    HealthResponse,
)
from tradejournal_api.schemas.accounts import (
    AccountRecord,
    AccountCreateRequest,
    ActiveAccountRequest,
    ActiveAccountResponse,
)
from tradejournal_api.schemas.trades import (
    TradeRecord,
    TradeCreateRequest,
    TradeUpdateRequest,
    WithdrawalRequest,
    ImportResult,
)
from tradejournal_api.schemas.analytics import (
    SummaryMetricsSchema,
    EquityPointSchema,
    GroupStatsSchema,
    PerformersResponse,
    AnalyticsReportSchema,
)
from tradejournal_api.schemas.calculator import (
    PositionSizeRequest,
    PositionSizeResult,
    PositionSizeResponse,
)
from tradejournal_api.schemas.news import (
    NewsItemSchema,
    MarketSentimentSchema,
    NewsByCurrency,
    MarketAnalysisRequest,
    AnalysisResponse,
)

__all__ = [
    # Base
    "APIResponse",
    "PaginatedResponse",
    "ErrorResponse",
    "HealthResponse",
    # Accounts
    "AccountRecord",
    "AccountCreateRequest",
    "ActiveAccountRequest",
    "ActiveAccountResponse",
    # Trades
    "TradeRecord",
    "TradeCreateRequest",
    "TradeUpdateRequest",
    "WithdrawalRequest",
    "ImportResult",
    # Analytics
    "SummaryMetricsSchema",
    "EquityPointSchema",
    "GroupStatsSchema",
    "PerformersResponse",
    "AnalyticsReportSchema",
    # Calculator
    "PositionSizeRequest",
    "PositionSizeResult",
    "PositionSizeResponse",
    # News / AI
    "NewsItemSchema",
    "MarketSentimentSchema",
    "NewsByCurrency",
    "MarketAnalysisRequest",
    "AnalysisResponse",
]
