"""
AI Analysis API Routes
LLM-generated feedback on single trades, overall performance and market news
"""
from fastapi import APIRouter, Request

from tradejournal_api.dependencies import APIKey, ActiveAccount, AIService, News, TradeRepo
from tradejournal_api.middleware.rate_limiter import limiter, AI_LIMIT
from tradejournal_api.schemas.base import APIResponse
from tradejournal_api.schemas.news import AnalysisResponse, MarketAnalysisRequest
from tradejournal_core.errors import InvalidInputError
from tradejournal_core.services.analytics import trading_trades
from tradejournal_core.services.cache import Cache
from tradejournal_core.services.news import filter_news_by_pairs, format_news_for_ai

router = APIRouter(prefix="/ai", tags=["AI Analysis"])


@router.post("/trades/{trade_id}/analysis", response_model=APIResponse[AnalysisResponse])
@limiter.limit(AI_LIMIT)
async def analyze_trade(
    request: Request,
    trade_id: int,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
    ai_service: AIService,
):
    """
    Psychological analysis of one trade's notes
    """
    trade = trade_repo.get_for_account(trade_id, account.id)
    if trade.is_withdrawal:
        raise InvalidInputError("Withdrawals cannot be analyzed")
    analysis = await ai_service.analyze_trade(trade, account.currency)
    return APIResponse(data=AnalysisResponse(analysis=analysis))


@router.post("/performance", response_model=APIResponse[AnalysisResponse])
@limiter.limit(AI_LIMIT)
async def analyze_performance(
    request: Request,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
    ai_service: AIService,
):
    """
    Mentor-style review of the active account's trading history
    """
    trades = trade_repo.list_for_account(account.id, descending=False)
    if not trading_trades(trades):
        raise InvalidInputError("No trades to analyze")
    analysis = await ai_service.analyze_performance(
        trades, account.currency, start_balance=account.start_balance
    )
    return APIResponse(data=AnalysisResponse(analysis=analysis))


@router.post("/market", response_model=APIResponse[AnalysisResponse])
@limiter.limit(AI_LIMIT)
async def analyze_market(
    request: Request,
    body: MarketAnalysisRequest,
    api_key: APIKey,
    news_service: News,
    ai_service: AIService,
):
    """
    Market sentiment for the watched pairs, based on the latest headlines
    
    Summaries are cached per pair set (15 minutes)
    """
    cache = Cache()
    cache_key = ",".join(sorted(body.watched_pairs))
    analysis = cache.get("market_analysis", cache_key, limit=body.headline_limit)
    if analysis is None:
        news = await news_service.fetch_news()
        relevant = filter_news_by_pairs(news, body.watched_pairs) or news
        headlines = format_news_for_ai(relevant, limit=body.headline_limit)
        analysis = await ai_service.market_analysis(body.watched_pairs, headlines)
        cache.set("market_analysis", analysis, cache_key, limit=body.headline_limit)
    return APIResponse(data=AnalysisResponse(analysis=analysis))
