"""
Market News API Routes
"""
from fastapi import APIRouter, Query
from typing import List, Optional

from tradejournal_api.dependencies import APIKey, News
from tradejournal_api.schemas.base import APIResponse
from tradejournal_api.schemas.news import (
    NewsItemSchema,
    MarketSentimentSchema,
    NewsByCurrency,
)
from tradejournal_core.services.news import (
    filter_news_by_pairs,
    get_high_impact_news,
    get_market_sentiment,
    group_news_by_currency,
)

router = APIRouter(prefix="/news", tags=["News"])


@router.get("", response_model=APIResponse[List[NewsItemSchema]])
async def list_news(
    api_key: APIKey,
    news_service: News,
    pairs: Optional[List[str]] = Query(None, description="Only news mentioning these pairs, e.g. EUR/USD"),
    high_impact: bool = Query(False, description="Only central bank / NFP / CPI style events"),
    refresh: bool = Query(False, description="Bypass the cache"),
):
    """
    Latest forex headlines
    """
    news = await news_service.fetch_news(use_cache=not refresh)
    if pairs:
        news = filter_news_by_pairs(news, pairs)
    if high_impact:
        news = get_high_impact_news(news)
    return APIResponse(data=[NewsItemSchema.model_validate(n) for n in news])


@router.get("/sentiment", response_model=APIResponse[MarketSentimentSchema])
async def news_sentiment(
    api_key: APIKey,
    news_service: News,
):
    """
    Keyword-based bullish/bearish sentiment across the headlines
    """
    news = await news_service.fetch_news()
    return APIResponse(data=MarketSentimentSchema.model_validate(get_market_sentiment(news)))


@router.get("/by-currency", response_model=APIResponse[NewsByCurrency])
async def news_by_currency(
    api_key: APIKey,
    news_service: News,
):
    """
    Headlines grouped by the first currency they mention
    """
    groups = group_news_by_currency(await news_service.fetch_news())
    return APIResponse(
        data=NewsByCurrency(
            groups={
                currency: [NewsItemSchema.model_validate(n) for n in items]
                for currency, items in groups.items()
            }
        )
    )
