# packages/tradejournal_core/services/news.py
"""
市场新闻服务
通过 RSS-to-JSON 接口拉取外汇新闻，并提供过滤、分组、情绪统计
"""
import re
from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Dict, List, Optional, Sequence

import httpx

from tradejournal_core.errors import ExternalServiceError
from tradejournal_core.services.cache import Cache
from tradejournal_core.utils import get_logger

logger = get_logger("news_service")

DEFAULT_RSS_URL = "https://www.investing.com/rss/news_285.rss"
DEFAULT_SOURCE = "Investing.com"

HIGH_IMPACT_KEYWORDS = [
    "NFP", "Non-Farm", "Fed", "FOMC", "ECB", "BOE", "BOJ",
    "Rate Decision", "CPI", "GDP", "Employment",
]

CURRENCY_GROUPS = ["USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "NZD"]

BULLISH_KEYWORDS = [
    "surge", "gain", "rise", "jump", "soar", "higher",
    "strong", "positive", "bullish", "optimistic", "recovery",
]

BEARISH_KEYWORDS = [
    "fall", "drop", "decline", "slip", "plunge", "lower",
    "weak", "negative", "bearish", "pessimistic", "recession",
]

_TAG_RE = re.compile(r"<[^>]*>?")


@dataclass
class NewsItem:
    """一条新闻"""
    title: str
    link: str
    description: str
    pub_date: Optional[datetime] = None
    source: str = DEFAULT_SOURCE


@dataclass
class MarketSentiment:
    """关键词情绪统计"""
    bullish_count: int
    bearish_count: int
    sentiment: str  # 'bullish' / 'bearish' / 'neutral'
    strength: float


def clean_description(description: str) -> str:
    """去掉 HTML 标签，只保留前两句"""
    clean_text = _TAG_RE.sub("", description or "")
    sentences = clean_text.split(".")
    return ".".join(sentences[:2]) + "."


def _parse_pub_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug(f"Unparseable pubDate: {value}")
        return None


def format_news_for_ai(news: Sequence[NewsItem], limit: int = 10) -> str:
    """把前 limit 条标题拼成一段文本供 AI 使用"""
    return ". ".join(item.title for item in news[:limit])


def _keyword_pattern(keywords: Sequence[str]) -> re.Pattern:
    return re.compile("|".join(re.escape(k) for k in keywords if k), re.IGNORECASE)


def filter_news_by_pairs(news: Sequence[NewsItem], pairs: Sequence[str]) -> List[NewsItem]:
    """
    只保留与给定货币对相关的新闻

    关键词包括基础货币、报价货币和去掉斜杠的品种名（EUR/USD -> EUR, USD, EURUSD）
    """
    keywords = []
    for pair in pairs:
        parts = [p for p in pair.split("/") if p]
        keywords.extend(parts)
        keywords.append(pair.replace("/", ""))

    keywords = [k for k in keywords if k]
    if not keywords:
        return []

    pattern = _keyword_pattern(keywords)
    return [
        item for item in news
        if pattern.search(item.title) or pattern.search(item.description)
    ]


def get_high_impact_news(news: Sequence[NewsItem]) -> List[NewsItem]:
    """高影响事件（央行、非农、CPI 等）"""
    pattern = _keyword_pattern(HIGH_IMPACT_KEYWORDS)
    return [
        item for item in news
        if pattern.search(item.title) or pattern.search(item.description)
    ]


def group_news_by_currency(news: Sequence[NewsItem]) -> Dict[str, List[NewsItem]]:
    """
    按货币分组，每条新闻只进入第一个匹配的货币组，未匹配的进入 Other
    """
    groups: Dict[str, List[NewsItem]] = {currency: [] for currency in CURRENCY_GROUPS}
    groups["Other"] = []

    for item in news:
        for currency in CURRENCY_GROUPS:
            if currency in item.title or currency in item.description:
                groups[currency].append(item)
                break
        else:
            groups["Other"].append(item)

    return groups


def get_market_sentiment(news: Sequence[NewsItem]) -> MarketSentiment:
    """基于关键词计数的粗略情绪"""
    bullish_count = 0
    bearish_count = 0

    for item in news:
        text = f"{item.title} {item.description}".lower()
        bullish_count += sum(1 for keyword in BULLISH_KEYWORDS if keyword in text)
        bearish_count += sum(1 for keyword in BEARISH_KEYWORDS if keyword in text)

    if bullish_count > bearish_count:
        sentiment = "bullish"
    elif bearish_count > bullish_count:
        sentiment = "bearish"
    else:
        sentiment = "neutral"

    total = bullish_count + bearish_count
    strength = abs(bullish_count - bearish_count) / total if total else 0.0

    return MarketSentiment(
        bullish_count=bullish_count,
        bearish_count=bearish_count,
        sentiment=sentiment,
        strength=strength,
    )


class NewsService:
    """
    新闻拉取服务

    Args:
        rss_to_json_api: RSS 转 JSON 服务地址
        rss_url: 原始 RSS 地址
        client: 可注入的 httpx.AsyncClient（测试用 MockTransport）
        cache: 共享缓存（默认单例）
    """

    def __init__(
        self,
        rss_to_json_api: str,
        rss_url: str = DEFAULT_RSS_URL,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[Cache] = None,
        timeout: float = 10.0,
    ):
        self.rss_to_json_api = rss_to_json_api
        self.rss_url = rss_url
        self.client = client
        self.cache = cache or Cache()
        self.timeout = timeout

    async def fetch_news(self, use_cache: bool = True) -> List[NewsItem]:
        """
        拉取新闻列表

        Raises:
            ExternalServiceError: HTTP 错误或返回 status 不是 ok
        """
        if use_cache:
            cached = self.cache.get("news", self.rss_url)
            if cached is not None:
                return cached

        if not self.rss_to_json_api:
            raise ExternalServiceError("News feed API is not configured")

        try:
            if self.client is not None:
                response = await self.client.get(
                    self.rss_to_json_api, params={"rss_url": self.rss_url}
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(
                        self.rss_to_json_api, params={"rss_url": self.rss_url}
                    )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ Error fetching news: {e}")
            raise ExternalServiceError("Failed to load news") from e

        if data.get("status") != "ok":
            logger.error(f"❌ News feed returned status: {data.get('status')}")
            raise ExternalServiceError("Failed to fetch news from API")

        news = [
            NewsItem(
                title=item.get("title", ""),
                link=item.get("link", ""),
                description=clean_description(item.get("description", "")),
                pub_date=_parse_pub_date(item.get("pubDate")),
                source=DEFAULT_SOURCE,
            )
            for item in data.get("items", [])
        ]

        self.cache.set("news", news, self.rss_url)
        logger.info(f"📰 Fetched {len(news)} news items")
        return news
