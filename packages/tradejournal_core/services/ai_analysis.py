# packages/tradejournal_core/services/ai_analysis.py
"""
AI 交易分析服务
把交易数据整理成 prompt，调用聊天模型，返回 HTML 片段文本
"""
import asyncio
import json
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from tradejournal_core.errors import ExternalServiceError
from tradejournal_core.services.analytics import (
    best_performers,
    summary_metrics,
    trading_trades,
    worst_performers,
)
from tradejournal_core.utils import get_logger

logger = get_logger("ai_analysis")

DEFAULT_TIMEOUT = 60.0

SYSTEM_PROMPT = (
    "You are an assistant inside a personal trading journal. "
    "Answer concisely. When asked for HTML, return only an HTML fragment "
    "(no <html> or <body> tags)."
)


def _get(trade: Any, name: str, default: Any = None) -> Any:
    if isinstance(trade, dict):
        return trade.get(name, default)
    return getattr(trade, name, default)


def trade_history_payload(trades: Sequence[Any]) -> List[Dict[str, Any]]:
    """
    发送给模型的交易历史（不含提现）
    """
    payload = []
    for trade in trading_trades(trades):
        created_at = _get(trade, "created_at")
        payload.append({
            "pair": _get(trade, "pair"),
            "position": _get(trade, "position"),
            "lotSize": _get(trade, "lot_size"),
            "strategy": _get(trade, "strategy"),
            "pl": _get(trade, "pl"),
            "notes": _get(trade, "notes") or "",
            "date": created_at.isoformat() if hasattr(created_at, "isoformat") else created_at,
        })
    return payload


class AIAnalysisService:
    """
    AI 分析服务

    每个方法负责组织 prompt；模型本身是黑盒，
    只保证"返回文本或失败"
    """

    def __init__(self, llm: BaseChatModel, timeout: float = DEFAULT_TIMEOUT):
        self.llm = llm
        self.timeout = timeout

    async def generate(self, prompt: str) -> str:
        """
        调用模型生成文本

        Raises:
            ExternalServiceError: 超时、调用失败或返回为空
        """
        messages = [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)]

        logger.info(f"🤖 Calling LLM (timeout: {self.timeout}s)...")
        try:
            response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"❌ LLM call timed out ({self.timeout}s)")
            raise ExternalServiceError("AI analysis timed out") from e
        except Exception as e:
            logger.error(f"❌ LLM call failed: {e}")
            raise ExternalServiceError("Failed to generate AI content") from e

        text = self._response_text(response)
        if not text.strip():
            logger.error("❌ LLM returned an empty response")
            raise ExternalServiceError("Invalid AI response format")
        return text

    @staticmethod
    def _response_text(response: Any) -> str:
        content = getattr(response, "content", response)
        if isinstance(content, list):
            # 部分模型返回 content blocks
            return "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return str(content or "")

    # =========================================================================
    # Prompts
    # =========================================================================

    async def analyze_trade(self, trade: Any, currency: str) -> str:
        """单笔交易的心理分析"""
        prompt = (
            "You are a trading psychologist. Analyze the notes of this single trade:\n"
            f"  Pair: {_get(trade, 'pair')}\n"
            f"  Profit/Loss: {_get(trade, 'pl')} {currency}\n"
            f"  Notes: \"{_get(trade, 'notes') or ''}\"\n\n"
            "Give a constructive psychological analysis in 1-2 paragraphs. "
            "Identify biases (FOMO, revenge trading, etc.) and give one concrete suggestion."
        )
        return await self.generate(prompt)

    async def analyze_performance(
        self,
        trades: Sequence[Any],
        currency: str,
        start_balance: float = 0.0,
    ) -> str:
        """整体交易历史的导师式点评"""
        history = trade_history_payload(trades)
        summary = summary_metrics(trades, start_balance)
        best = best_performers(trades)
        worst = worst_performers(trades)

        largest_win = max(history, key=lambda t: t["pl"], default=None)
        largest_loss = min(history, key=lambda t: t["pl"], default=None)

        prompt = (
            "You are a trading mentor. Analyze this trading history and give sharp feedback "
            "as HTML bullet points (<ul><li>).\n"
            "Include a short summary of the trade with the largest profit and the trade with "
            "the largest loss as examples.\n"
            "Focus on: profit/loss patterns, best and worst strategies/pairs, psychological "
            "mistakes visible in the notes, and the 1-2 most important improvements.\n\n"
            f"{summary.to_prompt_text(currency)}"
            f"Best pair: {best.pair.name if best.pair else 'n/a'}, "
            f"best strategy: {best.strategy.name if best.strategy else 'n/a'}\n"
            f"Worst pair: {worst.pair.name if worst.pair else 'n/a'}, "
            f"worst strategy: {worst.strategy.name if worst.strategy else 'n/a'}\n"
            f"Largest win: {json.dumps(largest_win, default=str)}\n"
            f"Largest loss: {json.dumps(largest_loss, default=str)}\n\n"
            f"Data: {json.dumps(history, default=str)}"
        )
        return await self.generate(prompt)

    async def risk_analysis(
        self,
        currency: str,
        balance: float,
        risk_percentage: float,
        stop_loss_pips: float,
        lot_size: float,
        pair: Optional[str] = None,
    ) -> str:
        """仓位计算结果的合理性检查和分批建仓建议"""
        prompt = (
            f"I trade a {currency} account with a balance of {balance}. "
            f"I plan to open a position on {pair or 'an unspecified pair'} risking {risk_percentage}% "
            f"with a stop loss of {stop_loss_pips} pips. The calculator suggests a total lot size "
            f"of {lot_size}. Based on this:\n"
            "1. Give a short sanity check. Is this a reasonable risk management plan?\n"
            "2. Recommend a layering strategy (e.g. 2-3 layers) with a lot split for each layer "
            f"(the total must equal {lot_size}) and suggest approximate entry points for each "
            "layer relative to the current price.\n"
            "Use clear HTML formatting."
        )
        return await self.generate(prompt)

    async def market_analysis(self, watched_pairs: Sequence[str], headlines: str) -> str:
        """基于新闻标题的市场情绪摘要"""
        prompt = (
            "You are a neutral financial market analyst.\n"
            f"Based on these forex headlines: \"{headlines}\".\n"
            f"Focusing on these currency pairs: \"{', '.join(watched_pairs)}\".\n"
            "Summarize the current market sentiment in 2-3 short points (use <ul><li>). "
            "Avoid buy/sell advice; focus only on potential volatility or the general "
            "direction implied by the news."
        )
        return await self.generate(prompt)
