"""
Analytics API Routes
Summary metrics, equity curve, pair/strategy breakdowns for the active account
"""
from fastapi import APIRouter
from typing import Dict, List

from tradejournal_api.dependencies import APIKey, ActiveAccount, Analytics
from tradejournal_api.schemas.base import APIResponse
from tradejournal_api.schemas.analytics import (
    SummaryMetricsSchema,
    EquityPointSchema,
    GroupStatsSchema,
    PerformersResponse,
    PerformerSummarySchema,
    AnalyticsReportSchema,
)
from tradejournal_core.services.analytics import (
    build_report,
    calculate_equity_curve,
    pair_performance,
    strategy_performance,
    summary_metrics,
)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _group_stats(stats) -> Dict[str, GroupStatsSchema]:
    return {name: GroupStatsSchema.model_validate(s) for name, s in stats.items()}


@router.get("/summary", response_model=APIResponse[SummaryMetricsSchema])
async def get_summary(
    api_key: APIKey,
    account: ActiveAccount,
    analytics: Analytics,
):
    """
    Total P/L, current balance, win rate and return on start balance
    """
    trades = analytics.snapshot(account)
    summary = summary_metrics(trades, account.start_balance)
    return APIResponse(data=SummaryMetricsSchema.model_validate(summary))


@router.get("/equity", response_model=APIResponse[List[EquityPointSchema]])
async def get_equity_curve(
    api_key: APIKey,
    account: ActiveAccount,
    analytics: Analytics,
):
    """
    Running balance after each trade (withdrawals included)
    """
    curve = calculate_equity_curve(analytics.snapshot(account), account.start_balance)
    return APIResponse(data=[EquityPointSchema.model_validate(p) for p in curve])


@router.get("/pairs", response_model=APIResponse[Dict[str, GroupStatsSchema]])
async def get_pair_performance(
    api_key: APIKey,
    account: ActiveAccount,
    analytics: Analytics,
):
    """
    Per-pair statistics
    """
    return APIResponse(data=_group_stats(pair_performance(analytics.snapshot(account))))


@router.get("/strategies", response_model=APIResponse[Dict[str, GroupStatsSchema]])
async def get_strategy_performance(
    api_key: APIKey,
    account: ActiveAccount,
    analytics: Analytics,
):
    """
    Per-strategy statistics
    """
    return APIResponse(data=_group_stats(strategy_performance(analytics.snapshot(account))))


@router.get("/performers", response_model=APIResponse[PerformersResponse])
async def get_performers(
    api_key: APIKey,
    account: ActiveAccount,
    analytics: Analytics,
):
    """
    Best and worst pair / strategy by total P/L
    """
    report = build_report(analytics.snapshot(account), account.start_balance)
    return APIResponse(
        data=PerformersResponse(
            best=PerformerSummarySchema.model_validate(report.best),
            worst=PerformerSummarySchema.model_validate(report.worst),
        )
    )


@router.get("/report", response_model=APIResponse[AnalyticsReportSchema])
async def get_report(
    api_key: APIKey,
    account: ActiveAccount,
    analytics: Analytics,
):
    """
    Full analytics report in one call
    """
    report = analytics.report_for_user(account.user_id)
    return APIResponse(data=AnalyticsReportSchema.model_validate(report))
