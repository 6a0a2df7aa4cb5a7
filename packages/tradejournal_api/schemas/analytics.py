"""
Analytics API Schemas
"""
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional
from datetime import datetime


class SummaryMetricsSchema(BaseModel):
    """Account summary metrics"""
    model_config = ConfigDict(from_attributes=True)
    
    total_pl: float = 0.0
    current_balance: float = 0.0
    win_rate: float = 0.0
    profit_percentage: float = 0.0
    total_trades: int = 0


class EquityPointSchema(BaseModel):
    """One point of the equity curve"""
    model_config = ConfigDict(from_attributes=True)
    
    timestamp: datetime
    balance: float


class GroupStatsSchema(BaseModel):
    """Per-pair / per-strategy statistics"""
    model_config = ConfigDict(from_attributes=True)
    
    total_pl: float
    trades: int
    wins: int
    losses: int
    win_rate: float
    average_pl: float


class PerformerSchema(BaseModel):
    """Best or worst performer"""
    model_config = ConfigDict(from_attributes=True)
    
    name: str
    stats: GroupStatsSchema


class PerformerSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    pair: Optional[PerformerSchema] = None
    strategy: Optional[PerformerSchema] = None


class PerformersResponse(BaseModel):
    best: PerformerSummarySchema
    worst: PerformerSummarySchema


class AnalyticsReportSchema(BaseModel):
    """Full analytics report for the active account"""
    model_config = ConfigDict(from_attributes=True)
    
    summary: SummaryMetricsSchema
    equity_curve: List[EquityPointSchema]
    pair_performance: Dict[str, GroupStatsSchema]
    strategy_performance: Dict[str, GroupStatsSchema]
    best: PerformerSummarySchema
    worst: PerformerSummarySchema
