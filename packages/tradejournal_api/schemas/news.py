"""
News & AI API Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional
from datetime import datetime


class NewsItemSchema(BaseModel):
    """Market news item"""
    model_config = ConfigDict(from_attributes=True)
    
    title: str
    link: str
    description: str
    pub_date: Optional[datetime] = None
    source: str


class MarketSentimentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    bullish_count: int
    bearish_count: int
    sentiment: str
    strength: float


class NewsByCurrency(BaseModel):
    groups: Dict[str, List[NewsItemSchema]]


class MarketAnalysisRequest(BaseModel):
    """AI market sentiment request"""
    watched_pairs: List[str] = Field(..., min_length=1, examples=[["EUR/USD", "XAU/USD"]])
    headline_limit: int = Field(10, ge=1, le=50)


class AnalysisResponse(BaseModel):
    """AI-generated analysis (HTML fragment)"""
    analysis: str
