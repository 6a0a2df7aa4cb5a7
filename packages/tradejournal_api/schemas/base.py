"""
Response envelopes shared by every journal endpoint
"""
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from tradejournal_core.utils import utc_now

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """
    Successful response wrapper

    Example:
        {
            "success": true,
            "data": {"id": 7, "pair": "EUR/USD", "pl": 50.0, ...},
            "message": "Trade logged",
            "timestamp": "2024-01-01T09:00:00+00:00"
        }
    """
    success: bool = True
    data: T
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a newest-first trade listing"""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, page_size: int) -> "PaginatedResponse[T]":
        pages = -(-total // page_size) if page_size > 0 else 0
        return cls(items=items, total=total, page=page, page_size=page_size, total_pages=pages)


class ErrorResponse(BaseModel):
    """
    Body of every error response

    `detail` is a message string, or the list of field errors for
    request validation failures.

    Example:
        {
            "success": false,
            "error": "Not Found",
            "detail": "Trade 123 not found",
            "code": "NOT_FOUND",
            "timestamp": "2024-01-01T09:00:00+00:00"
        }
    """
    success: bool = False
    error: Any
    detail: Any = None
    code: str
    timestamp: datetime = Field(default_factory=utc_now)

    def to_content(self, **extra: Any) -> dict:
        """JSON-ready dict for JSONResponse, with optional extra keys"""
        return {**self.model_dump(mode="json"), **extra}


class HealthResponse(BaseModel):
    """Service and database status"""
    status: str = "healthy"
    version: str
    environment: str
    database: str = "connected"
    timestamp: datetime = Field(default_factory=utc_now)
