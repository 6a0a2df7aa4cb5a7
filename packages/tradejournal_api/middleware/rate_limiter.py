# packages/tradejournal_api/middleware/rate_limiter.py
"""
速率限制中间件

基于 slowapi 实现，防止 API 滥用。

限制策略：
- 默认：120 请求/分钟（按 API Key）
- AI 端点：10 请求/分钟（外部 LLM 调用成本高）
- 导入：5 请求/分钟
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, Response
from fastapi.responses import JSONResponse

from tradejournal_api.config import settings
from tradejournal_api.schemas.base import ErrorResponse


def get_api_key_or_ip(request: Request) -> str:
    """
    获取限流键：优先使用 API Key，否则使用 IP
    """
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"apikey:{api_key}"
    
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_api_key_or_ip,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.REDIS_URL or "memory://",
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    速率限制超出时的响应处理
    """
    retry_after = exc.detail.split("retry after ")[1] if "retry after" in str(exc.detail) else "60"
    
    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error="Rate Limit Exceeded",
            detail=f"Too many requests. {exc.detail}",
            code="RATE_LIMIT_EXCEEDED",
        ).to_content(retry_after=retry_after),
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(settings.RATE_LIMIT_PER_MINUTE),
        }
    )


# AI 端点限流：10 请求/分钟
AI_LIMIT = "10/minute"

# 导入限流：5 请求/分钟
IMPORT_LIMIT = "5/minute"
