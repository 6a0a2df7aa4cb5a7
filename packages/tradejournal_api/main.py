"""
Trade Journal API - FastAPI Application Entry Point

- API Key 认证 + X-User-Id 用户隔离
- 速率限制（AI 与导入端点单独限流）
- 统一的响应/错误格式
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from tradejournal_api.config import settings
from tradejournal_api.dependencies import init_services, shutdown_services
from tradejournal_api.routes.v1 import router as v1_router
from tradejournal_api.middleware.error_handler import setup_exception_handlers
from tradejournal_api.middleware.rate_limiter import limiter, rate_limit_exceeded_handler


# =============================================================================
# OpenAPI Tags Metadata
# =============================================================================

tags_metadata = [
    {
        "name": "Health",
        "description": "Health check endpoint for monitoring.",
    },
    {
        "name": "Accounts",
        "description": "Trading accounts - create, delete, choose the active account.",
    },
    {
        "name": "Trades",
        "description": "Trade journal entries, withdrawals, CSV import and export.",
    },
    {
        "name": "Analytics",
        "description": "Equity curve, win rate, pair and strategy performance.",
    },
    {
        "name": "Calculator",
        "description": "Risk-based position size calculator.",
    },
    {
        "name": "AI Analysis",
        "description": "LLM feedback on trades, performance and market news.",
    },
    {
        "name": "News",
        "description": "Forex headlines, filters and keyword sentiment.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    # Startup
    await init_services()
    yield
    # Shutdown
    await shutdown_services()


# =============================================================================
# FastAPI Application
# =============================================================================

API_DESCRIPTION = """
# Trade Journal API

Personal trading journal with analytics and AI feedback.

## Authentication

All endpoints (except `/api/v1/health`) require an API Key and the caller's
user id in the headers:

```bash
curl -H "X-API-Key: your-api-key" -H "X-User-Id: user-1" \\
     http://localhost:8000/api/v1/accounts
```

## Quick Start

### 1. Create an account
```bash
POST /api/v1/accounts  {"name": "Main", "currency": "USD", "start_balance": 1000}
```

### 2. Log a trade
```bash
POST /api/v1/trades  {"pair": "EUR/USD", "lot_size": 0.1, "strategy": "Breakout", "position": "buy", "pl": 50}
```

### 3. View analytics
```bash
GET /api/v1/analytics/report
```

## Response Format

```json
{
  "success": true,
  "data": { ... },
  "message": "Optional message",
  "timestamp": "2024-01-01T00:00:00"
}
```

## Rate Limiting

- **Default**: 120 requests/minute per API key
- **AI endpoints**: 10 requests/minute
- **CSV import**: 5 requests/minute

Exceeding the limit returns HTTP 429 with `Retry-After` header.
"""

app = FastAPI(
    title=settings.APP_NAME,
    description=API_DESCRIPTION,
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    openapi_tags=tags_metadata,
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan,
)

# =============================================================================
# Rate Limiting
# =============================================================================

# 注册限流器到 app
app.state.limiter = limiter

# 注册速率限制异常处理
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["X-API-Key", "X-User-Id", "Content-Type", "Authorization"],
)

# Setup exception handlers
setup_exception_handlers(app)

# =============================================================================
# Routes
# =============================================================================

app.include_router(v1_router, prefix="/api/v1")


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - returns API information"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
        "docs": "/api/docs",
        "health": "/api/v1/health",
        "rate_limit": f"{settings.RATE_LIMIT_PER_MINUTE}/minute",
    }


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server():
    """Run the API server (for CLI usage)"""
    import uvicorn
    uvicorn.run(
        "tradejournal_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run_server()
