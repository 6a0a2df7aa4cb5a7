"""
API v1 Routes

所有 API 路由注册：
- health: 健康检查
- accounts: 交易账户
- trades: 交易日志、提现、CSV 导入导出
- analytics: 绩效分析
- calculator: 仓位计算器
- ai: AI 分析
- news: 市场新闻
"""
from fastapi import APIRouter

from tradejournal_api.routes.v1.health import router as health_router
from tradejournal_api.routes.v1.accounts import router as accounts_router
from tradejournal_api.routes.v1.trades import router as trades_router
from tradejournal_api.routes.v1.analytics import router as analytics_router
from tradejournal_api.routes.v1.calculator import router as calculator_router
from tradejournal_api.routes.v1.ai import router as ai_router
from tradejournal_api.routes.v1.news import router as news_router

router = APIRouter()

# Include all routers
router.include_router(health_router)
router.include_router(accounts_router)
router.include_router(trades_router)
router.include_router(analytics_router)
router.include_router(calculator_router)
router.include_router(ai_router)
router.include_router(news_router)
