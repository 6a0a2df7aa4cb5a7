"""
Dependency Injection for FastAPI
Integrates with tradejournal_core services
"""
from typing import Annotated, Callable, Generator
from fastapi import Depends
from sqlmodel import Session

from langchain_core.language_models import BaseChatModel

from tradejournal_core.data import SessionLocal, init_db
from tradejournal_core.data.models.account import Account
from tradejournal_core.data.models.llm_config import LLMConfig
from tradejournal_core.data.repositories.account import AccountRepository
from tradejournal_core.data.repositories.trade import TradeRepository
from tradejournal_core.data.repositories.llm_config import LLMConfigRepository
from tradejournal_core.errors import NoActiveAccountError
from tradejournal_core.services.analytics import AnalyticsService
from tradejournal_core.services.ai_analysis import AIAnalysisService
from tradejournal_core.services.llm_factory import LLMFactory
from tradejournal_core.services.news import NewsService
from tradejournal_core.utils import get_logger
from tradejournal_api.auth.api_key import validate_api_key, get_user_id
from tradejournal_api.config import settings

logger = get_logger("api.dependencies")


# =============================================================================
# Database Session
# =============================================================================

def get_db() -> Generator[Session, None, None]:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Repository Dependencies
# =============================================================================

def get_account_repository(
    db: Annotated[Session, Depends(get_db)]
) -> AccountRepository:
    """Get AccountRepository instance"""
    return AccountRepository(db)


def get_trade_repository(
    db: Annotated[Session, Depends(get_db)]
) -> TradeRepository:
    """Get TradeRepository instance"""
    return TradeRepository(db)


def get_analytics_service(
    db: Annotated[Session, Depends(get_db)]
) -> AnalyticsService:
    """Get AnalyticsService instance"""
    return AnalyticsService(db)


def get_active_account(
    user_id: Annotated[str, Depends(get_user_id)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repository)],
) -> Account:
    """Resolve the caller's active account (404 when the user has none)"""
    account = account_repo.get_active(user_id)
    if account is None:
        raise NoActiveAccountError("Create an account first: no active account")
    return account


# =============================================================================
# AI / News Services
# =============================================================================

def get_llm(
    db: Annotated[Session, Depends(get_db)]
) -> BaseChatModel:
    """Build the default chat model from llm_configs"""
    return LLMFactory(db).create_default()


def get_ai_service(
    llm: Annotated[BaseChatModel, Depends(get_llm)]
) -> AIAnalysisService:
    """Get AIAnalysisService instance"""
    return AIAnalysisService(llm, timeout=settings.LLM_TIMEOUT_SECONDS)


def get_ai_service_factory(
    db: Annotated[Session, Depends(get_db)]
) -> Callable[[], AIAnalysisService]:
    """
    Lazily build the AI service
    For endpoints where AI analysis is optional
    """
    def factory() -> AIAnalysisService:
        return AIAnalysisService(LLMFactory(db).create_default(), timeout=settings.LLM_TIMEOUT_SECONDS)
    return factory


def get_news_service() -> NewsService:
    """Get NewsService instance"""
    return NewsService(
        rss_to_json_api=settings.NEWS_RSS_TO_JSON_API,
        rss_url=settings.NEWS_RSS_URL,
        timeout=settings.NEWS_TIMEOUT_SECONDS,
    )


# =============================================================================
# Type Aliases for Clean Route Signatures
# =============================================================================

DbSession = Annotated[Session, Depends(get_db)]
APIKey = Annotated[str, Depends(validate_api_key)]
UserId = Annotated[str, Depends(get_user_id)]
AccountRepo = Annotated[AccountRepository, Depends(get_account_repository)]
TradeRepo = Annotated[TradeRepository, Depends(get_trade_repository)]
Analytics = Annotated[AnalyticsService, Depends(get_analytics_service)]
ActiveAccount = Annotated[Account, Depends(get_active_account)]
AIService = Annotated[AIAnalysisService, Depends(get_ai_service)]
AIServiceFactory = Annotated[Callable[[], AIAnalysisService], Depends(get_ai_service_factory)]
News = Annotated[NewsService, Depends(get_news_service)]


# =============================================================================
# Startup/Shutdown Hooks
# =============================================================================

async def init_services():
    """Initialize services on application startup"""
    # 1. 初始化数据库表结构
    init_db()
    
    # 2. 确保存在默认 LLM 配置
    db = SessionLocal()
    try:
        _init_default_llm_config(db)
    finally:
        db.close()


def _init_default_llm_config(db: Session):
    """
    llm_configs 为空时，根据环境变量创建默认配置
    已有配置不覆盖
    """
    repo = LLMConfigRepository(db)
    if repo.get_all():
        logger.info("ℹ️ LLM configs already exist")
        return
    
    config = repo.save(LLMConfig(
        name="default",
        display_name=f"{settings.LLM_PROVIDER}/{settings.LLM_MODEL}",
        provider=settings.LLM_PROVIDER,
        model_name=settings.LLM_MODEL,
        api_key=settings.LLM_API_KEY,
        base_url=settings.LLM_BASE_URL,
        temperature=settings.LLM_TEMPERATURE,
        is_default=True,
    ))
    logger.info(f"✅ Created default LLM config: {config.display_name}")


async def shutdown_services():
    """Cleanup services on application shutdown"""
    pass
