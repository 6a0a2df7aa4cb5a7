# packages/tradejournal_core/services/llm_factory.py

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI
from langchain_anthropic import ChatAnthropic
from langchain_ollama import ChatOllama
from sqlmodel import Session

from tradejournal_core.data.repositories.llm_config import LLMConfigRepository
from tradejournal_core.data.models.llm_config import LLMConfig
from tradejournal_core.utils import get_logger

logger = get_logger("llm_factory")


class LLMFactory:
    """
    LLM 工厂类
    根据配置创建不同的 LLM 实例
    """
    
    def __init__(self, session: Session):
        self.session = session
        self.repo = LLMConfigRepository(session)
    
    def create_from_config(self, config: LLMConfig) -> BaseChatModel:
        """
        根据配置创建 LLM 实例
        """
        if not config.is_enabled:
            logger.error(f"🙅 LLM config '{config.name}' is disabled")
            raise ValueError(f"LLM config '{config.name}' is disabled")
        
        provider = config.provider.lower()
        kwargs = config.to_langchain_kwargs()
        
        logger.info(f"Creating LLM: {config.display_name or config.name} ({config.provider}/{config.model_name})")
        
        if provider == "openai":
            return ChatOpenAI(**kwargs)
        
        elif provider == "anthropic":
            return ChatAnthropic(**kwargs)
        
        elif provider == "ollama":
            # Ollama 本地模型不需要 api_key / max_retries
            kwargs.pop("api_key", None)
            kwargs.pop("max_retries", None)
            return ChatOllama(**kwargs)
        
        else:
            # other providers can try the openai compatible api first
            try:
                return ChatOpenAI(**kwargs)
            except Exception as e:
                logger.error(f"Failed to create LLM: {e}")
                raise ValueError(f"Failed to create LLM: {e}") from e
    
    def create_from_name(self, name: str) -> BaseChatModel:
        """根据配置名称创建 LLM"""
        config = self.repo.get_by_name(name)
        if not config:
            raise ValueError(f"LLM config not found: name={name}")
        return self.create_from_config(config)
    
    def create_default(self) -> BaseChatModel:
        """创建默认 LLM"""
        config = self.repo.get_default()
        if not config:
            raise ValueError("No default LLM config found")
        return self.create_from_config(config)
