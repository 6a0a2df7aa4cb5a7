"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # Application
    APP_NAME: str = "Trade Journal API"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    
    # Database
    DATABASE_URL: str = "sqlite:///tradejournal.db"
    
    # Security
    API_KEYS: List[str] = ["dev-key-123"]
    
    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    
    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120
    
    # Optional: Redis (rate limiter storage)
    REDIS_URL: Optional[str] = None
    
    # Default LLM (seeded into llm_configs when the table is empty)
    LLM_PROVIDER: str = "openai"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: Optional[str] = None
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT_SECONDS: float = 60.0
    
    # News feed
    NEWS_RSS_TO_JSON_API: str = "https://api.rss2json.com/v1/api.json"
    NEWS_RSS_URL: str = "https://www.investing.com/rss/news_285.rss"
    NEWS_TIMEOUT_SECONDS: float = 10.0
    
    @field_validator("API_KEYS", "CORS_ORIGINS", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        """Parse comma-separated string into list"""
        if isinstance(v, str):
            return [x.strip() for x in v.split(",") if x.strip()]
        return v
    
    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
