# packages/tradejournal_core/data/repositories/llm_config.py

from sqlmodel import select, Session
from typing import List, Optional

from tradejournal_core.data.models.llm_config import LLMConfig


class LLMConfigRepository:
    """LLM 配置仓储"""
    
    def __init__(self, session: Session):
        self.session = session
    
    def save(self, config: LLMConfig) -> LLMConfig:
        """保存 LLM 配置"""
        self.session.add(config)
        self.session.commit()
        self.session.refresh(config)
        return config
    
    def get_by_id(self, config_id: int) -> Optional[LLMConfig]:
        statement = select(LLMConfig).where(LLMConfig.id == config_id)
        return self.session.exec(statement).first()
    
    def get_by_name(self, name: str) -> Optional[LLMConfig]:
        statement = select(LLMConfig).where(LLMConfig.name == name)
        return self.session.exec(statement).first()
    
    def get_default(self) -> Optional[LLMConfig]:
        """获取默认 LLM 配置"""
        statement = select(LLMConfig).where(
            LLMConfig.is_default == True,  # noqa: E712
            LLMConfig.is_enabled == True,  # noqa: E712
        )
        return self.session.exec(statement).first()
    
    def get_all(self) -> List[LLMConfig]:
        statement = select(LLMConfig)
        return list(self.session.exec(statement).all())
    
    def set_as_default(self, config_id: int):
        """设置为默认配置"""
        # 先将所有配置的 is_default 设为 False
        for cfg in self.get_all():
            cfg.is_default = cfg.id == config_id
            self.session.add(cfg)
        self.session.commit()
