# packages/tradejournal_core/utils/logger.py
import logging
import os
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler
from rich.console import Console


class JournalLogger:
    """交易日志系统统一日志管理器"""
    
    _instance: Optional['JournalLogger'] = None
    _initialized = False
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        if self._initialized:
            return
        
        self.logger = logging.getLogger('tradejournal')
        self.logger.setLevel(logging.DEBUG)
        
        # 避免重复添加 handler
        if self.logger.handlers:
            self._initialized = True
            return
        
        self._setup_handlers()
        self._initialized = True
    
    def _setup_handlers(self):
        """配置日志处理器"""
        # 控制台处理器
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=True,
            rich_tracebacks=True,
            markup=False,
        )
        console_handler.setLevel(logging.INFO)
        
        # 文件处理器（带轮转）
        log_dir = Path(os.getenv('TRADEJOURNAL_LOG_DIR', 'logs'))
        log_dir.mkdir(parents=True, exist_ok=True)
        
        file_handler = RotatingFileHandler(
            log_dir / 'tradejournal.log',
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        
        # 错误日志单独文件
        error_handler = RotatingFileHandler(
            log_dir / 'tradejournal_error.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        
        self.logger.addHandler(console_handler)
        self.logger.addHandler(file_handler)
        self.logger.addHandler(error_handler)
    
    def get_logger(self, name: Optional[str] = None):
        """获取日志记录器"""
        if name:
            return self.logger.getChild(name)
        return self.logger


# 便捷函数
def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取日志记录器的便捷函数"""
    journal_logger = JournalLogger()
    return journal_logger.get_logger(name)


class LogContext:
    """
    日志上下文管理器
    
    在 with 块内为日志记录附加上下文字段（如 account_id）
    """
    
    def __init__(self, logger: logging.Logger, **context):
        self.logger = logger
        self.context = context
        self.filters = []
    
    def __enter__(self):
        class ContextFilter(logging.Filter):
            def __init__(self, context):
                super().__init__()
                self.context = context
            
            def filter(self, record):
                for key, value in self.context.items():
                    setattr(record, key, value)
                return True
        
        filter_obj = ContextFilter(self.context)
        self.logger.addFilter(filter_obj)
        self.filters.append(filter_obj)
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        for filter_obj in self.filters:
            self.logger.removeFilter(filter_obj)
        self.filters.clear()


__all__ = ['get_logger', 'JournalLogger', 'LogContext']
