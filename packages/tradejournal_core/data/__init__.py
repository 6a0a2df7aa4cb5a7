# packages/tradejournal_core/data/__init__.py
from .database import engine, init_db, SessionLocal

__all__ = ["engine", "init_db", "SessionLocal"]
