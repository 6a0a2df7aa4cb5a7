# packages/tradejournal_core/data/database.py
import os

from sqlmodel import create_engine, SQLModel, Session
from dotenv import load_dotenv
load_dotenv()

# 注册所有表模型到 metadata
from tradejournal_core.data import models  # noqa: F401
from tradejournal_core.utils import get_logger

logger = get_logger("database")

database_url = os.getenv("DATABASE_URL", "sqlite:///tradejournal.db")
connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
engine = create_engine(database_url, echo=False, connect_args=connect_args)

def init_db():
    """
    initialize the database tables
    """
    SQLModel.metadata.create_all(engine)
    logger.info("🔧 Database tables initialized")

def SessionLocal() -> Session:
    """
    Create a new database session
    """
    return Session(engine)
