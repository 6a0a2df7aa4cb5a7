#!/usr/bin/env python3
"""
Pytest fixtures for Trade Journal unit tests
Provides shared test data, an in-memory database and API clients
"""
import os
import sys
import tempfile
from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List
import pytest

# Add project to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "packages"))

# Keep test runs away from the real database file and log directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TRADEJOURNAL_LOG_DIR", tempfile.mkdtemp(prefix="tradejournal-logs-"))

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from tradejournal_core.data import models  # noqa: F401
from tradejournal_core.services.cache import Cache


# =============================================================================
# Sample Data Fixtures
# =============================================================================

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def sample_trades() -> List[Dict[str, Any]]:
    """
    Three trades on two pairs / two strategies, one hour apart
    EUR/USD nets +30, GBP/USD +30; start balance 1000 ends at 1060
    """
    return [
        {"id": 1, "pair": "EUR/USD", "pl": 50, "strategy": "Breakout",
         "position": "buy", "lot_size": 0.1, "created_at": BASE_TIME},
        {"id": 2, "pair": "EUR/USD", "pl": -20, "strategy": "Breakout",
         "position": "sell", "lot_size": 0.2, "created_at": BASE_TIME + timedelta(hours=1)},
        {"id": 3, "pair": "GBP/USD", "pl": 30, "strategy": "Scalping",
         "position": "buy", "lot_size": 0.1, "created_at": BASE_TIME + timedelta(hours=2)},
    ]


@pytest.fixture
def withdrawal() -> Dict[str, Any]:
    return {
        "id": 4,
        "pair": "WITHDRAWAL",
        "pl": -200,
        "strategy": "Withdrawal",
        "position": "wd",
        "lot_size": 0,
        "created_at": BASE_TIME + timedelta(hours=3),
    }


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def clear_cache():
    """The cache is a process-wide singleton"""
    Cache().clear()
    yield
    Cache().clear()
