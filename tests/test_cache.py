# tests/test_cache.py
"""
测试共享缓存和日志上下文
"""
import logging

from tradejournal_core.services.cache import Cache
from tradejournal_core.utils import LogContext, get_logger


def test_singleton():
    assert Cache() is Cache()


def test_set_get_delete():
    cache = Cache()
    cache.set("news", ["a"], "https://rss.test")

    assert cache.get("news", "https://rss.test") == ["a"]
    assert cache.get("news", "https://other.test") is None
    assert cache.get_entry_age("news", "https://rss.test") >= 0
    assert cache.delete("news", "https://rss.test") is True
    assert cache.get("news", "https://rss.test") is None


def test_expired_entry():
    cache = Cache()
    cache.set("news", ["old"], "feed")
    entry = next(iter(cache.cache.values()))
    entry.timestamp -= cache.cache_ttl["news"] + 1

    assert cache.get("news", "feed") is None
    assert cache.get_stats()["total_items"] == 0


def test_clear_by_type():
    cache = Cache()
    cache.set("news", 1, "x")
    cache.set("market_analysis", 2, "EUR/USD")

    cache.clear("news")

    assert cache.get_stats() == {"total_items": 1, "by_type": {"market_analysis": 1}}


def test_log_context_attaches_fields():
    logger = get_logger("test_context")
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = Collect()
    logger.addHandler(handler)
    try:
        with LogContext(logger, account_id=7):
            logger.info("inside")
        logger.info("outside")
    finally:
        logger.removeHandler(handler)

    assert records[0].account_id == 7
    assert not hasattr(records[1], "account_id")
