"""
A cache system for the trading journal (Singleton pattern).
All services share the same cache instance so repeated feed requests are served from memory.
"""
from dataclasses import dataclass
from typing import Any, Optional
import threading
import time

from tradejournal_core.utils import get_logger

logger = get_logger("cache")


@dataclass
class CacheItem:
    """
    A cache item containing data, timestamp, and TTL
    """
    data: Any
    timestamp: float
    ttl: float


class Cache:
    """
    A cache system for the trading journal (Singleton pattern)
    """
    _instance = None
    _lock = threading.Lock()  # Lock for thread-safe singleton creation

    def __new__(cls):
        """
        Create or return the singleton instance
        Uses double-checked locking for thread safety
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(Cache, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.cache = {}
        self._cache_lock = threading.Lock()

        # Different cache TTL for different data types (in seconds)
        self.cache_ttl = {
            'news': 300,              # 5 minutes (新闻源)
            'market_analysis': 900,   # 15 minutes (AI 市场情绪摘要)
        }

        self._initialized = True
        logger.info("Cache singleton instance initialized")

    def _make_key(self, data_type: str, *args, **kwargs) -> str:
        """
        Make a unique key for the cache entry
        """
        args_str = '_'.join(str(arg) for arg in args)
        kwargs_str = '_'.join(f'{k}={v}' for k, v in kwargs.items())
        return f'{data_type}:{args_str}:{kwargs_str}'

    def get(self, data_type: str, *args, **kwargs) -> Any:
        """
        Get a value from the cache

        Returns:
            The cached data if found and not expired, None otherwise
        """
        key = self._make_key(data_type, *args, **kwargs)
        with self._cache_lock:
            entry = self.cache.get(key)
            if entry is None:
                return None

            if entry.ttl > 0 and time.time() - entry.timestamp > entry.ttl:
                del self.cache[key]
                logger.debug(f"Cache expired for key: {key}")
                return None

            logger.debug(f"Cache hit for key: {key}")
            return entry.data

    def set(self, data_type: str, data: Any, *args, **kwargs):
        """
        Set a value in the cache
        """
        key = self._make_key(data_type, *args, **kwargs)
        with self._cache_lock:
            self.cache[key] = CacheItem(data, time.time(), self.cache_ttl.get(data_type, 0))
            logger.debug(f"Cache set for key: {key}")

    def delete(self, data_type: str, *args, **kwargs) -> bool:
        """
        Delete a specific cache entry
        """
        key = self._make_key(data_type, *args, **kwargs)
        with self._cache_lock:
            if key in self.cache:
                del self.cache[key]
                logger.debug(f"Deleted cache entry: {key}")
                return True
            return False

    def get_entry_age(self, data_type: str, *args, **kwargs) -> Optional[float]:
        """
        Get the age of a cache entry in seconds, None if missing
        """
        key = self._make_key(data_type, *args, **kwargs)
        with self._cache_lock:
            entry = self.cache.get(key)
            if entry is None:
                return None
            return time.time() - entry.timestamp

    def clear(self, data_type: Optional[str] = None):
        """
        Clear the cache

        Args:
            data_type: If provided, only clear entries of this type. If None, clear all.
        """
        with self._cache_lock:
            if data_type is None:
                count = len(self.cache)
                self.cache.clear()
                logger.info(f"Cleared all cache entries ({count} items)")
            else:
                keys_to_delete = [k for k in self.cache.keys() if k.startswith(f"{data_type}:")]
                for key in keys_to_delete:
                    del self.cache[key]
                logger.info(f"Cleared {len(keys_to_delete)} cache entries for type: {data_type}")

    def get_stats(self) -> dict:
        """
        Get statistics about the cache
        """
        with self._cache_lock:
            counts = {}
            for key in self.cache.keys():
                data_type = key.split(':')[0]
                counts[data_type] = counts.get(data_type, 0) + 1
            return {
                'total_items': len(self.cache),
                'by_type': counts,
            }
