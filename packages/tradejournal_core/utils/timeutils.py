# packages/tradejournal_core/utils/timeutils.py
"""
时间工具
存储层只接受带时区的时间，统一使用 UTC
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """当前 UTC 时间（带时区）"""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """不带时区的时间按 UTC 解释；带时区的转换为 UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
