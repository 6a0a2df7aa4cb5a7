# packages/tradejournal_core/errors.py
"""
交易日志领域异常
"""


class JournalError(Exception):
    """所有交易日志异常的基类"""


class InvalidInputError(JournalError, ValueError):
    """输入校验失败（如止损为 0、余额非正）"""


class NotFoundError(JournalError, LookupError):
    """账户或交易不存在"""


class NoActiveAccountError(NotFoundError):
    """当前用户没有可用的活跃账户"""


class ExternalServiceError(JournalError, RuntimeError):
    """外部服务（LLM、新闻源）调用失败"""
