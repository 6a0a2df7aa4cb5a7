# packages/tradejournal_core/services/csv_interchange.py
"""
CSV 导入/导出

固定列格式，逗号分隔，第一行必须是表头。
已知限制：不支持引号和转义，字段内不能包含逗号或换行。

往返性质：只包含 EXPORT_COLUMNS 列、字段中没有逗号的记录，
parse_csv(generate_csv(records)) 按数值比较等于原记录。
数字用 str() 输出、不固定精度，因此 "100" 和 100、"1.50" 和 1.5
往返后按值相等，字符串形式可能不同。
"""
import os
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from tradejournal_core.data.models.trade import TRADE_POSITIONS, WITHDRAWAL_PAIR
from tradejournal_core.errors import InvalidInputError
from tradejournal_core.utils import as_utc, get_logger

logger = get_logger("csv_interchange")

DELIMITER = ","

# 开仓/平仓的 time 和 price 列按位置区分，列名去重
EXPORT_COLUMNS = (
    "time",
    "position",
    "symbol",
    "type",
    "volume",
    "price_open",
    "sl",
    "tp",
    "time_close",
    "price_close",
    "commission",
    "swap",
    "profit",
)

DEFAULT_IMPORT_STRATEGY = "Imported"

Number = Union[int, float]

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_value(value: str) -> Union[str, Number]:
    """
    完整解析为数字的字符串转为数字，其余保持原样

    整数文本返回 int，其它数字返回 float；
    位数超过解释器上限的整数文本保持原样；
    'nan'、'inf' 之类 float() 接受的特殊值仍视为字符串
    """
    text = value.strip()
    if _INT_RE.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # 超过解释器的整数位数上限
            return value
    if _FLOAT_RE.fullmatch(text):
        return float(text)
    return value


def parse_csv(text: str) -> List[Dict[str, Any]]:
    """
    解析 CSV 文本

    Args:
        text: 原始文本（表头 + 零或多行数据）

    Returns:
        按输入顺序的记录列表，每条为 {列名: 值}；
        字段少于表头时缺少的键不出现，多出的字段被丢弃；空行被忽略
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if not lines:
        return []

    headers = [h.strip() for h in lines[0].split(DELIMITER)]
    records = []

    for line in lines[1:]:
        values = line.split(DELIMITER)
        record = {}
        for header, value in zip(headers, values):
            record[header] = coerce_value(value)
        records.append(record)

    logger.debug(f"Parsed {len(records)} CSV rows with columns {headers}")
    return records


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def generate_csv(
    records: Iterable[Mapping[str, Any]],
    columns: Sequence[str] = EXPORT_COLUMNS,
    line_separator: str = os.linesep,
) -> str:
    """
    生成 CSV 文本

    Args:
        records: 记录列表（{列名: 值}）
        columns: 有序列名
        line_separator: 行分隔符（默认跟随当前平台）

    Returns:
        表头 + 每条记录一行；缺失或为 None 的值输出为空字符串
    """
    lines = [DELIMITER.join(columns)]
    for record in records:
        lines.append(DELIMITER.join(_format_value(record.get(column)) for column in columns))
    return line_separator.join(lines)


# =============================================================================
# 交易记录 <-> 导出格式
# =============================================================================

def _get(trade: Any, *names: str) -> Any:
    for name in names:
        if isinstance(trade, Mapping):
            if name in trade:
                return trade[name]
        elif hasattr(trade, name):
            return getattr(trade, name)
    return None


def trade_to_row(trade: Any) -> Dict[str, Any]:
    """把一笔日志交易映射到导出列"""
    return {
        "time": _get(trade, "created_at", "createdAt"),
        "position": _get(trade, "id"),
        "symbol": _get(trade, "pair"),
        "type": _get(trade, "position"),
        "volume": _get(trade, "lot_size", "lotSize"),
        "profit": _get(trade, "pl"),
    }


def trades_to_rows(trades: Iterable[Any]) -> List[Dict[str, Any]]:
    """导出用的行（提现记录不导出）"""
    return [trade_to_row(t) for t in trades if _get(t, "pair") != WITHDRAWAL_PAIR]


def _number(row: Mapping[str, Any], name: str, row_number: int, default: Optional[Number] = None):
    value = row.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, (int, float)):
        return value
    raise InvalidInputError(f"Row {row_number}: column '{name}' is not a number: {value!r}")


def _parse_time(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    for fmt in ("%Y.%m.%d %H:%M:%S", "%Y.%m.%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
        try:
            return as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def row_to_trade_fields(
    row: Mapping[str, Any],
    row_number: int = 1,
    default_strategy: str = DEFAULT_IMPORT_STRATEGY,
) -> Dict[str, Any]:
    """
    把一行解析结果映射为交易创建参数

    支持导出格式（symbol/type/volume/profit/commission/swap）
    和日志自身的列（pair/position/lotSize/pl/strategy/notes）。
    净盈亏 = profit + commission + swap

    Raises:
        InvalidInputError: 缺少品种、方向无效或数字列不是数字
    """
    pair = row.get("pair", row.get("symbol"))
    if pair is None or not str(pair).strip():
        raise InvalidInputError(f"Row {row_number}: missing symbol")

    # 导出格式里 position 列是持仓编号，方向在 type 列
    raw_position = row.get("position") if "pair" in row else row.get("type")
    position = str(raw_position or "").strip().lower()
    if position not in TRADE_POSITIONS:
        raise InvalidInputError(f"Row {row_number}: unknown trade type {position!r}")

    if "pl" in row:
        pl = _number(row, "pl", row_number, default=0)
    else:
        pl = (
            _number(row, "profit", row_number, default=0)
            + _number(row, "commission", row_number, default=0)
            + _number(row, "swap", row_number, default=0)
        )

    lot_size = _number(row, "lotSize" if "lotSize" in row else "volume", row_number, default=0)
    strategy = row.get("strategy")
    notes = row.get("notes")

    return {
        "pair": str(pair).strip(),
        "lot_size": float(lot_size),
        "strategy": str(strategy).strip() if strategy not in (None, "") else default_strategy,
        "position": position,
        "pl": float(pl),
        "notes": str(notes) if notes not in (None, "") else None,
        "created_at": _parse_time(row.get("time")),
    }


def rows_to_trade_fields(
    rows: Sequence[Mapping[str, Any]],
    default_strategy: str = DEFAULT_IMPORT_STRATEGY,
) -> List[Dict[str, Any]]:
    """批量映射；行号从 1 开始（不含表头）"""
    return [
        row_to_trade_fields(row, row_number=i, default_strategy=default_strategy)
        for i, row in enumerate(rows, start=1)
    ]
