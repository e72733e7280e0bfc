import json
import re
from typing import Any, Dict, Optional, Union

from .context import logger


_FALSY_STRINGS = {"", "0"}
# float() 也接受 "nan"/"inf"/"1_000"，这些不算数字字符串
_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def is_truthy(value: Optional[Any]) -> bool:
    """设置值的真值判断：None、False、0、""、"0"、空列表与空字典为假。"""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value not in _FALSY_STRINGS
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return bool(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_numeric(text: str) -> Optional[Union[int, float]]:
    """数字字符串（允许首尾空白）转为数值，否则返回 None。

    整数字面量用 int 精确解析，超过 2**53 的整数也不会丢精度。
    """
    stripped = text.strip()
    if not _NUMERIC_PATTERN.match(stripped):
        return None
    if _INTEGER_PATTERN.match(stripped):
        return int(stripped)
    return float(stripped)


def _number_text(number: Any) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def _as_keyed(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return {str(key): item for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return {str(index): item for index, item in enumerate(value)}
    return None


def loose_equals(left: Any, right: Any) -> bool:
    """宽松比较，规则与 SETTINGS_COMPARE_MODE=loose 的说明一致。

    - 任一侧为 bool：比较真值
    - 任一侧为 None：与 None、""、0、空容器相等
    - 数字与数字：按数值比较
    - 数字与字符串：字符串是数字时按数值比较，否则按文本比较
    - 字符串与字符串：两边都是数字时按数值比较，否则精确比较
    - 字典/列表逐项宽松比较；列表与字典比较时按下标键 "0"、"1"… 对齐，
      与读取旧 "[]" 数据时的解码一致；容器与标量永不相等
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return is_truthy(left) == is_truthy(right)

    if left is None or right is None:
        other = right if left is None else left
        if other is None:
            return True
        if isinstance(other, str):
            return other == ""
        if _is_number(other):
            return other == 0
        if isinstance(other, (list, tuple, dict)):
            return len(other) == 0
        return False

    if isinstance(left, dict) or isinstance(right, dict):
        left, right = _as_keyed(left), _as_keyed(right)
        if left is None or right is None:
            return False
        if set(left) != set(right):
            return False
        return all(loose_equals(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))):
            return False
        if len(left) != len(right):
            return False
        return all(loose_equals(a, b) for a, b in zip(left, right))

    if _is_number(left) and _is_number(right):
        return left == right

    if _is_number(left) or _is_number(right):
        number, text = (left, right) if _is_number(left) else (right, left)
        if not isinstance(text, str):
            return False
        parsed = parse_numeric(text)
        if parsed is not None:
            return parsed == number
        return _number_text(number) == text

    if isinstance(left, str) and isinstance(right, str):
        left_number = parse_numeric(left)
        right_number = parse_numeric(right)
        if left_number is not None and right_number is not None:
            return left_number == right_number
        return left == right

    return left == right


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def strict_equals(left: Any, right: Any) -> bool:
    """按规范化 JSON 文本比较，"1" 与 1 不相等。"""
    return canonical_json(left) == canonical_json(right)


_COMPARATORS = {
    "loose": loose_equals,
    "strict": strict_equals,
}


def get_comparator(mode: str):
    try:
        return _COMPARATORS[mode]
    except KeyError:
        logger.error(f"未知的设置比较模式: {mode}")
        raise ValueError(f"unknown compare mode: {mode!r}") from None


__all__ = [
    "is_truthy",
    "parse_numeric",
    "loose_equals",
    "canonical_json",
    "strict_equals",
    "get_comparator",
]
