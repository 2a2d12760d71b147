"""
MusicXML 文本字段的宽松解析。

约定：
- MusicXML 中的数值都以元素文本/属性出现；缺失或无法解析时返回调用方给定的默认值。
- 小数按“向零截断”转为 int（例如 alter="0.5" → 0，tempo="90.7" → 90）。
"""

from __future__ import annotations

import math


def strip(text: str | None) -> str:
    return (text or "").strip()


def parse_number(text: str | None) -> float | None:
    t = strip(text)
    if not t:
        return None
    try:
        value = float(t)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_int(text: str | None, *, default: int) -> int:
    value = parse_number(text)
    if value is None:
        return default
    return int(value)
