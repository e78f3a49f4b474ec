"""数值辅助函数 -- 除零兜底、均值、百分比、四舍五入"""

import math
from collections.abc import Iterable


def mean(values: Iterable[float]) -> float:
    """算术平均，空样本返回 0"""
    total = 0.0
    count = 0
    for value in values:
        total += value
        count += 1
    return total / count if count else 0.0


def percentage(part: int, whole: int, empty: float = 0.0) -> float:
    """part / whole * 100，whole 为 0 时返回 empty"""
    if whole <= 0:
        return empty
    return part / whole * 100


def round_half_up(value: float) -> int:
    """四舍五入（.5 向正无穷进位），与 JS Math.round 一致

    Python 内置 round() 为银行家舍入（80.5 -> 80），此处 80.5 -> 81。
    """
    return math.floor(value + 0.5)
