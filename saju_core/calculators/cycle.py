#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
干支循环运算模块

提供取模、天干地支五行阴阳查询、六十甲子索引换算等基础函数。
所有索引先经过取模归一化，越界索引不报错。
"""

from typing import Optional, Tuple

from saju_core.data.stems_branches import (
    STEM_COUNT, BRANCH_COUNT, STEM_ELEMENTS, BRANCH_ELEMENTS,
    Element, Polarity,
)

SEXAGENARY_COUNT = 60


def mod(n: int, m: int) -> int:
    """取模，结果始终落在 [0, m)"""
    return ((n % m) + m) % m


def normalize_stem(stem: int) -> int:
    return mod(stem, STEM_COUNT)


def normalize_branch(branch: int) -> int:
    return mod(branch, BRANCH_COUNT)


def stem_element(stem: int) -> Element:
    return STEM_ELEMENTS[normalize_stem(stem)]


def stem_polarity(stem: int) -> Polarity:
    return Polarity.YANG if normalize_stem(stem) % 2 == 0 else Polarity.YIN


def branch_element(branch: int) -> Element:
    return BRANCH_ELEMENTS[normalize_branch(branch)]


def branch_polarity(branch: int) -> Polarity:
    return Polarity.YANG if normalize_branch(branch) % 2 == 0 else Polarity.YIN


def ganzhi_index(stem: int, branch: int) -> Optional[int]:
    """
    干支组合 → 六十甲子索引

    天干与地支阴阳不一致时（如甲丑）不存在对应的甲子，返回 None。

    Args:
        stem: 天干索引
        branch: 地支索引

    Returns:
        0-59 的索引，或 None
    """
    s = normalize_stem(stem)
    b = normalize_branch(branch)
    if (s - b) % 2 != 0:
        return None
    k = mod((s - b) // 2, 6)
    return mod(s + STEM_COUNT * k, SEXAGENARY_COUNT)


def ganzhi_from_index(index: int) -> Tuple[int, int]:
    """六十甲子索引 → (天干, 地支)"""
    i = mod(index, SEXAGENARY_COUNT)
    return i % STEM_COUNT, i % BRANCH_COUNT


def year_ganzhi_approx(year: int) -> Tuple[int, int]:
    """
    公历年份的近似年柱（不考虑立春边界）

    公元 4 年为甲子年。
    """
    return ganzhi_from_index(year - 4)


def month_ganzhi(year_stem: int, saju_month_index: int) -> Tuple[int, int]:
    """
    月柱（五虎遁）

    Args:
        year_stem: 年干索引
        saju_month_index: 节气月序号，1 = 寅月 ... 12 = 丑月

    Returns:
        (天干, 地支)
    """
    first_month_stem = mod(year_stem, 5) * 2 + 2
    offset = mod(saju_month_index - 1, 12)
    return normalize_stem(first_month_stem + offset), normalize_branch(2 + offset)
