#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
调候用神目录（조후）

日干 × 月支 → (主调候天干, 辅调候天干)，数据见 data/johu_catalog.json。
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from saju_core.calculators.cycle import normalize_stem, normalize_branch, stem_element
from saju_core.data.catalog_loader import load_json_catalog, parse_stem_char, parse_branch_char
from saju_core.data.stems_branches import Element, STEM_HANJA
from saju_core.exceptions import CatalogLoadError

_SOURCE = 'johu_catalog.json'

# 巳午未（夏）与亥子丑（冬）调候最急
URGENT_MONTHS = frozenset({5, 6, 7, 11, 0, 1})


@dataclass(frozen=True)
class JohuEntry:
    primary_stem: int
    secondary_stem: Optional[int]

    @property
    def primary_element(self) -> Element:
        return stem_element(self.primary_stem)

    @property
    def secondary_element(self) -> Optional[Element]:
        if self.secondary_stem is None:
            return None
        return stem_element(self.secondary_stem)


def load_johu_table(raw: Dict) -> Dict[Tuple[int, int], JohuEntry]:
    """
    校验并构建调候表

    Raises:
        CatalogLoadError: 缺少 month_order / entries，或某日干数据不完整
    """
    try:
        month_order = raw['month_order']
        entries = raw['entries']
    except KeyError as e:
        raise CatalogLoadError(f"调候目录缺少字段: {e}", catalog=_SOURCE) from e
    months = [parse_branch_char(b, _SOURCE) for b in month_order]
    if sorted(months) != list(range(12)):
        raise CatalogLoadError("调候目录月份不完整", catalog=_SOURCE)

    table = {}
    for stem_char in STEM_HANJA:
        row = entries.get(stem_char)
        if row is None or len(row) != 12:
            raise CatalogLoadError(f"调候目录缺少日干 {stem_char} 的 12 个月数据", catalog=_SOURCE)
        stem = parse_stem_char(stem_char, _SOURCE)
        for branch, cell in zip(months, row):
            if not 1 <= len(cell) <= 2:
                raise CatalogLoadError(f"调候目录格式错误: {stem_char} {cell}", catalog=_SOURCE)
            primary = parse_stem_char(cell[0], _SOURCE)
            secondary = parse_stem_char(cell[1], _SOURCE) if len(cell) == 2 else None
            table[(stem, branch)] = JohuEntry(primary, secondary)
    return table


JOHU_TABLE = load_johu_table(load_json_catalog(_SOURCE))


def lookup_johu(day_master: int, month_branch: int) -> JohuEntry:
    return JOHU_TABLE[(normalize_stem(day_master), normalize_branch(month_branch))]
