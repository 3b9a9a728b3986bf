#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
地支藏干表（지장간）

每个地支藏 1-3 个天干，角色为本气 MAIN / 中气 MIDDLE / 余气 RESIDUAL。
权重方案：
- STANDARD：按藏干个数取 [1.0] / [0.7, 0.3] / [0.6, 0.3, 0.1]，可覆盖，按地支归一化
- EQUAL：每个藏干 1/n
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from saju_core.calculators.cycle import normalize_branch


class HiddenStemRole(str, Enum):
    MAIN = "MAIN"            # 本气
    MIDDLE = "MIDDLE"        # 中气
    RESIDUAL = "RESIDUAL"    # 余气


class HiddenStemScheme(str, Enum):
    STANDARD = "STANDARD"
    EQUAL = "EQUAL"


@dataclass(frozen=True)
class HiddenStem:
    stem: int
    role: HiddenStemRole
    weight: float


_M, _MD, _R = HiddenStemRole.MAIN, HiddenStemRole.MIDDLE, HiddenStemRole.RESIDUAL

# 地支 → [(天干索引, 角色)]，按本气、中气、余气顺序
HIDDEN_STEM_CATALOG: Tuple[Tuple[Tuple[int, HiddenStemRole], ...], ...] = (
    ((9, _M),),                      # 子：癸
    ((5, _M), (9, _MD), (7, _R)),    # 丑：己癸辛
    ((0, _M), (2, _MD), (4, _R)),    # 寅：甲丙戊
    ((1, _M),),                      # 卯：乙
    ((4, _M), (1, _MD), (9, _R)),    # 辰：戊乙癸
    ((2, _M), (6, _MD), (4, _R)),    # 巳：丙庚戊
    ((3, _M), (5, _R)),              # 午：丁己
    ((5, _M), (3, _MD), (1, _R)),    # 未：己丁乙
    ((6, _M), (8, _MD), (4, _R)),    # 申：庚壬戊
    ((7, _M),),                      # 酉：辛
    ((4, _M), (7, _MD), (3, _R)),    # 戌：戊辛丁
    ((8, _M), (0, _R)),              # 亥：壬甲
)

# 藏干个数 → 标准权重
STANDARD_ROLE_WEIGHTS: Dict[int, Tuple[float, ...]] = {
    1: (1.0,),
    2: (0.7, 0.3),
    3: (0.6, 0.3, 0.1),
}


def _normalize(weights: Sequence[float]) -> List[float]:
    total = sum(weights)
    if total <= 0:
        return [0.0 for _ in weights]
    return [w / total for w in weights]


def hidden_stems_of(branch: int,
                    scheme: HiddenStemScheme = HiddenStemScheme.STANDARD,
                    role_weights: Optional[Mapping[int, Sequence[float]]] = None) -> List[HiddenStem]:
    """
    获取地支藏干及其权重

    Args:
        branch: 地支索引（越界取模）
        scheme: 权重方案
        role_weights: 覆盖标准权重，键为藏干个数

    Returns:
        List[HiddenStem]: 本气在前
    """
    entries = HIDDEN_STEM_CATALOG[normalize_branch(branch)]
    n = len(entries)
    if scheme == HiddenStemScheme.EQUAL:
        weights = [1.0 / n] * n
    else:
        table = dict(STANDARD_ROLE_WEIGHTS)
        if role_weights:
            table.update({int(k): tuple(v) for k, v in role_weights.items()})
        raw = list(table[n])
        if len(raw) != n:
            raise ValueError(f"藏干权重个数不匹配: 需要 {n} 个, 实际 {len(raw)} 个")
        weights = _normalize(raw)
    return [HiddenStem(stem, role, weight) for (stem, role), weight in zip(entries, weights)]


def principal_stem(branch: int) -> int:
    """本气"""
    return HIDDEN_STEM_CATALOG[normalize_branch(branch)][0][0]
