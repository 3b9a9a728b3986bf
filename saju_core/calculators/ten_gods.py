#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
十神（십성）计算模块

以日主为参照，由五行生克与阴阳异同确定十神。
"""

from enum import Enum
from typing import Dict, List

from saju_core.calculators.cycle import stem_element, stem_polarity
from saju_core.calculators.element_relations import ElementRelation, get_element_relation
from saju_core.data.hidden_stems import hidden_stems_of


class TenGod(str, Enum):
    BI_GYEON = "BI_GYEON"        # 比肩
    GEOB_JAE = "GEOB_JAE"        # 劫财
    SIK_SHIN = "SIK_SHIN"        # 食神
    SANG_GWAN = "SANG_GWAN"      # 伤官
    PYEON_JAE = "PYEON_JAE"      # 偏财
    JEONG_JAE = "JEONG_JAE"      # 正财
    PYEON_GWAN = "PYEON_GWAN"    # 七杀
    JEONG_GWAN = "JEONG_GWAN"    # 正官
    PYEON_IN = "PYEON_IN"        # 偏印
    JEONG_IN = "JEONG_IN"        # 正印


TEN_GOD_ORDER = tuple(TenGod)

TEN_GOD_NAMES = {
    TenGod.BI_GYEON: '比肩',
    TenGod.GEOB_JAE: '劫财',
    TenGod.SIK_SHIN: '食神',
    TenGod.SANG_GWAN: '伤官',
    TenGod.PYEON_JAE: '偏财',
    TenGod.JEONG_JAE: '正财',
    TenGod.PYEON_GWAN: '七杀',
    TenGod.JEONG_GWAN: '正官',
    TenGod.PYEON_IN: '偏印',
    TenGod.JEONG_IN: '正印',
}

# 关系 → (同阴阳, 异阴阳)
_RELATION_TO_TEN_GOD = {
    ElementRelation.SAME: (TenGod.BI_GYEON, TenGod.GEOB_JAE),
    ElementRelation.ME_GENERATING: (TenGod.SIK_SHIN, TenGod.SANG_GWAN),
    ElementRelation.ME_CONTROLLING: (TenGod.PYEON_JAE, TenGod.JEONG_JAE),
    ElementRelation.CONTROLLING_ME: (TenGod.PYEON_GWAN, TenGod.JEONG_GWAN),
    ElementRelation.GENERATING_ME: (TenGod.PYEON_IN, TenGod.JEONG_IN),
}

# 比劫、印星为帮身
BIGYEOP = frozenset({TenGod.BI_GYEON, TenGod.GEOB_JAE})
INSEONG = frozenset({TenGod.PYEON_IN, TenGod.JEONG_IN})
SUPPORTING_TEN_GODS = BIGYEOP | INSEONG


def ten_god_of(day_master: int, target_stem: int) -> TenGod:
    """
    计算目标天干相对日主的十神

    Args:
        day_master: 日干索引
        target_stem: 目标天干索引

    Returns:
        TenGod
    """
    relation = get_element_relation(stem_element(day_master), stem_element(target_stem))
    same_polarity = stem_polarity(day_master) == stem_polarity(target_stem)
    same, different = _RELATION_TO_TEN_GOD[relation]
    return same if same_polarity else different


def branch_ten_gods(day_master: int, branch: int) -> List[TenGod]:
    """地支藏干的十神（本气在前）"""
    return [ten_god_of(day_master, hidden.stem) for hidden in hidden_stems_of(branch)]


def is_supporting_ten_god(ten_god: TenGod) -> bool:
    """比劫、印星视为帮扶日主"""
    return ten_god in SUPPORTING_TEN_GODS


def empty_ten_god_tally() -> Dict[TenGod, float]:
    return {ten_god: 0.0 for ten_god in TEN_GOD_ORDER}
