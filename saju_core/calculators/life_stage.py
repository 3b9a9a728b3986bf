#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
十二运星（십이운성）计算模块

阳干顺行、阴干逆行（可配置关闭）。土干长生位有火土同宫与水土同宫两种流派。
"""

from enum import Enum

from saju_core.calculators.cycle import mod, normalize_stem, normalize_branch, stem_polarity
from saju_core.data.stems_branches import Polarity


class LifeStage(str, Enum):
    JANG_SAENG = "JANG_SAENG"  # 长生
    MOK_YOK = "MOK_YOK"        # 沐浴
    GWAN_DAE = "GWAN_DAE"      # 冠带
    GEON_ROK = "GEON_ROK"      # 临官
    JE_WANG = "JE_WANG"        # 帝旺
    SWOE = "SWOE"              # 衰
    BYEONG = "BYEONG"          # 病
    SA = "SA"                  # 死
    MYO = "MYO"                # 墓
    JEOL = "JEOL"              # 绝
    TAE = "TAE"                # 胎
    YANG = "YANG"              # 养


LIFE_STAGE_ORDER = tuple(LifeStage)


class EarthLifeStageRule(str, Enum):
    FOLLOW_FIRE = "FOLLOW_FIRE"    # 火土同宫
    FOLLOW_WATER = "FOLLOW_WATER"  # 水土同宫


# 各天干长生所在地支
_JANG_SAENG_BRANCH = {
    EarthLifeStageRule.FOLLOW_FIRE: (11, 6, 2, 9, 2, 9, 5, 0, 8, 3),
    EarthLifeStageRule.FOLLOW_WATER: (11, 6, 2, 9, 8, 3, 5, 0, 8, 3),
}

# 旺相阶段
STRONG_STAGES = frozenset({LifeStage.JANG_SAENG, LifeStage.GWAN_DAE, LifeStage.GEON_ROK, LifeStage.JE_WANG})


def life_stage_of(stem: int, branch: int,
                  earth_rule: EarthLifeStageRule = EarthLifeStageRule.FOLLOW_FIRE,
                  yin_reversal: bool = True) -> LifeStage:
    """
    计算天干在地支上的十二运星

    Args:
        stem: 天干索引
        branch: 地支索引
        earth_rule: 土干长生流派
        yin_reversal: 阴干是否逆行

    Returns:
        LifeStage
    """
    s = normalize_stem(stem)
    target = normalize_branch(branch)
    start = _JANG_SAENG_BRANCH[earth_rule][s]
    if yin_reversal and stem_polarity(s) == Polarity.YIN:
        offset = mod(start - target, 12)
    else:
        offset = mod(target - start, 12)
    return LIFE_STAGE_ORDER[offset]
