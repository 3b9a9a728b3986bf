#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
格局分类器（격국）

判定顺序：化气格 → 一行得气格 → 从格 → 正格（八格、建禄、羊刃、月劫）。
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

from saju_core.calculators.cycle import stem_element
from saju_core.calculators.element_relations import generates, controls, controlled_by, generated_by
from saju_core.calculators.hapwha import HapHwaEvaluation, HapState
from saju_core.calculators.scoring import ChartScore
from saju_core.calculators.ten_gods import TenGod, BIGYEOP, ten_god_of
from saju_core.analyzers.strength_analyzer import StrengthLevel, StrengthResult
from saju_core.data.hidden_stems import hidden_stems_of
from saju_core.data.stems_branches import Element, STEM_HANJA, BRANCH_HANJA
from saju_core.models import PillarPosition, PillarSet

logger = logging.getLogger(__name__)


class GyeokgukCategory(str, Enum):
    JEONGGYEOK = "JEONGGYEOK"    # 正格
    JONGGYEOK = "JONGGYEOK"      # 从格
    HWAGYEOK = "HWAGYEOK"        # 化气格
    ILHAENG = "ILHAENG"          # 一行得气格


class GyeokgukType(str, Enum):
    JEONGGWAN_GYEOK = "JEONGGWAN_GYEOK"
    PYEONGWAN_GYEOK = "PYEONGWAN_GYEOK"
    JEONGIN_GYEOK = "JEONGIN_GYEOK"
    PYEONIN_GYEOK = "PYEONIN_GYEOK"
    SIKSIN_GYEOK = "SIKSIN_GYEOK"
    SANGGWAN_GYEOK = "SANGGWAN_GYEOK"
    JEONGJAE_GYEOK = "JEONGJAE_GYEOK"
    PYEONJAE_GYEOK = "PYEONJAE_GYEOK"
    GEONROK_GYEOK = "GEONROK_GYEOK"
    YANGIN_GYEOK = "YANGIN_GYEOK"
    WOLGEOP_GYEOK = "WOLGEOP_GYEOK"
    JONGA_GYEOK = "JONGA_GYEOK"        # 从儿
    JONGJAE_GYEOK = "JONGJAE_GYEOK"    # 从财
    JONGSAL_GYEOK = "JONGSAL_GYEOK"    # 从杀
    GOKJIK_GYEOK = "GOKJIK_GYEOK"      # 曲直
    YEOMSANG_GYEOK = "YEOMSANG_GYEOK"  # 炎上
    GASAEK_GYEOK = "GASAEK_GYEOK"      # 稼穑
    JONGHYEOK_GYEOK = "JONGHYEOK_GYEOK"  # 从革
    YUNHA_GYEOK = "YUNHA_GYEOK"        # 润下
    HWATO_GYEOK = "HWATO_GYEOK"        # 化土
    HWAGEUM_GYEOK = "HWAGEUM_GYEOK"    # 化金
    HWASU_GYEOK = "HWASU_GYEOK"        # 化水
    HWAMOK_GYEOK = "HWAMOK_GYEOK"      # 化木
    HWAHWA_GYEOK = "HWAHWA_GYEOK"      # 化火


TEN_GOD_TO_GYEOK = {
    TenGod.JEONG_GWAN: GyeokgukType.JEONGGWAN_GYEOK,
    TenGod.PYEON_GWAN: GyeokgukType.PYEONGWAN_GYEOK,
    TenGod.JEONG_IN: GyeokgukType.JEONGIN_GYEOK,
    TenGod.PYEON_IN: GyeokgukType.PYEONIN_GYEOK,
    TenGod.SIK_SHIN: GyeokgukType.SIKSIN_GYEOK,
    TenGod.SANG_GWAN: GyeokgukType.SANGGWAN_GYEOK,
    TenGod.JEONG_JAE: GyeokgukType.JEONGJAE_GYEOK,
    TenGod.PYEON_JAE: GyeokgukType.PYEONJAE_GYEOK,
}

ILHAENG_BY_ELEMENT = {
    Element.WOOD: GyeokgukType.GOKJIK_GYEOK,
    Element.FIRE: GyeokgukType.YEOMSANG_GYEOK,
    Element.EARTH: GyeokgukType.GASAEK_GYEOK,
    Element.METAL: GyeokgukType.JONGHYEOK_GYEOK,
    Element.WATER: GyeokgukType.YUNHA_GYEOK,
}

HWAGI_BY_ELEMENT = {
    Element.EARTH: GyeokgukType.HWATO_GYEOK,
    Element.METAL: GyeokgukType.HWAGEUM_GYEOK,
    Element.WATER: GyeokgukType.HWASU_GYEOK,
    Element.WOOD: GyeokgukType.HWAMOK_GYEOK,
    Element.FIRE: GyeokgukType.HWAHWA_GYEOK,
}

# 各日干建禄、羊刃所在月支（阴干无羊刃）
GEONROK_BRANCH = (2, 3, 5, 6, 5, 6, 8, 9, 11, 0)
YANGIN_BRANCH = (3, None, 6, None, 6, None, 9, None, 0, None)

ILHAENG_MIN_RATIO = 0.6
JONG_MAX_SUPPORT_RATIO = 0.15


@dataclass(frozen=True)
class GyeokgukResult:
    type: GyeokgukType
    category: GyeokgukCategory
    confidence: float
    reasoning: str

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'category': self.category.value,
            'confidence': round(self.confidence, 4),
            'reasoning': self.reasoning,
        }


def determine_jeong_gyeok(pillars: PillarSet) -> GyeokgukResult:
    """
    以月支定正格

    建禄、羊刃、月劫优先；其次取月支藏干中透出于年、月、时干者（本气、中气、余气顺序，
    比劫除外）；都不透时取本气十神，本气为比劫时取中气、余气。
    """
    day_master = pillars.day_master
    month_branch = pillars.month.branch
    label = f"日主{STEM_HANJA[day_master]}生于{BRANCH_HANJA[month_branch]}月"

    if GEONROK_BRANCH[day_master] == month_branch:
        return GyeokgukResult(GyeokgukType.GEONROK_GYEOK, GyeokgukCategory.JEONGGYEOK, 0.8, f"{label}，月支为禄")
    if YANGIN_BRANCH[day_master] == month_branch:
        return GyeokgukResult(GyeokgukType.YANGIN_GYEOK, GyeokgukCategory.JEONGGYEOK, 0.8, f"{label}，月支为刃")

    hidden = hidden_stems_of(month_branch)
    main_ten_god = ten_god_of(day_master, hidden[0].stem)
    if main_ten_god == TenGod.GEOB_JAE:
        return GyeokgukResult(GyeokgukType.WOLGEOP_GYEOK, GyeokgukCategory.JEONGGYEOK, 0.75, f"{label}，本气为劫财")

    visible = {
        pillars.pillar_at(p).stem for p in (PillarPosition.YEAR, PillarPosition.MONTH, PillarPosition.HOUR)
    }
    for index, h in enumerate(hidden):
        ten_god = ten_god_of(day_master, h.stem)
        if h.stem in visible and ten_god not in BIGYEOP:
            confidence = 0.85 if index == 0 else 0.75
            return GyeokgukResult(TEN_GOD_TO_GYEOK[ten_god], GyeokgukCategory.JEONGGYEOK, confidence,
                                  f"{label}，{STEM_HANJA[h.stem]}透干取格")

    for h in hidden:
        ten_god = ten_god_of(day_master, h.stem)
        if ten_god not in BIGYEOP:
            return GyeokgukResult(TEN_GOD_TO_GYEOK[ten_god], GyeokgukCategory.JEONGGYEOK, 0.6,
                                  f"{label}，无透干，取{STEM_HANJA[h.stem]}")
    return GyeokgukResult(GyeokgukType.GEONROK_GYEOK, GyeokgukCategory.JEONGGYEOK, 0.5, f"{label}，藏干皆比劫")


class GyeokgukClassifier:
    """格局分类器"""

    @staticmethod
    def classify(pillars: PillarSet,
                 strength: StrengthResult,
                 score: ChartScore,
                 hap_hwa_evaluations: Sequence[HapHwaEvaluation] = ()) -> GyeokgukResult:
        """
        判定格局

        Args:
            pillars: 四柱
            strength: 旺衰结果
            score: 五行十神分数
            hap_hwa_evaluations: 合化评估

        Returns:
            GyeokgukResult
        """
        day_element = stem_element(pillars.day_master)

        hwagi = GyeokgukClassifier._check_hwagi(hap_hwa_evaluations)
        if hwagi is not None:
            logger.debug(f"✅ 化气格: {hwagi.type.value}")
            return hwagi

        ratio = score.element_ratio(day_element)
        if strength.level == StrengthLevel.VERY_STRONG and ratio >= ILHAENG_MIN_RATIO:
            return GyeokgukResult(
                ILHAENG_BY_ELEMENT[day_element], GyeokgukCategory.ILHAENG,
                min(0.6 + (ratio - ILHAENG_MIN_RATIO), 0.9),
                f"日主五行占比 {ratio:.2f}，一行得气",
            )

        jong = GyeokgukClassifier._check_jong(strength, score, day_element)
        if jong is not None:
            return jong

        return determine_jeong_gyeok(pillars)

    @staticmethod
    def _check_hwagi(hap_hwa_evaluations: Sequence[HapHwaEvaluation]) -> Optional[GyeokgukResult]:
        for evaluation in hap_hwa_evaluations:
            if evaluation.involves_day_master and evaluation.state == HapState.HAPWHA:
                return GyeokgukResult(
                    HWAGI_BY_ELEMENT[evaluation.result_element], GyeokgukCategory.HWAGYEOK, 0.75,
                    f"日主合化为{evaluation.result_element.value}",
                )
        return None

    @staticmethod
    def _check_jong(strength: StrengthResult, score: ChartScore, day_element: Element) -> Optional[GyeokgukResult]:
        if strength.level != StrengthLevel.VERY_WEAK:
            return None
        total = score.element_total
        if total <= 0:
            return None
        support = score.elements[day_element] + score.elements[generated_by(day_element)]
        support_ratio = support / total
        if support_ratio > JONG_MAX_SUPPORT_RATIO:
            return None

        groups = (
            (GyeokgukType.JONGA_GYEOK, generates(day_element)),
            (GyeokgukType.JONGJAE_GYEOK, controls(day_element)),
            (GyeokgukType.JONGSAL_GYEOK, controlled_by(day_element)),
        )
        gyeok, element = max(groups, key=lambda g: score.elements[g[1]])
        return GyeokgukResult(gyeok, GyeokgukCategory.JONGGYEOK, 0.65,
                              f"日主无根（帮扶占比 {support_ratio:.2f}），从{element.value}")
