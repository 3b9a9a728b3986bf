#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
日主旺衰分析器（신강/신약）

得令 + 得地 + 得势 = 总扶助分，与阈值比较后按固定区间定级。
身强/身弱由等级查表得出，等级为唯一依据。
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from saju_core.calculators.cycle import stem_element
from saju_core.calculators.element_relations import get_element_relation, ElementRelation
from saju_core.calculators.hapwha import HapHwaEvaluation, HapState, stem_hap_states
from saju_core.calculators.ten_gods import TenGod, BIGYEOP, INSEONG, ten_god_of, is_supporting_ten_god
from saju_core.config.calculation_config import CalculationConfig, HiddenStemScope, DEFAULT_CONFIG
from saju_core.data.hidden_stems import HiddenStemRole, hidden_stems_of
from saju_core.data.stems_branches import STEM_HANJA, BRANCH_HANJA
from saju_core.models import PillarPosition, PillarSet

logger = logging.getLogger(__name__)


class StrengthLevel(str, Enum):
    VERY_STRONG = "VERY_STRONG"          # 极旺
    STRONG = "STRONG"                    # 身旺
    SLIGHTLY_STRONG = "SLIGHTLY_STRONG"  # 偏旺
    SLIGHTLY_WEAK = "SLIGHTLY_WEAK"      # 偏弱
    WEAK = "WEAK"                        # 身弱
    VERY_WEAK = "VERY_WEAK"              # 极弱


# 从弱到强的顺序
STRENGTH_SCALE = (
    StrengthLevel.VERY_WEAK, StrengthLevel.WEAK, StrengthLevel.SLIGHTLY_WEAK,
    StrengthLevel.SLIGHTLY_STRONG, StrengthLevel.STRONG, StrengthLevel.VERY_STRONG,
)

STRENGTH_LEVEL_NAMES = {
    StrengthLevel.VERY_STRONG: '极旺',
    StrengthLevel.STRONG: '身旺',
    StrengthLevel.SLIGHTLY_STRONG: '偏旺',
    StrengthLevel.SLIGHTLY_WEAK: '偏弱',
    StrengthLevel.WEAK: '身弱',
    StrengthLevel.VERY_WEAK: '极弱',
}

IS_STRONG_SIDE = {
    StrengthLevel.VERY_STRONG: True,
    StrengthLevel.STRONG: True,
    StrengthLevel.SLIGHTLY_STRONG: True,
    StrengthLevel.SLIGHTLY_WEAK: False,
    StrengthLevel.WEAK: False,
    StrengthLevel.VERY_WEAK: False,
}

# (下限比例, 等级)，比例 = (总扶助分 - 阈值) / 满分
LEVEL_BRACKETS = (
    (0.30, StrengthLevel.VERY_STRONG),
    (0.10, StrengthLevel.STRONG),
    (0.0, StrengthLevel.SLIGHTLY_STRONG),
    (-0.10, StrengthLevel.SLIGHTLY_WEAK),
    (-0.30, StrengthLevel.WEAK),
)


@dataclass(frozen=True)
class StrengthScore:
    deukryeong: float
    deukji: float
    deukse: float
    total_support: float
    total_oppose: float


@dataclass(frozen=True)
class StrengthResult:
    day_master: int
    level: StrengthLevel
    score: StrengthScore
    is_strong: bool
    degree: float
    details: List[str] = field(default_factory=list, compare=False)

    def to_dict(self) -> Dict:
        return {
            'day_master': self.day_master,
            'level': self.level.value,
            'level_name': STRENGTH_LEVEL_NAMES[self.level],
            'is_strong': self.is_strong,
            'degree': round(self.degree, 4),
            'score': {
                'deukryeong': round(self.score.deukryeong, 6),
                'deukji': round(self.score.deukji, 6),
                'deukse': round(self.score.deukse, 6),
                'total_support': round(self.score.total_support, 6),
                'total_oppose': round(self.score.total_oppose, 6),
            },
            'details': list(self.details),
        }


def max_support(config: CalculationConfig) -> float:
    """定级用满分：得令 + 得地三支 + 得势三干"""
    return (config.deukryeong_weight
            + config.deukji_per_branch * 3
            + max(config.deukse_bigyeop, config.deukse_inseong) * 3)


def oppose_basis(config: CalculationConfig) -> float:
    """抑制分基数：得令 + 得地四支 + 比劫三干"""
    return (config.deukryeong_weight
            + config.deukji_per_branch * 4
            + config.deukse_bigyeop * 3)


def classify_level(total_support: float, threshold: float, max_total: float) -> StrengthLevel:
    """
    按固定区间定级

    总扶助分越高等级越高（单调不减）。满分为 0 时按比例 0 处理。
    """
    ratio = (total_support - threshold) / max_total if max_total > 0 else 0.0
    for lower, level in LEVEL_BRACKETS:
        if ratio >= lower:
            return level
    return StrengthLevel.VERY_WEAK


def is_strong_side(level: StrengthLevel) -> bool:
    return IS_STRONG_SIDE[level]


def determine_ten_god(day_master: int, stem: int) -> TenGod:
    return ten_god_of(day_master, stem)


def _supports(day_master: int, stem: int) -> bool:
    return is_supporting_ten_god(ten_god_of(day_master, stem))


def _fmt(value: float) -> str:
    return f"{value:.2f}"


class StrengthAnalyzer:
    """日主旺衰分析器"""

    def __init__(self, config: Optional[CalculationConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def analyze(self, pillars: PillarSet,
                days_since_jeol: Optional[int] = None,
                hap_hwa_evaluations: Sequence[HapHwaEvaluation] = ()) -> StrengthResult:
        """
        分析日主旺衰

        Args:
            pillars: 四柱
            days_since_jeol: 距上一个节的天数（司令模式使用）
            hap_hwa_evaluations: 天干合化评估结果

        Returns:
            StrengthResult
        """
        config = self.config
        day_master = pillars.day_master
        details: List[str] = []
        logger.debug(f"🔍 开始分析旺衰 - 日主: {STEM_HANJA[day_master]}, 月支: {BRANCH_HANJA[pillars.month.branch]}")

        deukryeong = self._calculate_deukryeong(pillars, days_since_jeol, details)
        deukji = self._calculate_deukji(pillars, details)
        deukse = self._calculate_deukse(pillars, hap_hwa_evaluations, details)

        total_support = deukryeong + deukji + deukse
        max_total = max_support(config)
        total_oppose = max(oppose_basis(config) - total_support, 0.0)
        level = classify_level(total_support, config.strength_threshold, max_total)
        is_strong = is_strong_side(level)
        degree = min(100.0, total_support / max_total * 100) if max_total > 0 else 0.0

        details.append('---')
        details.append(f"总扶助分: {_fmt(total_support)} = 得令 {_fmt(deukryeong)} + "
                       f"得地 {_fmt(deukji)} + 得势 {_fmt(deukse)}")
        details.append(f"判定: {STRENGTH_LEVEL_NAMES[level]}（{'身强' if is_strong else '身弱'}）")
        logger.debug(f"✅ 旺衰判定: {level.value}, 总扶助分 {_fmt(total_support)}")

        return StrengthResult(
            day_master=day_master,
            level=level,
            score=StrengthScore(deukryeong, deukji, deukse, total_support, total_oppose),
            is_strong=is_strong,
            degree=degree,
            details=details,
        )

    def _calculate_deukryeong(self, pillars: PillarSet, days_since_jeol: Optional[int],
                              details: List[str]) -> float:
        """
        得令分：月支藏干中帮扶日主的权重占比 × 得令满分

        司令模式下按节气后天数确定司令藏干，帮扶则满分，否则为 0。
        """
        config = self.config
        day_master = pillars.day_master
        month_branch = pillars.month.branch
        hidden = hidden_stems_of(month_branch, config.hidden_stem_scheme, config.hidden_stem_weights)

        if config.proportional_deukryeong and days_since_jeol is not None:
            governing = self._governing_stem(hidden, days_since_jeol)
            score = config.deukryeong_weight if _supports(day_master, governing) else 0.0
            details.append(f"得令（司令 {STEM_HANJA[governing]}，节后 {days_since_jeol} 天）: {_fmt(score)}")
            return score

        ratio = sum(h.weight for h in hidden if _supports(day_master, h.stem))
        score = min(ratio * config.deukryeong_weight, config.deukryeong_weight)
        details.append(f"得令（月支 {BRANCH_HANJA[month_branch]}，帮扶比例 {_fmt(ratio)}）: {_fmt(score)}")
        return score

    def _governing_stem(self, hidden, days_since_jeol: int) -> int:
        """按余气、中气、本气顺序分配司令天数"""
        by_role = {h.role: h.stem for h in hidden}
        elapsed = max(days_since_jeol, 0)
        if HiddenStemRole.RESIDUAL in by_role:
            if elapsed < self.config.saryeong_residual_days:
                return by_role[HiddenStemRole.RESIDUAL]
            elapsed -= self.config.saryeong_residual_days
        if HiddenStemRole.MIDDLE in by_role:
            if elapsed < self.config.saryeong_middle_days:
                return by_role[HiddenStemRole.MIDDLE]
        return by_role[HiddenStemRole.MAIN]

    def _calculate_deukji(self, pillars: PillarSet, details: List[str]) -> float:
        """得地分：年、日、时三支的帮扶比例 × 每支满分"""
        config = self.config
        day_master = pillars.day_master
        total = 0.0
        for position, pillar in pillars.iter_positions():
            if position == PillarPosition.MONTH:
                continue
            hidden = hidden_stems_of(pillar.branch, config.hidden_stem_scheme, config.hidden_stem_weights)
            if config.hidden_stem_scope_for_strength == HiddenStemScope.PRINCIPAL_ONLY:
                ratio = 1.0 if _supports(day_master, hidden[0].stem) else 0.0
            else:
                ratio = sum(h.weight for h in hidden if _supports(day_master, h.stem))
            score = min(ratio, 1.0) * config.deukji_per_branch
            total += score
            details.append(f"得地（{position.value} {BRANCH_HANJA[pillar.branch]}）: {_fmt(score)}")
        return total

    def _calculate_deukse(self, pillars: PillarSet, hap_hwa_evaluations: Sequence[HapHwaEvaluation],
                          details: List[str]) -> float:
        """
        得势分：年、月、时三干中比劫、印星计分

        合化之干按化神五行计，合绊之干不计。
        """
        config = self.config
        day_master = pillars.day_master
        hap_states = stem_hap_states(list(hap_hwa_evaluations))
        total = 0.0
        for position, pillar in pillars.iter_positions():
            if position == PillarPosition.DAY:
                continue
            state = hap_states.get(position)
            if state is not None and state[0] == HapState.HAPGEO:
                details.append(f"得势（{position.value} {STEM_HANJA[pillar.stem]}）: 合绊不计")
                continue
            if state is not None and state[0] == HapState.HAPWHA:
                relation = get_element_relation(stem_element(day_master), state[1])
                if relation == ElementRelation.SAME:
                    score = config.deukse_bigyeop
                elif relation == ElementRelation.GENERATING_ME:
                    score = config.deukse_inseong
                else:
                    score = 0.0
                details.append(f"得势（{position.value} {STEM_HANJA[pillar.stem]} 合化{state[1].value}）: {_fmt(score)}")
                total += score
                continue

            ten_god = ten_god_of(day_master, pillar.stem)
            if ten_god in BIGYEOP:
                score = config.deukse_bigyeop
            elif ten_god in INSEONG:
                score = config.deukse_inseong
            else:
                score = 0.0
            total += score
            details.append(f"得势（{position.value} {STEM_HANJA[pillar.stem]} {ten_god.value}）: {_fmt(score)}")
        return total
