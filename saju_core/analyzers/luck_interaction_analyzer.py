#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
大运、流年与命局互动分析器（대운/세운）

分析运柱干支相对日主的十神、十二运星，与用神、忌神的五行关系，
以及与命局四柱的刑冲合害，给出吉凶判定。
流年同时考虑当前大运：流年与大运之间的关系并入流年关系后重新判定。
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from saju_core.calculators.branch_relations import (
    BranchRelation, CONFLICT_TYPES, HARMONIOUS_TYPES, branch_pair_relations,
)
from saju_core.calculators.cycle import (
    branch_element, stem_element, year_ganzhi_approx, month_ganzhi,
)
from saju_core.calculators.life_stage import EarthLifeStageRule, LifeStage, life_stage_of
from saju_core.calculators.stem_relations import StemRelation, StemRelationType, stem_pair_relations
from saju_core.calculators.ten_gods import TenGod, TEN_GOD_NAMES, ten_god_of
from saju_core.data.stems_branches import Element
from saju_core.models import Pillar, PillarSet

logger = logging.getLogger(__name__)

DAEUN_TARGET = 'DAEUN'


class LuckQuality(str, Enum):
    VERY_FAVORABLE = "VERY_FAVORABLE"
    FAVORABLE = "FAVORABLE"
    NEUTRAL = "NEUTRAL"
    UNFAVORABLE = "UNFAVORABLE"
    VERY_UNFAVORABLE = "VERY_UNFAVORABLE"


QUALITY_NAMES = {
    LuckQuality.VERY_FAVORABLE: '大吉',
    LuckQuality.FAVORABLE: '吉',
    LuckQuality.NEUTRAL: '平',
    LuckQuality.UNFAVORABLE: '凶',
    LuckQuality.VERY_UNFAVORABLE: '大凶',
}


@dataclass(frozen=True)
class DaeunPillar:
    order: int
    pillar: Pillar
    start_age: int = 0

    def to_dict(self) -> Dict:
        return {'order': self.order, 'start_age': self.start_age, 'pillar': self.pillar.to_dict()}


@dataclass(frozen=True)
class SaeunPillar:
    year: int
    pillar: Pillar

    def to_dict(self) -> Dict:
        return {'year': self.year, 'pillar': self.pillar.to_dict()}


@dataclass(frozen=True)
class WolunPillar:
    year: int
    saju_month_index: int
    pillar: Pillar

    def to_dict(self) -> Dict:
        return {'year': self.year, 'saju_month_index': self.saju_month_index, 'pillar': self.pillar.to_dict()}


@dataclass(frozen=True)
class LuckRelationHit:
    """运柱与命局某柱（或当前大运）之间的关系"""
    relation: Union[StemRelation, BranchRelation]
    target: str

    @property
    def is_good(self) -> bool:
        if isinstance(self.relation, StemRelation):
            return self.relation.type == StemRelationType.HAP
        return self.relation.type in HARMONIOUS_TYPES

    @property
    def is_bad(self) -> bool:
        if isinstance(self.relation, StemRelation):
            return self.relation.type == StemRelationType.CHUNG
        return self.relation.type in CONFLICT_TYPES

    def to_dict(self) -> Dict:
        data = self.relation.to_dict()
        data['target'] = self.target
        return data


@dataclass(frozen=True)
class LuckPillarAnalysis:
    pillar: Pillar
    ten_god: TenGod
    life_stage: LifeStage
    is_yongshin_element: bool
    is_gisin_element: bool
    stem_relations: Tuple[LuckRelationHit, ...]
    branch_relations: Tuple[LuckRelationHit, ...]
    quality: LuckQuality
    summary: str

    def to_dict(self) -> Dict:
        return {
            'pillar': self.pillar.to_dict(),
            'ten_god': self.ten_god.value,
            'life_stage': self.life_stage.value,
            'is_yongshin_element': self.is_yongshin_element,
            'is_gisin_element': self.is_gisin_element,
            'stem_relations': [r.to_dict() for r in self.stem_relations],
            'branch_relations': [r.to_dict() for r in self.branch_relations],
            'quality': self.quality.value,
            'summary': self.summary,
        }


@dataclass(frozen=True)
class DaeunAnalysis:
    daeun_pillar: DaeunPillar
    analysis: LuckPillarAnalysis
    is_transition_period: bool

    def to_dict(self) -> Dict:
        return {
            'daeun_pillar': self.daeun_pillar.to_dict(),
            'analysis': self.analysis.to_dict(),
            'is_transition_period': self.is_transition_period,
        }


def find_stem_relations(luck_stem: int, natal: PillarSet) -> Tuple[LuckRelationHit, ...]:
    return tuple(
        LuckRelationHit(relation, position.value)
        for position, pillar in natal.iter_positions()
        for relation in stem_pair_relations(luck_stem, pillar.stem)
    )


def find_branch_relations(luck_branch: int, natal: PillarSet) -> Tuple[LuckRelationHit, ...]:
    return tuple(
        LuckRelationHit(relation, position.value)
        for position, pillar in natal.iter_positions()
        for relation in branch_pair_relations(luck_branch, pillar.branch)
    )


def determine_luck_quality(luck_stem_element: Element, luck_branch_element: Element,
                           yongshin: Optional[Element], gisin: Optional[Element],
                           has_good_relations: bool, has_bad_relations: bool) -> LuckQuality:
    """
    运势吉凶判定

    天干为用神 +2、地支为用神 +1；天干为忌神 -2、地支为忌神 -1；
    有合 +1，有冲刑破害 -1。
    """
    score = 0
    if yongshin is not None:
        score += 2 if luck_stem_element == yongshin else 0
        score += 1 if luck_branch_element == yongshin else 0
    if gisin is not None:
        score -= 2 if luck_stem_element == gisin else 0
        score -= 1 if luck_branch_element == gisin else 0
    score += 1 if has_good_relations else 0
    score -= 1 if has_bad_relations else 0

    if score >= 3:
        return LuckQuality.VERY_FAVORABLE
    if score >= 1:
        return LuckQuality.FAVORABLE
    if score == 0:
        return LuckQuality.NEUTRAL
    if score >= -2:
        return LuckQuality.UNFAVORABLE
    return LuckQuality.VERY_UNFAVORABLE


def _summary(pillar: Pillar, ten_god: TenGod, is_yongshin: bool, is_gisin: bool, quality: LuckQuality) -> str:
    parts = [f"{pillar.label}运", TEN_GOD_NAMES[ten_god]]
    if is_yongshin:
        parts.append('逢用神')
    if is_gisin:
        parts.append('逢忌神')
    parts.append(QUALITY_NAMES[quality])
    return '，'.join(parts)


class LuckInteractionAnalyzer:
    """运势互动分析器"""

    def __init__(self, natal: PillarSet,
                 yongshin: Optional[Element] = None,
                 gisin: Optional[Element] = None,
                 earth_rule: EarthLifeStageRule = EarthLifeStageRule.FOLLOW_FIRE,
                 yin_reversal: bool = True):
        self.natal = natal
        self.yongshin = yongshin
        self.gisin = gisin
        self.earth_rule = earth_rule
        self.yin_reversal = yin_reversal

    def _quality(self, pillar: Pillar, stem_hits: Sequence[LuckRelationHit],
                 branch_hits: Sequence[LuckRelationHit]) -> LuckQuality:
        hits = list(stem_hits) + list(branch_hits)
        return determine_luck_quality(
            stem_element(pillar.stem), branch_element(pillar.branch),
            self.yongshin, self.gisin,
            any(h.is_good for h in hits), any(h.is_bad for h in hits),
        )

    def analyze_luck_pillar(self, pillar: Pillar) -> LuckPillarAnalysis:
        """
        分析单个运柱

        Args:
            pillar: 大运或流年干支

        Returns:
            LuckPillarAnalysis
        """
        day_master = self.natal.day_master
        ten_god = ten_god_of(day_master, pillar.stem)
        life_stage = life_stage_of(day_master, pillar.branch, self.earth_rule, self.yin_reversal)
        elements = {stem_element(pillar.stem), branch_element(pillar.branch)}
        is_yongshin = self.yongshin is not None and self.yongshin in elements
        is_gisin = self.gisin is not None and self.gisin in elements

        stem_hits = find_stem_relations(pillar.stem, self.natal)
        branch_hits = find_branch_relations(pillar.branch, self.natal)
        quality = self._quality(pillar, stem_hits, branch_hits)
        return LuckPillarAnalysis(
            pillar=pillar,
            ten_god=ten_god,
            life_stage=life_stage,
            is_yongshin_element=is_yongshin,
            is_gisin_element=is_gisin,
            stem_relations=stem_hits,
            branch_relations=branch_hits,
            quality=quality,
            summary=_summary(pillar, ten_god, is_yongshin, is_gisin, quality),
        )

    def merge_daeun_relations(self, analysis: LuckPillarAnalysis, daeun: Pillar) -> LuckPillarAnalysis:
        """把流年与当前大运之间的关系并入流年分析，并重新判定吉凶"""
        stem_hits = analysis.stem_relations + tuple(
            LuckRelationHit(r, DAEUN_TARGET) for r in stem_pair_relations(analysis.pillar.stem, daeun.stem)
        )
        branch_hits = analysis.branch_relations + tuple(
            LuckRelationHit(r, DAEUN_TARGET) for r in branch_pair_relations(analysis.pillar.branch, daeun.branch)
        )
        quality = self._quality(analysis.pillar, stem_hits, branch_hits)
        return replace(
            analysis,
            stem_relations=stem_hits,
            branch_relations=branch_hits,
            quality=quality,
            summary=_summary(analysis.pillar, analysis.ten_god, analysis.is_yongshin_element,
                             analysis.is_gisin_element, quality),
        )

    def analyze_all_daeun(self, daeun_pillars: Sequence[DaeunPillar]) -> List[DaeunAnalysis]:
        return [
            DaeunAnalysis(daeun, self.analyze_luck_pillar(daeun.pillar), daeun.order > 1)
            for daeun in daeun_pillars
        ]

    def analyze_saeun(self, saeun_pillars: Sequence[SaeunPillar],
                      current_daeun: Optional[Pillar] = None) -> List[LuckPillarAnalysis]:
        results = []
        for saeun in saeun_pillars:
            analysis = self.analyze_luck_pillar(saeun.pillar)
            if current_daeun is not None:
                analysis = self.merge_daeun_relations(analysis, current_daeun)
            results.append(analysis)
        logger.debug(f"📊 流年分析完成: {len(results)} 年")
        return results


class SaeunCalculator:
    """流年、流月干支（按公历年近似，不考虑立春边界）"""

    @staticmethod
    def for_year(year: int) -> SaeunPillar:
        return SaeunPillar(year, Pillar(*year_ganzhi_approx(year)))

    @staticmethod
    def calculate(start_year: int, count: int = 10) -> List[SaeunPillar]:
        return [SaeunCalculator.for_year(start_year + offset) for offset in range(count)]

    @staticmethod
    def monthly_luck(year: int) -> List[WolunPillar]:
        year_stem = year_ganzhi_approx(year)[0]
        return [
            WolunPillar(year, index, Pillar(*month_ganzhi(year_stem, index)))
            for index in range(1, 13)
        ]
