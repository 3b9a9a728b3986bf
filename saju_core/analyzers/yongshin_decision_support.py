#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
用神综合判定（용신）

核心理论：
1. 扶抑用神（억부）以旺衰为基础：身强宜泄耗，身弱宜生扶
2. 调候用神（조후）以月令气候为基础，查日干 × 月支目录
3. 特殊格局（化气、一行、从格）的用神优先于扶抑、调候
4. 扶抑与调候不一致时，先看通关、格局用神，再按一致程度与流派优先级取舍

喜神、忌神、仇神由最终用神按五行生克推出。
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from saju_core.analyzers.gyeokguk_classifier import GyeokgukCategory, GyeokgukResult, GyeokgukType
from saju_core.analyzers.johu_catalog import URGENT_MONTHS, lookup_johu
from saju_core.analyzers.strength_analyzer import StrengthResult, max_support
from saju_core.calculators.cycle import stem_element
from saju_core.calculators.element_relations import (
    generates, controls, generated_by, controlled_by,
)
from saju_core.calculators.hapwha import HapHwaEvaluation, HapState, stem_hap_states
from saju_core.calculators.scoring import ChartScore
from saju_core.config.calculation_config import CalculationConfig, YongshinPriority, DEFAULT_CONFIG
from saju_core.data.hidden_stems import principal_stem
from saju_core.data.stems_branches import Element, ELEMENT_ORDER
from saju_core.models import PillarPosition, PillarSet

logger = logging.getLogger(__name__)


class YongshinType(str, Enum):
    EOKBU = "EOKBU"                          # 扶抑
    JOHU = "JOHU"                            # 调候
    TONGGWAN = "TONGGWAN"                    # 通关
    GYEOKGUK = "GYEOKGUK"                    # 格局
    HAPWHA_YONGSHIN = "HAPWHA_YONGSHIN"      # 化气格用神
    ILHAENG_YONGSHIN = "ILHAENG_YONGSHIN"    # 一行得气格用神
    JEONWANG = "JEONWANG"                    # 从旺（从格用神）


class YongshinAgreement(str, Enum):
    FULL_AGREE = "FULL_AGREE"
    PARTIAL_AGREE = "PARTIAL_AGREE"
    DISAGREE = "DISAGREE"


AGREEMENT_CONFIDENCE = {
    YongshinAgreement.FULL_AGREE: 0.95,
    YongshinAgreement.PARTIAL_AGREE: 0.80,
    YongshinAgreement.DISAGREE: 0.60,
}

GYEOKGUK_OVERRIDE_RULES = (
    (YongshinType.HAPWHA_YONGSHIN, GyeokgukCategory.HWAGYEOK),
    (YongshinType.ILHAENG_YONGSHIN, GyeokgukCategory.ILHAENG),
    (YongshinType.JEONWANG, GyeokgukCategory.JONGGYEOK),
)

MAX_CONFIDENCE = 0.95
GYEOKGUK_MATCH_CONFIDENCE = 0.70


class TenGodCategory(str, Enum):
    BIGYEOP = "BIGYEOP"    # 比劫
    SIKSANG = "SIKSANG"    # 食伤
    JAE = "JAE"            # 财
    GWAN = "GWAN"          # 官杀
    INSEONG = "INSEONG"    # 印


_CATEGORY_TO_ELEMENT = {
    TenGodCategory.BIGYEOP: lambda e: e,
    TenGodCategory.SIKSANG: generates,
    TenGodCategory.JAE: controls,
    TenGodCategory.GWAN: controlled_by,
    TenGodCategory.INSEONG: generated_by,
}

# 正格用神：格局 → (身强取, 身弱取)
_GYEOK_YONGSHIN = {
    GyeokgukType.JEONGGWAN_GYEOK: (TenGodCategory.JAE, TenGodCategory.INSEONG),
    GyeokgukType.PYEONGWAN_GYEOK: (TenGodCategory.SIKSANG, TenGodCategory.INSEONG),
    GyeokgukType.JEONGIN_GYEOK: (TenGodCategory.JAE, TenGodCategory.GWAN),
    GyeokgukType.PYEONIN_GYEOK: (TenGodCategory.JAE, TenGodCategory.GWAN),
    GyeokgukType.SIKSIN_GYEOK: (TenGodCategory.JAE, TenGodCategory.INSEONG),
    GyeokgukType.SANGGWAN_GYEOK: (TenGodCategory.JAE, TenGodCategory.INSEONG),
    GyeokgukType.JEONGJAE_GYEOK: (TenGodCategory.GWAN, TenGodCategory.BIGYEOP),
    GyeokgukType.PYEONJAE_GYEOK: (TenGodCategory.GWAN, TenGodCategory.BIGYEOP),
    GyeokgukType.GEONROK_GYEOK: (TenGodCategory.GWAN, TenGodCategory.INSEONG),
    GyeokgukType.YANGIN_GYEOK: (TenGodCategory.GWAN, TenGodCategory.INSEONG),
    GyeokgukType.WOLGEOP_GYEOK: (TenGodCategory.GWAN, TenGodCategory.INSEONG),
}

# 从格所从之五行（相对日主）
_JONG_CATEGORY = {
    GyeokgukType.JONGA_GYEOK: TenGodCategory.SIKSANG,
    GyeokgukType.JONGJAE_GYEOK: TenGodCategory.JAE,
    GyeokgukType.JONGSAL_GYEOK: TenGodCategory.GWAN,
}


def category_to_element(category: TenGodCategory, day_element: Element) -> Element:
    return _CATEGORY_TO_ELEMENT[category](day_element)


@dataclass(frozen=True)
class YongshinRecommendation:
    type: YongshinType
    primary_element: Element
    secondary_element: Optional[Element]
    confidence: float
    reasoning: str = ''

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'primary_element': self.primary_element.value,
            'secondary_element': self.secondary_element.value if self.secondary_element else None,
            'confidence': round(self.confidence, 4),
            'reasoning': self.reasoning,
        }


@dataclass(frozen=True)
class YongshinResult:
    yongshin: Element
    heesin: Optional[Element]
    gisin: Element
    gusin: Element
    agreement: YongshinAgreement
    confidence: float
    recommendations: Tuple[YongshinRecommendation, ...]
    details: List[str] = field(default_factory=list, compare=False)

    def to_dict(self) -> Dict:
        return {
            'yongshin': self.yongshin.value,
            'heesin': self.heesin.value if self.heesin else None,
            'gisin': self.gisin.value,
            'gusin': self.gusin.value,
            'agreement': self.agreement.value,
            'confidence': round(self.confidence, 4),
            'recommendations': [r.to_dict() for r in self.recommendations],
            'details': list(self.details),
        }


def count_chart_elements(pillars: PillarSet,
                         hap_hwa_evaluations: Sequence[HapHwaEvaluation] = ()) -> Dict[Element, int]:
    """
    盘面五行个数

    年、月、时三干（合化之干计化神，合绊之干不计）加四支本气。
    """
    counts = {e: 0 for e in ELEMENT_ORDER}
    states = stem_hap_states(list(hap_hwa_evaluations))
    for position in (PillarPosition.YEAR, PillarPosition.MONTH, PillarPosition.HOUR):
        state = states.get(position)
        if state is not None and state[0] == HapState.HAPWHA:
            counts[state[1]] += 1
        elif state is None or state[0] != HapState.HAPGEO:
            counts[stem_element(pillars.pillar_at(position).stem)] += 1
    for _, pillar in pillars.iter_positions():
        counts[stem_element(principal_stem(pillar.branch))] += 1
    return counts


def assess_agreement(eokbu: YongshinRecommendation, johu: YongshinRecommendation) -> YongshinAgreement:
    if eokbu.primary_element == johu.primary_element:
        return YongshinAgreement.FULL_AGREE
    if eokbu.secondary_element == johu.primary_element or johu.secondary_element == eokbu.primary_element:
        return YongshinAgreement.PARTIAL_AGREE
    return YongshinAgreement.DISAGREE


def resolve_final(eokbu: YongshinRecommendation, johu: YongshinRecommendation,
                  priority: YongshinPriority = YongshinPriority.JOHU_FIRST) -> Element:
    """扶抑与调候取舍：一致 → 交叉一致 → 流派优先级"""
    if eokbu.primary_element == johu.primary_element:
        return eokbu.primary_element
    if eokbu.secondary_element == johu.primary_element:
        return johu.primary_element
    if johu.secondary_element == eokbu.primary_element:
        return eokbu.primary_element

    if priority == YongshinPriority.JOHU_FIRST:
        return johu.primary_element
    if priority == YongshinPriority.EOKBU_FIRST:
        return eokbu.primary_element
    return johu.primary_element if johu.confidence >= eokbu.confidence else eokbu.primary_element


def _agreement_bonus(element: Element, eokbu: YongshinRecommendation, johu: YongshinRecommendation) -> float:
    if element in (eokbu.primary_element, johu.primary_element):
        return 0.15
    if element in (eokbu.secondary_element, johu.secondary_element):
        return 0.05
    return 0.0


def resolve_all(eokbu: YongshinRecommendation,
                johu: YongshinRecommendation,
                recommendations: Sequence[YongshinRecommendation],
                config: CalculationConfig = DEFAULT_CONFIG,
                gyeokguk: Optional[GyeokgukResult] = None) -> Tuple[Element, float]:
    """
    确定最终用神及置信度

    Returns:
        (用神五行, 置信度)
    """
    by_type: Dict[YongshinType, YongshinRecommendation] = {}
    for recommendation in recommendations:
        by_type.setdefault(recommendation.type, recommendation)

    if gyeokguk is not None:
        for recommendation_type, category in GYEOKGUK_OVERRIDE_RULES:
            if category != gyeokguk.category:
                continue
            recommendation = by_type.get(recommendation_type)
            if recommendation is None:
                continue
            bonus = _agreement_bonus(recommendation.primary_element, eokbu, johu)
            return recommendation.primary_element, min(recommendation.confidence + bonus, MAX_CONFIDENCE)

    disagree = eokbu.primary_element != johu.primary_element

    tonggwan = by_type.get(YongshinType.TONGGWAN)
    if tonggwan is not None and disagree:
        return tonggwan.primary_element, tonggwan.confidence

    gyeokguk_rec = by_type.get(YongshinType.GYEOKGUK)
    if gyeokguk_rec is not None and disagree:
        if gyeokguk_rec.primary_element == eokbu.primary_element:
            return eokbu.primary_element, GYEOKGUK_MATCH_CONFIDENCE
        if gyeokguk_rec.primary_element == johu.primary_element:
            return johu.primary_element, GYEOKGUK_MATCH_CONFIDENCE

    final = resolve_final(eokbu, johu, config.yongshin_priority)
    return final, AGREEMENT_CONFIDENCE[assess_agreement(eokbu, johu)]


def resolve_heesin(final: Element, eokbu: YongshinRecommendation, johu: YongshinRecommendation) -> Element:
    """喜神：优先取与用神不同的辅助五行，其次另一方的主用神，最后取生用神者"""
    for candidate in (johu.secondary_element, eokbu.secondary_element):
        if candidate is not None and candidate != final:
            return candidate
    other_primary = eokbu.primary_element if final == johu.primary_element else johu.primary_element
    if other_primary != final:
        return other_primary
    return generated_by(final)


def derive_gisin(yongshin: Element) -> Element:
    """忌神：克用神者"""
    return controlled_by(yongshin)


def derive_gusin(gisin: Element) -> Element:
    """仇神：生忌神者"""
    return generated_by(gisin)


class YongshinDecisionSupport:
    """用神综合判定"""

    def __init__(self, config: Optional[CalculationConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def eokbu_recommendation(self, pillars: PillarSet, strength: StrengthResult) -> YongshinRecommendation:
        """扶抑用神：身强取食伤、财；身弱取印、比劫"""
        day_element = stem_element(pillars.day_master)
        max_total = max_support(self.config)
        distance = abs(strength.score.total_support - self.config.strength_threshold)
        confidence = 0.5 + min(distance / max_total, 0.4) if max_total > 0 else 0.5
        if strength.is_strong:
            return YongshinRecommendation(YongshinType.EOKBU, generates(day_element), controls(day_element),
                                          confidence, '身强，取食伤泄秀、财星耗身')
        return YongshinRecommendation(YongshinType.EOKBU, generated_by(day_element), day_element,
                                      confidence, '身弱，取印星生身、比劫帮身')

    @staticmethod
    def johu_recommendation(pillars: PillarSet) -> YongshinRecommendation:
        entry = lookup_johu(pillars.day_master, pillars.month.branch)
        secondary = entry.secondary_element
        if secondary == entry.primary_element:
            secondary = None
        urgent = pillars.month.branch in URGENT_MONTHS
        return YongshinRecommendation(YongshinType.JOHU, entry.primary_element, secondary,
                                      0.85 if urgent else 0.6,
                                      '寒暖燥湿偏重，调候为急' if urgent else '气候平和，调候为辅')

    def tonggwan_recommendation(self, score: ChartScore) -> Optional[YongshinRecommendation]:
        """通关用神：最强两行相克且各占一定比例时，取中间相生之五行"""
        first, second = score.dominant_elements()[:2]
        min_ratio = self.config.tonggwan_min_ratio
        if score.element_ratio(first) < min_ratio or score.element_ratio(second) < min_ratio:
            return None
        if controls(first) == second:
            attacker = first
        elif controls(second) == first:
            attacker = second
        else:
            return None
        mediator = generates(attacker)
        return YongshinRecommendation(YongshinType.TONGGWAN, mediator, None, 0.7,
                                      f"{first.value}与{second.value}相战，取{mediator.value}通关")

    @staticmethod
    def gyeokguk_recommendations(pillars: PillarSet, gyeokguk: GyeokgukResult,
                                 strength: StrengthResult,
                                 hap_hwa_evaluations: Sequence[HapHwaEvaluation] = ()) -> List[YongshinRecommendation]:
        """格局相关用神（化气、一行、从格及正格）"""
        day_element = stem_element(pillars.day_master)
        if gyeokguk.category == GyeokgukCategory.HWAGYEOK:
            hwa = next((e.result_element for e in hap_hwa_evaluations
                        if e.involves_day_master and e.state == HapState.HAPWHA), None)
            if hwa is None:
                logger.warning("⚠️ 化气格缺少日主合化结果，按扶抑、调候判定")
                return []
            return [YongshinRecommendation(YongshinType.HAPWHA_YONGSHIN, hwa, generated_by(hwa), 0.8,
                                           f"化气格，顺化神{hwa.value}")]
        if gyeokguk.category == GyeokgukCategory.ILHAENG:
            return [YongshinRecommendation(YongshinType.ILHAENG_YONGSHIN, day_element, generates(day_element),
                                           0.8, '一行得气，顺其旺势')]
        if gyeokguk.category == GyeokgukCategory.JONGGYEOK:
            element = category_to_element(_JONG_CATEGORY[gyeokguk.type], day_element)
            return [YongshinRecommendation(YongshinType.JEONWANG, element, generated_by(element), 0.75,
                                           f"从格，顺从{element.value}")]

        strong_category, weak_category = _GYEOK_YONGSHIN[gyeokguk.type]
        category = strong_category if strength.is_strong else weak_category
        return [YongshinRecommendation(YongshinType.GYEOKGUK, category_to_element(category, day_element), None,
                                       0.65, f"{gyeokguk.type.value}取{category.value}")]

    def decide(self, pillars: PillarSet, strength: StrengthResult, score: ChartScore,
               gyeokguk: Optional[GyeokgukResult] = None,
               hap_hwa_evaluations: Sequence[HapHwaEvaluation] = ()) -> YongshinResult:
        """
        综合判定用神

        Args:
            pillars: 四柱
            strength: 旺衰结果
            score: 五行十神分数
            gyeokguk: 格局结果
            hap_hwa_evaluations: 合化评估

        Returns:
            YongshinResult
        """
        eokbu = self.eokbu_recommendation(pillars, strength)
        johu = self.johu_recommendation(pillars)
        recommendations = [eokbu, johu]
        tonggwan = self.tonggwan_recommendation(score)
        if tonggwan is not None:
            recommendations.append(tonggwan)
        if gyeokguk is not None:
            recommendations.extend(self.gyeokguk_recommendations(pillars, gyeokguk, strength, hap_hwa_evaluations))

        logger.debug(f"🌡️ 扶抑: {eokbu.primary_element.value}, 调候: {johu.primary_element.value}")
        yongshin, confidence = resolve_all(eokbu, johu, recommendations, self.config, gyeokguk)
        agreement = assess_agreement(eokbu, johu)
        heesin = resolve_heesin(yongshin, eokbu, johu)
        gisin = derive_gisin(yongshin)
        gusin = derive_gusin(gisin)

        details = [
            f"扶抑用神: {eokbu.primary_element.value}（{eokbu.reasoning}）",
            f"调候用神: {johu.primary_element.value}（{johu.reasoning}）",
            f"一致程度: {agreement.value}",
            f"最终用神: {yongshin.value}，喜神 {heesin.value}，忌神 {gisin.value}，仇神 {gusin.value}",
        ]
        logger.debug(f"✅ 用神判定: {yongshin.value}（置信度 {confidence:.2f}）")
        return YongshinResult(yongshin, heesin, gisin, gusin, agreement, confidence,
                              tuple(recommendations), details)
