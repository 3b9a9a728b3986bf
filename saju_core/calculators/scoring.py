#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
五行、阴阳、十神分数汇总

天干每个计 stem_weight；地支展开为藏干，每个藏干计 branch_weight × 藏干权重。
分数为累加值，不做归一化。
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from saju_core.calculators.cycle import stem_element, stem_polarity, branch_polarity
from saju_core.calculators.ten_gods import TenGod, TEN_GOD_ORDER, ten_god_of, empty_ten_god_tally
from saju_core.data.hidden_stems import HiddenStemScheme, hidden_stems_of
from saju_core.data.stems_branches import Element, Polarity, ELEMENT_ORDER
from saju_core.models import PillarSet


@dataclass(frozen=True)
class ChartScore:
    elements: Dict[Element, float]
    polarities: Dict[Polarity, float]
    ten_gods: Dict[TenGod, float]

    @property
    def element_total(self) -> float:
        return sum(self.elements.values())

    def element_ratio(self, element: Element) -> float:
        """五行占比；总分为 0 时返回 0"""
        total = self.element_total
        if total <= 0:
            return 0.0
        return self.elements[element] / total

    def dominant_elements(self):
        """按分数降序排列的五行（同分按木火土金水顺序）"""
        return sorted(ELEMENT_ORDER, key=lambda e: (-self.elements[e], ELEMENT_ORDER.index(e)))

    def to_dict(self) -> Dict:
        return {
            'elements': {e.value: round(self.elements[e], 6) for e in ELEMENT_ORDER},
            'polarities': {p.value: round(self.polarities[p], 6) for p in Polarity},
            'ten_gods': {t.value: round(self.ten_gods[t], 6) for t in TEN_GOD_ORDER},
        }


def score_pillars(pillars: PillarSet,
                  scheme: HiddenStemScheme = HiddenStemScheme.STANDARD,
                  role_weights: Optional[Mapping[int, Sequence[float]]] = None,
                  stem_weight: float = 1.0,
                  branch_weight: float = 1.0,
                  include_branch_yin_yang: bool = False) -> ChartScore:
    """
    汇总四柱的五行、阴阳、十神分数

    Args:
        pillars: 四柱
        scheme: 藏干权重方案
        role_weights: 标准方案的覆盖权重
        stem_weight: 天干权重
        branch_weight: 地支权重
        include_branch_yin_yang: 是否额外计入地支本身的阴阳

    Returns:
        ChartScore
    """
    day_master = pillars.day_master
    elements = {e: 0.0 for e in ELEMENT_ORDER}
    polarities = {p: 0.0 for p in Polarity}
    ten_gods = empty_ten_god_tally()

    def add(stem: int, amount: float):
        elements[stem_element(stem)] += amount
        polarities[stem_polarity(stem)] += amount
        ten_gods[ten_god_of(day_master, stem)] += amount

    for _, pillar in pillars.iter_positions():
        add(pillar.stem, stem_weight)
    for _, pillar in pillars.iter_positions():
        for hidden in hidden_stems_of(pillar.branch, scheme, role_weights):
            add(hidden.stem, branch_weight * hidden.weight)
        if include_branch_yin_yang:
            polarities[branch_polarity(pillar.branch)] += branch_weight

    return ChartScore(elements, polarities, ten_gods)
