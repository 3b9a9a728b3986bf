#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
神煞加权

加权分 = 基础权重 × 柱位系数，四舍五入取整，按加权分降序排列。
基础权重表（data/shinsal_weight_table.json）必须覆盖全部神煞类型，缺项在加载时报错。
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

from saju_core.analyzers.shinsal_detector import ShinsalHit, ShinsalType
from saju_core.data.catalog_loader import load_json_catalog
from saju_core.exceptions import CatalogLoadError
from saju_core.models import PillarPosition

_SOURCE = 'shinsal_weight_table.json'

POSITION_MULTIPLIERS = {
    PillarPosition.DAY: 1.0,
    PillarPosition.MONTH: 0.85,
    PillarPosition.YEAR: 0.7,
    PillarPosition.HOUR: 0.6,
}


def load_base_weight_table(raw: Dict[str, float]) -> Dict[ShinsalType, float]:
    """
    校验并转换基础权重表

    Raises:
        CatalogLoadError: 任一神煞类型缺少权重
    """
    table = {}
    for shinsal_type in ShinsalType:
        weight = raw.get(shinsal_type.value)
        if weight is None:
            raise CatalogLoadError(f"Missing shinsal base weight: {shinsal_type.value}", catalog=_SOURCE)
        table[shinsal_type] = float(weight)
    return table


BASE_WEIGHT_TABLE = load_base_weight_table(load_json_catalog(_SOURCE))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class WeightedShinsalHit:
    hit: ShinsalHit
    base_weight: float
    position_multiplier: float
    weighted_score: int

    def to_dict(self) -> Dict:
        data = self.hit.to_dict()
        data.update({
            'base_weight': self.base_weight,
            'position_multiplier': self.position_multiplier,
            'weighted_score': self.weighted_score,
        })
        return data


class ShinsalWeightCalculator:
    """神煞加权计算"""

    @staticmethod
    def base_weight_for(shinsal_type: ShinsalType) -> float:
        return BASE_WEIGHT_TABLE[shinsal_type]

    @staticmethod
    def position_multiplier_for(position: PillarPosition) -> float:
        return POSITION_MULTIPLIERS[position]

    @staticmethod
    def weight(hit: ShinsalHit) -> WeightedShinsalHit:
        base = ShinsalWeightCalculator.base_weight_for(hit.type)
        multiplier = ShinsalWeightCalculator.position_multiplier_for(hit.position)
        return WeightedShinsalHit(hit, base, multiplier, round_half_up(base * multiplier))

    @staticmethod
    def weight_all(hits: Sequence[ShinsalHit]) -> List[WeightedShinsalHit]:
        """加权并按加权分降序排列（同分保持原顺序）"""
        weighted = [ShinsalWeightCalculator.weight(hit) for hit in hits]
        return sorted(weighted, key=lambda w: -w.weighted_score)
