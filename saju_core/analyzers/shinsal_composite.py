#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
神煞组合解读

规则表（data/shinsal_composite_rules.json）中两种神煞同时出现时生成组合，
两者有同柱命中时额外加 5 分。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from saju_core.analyzers.shinsal_detector import ShinsalHit, ShinsalType
from saju_core.data.catalog_loader import enum_value_parser, load_json_catalog
from saju_core.exceptions import CatalogLoadError

_SOURCE = 'shinsal_composite_rules.json'

PROXIMITY_BONUS = 5


class CompositeInteractionType(str, Enum):
    SYNERGY = "SYNERGY"      # 相辅
    AMPLIFY = "AMPLIFY"      # 加重
    TEMPER = "TEMPER"        # 制化
    CONFLICT = "CONFLICT"    # 相冲


@dataclass(frozen=True)
class CompositeRule:
    type1: ShinsalType
    type2: ShinsalType
    pattern_name: str
    interaction_type: CompositeInteractionType
    interpretation: str
    base_bonus_score: int


@dataclass(frozen=True)
class ShinsalComposite:
    pattern_name: str
    interaction_type: CompositeInteractionType
    involved_hits: Tuple[ShinsalHit, ...]
    interpretation: str
    bonus_score: int

    def to_dict(self) -> Dict:
        return {
            'pattern_name': self.pattern_name,
            'interaction_type': self.interaction_type.value,
            'involved_hits': [h.to_dict() for h in self.involved_hits],
            'interpretation': self.interpretation,
            'bonus_score': self.bonus_score,
        }


def _load_rules() -> Tuple[CompositeRule, ...]:
    parse_type = enum_value_parser(ShinsalType, 'shinsal composite rule')
    parse_interaction = enum_value_parser(CompositeInteractionType, 'shinsal composite rule')
    rules = []
    for raw in load_json_catalog(_SOURCE):
        try:
            rules.append(CompositeRule(
                type1=parse_type(raw['type1']),
                type2=parse_type(raw['type2']),
                pattern_name=raw['pattern_name'],
                interaction_type=parse_interaction(raw['interaction_type']),
                interpretation=raw['interpretation'],
                base_bonus_score=int(raw['base_bonus_score']),
            ))
        except KeyError as e:
            raise CatalogLoadError(f"神煞组合规则缺少字段: {e}", catalog=_SOURCE) from e
    return tuple(rules)


COMPOSITE_RULES = _load_rules()


def _has_same_pillar_hits(hits1: Sequence[ShinsalHit], hits2: Sequence[ShinsalHit]) -> bool:
    positions = {hit.position for hit in hits1}
    return any(hit.position in positions for hit in hits2)


class ShinsalCompositeInterpreter:
    """神煞组合解读"""

    @staticmethod
    def detect(hits: Sequence[ShinsalHit],
               rules: Sequence[CompositeRule] = COMPOSITE_RULES) -> List[ShinsalComposite]:
        """
        检测神煞组合

        命中总数少于 2 时直接返回空列表。结果按规则表顺序排列。
        """
        if len(hits) < 2:
            return []

        by_type: Dict[ShinsalType, List[ShinsalHit]] = {}
        for hit in hits:
            by_type.setdefault(hit.type, []).append(hit)

        composites = []
        for rule in rules:
            hits1 = by_type.get(rule.type1)
            hits2 = by_type.get(rule.type2)
            if not hits1 or not hits2:
                continue
            bonus = PROXIMITY_BONUS if _has_same_pillar_hits(hits1, hits2) else 0
            composites.append(ShinsalComposite(
                pattern_name=rule.pattern_name,
                interaction_type=rule.interaction_type,
                involved_hits=tuple(hits1 + hits2),
                interpretation=rule.interpretation,
                bonus_score=rule.base_bonus_score + bonus,
            ))
        return composites
