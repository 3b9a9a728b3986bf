#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
天干合冲检测

- 合（HAP）：两干相隔 5 位，化出固定五行（甲己土、乙庚金、丙辛水、丁壬木、戊癸火）
- 冲（CHUNG）：甲庚、乙辛、丙壬、丁癸

结果按 (类型, 成员对) 去重，按 HAP 先于 CHUNG、再按成员升序排序。
"""

from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from saju_core.calculators.cycle import normalize_stem
from saju_core.data.stems_branches import Element, STEM_HANJA
from saju_core.models import PillarPosition, PillarSet, position_distance


class StemRelationType(str, Enum):
    HAP = "HAP"
    CHUNG = "CHUNG"


_RANK = {StemRelationType.HAP: 0, StemRelationType.CHUNG: 1}

# 合化五行，键为较小的天干索引
HAP_RESULT_ELEMENTS = {
    0: Element.EARTH,   # 甲己
    1: Element.METAL,   # 乙庚
    2: Element.WATER,   # 丙辛
    3: Element.WOOD,    # 丁壬
    4: Element.FIRE,    # 戊癸
}

STEM_CHUNG_PAIRS = frozenset({(0, 6), (1, 7), (2, 8), (3, 9)})

# 相邻 1.0，隔一柱 0.6，隔两柱 0.3
ADJACENCY_SCORES = {1: 1.0, 2: 0.6, 3: 0.3}


@dataclass(frozen=True)
class StemRelation:
    type: StemRelationType
    members: Tuple[int, int]
    result_element: Optional[Element] = None

    @property
    def sort_key(self):
        return (_RANK[self.type], self.members)

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'members': list(self.members),
            'label': ''.join(STEM_HANJA[m] for m in self.members),
            'result_element': self.result_element.value if self.result_element else None,
        }


@dataclass(frozen=True)
class StemRelationHit:
    """盘中某两柱之间的天干关系"""
    relation: StemRelation
    positions: Tuple[PillarPosition, PillarPosition]
    score: float = field(default=0.0)

    def to_dict(self) -> Dict:
        data = self.relation.to_dict()
        data['positions'] = [p.value for p in self.positions]
        data['score'] = self.score
        return data


def _sorted_pair(a: int, b: int) -> Tuple[int, int]:
    a, b = normalize_stem(a), normalize_stem(b)
    return (a, b) if a <= b else (b, a)


def is_stem_hap(a: int, b: int) -> bool:
    a, b = normalize_stem(a), normalize_stem(b)
    return b == (a + 5) % 10 or a == (b + 5) % 10


def is_stem_chung(a: int, b: int) -> bool:
    return _sorted_pair(a, b) in STEM_CHUNG_PAIRS


def hap_result_element(a: int, b: int) -> Optional[Element]:
    if not is_stem_hap(a, b):
        return None
    return HAP_RESULT_ELEMENTS[_sorted_pair(a, b)[0]]


def stem_pair_relations(a: int, b: int) -> List[StemRelation]:
    """两干之间的所有关系（无关系时返回空列表）"""
    members = _sorted_pair(a, b)
    relations = []
    if is_stem_hap(a, b):
        relations.append(StemRelation(StemRelationType.HAP, members, hap_result_element(a, b)))
    if is_stem_chung(a, b):
        relations.append(StemRelation(StemRelationType.CHUNG, members))
    return relations


def detect_stem_relations(stems: Sequence[int]) -> List[StemRelation]:
    """
    检测一组天干之间的合冲

    与输入顺序无关：同一组天干任意排列，输出相同。

    Args:
        stems: 天干索引序列

    Returns:
        去重并排序后的关系列表
    """
    seen = {}
    for a, b in combinations(stems, 2):
        for relation in stem_pair_relations(a, b):
            seen.setdefault((relation.type, relation.members), relation)
    return sorted(seen.values(), key=lambda r: r.sort_key)


def find_stem_relation_hits(pillars: PillarSet) -> List[StemRelationHit]:
    """
    盘内天干关系（带柱位与距离得分）

    同一关系出现在多对柱位时分别记录，按柱位顺序生成。
    """
    hits = []
    positioned = list(pillars.iter_positions())
    for (pos_a, pillar_a), (pos_b, pillar_b) in combinations(positioned, 2):
        for relation in stem_pair_relations(pillar_a.stem, pillar_b.stem):
            score = ADJACENCY_SCORES[position_distance(pos_a, pos_b)]
            hits.append(StemRelationHit(relation, (pos_a, pos_b), score))
    return hits


def score_stem_relations(pillars: PillarSet) -> List[StemRelationHit]:
    """带距离得分的天干关系，得分降序"""
    hits = find_stem_relation_hits(pillars)
    return sorted(hits, key=lambda h: (-h.score, h.relation.sort_key))
