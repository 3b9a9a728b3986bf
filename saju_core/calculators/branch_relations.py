#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
地支刑冲合害检测

六合、三合、半合、方合、冲、刑、破、害。
结果按 (类型, 成员) 去重，按固定类型顺序、再按成员升序排序。
"""

from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from saju_core.calculators.cycle import normalize_branch
from saju_core.data.stems_branches import Element, BRANCH_HANJA
from saju_core.models import PillarPosition, PillarSet


class BranchRelationType(str, Enum):
    YUKHAP = "YUKHAP"      # 六合
    SAMHAP = "SAMHAP"      # 三合
    BANHAP = "BANHAP"      # 半合
    BANGHAP = "BANGHAP"    # 方合
    CHUNG = "CHUNG"        # 冲
    HYEONG = "HYEONG"      # 刑
    PA = "PA"              # 破
    HAE = "HAE"            # 害


_RANK = {t: i for i, t in enumerate(BranchRelationType)}

HARMONIOUS_TYPES = frozenset({
    BranchRelationType.YUKHAP, BranchRelationType.SAMHAP,
    BranchRelationType.BANHAP, BranchRelationType.BANGHAP,
})
CONFLICT_TYPES = frozenset({
    BranchRelationType.CHUNG, BranchRelationType.HYEONG,
    BranchRelationType.PA, BranchRelationType.HAE,
})

YUKHAP_PAIRS: Dict[FrozenSet[int], Element] = {
    frozenset({0, 1}): Element.EARTH,    # 子丑
    frozenset({2, 11}): Element.WOOD,    # 寅亥
    frozenset({3, 10}): Element.FIRE,    # 卯戌
    frozenset({4, 9}): Element.METAL,    # 辰酉
    frozenset({5, 8}): Element.WATER,    # 巳申
    frozenset({6, 7}): Element.EARTH,    # 午未
}

# (生地, 旺地, 墓地) → 五行
SAMHAP_GROUPS: Tuple[Tuple[Tuple[int, int, int], Element], ...] = (
    ((8, 0, 4), Element.WATER),    # 申子辰
    ((11, 3, 7), Element.WOOD),    # 亥卯未
    ((2, 6, 10), Element.FIRE),    # 寅午戌
    ((5, 9, 1), Element.METAL),    # 巳酉丑
)

BANGHAP_GROUPS: Tuple[Tuple[Tuple[int, int, int], Element], ...] = (
    ((2, 3, 4), Element.WOOD),     # 寅卯辰
    ((5, 6, 7), Element.FIRE),     # 巳午未
    ((8, 9, 10), Element.METAL),   # 申酉戌
    ((11, 0, 1), Element.WATER),   # 亥子丑
)

HYEONG_PAIRS = frozenset({
    frozenset({2, 5}), frozenset({5, 8}), frozenset({2, 8}),    # 寅巳申
    frozenset({1, 10}), frozenset({10, 7}), frozenset({1, 7}),  # 丑戌未
    frozenset({0, 3}),                                          # 子卯
})
SELF_HYEONG = frozenset({4, 6, 9, 11})  # 辰午酉亥

PA_PAIRS = frozenset({
    frozenset({0, 9}), frozenset({1, 4}), frozenset({2, 11}),
    frozenset({3, 6}), frozenset({5, 8}), frozenset({7, 10}),
})

HAE_PAIRS = frozenset({
    frozenset({0, 7}), frozenset({1, 6}), frozenset({2, 5}),
    frozenset({3, 4}), frozenset({8, 11}), frozenset({9, 10}),
})


@dataclass(frozen=True)
class BranchRelation:
    type: BranchRelationType
    members: Tuple[int, ...]
    result_element: Optional[Element] = None

    @property
    def sort_key(self):
        return (_RANK[self.type], self.members)

    @property
    def is_harmonious(self) -> bool:
        return self.type in HARMONIOUS_TYPES

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'members': list(self.members),
            'label': ''.join(BRANCH_HANJA[m] for m in self.members),
            'result_element': self.result_element.value if self.result_element else None,
        }


@dataclass(frozen=True)
class BranchRelationHit:
    relation: BranchRelation
    positions: Tuple[PillarPosition, ...]

    def to_dict(self) -> Dict:
        data = self.relation.to_dict()
        data['positions'] = [p.value for p in self.positions]
        return data


def is_branch_chung(a: int, b: int) -> bool:
    return abs(normalize_branch(a) - normalize_branch(b)) == 6


def branch_pair_relations(a: int, b: int) -> List[BranchRelation]:
    """
    两支之间的两两关系（六合、半合、冲、刑、破、害）

    三合、方合需要三支齐全，不在此函数中判断。
    """
    a, b = normalize_branch(a), normalize_branch(b)
    members = (a, b) if a <= b else (b, a)
    pair = frozenset(members)
    relations = []

    if pair in YUKHAP_PAIRS:
        relations.append(BranchRelation(BranchRelationType.YUKHAP, members, YUKHAP_PAIRS[pair]))
    for group, element in SAMHAP_GROUPS:
        # 半合须含旺地
        if a != b and pair <= set(group) and group[1] in pair:
            relations.append(BranchRelation(BranchRelationType.BANHAP, members, element))
    if is_branch_chung(a, b):
        relations.append(BranchRelation(BranchRelationType.CHUNG, members))
    if pair in HYEONG_PAIRS or (a == b and a in SELF_HYEONG):
        relations.append(BranchRelation(BranchRelationType.HYEONG, members))
    if pair in PA_PAIRS:
        relations.append(BranchRelation(BranchRelationType.PA, members))
    if pair in HAE_PAIRS:
        relations.append(BranchRelation(BranchRelationType.HAE, members))
    return relations


def _triple_relations(branches: Sequence[int]) -> List[BranchRelation]:
    present = {normalize_branch(b) for b in branches}
    relations = []
    for group, element in SAMHAP_GROUPS:
        if set(group) <= present:
            relations.append(BranchRelation(BranchRelationType.SAMHAP, tuple(sorted(group)), element))
    for group, element in BANGHAP_GROUPS:
        if set(group) <= present:
            relations.append(BranchRelation(BranchRelationType.BANGHAP, tuple(sorted(group)), element))
    return relations


def detect_branch_relations(branches: Sequence[int]) -> List[BranchRelation]:
    """
    检测一组地支之间的关系

    三合齐全时不再单独记录其中的半合。

    Args:
        branches: 地支索引序列

    Returns:
        去重并排序后的关系列表
    """
    seen = {}
    triples = _triple_relations(branches)
    full_samhap = {r.members for r in triples if r.type == BranchRelationType.SAMHAP}
    for relation in triples:
        seen.setdefault((relation.type, relation.members), relation)
    for a, b in combinations(branches, 2):
        for relation in branch_pair_relations(a, b):
            if relation.type == BranchRelationType.BANHAP and any(
                    set(relation.members) <= set(group) for group in full_samhap):
                continue
            seen.setdefault((relation.type, relation.members), relation)
    return sorted(seen.values(), key=lambda r: r.sort_key)


def find_branch_relation_hits(pillars: PillarSet) -> List[BranchRelationHit]:
    """盘内地支关系（带柱位），按关系排序键排序"""
    positioned = list(pillars.iter_positions())
    hits = []
    for relation in detect_branch_relations([p.branch for _, p in positioned]):
        positions = tuple(
            pos for pos, pillar in positioned if pillar.branch in relation.members
        )
        hits.append(BranchRelationHit(relation, positions))
    return hits


@dataclass(frozen=True)
class ResolvedBranchRelation:
    """冲是否被合解"""
    hit: BranchRelationHit
    mitigated: bool
    mitigated_by: Tuple[BranchRelationType, ...] = ()

    @property
    def outcome(self) -> str:
        if self.hit.relation.is_harmonious:
            return 'HARMONY'
        return 'MITIGATED' if self.mitigated else 'ACTIVE'

    def to_dict(self) -> Dict:
        return {
            'relation': self.hit.to_dict(),
            'outcome': self.outcome,
            'mitigated_by': [t.value for t in self.mitigated_by],
        }


def resolve_branch_relations(hits: Sequence[BranchRelationHit]) -> List[ResolvedBranchRelation]:
    """
    合解冲：冲的任一成员同时参与六合或三合时，视为被缓解

    刑、破、害不受合解，始终为 ACTIVE。

    Returns:
        与输入顺序一致的解析结果
    """
    binding = [h for h in hits if h.relation.type in (BranchRelationType.YUKHAP, BranchRelationType.SAMHAP)]
    resolved = []
    for hit in hits:
        if hit.relation.type != BranchRelationType.CHUNG:
            resolved.append(ResolvedBranchRelation(hit, False))
            continue
        by = tuple(sorted(
            {b.relation.type for b in binding if set(b.relation.members) & set(hit.relation.members)},
            key=lambda t: _RANK[t],
        ))
        resolved.append(ResolvedBranchRelation(hit, bool(by), by))
    return resolved
