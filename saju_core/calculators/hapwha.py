#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
天干合化判定（합화）

- 相邻两柱天干相合，且月令五行与化神相同（或月令生化神）时成化（HAPWHA）
- 日主参与的合只在月令五行与化神相同时成化，否则为合绊（HAPGEO）
- 不相邻的合不成立（NOT_ESTABLISHED）
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from saju_core.calculators.cycle import branch_element
from saju_core.calculators.element_relations import generates
from saju_core.calculators.stem_relations import StemRelationType, find_stem_relation_hits
from saju_core.data.stems_branches import Element
from saju_core.models import PillarPosition, PillarSet, position_distance


class HapState(str, Enum):
    HAPWHA = "HAPWHA"                      # 合化
    HAPGEO = "HAPGEO"                      # 合绊
    NOT_ESTABLISHED = "NOT_ESTABLISHED"    # 不成立


_STATE_RANK = {HapState.HAPWHA: 2, HapState.HAPGEO: 1, HapState.NOT_ESTABLISHED: 0}


@dataclass(frozen=True)
class HapHwaEvaluation:
    stems: Tuple[int, int]
    positions: Tuple[PillarPosition, PillarPosition]
    result_element: Element
    state: HapState
    reasoning: str

    @property
    def involves_day_master(self) -> bool:
        return PillarPosition.DAY in self.positions

    def to_dict(self) -> Dict:
        return {
            'stems': list(self.stems),
            'positions': [p.value for p in self.positions],
            'result_element': self.result_element.value,
            'state': self.state.value,
            'reasoning': self.reasoning,
        }


def evaluate_hap_hwa(pillars: PillarSet) -> List[HapHwaEvaluation]:
    """
    评估盘内所有天干合的合化状态

    Returns:
        按柱位顺序排列的评估结果
    """
    month_element = branch_element(pillars.month.branch)
    evaluations = []
    for hit in find_stem_relation_hits(pillars):
        if hit.relation.type != StemRelationType.HAP:
            continue
        result = hit.relation.result_element
        pos_a, pos_b = hit.positions
        stems = (pillars.pillar_at(pos_a).stem, pillars.pillar_at(pos_b).stem)

        if position_distance(pos_a, pos_b) != 1:
            state, reason = HapState.NOT_ESTABLISHED, '两干不相邻'
        elif PillarPosition.DAY in hit.positions:
            if month_element == result:
                state, reason = HapState.HAPWHA, '日主合化，月令与化神同气'
            else:
                state, reason = HapState.HAPGEO, '日主合而不化'
        elif month_element == result or generates(month_element) == result:
            state, reason = HapState.HAPWHA, '月令助化神'
        else:
            state, reason = HapState.HAPGEO, '月令不助化神'

        evaluations.append(HapHwaEvaluation(stems, hit.positions, result, state, reason))
    return evaluations


def stem_hap_states(evaluations: List[HapHwaEvaluation]) -> Dict[PillarPosition, Tuple[HapState, Element]]:
    """
    每个柱位天干的最终合化状态

    一干多合时取最强状态（合化 > 合绊），不成立的合不记录。
    """
    states: Dict[PillarPosition, Tuple[HapState, Element]] = {}
    for evaluation in evaluations:
        if evaluation.state == HapState.NOT_ESTABLISHED:
            continue
        for position in evaluation.positions:
            current = states.get(position)
            if current is None or _STATE_RANK[evaluation.state] > _STATE_RANK[current[0]]:
                states[position] = (evaluation.state, evaluation.result_element)
    return states
