#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
宫位分析（궁위）

年柱祖上、月柱父母兄弟、日柱自身配偶、时柱子女。
每宫记录天干十神、本气十神、十二运星及简要解读。
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from saju_core.calculators.life_stage import EarthLifeStageRule, LifeStage, STRONG_STAGES, life_stage_of
from saju_core.calculators.ten_gods import TenGod, ten_god_of
from saju_core.data.hidden_stems import principal_stem
from saju_core.models import PillarPosition, PillarSet

PALACE_DOMAINS = {
    PillarPosition.YEAR: 'ANCESTORS',
    PillarPosition.MONTH: 'PARENTS_SIBLINGS',
    PillarPosition.DAY: 'SELF_SPOUSE',
    PillarPosition.HOUR: 'CHILDREN',
}

# (宫位, 本气十神) → 解读
PALACE_INSIGHTS = {
    (PillarPosition.DAY, TenGod.JEONG_JAE): {'score': 2, 'passed': True, 'text': '妻宫坐正财，配偶贤良'},
    (PillarPosition.DAY, TenGod.JEONG_GWAN): {'score': 2, 'passed': True, 'text': '夫宫坐正官，配偶端正'},
    (PillarPosition.DAY, TenGod.SANG_GWAN): {'score': -1, 'passed': False, 'text': '日支伤官，婚姻多波折'},
    (PillarPosition.DAY, TenGod.GEOB_JAE): {'score': -1, 'passed': False, 'text': '日支劫财，防夫妻争财'},
    (PillarPosition.MONTH, TenGod.JEONG_IN): {'score': 2, 'passed': True, 'text': '月令正印，得父母庇荫'},
    (PillarPosition.MONTH, TenGod.PYEON_GWAN): {'score': -1, 'passed': False, 'text': '月令七杀，早年压力大'},
    (PillarPosition.YEAR, TenGod.JEONG_IN): {'score': 1, 'passed': True, 'text': '年支正印，祖上有荫'},
    (PillarPosition.HOUR, TenGod.SIK_SHIN): {'score': 2, 'passed': True, 'text': '时支食神，子女聪慧'},
    (PillarPosition.HOUR, TenGod.PYEON_GWAN): {'score': -1, 'passed': False, 'text': '时支七杀，子女性刚'},
}


def narrative_placeholder() -> Dict:
    """缺少解读时的中性占位"""
    return {'score': 0, 'passed': False}


@dataclass(frozen=True)
class PalaceInfo:
    position: PillarPosition
    domain: str
    stem_ten_god: Optional[TenGod]
    branch_ten_god: TenGod
    life_stage: LifeStage
    insight: Dict

    def to_dict(self) -> Dict:
        return {
            'position': self.position.value,
            'domain': self.domain,
            'stem_ten_god': self.stem_ten_god.value if self.stem_ten_god else None,
            'branch_ten_god': self.branch_ten_god.value,
            'life_stage': self.life_stage.value,
            'life_stage_strong': self.life_stage in STRONG_STAGES,
            'insight': dict(self.insight),
        }


def analyze_palaces(pillars: PillarSet,
                    earth_rule: EarthLifeStageRule = EarthLifeStageRule.FOLLOW_FIRE,
                    yin_reversal: bool = True) -> List[PalaceInfo]:
    day_master = pillars.day_master
    palaces = []
    for position, pillar in pillars.iter_positions():
        stem_ten_god = None if position == PillarPosition.DAY else ten_god_of(day_master, pillar.stem)
        branch_ten_god = ten_god_of(day_master, principal_stem(pillar.branch))
        palaces.append(PalaceInfo(
            position=position,
            domain=PALACE_DOMAINS[position],
            stem_ten_god=stem_ten_god,
            branch_ten_god=branch_ten_god,
            life_stage=life_stage_of(day_master, pillar.branch, earth_rule, yin_reversal),
            insight=PALACE_INSIGHTS.get((position, branch_ten_god), narrative_placeholder()),
        ))
    return palaces
