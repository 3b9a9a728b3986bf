#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
空亡（공망）

以日柱所在旬推出两个空亡地支，并标出其余三柱落空的柱位。
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from saju_core.calculators.cycle import ganzhi_index, normalize_branch
from saju_core.models import PillarPosition, PillarSet


@dataclass(frozen=True)
class GongmangResult:
    void_branches: Tuple[int, int]
    hit_positions: Tuple[PillarPosition, ...]

    def to_dict(self) -> Dict:
        return {
            'void_branches': list(self.void_branches),
            'hit_positions': [p.value for p in self.hit_positions],
        }


def void_branches_of(stem: int, branch: int) -> Optional[Tuple[int, int]]:
    """
    旬空地支

    甲子旬空戌亥，甲戌旬空申酉，依此类推。干支阴阳不合时返回 None。
    """
    index = ganzhi_index(stem, branch)
    if index is None:
        return None
    xun_start_branch = (index - index % 10) % 12
    return normalize_branch(xun_start_branch + 10), normalize_branch(xun_start_branch + 11)


def calculate_gongmang(pillars: PillarSet) -> GongmangResult:
    voids = void_branches_of(pillars.day.stem, pillars.day.branch)
    if voids is None:
        return GongmangResult((), ())
    hits = tuple(
        position for position, pillar in pillars.iter_positions()
        if position != PillarPosition.DAY and pillar.branch in voids
    )
    return GongmangResult(voids, hits)
