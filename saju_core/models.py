#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
四柱领域模型

Pillar / PillarSet 为不可变对象，每次分析请求重新构建。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Tuple

from saju_core.calculators.cycle import normalize_stem, normalize_branch, ganzhi_index
from saju_core.data.stems_branches import STEM_HANJA, BRANCH_HANJA


class PillarPosition(str, Enum):
    """柱位"""
    YEAR = "YEAR"
    MONTH = "MONTH"
    DAY = "DAY"
    HOUR = "HOUR"


POSITION_ORDER = (PillarPosition.YEAR, PillarPosition.MONTH, PillarPosition.DAY, PillarPosition.HOUR)


@dataclass(frozen=True)
class Pillar:
    """一柱：天干 + 地支（索引越界时取模归一化）"""
    stem: int
    branch: int

    def __post_init__(self):
        object.__setattr__(self, 'stem', normalize_stem(self.stem))
        object.__setattr__(self, 'branch', normalize_branch(self.branch))

    @property
    def label(self) -> str:
        return STEM_HANJA[self.stem] + BRANCH_HANJA[self.branch]

    @property
    def ganzhi_index(self):
        return ganzhi_index(self.stem, self.branch)

    def to_dict(self) -> Dict:
        return {'stem': self.stem, 'branch': self.branch, 'label': self.label}


@dataclass(frozen=True)
class PillarSet:
    """四柱：年、月、日、时"""
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar

    @classmethod
    def from_indices(cls, year: Tuple[int, int], month: Tuple[int, int],
                     day: Tuple[int, int], hour: Tuple[int, int]) -> 'PillarSet':
        return cls(Pillar(*year), Pillar(*month), Pillar(*day), Pillar(*hour))

    @property
    def day_master(self) -> int:
        """日主（日干）"""
        return self.day.stem

    def pillar_at(self, position: PillarPosition) -> Pillar:
        return getattr(self, position.value.lower())

    def iter_positions(self) -> Iterator[Tuple[PillarPosition, Pillar]]:
        for position in POSITION_ORDER:
            yield position, self.pillar_at(position)

    def by_position(self) -> Dict[PillarPosition, Pillar]:
        return dict(self.iter_positions())

    def to_dict(self) -> Dict:
        return {position.value: pillar.to_dict() for position, pillar in self.iter_positions()}


def position_distance(a: PillarPosition, b: PillarPosition) -> int:
    """两柱之间的距离（相邻为 1）"""
    return abs(POSITION_ORDER.index(a) - POSITION_ORDER.index(b))
