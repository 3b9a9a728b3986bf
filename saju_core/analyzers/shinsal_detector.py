#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
神煞检测（신살）

- 三合十二神煞：以年支、日支所在三合局为基准，检查其余柱位地支
- 天乙贵人、文昌贵人、羊刃：以日干为基准，检查四柱地支
- 魁罡、孤鸾：日柱干支
- 白虎：任一柱干支
- 孤辰、寡宿：以年支所在方合为基准

目录数据见 data/shinsal_core_catalog.json。
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from saju_core.data.catalog_loader import load_json_catalog, parse_stem_char, parse_branch_char
from saju_core.data.stems_branches import STEM_HANJA, BRANCH_HANJA
from saju_core.exceptions import CatalogLoadError
from saju_core.models import POSITION_ORDER, PillarPosition, PillarSet

logger = logging.getLogger(__name__)

_SOURCE = 'shinsal_core_catalog.json'


class ShinsalType(str, Enum):
    # 三合十二神煞
    JISAL = "JISAL"                    # 地杀
    DOHWA = "DOHWA"                    # 桃花
    WOLSAL = "WOLSAL"                  # 月杀
    MANGSIN = "MANGSIN"                # 亡神
    JANGSEONG = "JANGSEONG"            # 将星
    BANAN = "BANAN"                    # 攀鞍
    YEOKMA = "YEOKMA"                  # 驿马
    YUKHAE = "YUKHAE"                  # 六害
    HWAGAE = "HWAGAE"                  # 华盖
    GEOPSAL = "GEOPSAL"                # 劫杀
    JAESAL = "JAESAL"                  # 灾杀
    CHEONSAL = "CHEONSAL"              # 天杀
    # 其他
    CHEONEUL_GWIIN = "CHEONEUL_GWIIN"  # 天乙贵人
    MUNCHANG_GWIIN = "MUNCHANG_GWIIN"  # 文昌贵人
    YANGIN = "YANGIN"                  # 羊刃
    GOEGANG = "GOEGANG"                # 魁罡
    GORAN = "GORAN"                    # 孤鸾
    BAEKHO = "BAEKHO"                  # 白虎
    GOSIN = "GOSIN"                    # 孤辰
    GWASUK = "GWASUK"                  # 寡宿


SAMHAP_SHINSAL = (
    ShinsalType.JISAL, ShinsalType.DOHWA, ShinsalType.WOLSAL, ShinsalType.MANGSIN,
    ShinsalType.JANGSEONG, ShinsalType.BANAN, ShinsalType.YEOKMA, ShinsalType.YUKHAE,
    ShinsalType.HWAGAE, ShinsalType.GEOPSAL, ShinsalType.JAESAL, ShinsalType.CHEONSAL,
)


@dataclass(frozen=True)
class ShinsalHit:
    type: ShinsalType
    position: PillarPosition
    reference: str = ''

    def to_dict(self) -> Dict:
        return {'type': self.type.value, 'position': self.position.value, 'reference': self.reference}


@dataclass(frozen=True)
class ShinsalCatalog:
    samhap_by_branch: Dict[int, Dict[ShinsalType, int]]
    banghap_by_branch: Dict[int, Tuple[int, int]]
    cheoneul: Dict[int, FrozenSet[int]]
    munchang: Dict[int, int]
    yangin: Dict[int, int]
    goegang: FrozenSet[Tuple[int, int]]
    goran: FrozenSet[Tuple[int, int]]
    baekho: FrozenSet[Tuple[int, int]]


def _pillar_pairs(raw, key: str) -> FrozenSet[Tuple[int, int]]:
    return frozenset((parse_stem_char(s, _SOURCE), parse_branch_char(b, _SOURCE)) for s, b in raw[key])


def _load_catalog() -> ShinsalCatalog:
    raw = load_json_catalog(_SOURCE)
    try:
        samhap_by_branch = {}
        for group in raw['samhap_groups']:
            stars = {t: parse_branch_char(group[t.value], _SOURCE) for t in SAMHAP_SHINSAL}
            for member in group['members']:
                samhap_by_branch[parse_branch_char(member, _SOURCE)] = stars

        banghap_by_branch = {}
        for entry in raw['banghap_entries']:
            value = (parse_branch_char(entry['GOSIN'], _SOURCE), parse_branch_char(entry['GWASUK'], _SOURCE))
            for member in entry['members']:
                banghap_by_branch[parse_branch_char(member, _SOURCE)] = value

        cheoneul = {
            parse_stem_char(stem, _SOURCE): frozenset(parse_branch_char(b, _SOURCE) for b in branches)
            for stem, branches in raw['cheoneul_gwiin'].items()
        }
        munchang = {parse_stem_char(s, _SOURCE): parse_branch_char(b, _SOURCE)
                    for s, b in raw['munchang_gwiin'].items()}
        yangin = {parse_stem_char(s, _SOURCE): parse_branch_char(b, _SOURCE) for s, b in raw['yangin'].items()}
        catalog = ShinsalCatalog(
            samhap_by_branch, banghap_by_branch, cheoneul, munchang, yangin,
            _pillar_pairs(raw, 'goegang_pillars'),
            _pillar_pairs(raw, 'goran_pillars'),
            _pillar_pairs(raw, 'baekho_pillars'),
        )
    except KeyError as e:
        raise CatalogLoadError(f"神煞目录缺少字段: {e}", catalog=_SOURCE) from e

    for name, table, size in (('三合', catalog.samhap_by_branch, 12), ('方合', catalog.banghap_by_branch, 12),
                              ('天乙贵人', catalog.cheoneul, 10), ('文昌贵人', catalog.munchang, 10)):
        if len(table) != size:
            raise CatalogLoadError(f"神煞目录 {name} 不完整: {len(table)}/{size}", catalog=_SOURCE)
    return catalog


SHINSAL_CATALOG = _load_catalog()


class ShinsalDetector:
    """神煞检测器"""

    def __init__(self, catalog: ShinsalCatalog = SHINSAL_CATALOG):
        self.catalog = catalog

    def detect(self, pillars: PillarSet) -> List[ShinsalHit]:
        """
        检测四柱神煞

        同一 (类型, 柱位) 只记录一次，按柱位顺序、再按类型定义顺序排序。
        """
        found: Dict[Tuple[ShinsalType, PillarPosition], ShinsalHit] = {}

        def add(shinsal_type: ShinsalType, position: PillarPosition, reference: str):
            found.setdefault((shinsal_type, position), ShinsalHit(shinsal_type, position, reference))

        positioned = list(pillars.iter_positions())
        day_master = pillars.day_master

        for ref_position in (PillarPosition.YEAR, PillarPosition.DAY):
            ref_branch = pillars.pillar_at(ref_position).branch
            stars = self.catalog.samhap_by_branch[ref_branch]
            for position, pillar in positioned:
                if position == ref_position:
                    continue
                for shinsal_type, branch in stars.items():
                    if pillar.branch == branch:
                        add(shinsal_type, position, f"{ref_position.value}:{BRANCH_HANJA[ref_branch]}")

        for position, pillar in positioned:
            if pillar.branch in self.catalog.cheoneul[day_master]:
                add(ShinsalType.CHEONEUL_GWIIN, position, f"DAY:{STEM_HANJA[day_master]}")
            if pillar.branch == self.catalog.munchang[day_master]:
                add(ShinsalType.MUNCHANG_GWIIN, position, f"DAY:{STEM_HANJA[day_master]}")
            if self.catalog.yangin.get(day_master) == pillar.branch:
                add(ShinsalType.YANGIN, position, f"DAY:{STEM_HANJA[day_master]}")
            if (pillar.stem, pillar.branch) in self.catalog.baekho:
                add(ShinsalType.BAEKHO, position, pillar.label)

        day_pair = (pillars.day.stem, pillars.day.branch)
        if day_pair in self.catalog.goegang:
            add(ShinsalType.GOEGANG, PillarPosition.DAY, pillars.day.label)
        if day_pair in self.catalog.goran:
            add(ShinsalType.GORAN, PillarPosition.DAY, pillars.day.label)

        gosin, gwasuk = self.catalog.banghap_by_branch[pillars.year.branch]
        for position, pillar in positioned:
            if position == PillarPosition.YEAR:
                continue
            if pillar.branch == gosin:
                add(ShinsalType.GOSIN, position, f"YEAR:{BRANCH_HANJA[pillars.year.branch]}")
            if pillar.branch == gwasuk:
                add(ShinsalType.GWASUK, position, f"YEAR:{BRANCH_HANJA[pillars.year.branch]}")

        type_order = list(ShinsalType)
        hits = sorted(found.values(), key=lambda h: (POSITION_ORDER.index(h.position), type_order.index(h.type)))
        logger.debug(f"📊 神煞检测完成: {len(hits)} 个")
        return hits
