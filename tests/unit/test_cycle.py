#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
干支循环运算单元测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from saju_core.calculators.cycle import (
    mod,
    stem_element,
    stem_polarity,
    branch_element,
    branch_polarity,
    ganzhi_index,
    ganzhi_from_index,
    year_ganzhi_approx,
    month_ganzhi,
)
from saju_core.calculators.life_stage import EarthLifeStageRule, LifeStage, life_stage_of
from saju_core.data.stems_branches import Element, Polarity, parse_stem, parse_branch
from saju_core.models import Pillar, PillarPosition, PillarSet, position_distance


class TestCycle:
    """干支循环测试类"""

    @pytest.mark.parametrize("n,m,expected", [
        (-1, 12, 11),
        (13, 12, 1),
        (-10, 10, 0),
        (25, 10, 5),
    ])
    def test_mod_always_non_negative(self, n, m, expected):
        """测试取模结果落在 [0, m)"""
        assert mod(n, m) == expected

    def test_stem_element_and_polarity(self):
        """测试天干五行阴阳"""
        assert stem_element(0) == Element.WOOD
        assert stem_element(9) == Element.WATER
        assert stem_element(14) == Element.EARTH  # 越界取模 → 戊
        assert stem_polarity(0) == Polarity.YANG
        assert stem_polarity(3) == Polarity.YIN

    def test_branch_element_and_polarity(self):
        """测试地支五行阴阳"""
        assert branch_element(0) == Element.WATER
        assert branch_element(4) == Element.EARTH
        assert branch_element(-1) == Element.WATER  # 亥
        assert branch_polarity(2) == Polarity.YANG
        assert branch_polarity(11) == Polarity.YIN

    @pytest.mark.parametrize("stem,branch,expected", [
        (0, 0, 0),     # 甲子
        (1, 1, 1),     # 乙丑
        (0, 10, 10),   # 甲戌
        (4, 4, 4),     # 戊辰
        (9, 11, 59),   # 癸亥
    ])
    def test_ganzhi_index(self, stem, branch, expected):
        """测试六十甲子索引"""
        assert ganzhi_index(stem, branch) == expected

    def test_ganzhi_index_parity_mismatch(self):
        """测试阴阳不合的干支组合返回 None"""
        assert ganzhi_index(0, 1) is None
        assert ganzhi_index(3, 4) is None

    def test_ganzhi_index_inverse(self):
        """测试索引与干支互相换算"""
        for index in range(60):
            assert ganzhi_index(*ganzhi_from_index(index)) == index

    @pytest.mark.parametrize("year,expected", [
        (1984, (0, 0)),   # 甲子
        (2024, (0, 4)),   # 甲辰
        (2026, (2, 6)),   # 丙午
    ])
    def test_year_ganzhi_approx(self, year, expected):
        """测试近似年柱"""
        assert year_ganzhi_approx(year) == expected

    @pytest.mark.parametrize("year_stem,month_index,expected", [
        (0, 1, (2, 2)),    # 甲年寅月 → 丙寅
        (5, 1, (2, 2)),    # 己年寅月 → 丙寅
        (1, 1, (4, 2)),    # 乙年寅月 → 戊寅
        (0, 12, (3, 1)),   # 甲年丑月 → 丁丑
        (9, 1, (0, 2)),    # 癸年寅月 → 甲寅
    ])
    def test_month_ganzhi(self, year_stem, month_index, expected):
        """测试五虎遁月柱"""
        assert month_ganzhi(year_stem, month_index) == expected

    def test_parse_stem_and_branch(self):
        """测试汉字与韩文干支解析"""
        assert parse_stem('戊') == 4
        assert parse_stem('무') == 4
        assert parse_branch('午') == 6
        with pytest.raises(ValueError):
            parse_stem('X')


class TestPillarModel:
    """四柱模型测试类"""

    def test_pillar_normalizes_indices(self):
        """测试越界索引取模归一化"""
        pillar = Pillar(12, 14)
        assert (pillar.stem, pillar.branch) == (2, 2)
        assert pillar.label == '丙寅'

    def test_pillar_set_accessors(self, golden_pillars):
        """测试四柱访问"""
        assert golden_pillars.day_master == 4
        assert golden_pillars.pillar_at(PillarPosition.HOUR) == Pillar(6, 6)
        assert [p.value for p, _ in golden_pillars.iter_positions()] == ['YEAR', 'MONTH', 'DAY', 'HOUR']
        assert golden_pillars.to_dict()['DAY']['label'] == '戊辰'

    def test_position_distance(self):
        """测试柱位距离"""
        assert position_distance(PillarPosition.YEAR, PillarPosition.MONTH) == 1
        assert position_distance(PillarPosition.HOUR, PillarPosition.YEAR) == 3

    def test_pillar_set_is_immutable(self, golden_pillars):
        """测试四柱不可修改"""
        with pytest.raises(AttributeError):
            golden_pillars.day = Pillar(0, 0)


class TestLifeStage:
    """十二运星测试类"""

    @pytest.mark.parametrize("stem,branch,expected", [
        (0, 11, LifeStage.JANG_SAENG),  # 甲长生在亥
        (0, 3, LifeStage.JE_WANG),      # 甲帝旺在卯
        (1, 6, LifeStage.JANG_SAENG),   # 乙长生在午
        (1, 2, LifeStage.JE_WANG),      # 乙帝旺在寅（逆行）
        (4, 2, LifeStage.JANG_SAENG),   # 戊长生在寅（火土同宫）
    ])
    def test_life_stage_default_rule(self, stem, branch, expected):
        """测试默认流派的十二运星"""
        assert life_stage_of(stem, branch) == expected

    def test_earth_follows_water(self):
        """测试水土同宫：戊长生在申"""
        assert life_stage_of(4, 8, EarthLifeStageRule.FOLLOW_WATER) == LifeStage.JANG_SAENG

    def test_yin_reversal_disabled(self):
        """测试阴干不逆行时按顺行计算"""
        assert life_stage_of(1, 2, yin_reversal=False) == LifeStage.MYO
