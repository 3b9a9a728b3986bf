#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
大运、流年互动分析单元测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from saju_core.analyzers.luck_interaction_analyzer import (
    DAEUN_TARGET,
    DaeunPillar,
    LuckInteractionAnalyzer,
    LuckQuality,
    SaeunCalculator,
    determine_luck_quality,
)
from saju_core.calculators.branch_relations import BranchRelationType
from saju_core.calculators.life_stage import LifeStage
from saju_core.calculators.stem_relations import StemRelationType
from saju_core.calculators.ten_gods import TenGod
from saju_core.data.stems_branches import Element
from saju_core.models import Pillar

FIRE, WATER, WOOD = Element.FIRE, Element.WATER, Element.WOOD


@pytest.fixture
def analyzer(golden_pillars):
    """标准命盘，用神火、忌神水"""
    return LuckInteractionAnalyzer(golden_pillars, yongshin=FIRE, gisin=WATER)


class TestLuckQuality:
    """运势吉凶判定测试类"""

    @pytest.mark.parametrize("stem,branch,good,bad,expected", [
        (FIRE, FIRE, False, False, LuckQuality.VERY_FAVORABLE),    # +3
        (FIRE, WOOD, False, False, LuckQuality.FAVORABLE),         # +2
        (WOOD, FIRE, False, False, LuckQuality.FAVORABLE),         # +1
        (WOOD, WOOD, False, False, LuckQuality.NEUTRAL),           # 0
        (WOOD, WOOD, True, True, LuckQuality.NEUTRAL),             # +1 -1
        (WOOD, WATER, False, False, LuckQuality.UNFAVORABLE),      # -1
        (WATER, WOOD, False, False, LuckQuality.UNFAVORABLE),      # -2
        (WATER, WATER, False, False, LuckQuality.VERY_UNFAVORABLE),  # -3
        (WATER, WATER, False, True, LuckQuality.VERY_UNFAVORABLE),   # -4
    ])
    def test_quality_table(self, stem, branch, good, bad, expected):
        """测试吉凶计分"""
        assert determine_luck_quality(stem, branch, FIRE, WATER, good, bad) == expected

    def test_without_yongshin(self):
        """测试未提供用神忌神时只看关系"""
        assert determine_luck_quality(FIRE, FIRE, None, None, True, False) == LuckQuality.FAVORABLE


class TestLuckInteractionAnalyzer:
    """运势互动分析测试类"""

    def test_analyze_luck_pillar(self, analyzer):
        """测试丙午运：逢用神，午冲子、半合寅、自刑午"""
        analysis = analyzer.analyze_luck_pillar(Pillar(2, 6))

        assert analysis.ten_god == TenGod.PYEON_IN
        assert analysis.life_stage == LifeStage.JE_WANG
        assert analysis.is_yongshin_element is True
        assert analysis.is_gisin_element is False
        assert analysis.stem_relations == ()
        assert [(h.relation.type, h.target) for h in analysis.branch_relations] == [
            (BranchRelationType.CHUNG, 'YEAR'),
            (BranchRelationType.BANHAP, 'MONTH'),
            (BranchRelationType.HYEONG, 'HOUR'),
        ]
        assert analysis.quality == LuckQuality.VERY_FAVORABLE

    def test_merge_daeun_appends_relations(self, analyzer):
        """测试流年并入大运关系：保留原关系并追加"""
        saeun = analyzer.analyze_luck_pillar(Pillar(2, 6))
        merged = analyzer.merge_daeun_relations(saeun, Pillar(8, 0))

        assert merged.branch_relations[:len(saeun.branch_relations)] == saeun.branch_relations
        assert len(merged.branch_relations) == len(saeun.branch_relations) + 1
        assert merged.stem_relations[-1].target == DAEUN_TARGET
        assert merged.stem_relations[-1].relation.type == StemRelationType.CHUNG
        assert merged.branch_relations[-1].target == DAEUN_TARGET

    def test_analyze_saeun_with_current_daeun(self, analyzer):
        """测试流年分析并入当前大运"""
        saeun_pillars = SaeunCalculator.calculate(2026, 1)
        plain = analyzer.analyze_saeun(saeun_pillars)
        merged = analyzer.analyze_saeun(saeun_pillars, current_daeun=Pillar(8, 0))
        assert len(merged[0].stem_relations) == len(plain[0].stem_relations) + 1

    def test_transition_period(self, analyzer):
        """测试第一步大运之后为交运期"""
        daeun = [DaeunPillar(1, Pillar(3, 3), 3), DaeunPillar(2, Pillar(4, 4), 13)]
        results = analyzer.analyze_all_daeun(daeun)
        assert [r.is_transition_period for r in results] == [False, True]
        assert results[1].to_dict()['daeun_pillar']['start_age'] == 13


class TestSaeunCalculator:
    """流年流月测试类"""

    def test_calculate(self):
        """测试连续流年"""
        years = SaeunCalculator.calculate(2024, 3)
        assert [s.year for s in years] == [2024, 2025, 2026]
        assert [s.pillar.label for s in years] == ['甲辰', '乙巳', '丙午']

    def test_monthly_luck(self):
        """测试流月：甲辰年正月丙寅，十二月丁丑"""
        months = SaeunCalculator.monthly_luck(2024)
        assert len(months) == 12
        assert months[0].pillar.label == '丙寅'
        assert months[-1].pillar.label == '丁丑'
