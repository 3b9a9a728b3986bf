#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
旺衰分析单元测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from saju_core.analyzers.strength_analyzer import (
    STRENGTH_SCALE,
    StrengthAnalyzer,
    StrengthLevel,
    classify_level,
    is_strong_side,
    max_support,
    oppose_basis,
)
from saju_core.calculators.hapwha import evaluate_hap_hwa
from saju_core.config.calculation_config import build_config


class TestClassifyLevel:
    """旺衰定级测试类"""

    @pytest.mark.parametrize("support,expected", [
        (80, StrengthLevel.VERY_STRONG),
        (79, StrengthLevel.STRONG),
        (60, StrengthLevel.STRONG),
        (50, StrengthLevel.SLIGHTLY_STRONG),
        (49, StrengthLevel.SLIGHTLY_WEAK),
        (40, StrengthLevel.SLIGHTLY_WEAK),
        (39, StrengthLevel.WEAK),
        (20, StrengthLevel.WEAK),
        (19, StrengthLevel.VERY_WEAK),
        (0, StrengthLevel.VERY_WEAK),
    ])
    def test_brackets(self, support, expected):
        """测试区间边界"""
        assert classify_level(support, 50, 100) == expected

    def test_monotonic(self):
        """测试总扶助分越高等级不降"""
        ranks = [STRENGTH_SCALE.index(classify_level(s / 2, 50, 100)) for s in range(0, 201)]
        assert ranks == sorted(ranks)

    def test_zero_max_total(self):
        """测试满分为 0 时按比例 0 处理"""
        assert classify_level(0, 0, 0) == StrengthLevel.SLIGHTLY_STRONG

    def test_strong_side_table(self):
        """测试身强身弱归属"""
        assert [is_strong_side(level) for level in STRENGTH_SCALE] == [False, False, False, True, True, True]

    def test_default_max_support(self, default_config):
        """测试默认满分 100"""
        assert max_support(default_config) == pytest.approx(100.0)

    def test_default_oppose_basis(self, default_config):
        """测试默认抑制分基数 110：得令 40 + 得地四支 40 + 比劫三干 30"""
        assert oppose_basis(default_config) == pytest.approx(110.0)

    def test_oppose_floored_at_zero(self, golden_pillars):
        """测试扶助分超过基数时抑制分为 0"""
        config = build_config(overrides={
            'deukji_per_branch': 0.0, 'deukse_bigyeop': 0.0, 'deukse_inseong': 50.0,
        })
        result = StrengthAnalyzer(config).analyze(golden_pillars)
        # 得令 16 + 丙偏印 50 = 66，基数仅 40
        assert result.score.total_support == pytest.approx(66.0)
        assert result.score.total_oppose == pytest.approx(0.0)


class TestStrengthAnalyzer:
    """旺衰分析器测试类"""

    def test_golden_chart(self, golden_pillars):
        """测试标准命盘：戊土生寅月，身弱"""
        result = StrengthAnalyzer().analyze(golden_pillars)

        assert result.score.deukryeong == pytest.approx(16.0)
        assert result.score.deukji == pytest.approx(16.0)
        assert result.score.deukse == pytest.approx(7.0)
        assert result.score.total_support == pytest.approx(39.0)
        assert result.score.total_oppose == pytest.approx(71.0)
        assert result.level == StrengthLevel.WEAK
        assert result.is_strong is False
        assert result.degree == pytest.approx(39.0)
        assert result.details

    def test_strong_chart(self, make_pillars):
        """测试甲木生寅月、多比劫印星，身旺"""
        pillars = make_pillars((8, 2), (0, 2), (0, 2), (1, 11))
        result = StrengthAnalyzer().analyze(pillars)
        assert result.score.total_support == pytest.approx(73.0)
        assert result.level == StrengthLevel.STRONG
        assert result.is_strong is True

    def test_hapwha_changes_deukse(self, make_pillars):
        """测试合化之干按化神计分：丁壬合木于寅月"""
        pillars = make_pillars((3, 3), (8, 2), (0, 0), (0, 0))
        analyzer = StrengthAnalyzer()
        plain = analyzer.analyze(pillars)
        merged = analyzer.analyze(pillars, hap_hwa_evaluations=evaluate_hap_hwa(pillars))
        assert plain.score.deukse == pytest.approx(17.0)
        assert merged.score.deukse == pytest.approx(30.0)

    def test_hapgeo_skips_stems(self, make_pillars):
        """测试合绊之干不计得势：丁壬合于午月"""
        pillars = make_pillars((3, 3), (8, 6), (0, 0), (0, 0))
        result = StrengthAnalyzer().analyze(pillars, hap_hwa_evaluations=evaluate_hap_hwa(pillars))
        assert result.score.deukse == pytest.approx(10.0)

    @pytest.mark.parametrize("days,expected", [
        (3, 40.0),    # 余气戊司令
        (10, 40.0),   # 中气丙司令
        (20, 0.0),    # 本气甲司令
    ])
    def test_saryeong_deukryeong(self, golden_pillars, days, expected):
        """测试司令模式按节后天数判定得令"""
        analyzer = StrengthAnalyzer(build_config('saryeong'))
        result = analyzer.analyze(golden_pillars, days_since_jeol=days)
        assert result.score.deukryeong == pytest.approx(expected)

    def test_saryeong_without_days_falls_back(self, golden_pillars):
        """测试未提供节后天数时按比例计分"""
        result = StrengthAnalyzer(build_config('saryeong')).analyze(golden_pillars)
        assert result.score.deukryeong == pytest.approx(16.0)

    def test_principal_only_deukji(self, golden_pillars):
        """测试得地只看本气"""
        config = build_config(overrides={'hidden_stem_scope_for_strength': 'PRINCIPAL_ONLY'})
        result = StrengthAnalyzer(config).analyze(golden_pillars)
        # 子本气癸 0，辰本气戊 10，午本气丁 10
        assert result.score.deukji == pytest.approx(20.0)

    def test_to_dict(self, golden_pillars):
        """测试序列化"""
        data = StrengthAnalyzer().analyze(golden_pillars).to_dict()
        assert data['level'] == 'WEAK'
        assert data['level_name'] == '身弱'
        assert data['score']['total_support'] == pytest.approx(39.0)
