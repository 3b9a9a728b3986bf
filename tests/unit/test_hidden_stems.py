#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
地支藏干与分数汇总单元测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from saju_core.calculators.scoring import ChartScore, score_pillars
from saju_core.data.hidden_stems import (
    HiddenStemRole,
    HiddenStemScheme,
    hidden_stems_of,
    principal_stem,
)
from saju_core.data.stems_branches import Element, Polarity, ELEMENT_ORDER


class TestHiddenStems:
    """藏干表测试类"""

    @pytest.mark.parametrize("branch", range(12))
    def test_standard_weights_sum_to_one(self, branch):
        """测试标准方案每支权重和为 1"""
        assert sum(h.weight for h in hidden_stems_of(branch)) == pytest.approx(1.0)

    def test_three_hidden_stems(self):
        """测试寅藏甲丙戊，权重 0.6/0.3/0.1"""
        hidden = hidden_stems_of(2)
        assert [h.stem for h in hidden] == [0, 2, 4]
        assert [h.role for h in hidden] == [HiddenStemRole.MAIN, HiddenStemRole.MIDDLE, HiddenStemRole.RESIDUAL]
        assert [h.weight for h in hidden] == pytest.approx([0.6, 0.3, 0.1])

    def test_two_hidden_stems(self):
        """测试午藏丁己，权重 0.7/0.3"""
        hidden = hidden_stems_of(6)
        assert [h.stem for h in hidden] == [3, 5]
        assert [h.weight for h in hidden] == pytest.approx([0.7, 0.3])

    def test_equal_scheme(self):
        """测试均分方案"""
        hidden = hidden_stems_of(1, HiddenStemScheme.EQUAL)
        assert [h.weight for h in hidden] == pytest.approx([1 / 3, 1 / 3, 1 / 3])

    def test_role_weight_override_is_normalized(self):
        """测试覆盖权重按地支归一化"""
        hidden = hidden_stems_of(6, role_weights={2: [1.0, 1.0]})
        assert [h.weight for h in hidden] == pytest.approx([0.5, 0.5])

    def test_zero_weight_sum_gives_zero_weights(self):
        """测试权重和为 0 时全部为 0"""
        hidden = hidden_stems_of(0, role_weights={1: [0.0]})
        assert [h.weight for h in hidden] == [0.0]

    def test_weight_count_mismatch_raises(self):
        """测试权重个数与藏干个数不符时报错"""
        with pytest.raises(ValueError):
            hidden_stems_of(6, role_weights={2: [1.0]})

    def test_principal_stem(self):
        """测试本气"""
        assert principal_stem(0) == 9    # 子 → 癸
        assert principal_stem(4) == 4    # 辰 → 戊
        assert principal_stem(23) == 8   # 亥 → 壬


class TestScoring:
    """分数汇总测试类"""

    def test_golden_element_tally(self, golden_pillars):
        """测试标准命盘的五行分数"""
        score = score_pillars(golden_pillars)
        expected = {
            Element.WOOD: 1.9,
            Element.FIRE: 2.0,
            Element.EARTH: 2.0,
            Element.METAL: 1.0,
            Element.WATER: 1.1,
        }
        for element, value in expected.items():
            assert score.elements[element] == pytest.approx(value)
        assert score.element_total == pytest.approx(8.0)

    def test_ten_god_tally_matches_element_total(self, golden_pillars):
        """测试十神总分与五行总分一致"""
        score = score_pillars(golden_pillars)
        assert sum(score.ten_gods.values()) == pytest.approx(score.element_total)

    def test_stem_weight(self, golden_pillars):
        """测试天干权重"""
        score = score_pillars(golden_pillars, stem_weight=2.0)
        assert score.element_total == pytest.approx(12.0)

    def test_branch_yin_yang_adds_polarity_only(self, golden_pillars):
        """测试计入地支阴阳只影响阴阳分"""
        base = score_pillars(golden_pillars)
        extra = score_pillars(golden_pillars, include_branch_yin_yang=True)
        # 子寅辰午皆为阳支
        assert extra.polarities[Polarity.YANG] == pytest.approx(base.polarities[Polarity.YANG] + 4)
        assert extra.element_total == pytest.approx(base.element_total)

    def test_element_ratio_zero_total(self):
        """测试总分为 0 时占比为 0"""
        score = ChartScore({e: 0.0 for e in ELEMENT_ORDER}, {}, {})
        assert score.element_ratio(Element.WOOD) == 0.0

    def test_to_dict_uses_value_keys(self, golden_pillars):
        """测试序列化使用枚举值为键"""
        data = score_pillars(golden_pillars).to_dict()
        assert set(data['elements']) == {'WOOD', 'FIRE', 'EARTH', 'METAL', 'WATER'}
        assert data['elements']['WATER'] == pytest.approx(1.1)
