#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
计算配置单元测试
测试流派预设叠加与用户覆盖
"""

import pytest
import os
import sys

from pydantic import ValidationError

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from saju_core.calculators.life_stage import EarthLifeStageRule
from saju_core.config.calculation_config import (
    CalculationConfig,
    DEFAULT_CONFIG,
    YongshinPriority,
    build_config,
    list_school_presets,
)
from saju_core.data.hidden_stems import HiddenStemScheme
from saju_core.exceptions import ConfigError


class TestCalculationConfig:
    """配置测试类"""

    def test_defaults(self):
        """测试默认值"""
        config = build_config()
        assert config == DEFAULT_CONFIG
        assert config.deukryeong_weight == 40
        assert config.strength_threshold == 50
        assert config.yongshin_priority == YongshinPriority.JOHU_FIRST

    def test_preset_alias(self):
        """测试预设别名"""
        config = build_config('jeokcheonsu')
        assert config.yongshin_priority == YongshinPriority.EOKBU_FIRST
        assert config.school_preset == 'jeokcheonsu'

    def test_combined_presets(self):
        """测试 "a+b" 组合预设按顺序叠加"""
        config = build_config('eokbu_first+equal_hidden_stems+water_earth')
        assert config.yongshin_priority == YongshinPriority.EOKBU_FIRST
        assert config.hidden_stem_scheme == HiddenStemScheme.EQUAL
        assert config.earth_life_stage_rule == EarthLifeStageRule.FOLLOW_WATER

    def test_overrides_win_over_preset(self):
        """测试用户覆盖优先于预设"""
        config = build_config('eokbu_first', {'yongshin_priority': 'EQUAL_WEIGHT', 'strength_threshold': 45})
        assert config.yongshin_priority == YongshinPriority.EQUAL_WEIGHT
        assert config.strength_threshold == 45

    def test_unknown_preset(self):
        """测试未知预设"""
        with pytest.raises(ConfigError) as exc_info:
            build_config('nonexistent')
        assert exc_info.value.field == 'school_preset'

    def test_unknown_field(self):
        """测试未知配置字段"""
        with pytest.raises(ConfigError) as exc_info:
            build_config(overrides={'no_such_field': 1})
        assert exc_info.value.field == 'no_such_field'

    @pytest.mark.parametrize("overrides", [
        {'stem_weight': -1},
        {'tonggwan_min_ratio': 1.5},
        {'hidden_stem_weights': {4: [0.25, 0.25, 0.25, 0.25]}},
        {'hidden_stem_weights': {2: [1.0]}},
        {'yongshin_priority': 'SOMETHING_ELSE'},
    ])
    def test_invalid_values(self, overrides):
        """测试非法字段值"""
        with pytest.raises(ConfigError):
            build_config(overrides=overrides)

    def test_json_round_trip(self):
        """测试 JSON 序列化往返"""
        config = build_config('saryeong', {'hidden_stem_weights': {2: [0.5, 0.5]}, 'deukse_inseong': 8})
        restored = CalculationConfig.from_json(config.to_json())
        assert restored == config
        assert restored.hidden_stem_weights == {2: (0.5, 0.5)}
        assert '"hidden_stem_weights":{"2":[0.5,0.5]}' in config.to_json()

    def test_config_is_frozen(self):
        """测试配置不可修改"""
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.stem_weight = 2.0

    def test_hidden_stem_weights_read_only(self):
        """测试藏干覆盖权重不可原地修改"""
        config = build_config(overrides={'hidden_stem_weights': {2: [0.5, 0.5]}})
        with pytest.raises(TypeError):
            DEFAULT_CONFIG.hidden_stem_weights[2] = (1.0, 0.0)
        with pytest.raises(TypeError):
            config.hidden_stem_weights[3] = (0.4, 0.3, 0.3)
        assert DEFAULT_CONFIG.hidden_stem_weights == {}
        assert config.model_dump()['hidden_stem_weights'] == {2: [0.5, 0.5]}

    def test_list_school_presets(self):
        """测试预设列表不含别名"""
        ids = [p['id'] for p in list_school_presets()]
        assert 'standard' in ids
        assert 'saryeong' in ids
        assert 'default' not in ids
        assert len(ids) == len(set(ids))
