#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
计算配置

所有权重、阈值、方案均可覆盖。构建顺序：
    基础默认值 → 流派预设 → 用户覆盖（逐字段覆盖，后者优先）

预设定义在 data/school_presets.json，支持 "a+b" 组合，按顺序叠加。
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from saju_core.calculators.life_stage import EarthLifeStageRule
from saju_core.data.catalog_loader import load_json_catalog
from saju_core.data.hidden_stems import HiddenStemScheme
from saju_core.exceptions import CatalogLoadError, ConfigError

logger = logging.getLogger(__name__)


class HiddenStemScope(str, Enum):
    """得地计分时的藏干范围"""
    ALL = "ALL"
    PRINCIPAL_ONLY = "PRINCIPAL_ONLY"


class YongshinPriority(str, Enum):
    """扶抑与调候不一致时的取用优先级"""
    JOHU_FIRST = "JOHU_FIRST"
    EOKBU_FIRST = "EOKBU_FIRST"
    EQUAL_WEIGHT = "EQUAL_WEIGHT"


class CalculationConfig(BaseModel):
    """四柱分析计算配置"""
    model_config = ConfigDict(frozen=True, extra='forbid')

    school_preset: Optional[str] = Field(None, description="已应用的流派预设 ID")

    # 分数汇总
    hidden_stem_scheme: HiddenStemScheme = Field(HiddenStemScheme.STANDARD, description="藏干权重方案")
    hidden_stem_weights: Mapping[int, Tuple[float, ...]] = Field(
        default_factory=dict,
        validate_default=True,
        description="标准方案的覆盖权重，键为藏干个数（1-3），值为本气、中气、余气顺序的权重"
    )
    stem_weight: float = Field(1.0, ge=0, description="天干权重")
    branch_weight: float = Field(1.0, ge=0, description="地支权重")
    include_branch_yin_yang: bool = Field(False, description="是否计入地支本身阴阳")

    # 十二运星
    earth_life_stage_rule: EarthLifeStageRule = Field(EarthLifeStageRule.FOLLOW_FIRE, description="土干长生流派")
    yin_reversal: bool = Field(True, description="阴干逆行")

    # 旺衰
    deukryeong_weight: float = Field(40.0, ge=0, description="得令满分")
    deukji_per_branch: float = Field(10.0, ge=0, description="得地每支满分")
    deukse_bigyeop: float = Field(10.0, ge=0, description="得势：比劫每干得分")
    deukse_inseong: float = Field(7.0, ge=0, description="得势：印星每干得分")
    strength_threshold: float = Field(50.0, ge=0, description="身强判定阈值")
    hidden_stem_scope_for_strength: HiddenStemScope = Field(HiddenStemScope.ALL, description="得地藏干范围")
    proportional_deukryeong: bool = Field(False, description="按节气后天数判定司令藏干")
    saryeong_residual_days: int = Field(7, ge=0, description="余气司令天数")
    saryeong_middle_days: int = Field(7, ge=0, description="中气司令天数")

    # 用神
    yongshin_priority: YongshinPriority = Field(YongshinPriority.JOHU_FIRST, description="扶抑/调候优先级")
    tonggwan_min_ratio: float = Field(0.25, ge=0, le=1, description="通关用神：两强五行各自最低占比")

    @field_validator('hidden_stem_weights')
    @classmethod
    def _validate_hidden_stem_weights(cls, value: Mapping[int, Tuple[float, ...]]) -> Mapping[int, Tuple[float, ...]]:
        for count, weights in value.items():
            if count not in (1, 2, 3):
                raise ValueError(f"藏干个数必须为 1-3: {count}")
            if len(weights) != count:
                raise ValueError(f"藏干个数 {count} 需要 {count} 个权重, 实际 {len(weights)} 个")
            if any(w < 0 for w in weights):
                raise ValueError("藏干权重不能为负数")
        # 只读视图，共享的默认配置不可被原地修改
        return MappingProxyType({count: tuple(weights) for count, weights in value.items()})

    @field_serializer('hidden_stem_weights')
    def _serialize_hidden_stem_weights(self, value: Mapping[int, Tuple[float, ...]]) -> Dict[int, List[float]]:
        return {count: list(weights) for count, weights in value.items()}

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str) -> 'CalculationConfig':
        return cls.model_validate_json(text)


DEFAULT_CONFIG = CalculationConfig()


def _load_presets() -> Dict[str, Dict[str, Any]]:
    raw = load_json_catalog('school_presets.json')
    index: Dict[str, Dict[str, Any]] = {}
    for preset in raw.get('presets', []):
        overlay = preset.get('overlay', {})
        unknown = set(overlay) - set(CalculationConfig.model_fields)
        if unknown:
            raise CatalogLoadError(f"预设 {preset.get('id')} 含未知字段: {sorted(unknown)}",
                                   catalog='school_presets.json')
        for key in [preset['id']] + preset.get('aliases', []):
            index[key] = preset
    return index


SCHOOL_PRESETS = _load_presets()


def list_school_presets() -> List[Dict[str, Any]]:
    """可用流派预设（不含别名）"""
    seen = []
    for preset in SCHOOL_PRESETS.values():
        if preset not in seen:
            seen.append(preset)
    return [{'id': p['id'], 'name': p.get('name', p['id'])} for p in seen]


def _overlay(base: Dict[str, Any], layer: Mapping[str, Any], source: str) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in layer.items():
        if key not in CalculationConfig.model_fields:
            raise ConfigError(f"{source} 含未知配置字段: {key}", field=key)
        merged[key] = value
    return merged


def build_config(preset_id: Optional[str] = None,
                 overrides: Optional[Mapping[str, Any]] = None) -> CalculationConfig:
    """
    构建计算配置

    Args:
        preset_id: 流派预设 ID，可用 "a+b" 组合多个预设
        overrides: 用户覆盖字段

    Returns:
        CalculationConfig

    Raises:
        ConfigError: 未知预设、未知字段或字段值非法
    """
    merged = DEFAULT_CONFIG.model_dump()
    if preset_id:
        for part in preset_id.split('+'):
            preset = SCHOOL_PRESETS.get(part.strip())
            if preset is None:
                raise ConfigError(f"未知流派预设: {part}", field='school_preset')
            merged = _overlay(merged, preset.get('overlay', {}), f"预设 {part}")
        merged['school_preset'] = preset_id
    if overrides:
        merged = _overlay(merged, overrides, "用户配置")

    try:
        config = CalculationConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"配置校验失败: {e}") from e
    logger.debug(f"📊 计算配置: preset={preset_id}, overrides={sorted(overrides or {})}")
    return config
