#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
四柱（사주）分析核心

输入四柱干支索引与计算配置，输出旺衰、格局、用神、神煞、运势等分析结果。
"""

from saju_core.models import Pillar, PillarSet
from saju_core.config.calculation_config import CalculationConfig, build_config
from saju_core.pipeline.analysis_assembler import SajuAnalysisAssembler, AnalysisKey

__all__ = [
    'Pillar',
    'PillarSet',
    'CalculationConfig',
    'build_config',
    'SajuAnalysisAssembler',
    'AnalysisKey',
]

__version__ = '1.0.0'
