#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 全局配置

提供：
- 共享 fixtures（标准命盘、默认配置）
- 测试钩子
- 全局配置
"""

import pytest
import sys
import os

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from saju_core.config.calculation_config import DEFAULT_CONFIG
from saju_core.models import PillarSet


# ==================== 命盘 Fixtures ====================

@pytest.fixture(scope="session")
def golden_pillars() -> PillarSet:
    """
    标准命盘：甲子年 丙寅月 戊辰日 庚午时

    各分析器的期望值按此盘手工推算。
    """
    return PillarSet.from_indices(year=(0, 0), month=(2, 2), day=(4, 4), hour=(6, 6))


@pytest.fixture(scope="session")
def default_config():
    return DEFAULT_CONFIG


@pytest.fixture(scope="function")
def make_pillars():
    """按 (天干, 地支) 元组构建四柱"""
    def _make(year, month, day, hour) -> PillarSet:
        return PillarSet.from_indices(year, month, day, hour)
    return _make


# ==================== Pytest 钩子 ====================

def pytest_configure(config):
    """注册自定义标记"""
    config.addinivalue_line("markers", "slow: 标记为慢速测试，可通过 -m 'not slow' 跳过")
    config.addinivalue_line("markers", "unit: 单元测试")


def pytest_collection_modifyitems(config, items):
    """按目录自动添加标记"""
    for item in items:
        if "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)
