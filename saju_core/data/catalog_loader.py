#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
静态 JSON 目录加载

目录在模块导入时加载并校验，缺项或无法解析的值立即抛出 CatalogLoadError。
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Type, TypeVar

from saju_core.exceptions import CatalogLoadError, InvalidEnumValueError
from saju_core.data.stems_branches import STEM_HANJA, BRANCH_HANJA

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parent

E = TypeVar('E')


@lru_cache(maxsize=None)
def load_json_catalog(name: str) -> Any:
    """
    读取 data 目录下的 JSON 目录文件

    Args:
        name: 文件名（如 johu_catalog.json）

    Raises:
        CatalogLoadError: 文件缺失或 JSON 格式错误
    """
    path = CATALOG_DIR / name
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"目录文件不存在: {path}", catalog=name) from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"目录文件格式错误: {path}: {e}", catalog=name) from e
    logger.debug(f"✅ 已加载目录: {name}")
    return data


def enum_value_parser(enum_cls: Type[E], source: str) -> Callable[[Any], E]:
    """
    生成枚举解析函数

    Args:
        enum_cls: 目标枚举
        source: 来源描述，用于错误信息

    Returns:
        解析函数，无法解析时抛出 InvalidEnumValueError
    """
    def parse(raw: Any) -> E:
        try:
            return enum_cls(raw)
        except ValueError as e:
            raise InvalidEnumValueError(enum_cls.__name__, source, raw) from e
    return parse


def parse_stem_char(raw: Any, source: str) -> int:
    if raw not in STEM_HANJA:
        raise InvalidEnumValueError('Stem', source, raw)
    return STEM_HANJA.index(raw)


def parse_branch_char(raw: Any, source: str) -> int:
    if raw not in BRANCH_HANJA:
        raise InvalidEnumValueError('Branch', source, raw)
    return BRANCH_HANJA.index(raw)
