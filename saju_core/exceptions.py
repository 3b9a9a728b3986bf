#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
异常定义

- 加载期致命错误：静态目录缺项或格式错误，导入时立即抛出
- 配置错误：未知流派预设、非法覆盖字段
"""


class SajuError(Exception):
    """
    分析核心异常基类

    用于区分业务规则错误与系统错误。
    """
    def __init__(self, message: str, error_type: str = "saju_error"):
        self.message = message
        self.error_type = error_type
        super().__init__(message)


class CatalogLoadError(SajuError):
    """静态目录加载错误（缺项、格式错误）"""
    def __init__(self, message: str, catalog: str = None):
        self.catalog = catalog
        error_type = f"catalog_load_error:{catalog}" if catalog else "catalog_load_error"
        super().__init__(message, error_type=error_type)


class InvalidEnumValueError(CatalogLoadError):
    """目录中的字符串无法解析为对应枚举"""
    def __init__(self, enum_name: str, source: str, raw):
        self.enum_name = enum_name
        self.raw = raw
        super().__init__(f"Invalid {enum_name} in {source}: {raw}", catalog=source)


class ConfigError(SajuError):
    """计算配置错误"""
    def __init__(self, message: str, field: str = None):
        self.field = field
        error_type = f"config_error:{field}" if field else "config_error"
        super().__init__(message, error_type=error_type)
