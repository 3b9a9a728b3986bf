#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
四柱分析核心共享日志工具

提供安全的日志输出函数，捕获 Broken pipe 等异常。
供各分析器与流水线共用。
"""

import logging
import sys


class SafeStreamHandler(logging.StreamHandler):
    """安全的 StreamHandler，下游关闭管道时静默丢弃该条日志"""
    def handleError(self, record):
        # StreamHandler.emit 已捕获异常并转交此处
        if isinstance(sys.exc_info()[1], BrokenPipeError):
            return
        super().handleError(record)


logger = logging.getLogger("saju_core")
if not logger.handlers:
    handler = SafeStreamHandler()
    handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def safe_log(level, message):
    """
    按级别名称输出日志，未知级别按 info 处理
    """
    logger.log(_LEVELS.get(level, logging.INFO), message)
