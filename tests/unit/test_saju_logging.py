#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
共享日志工具单元测试
"""

import logging
import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from saju_core.calculators.saju_logging import SafeStreamHandler, safe_log


class _FailingStream:
    """写入时抛出指定异常的流"""

    def __init__(self, error):
        self.error = error

    def write(self, text):
        raise self.error

    def flush(self):
        pass


def _record(message='测试日志'):
    return logging.LogRecord('saju_core', logging.INFO, __file__, 1, message, None, None)


class TestSafeStreamHandler:
    """安全日志处理器测试类"""

    def test_broken_pipe_is_silent(self, monkeypatch):
        """测试管道关闭时不转交默认错误处理"""
        calls = []
        monkeypatch.setattr(logging.Handler, 'handleError', lambda self, record: calls.append(record))
        handler = SafeStreamHandler(_FailingStream(BrokenPipeError()))
        handler.emit(_record())
        assert calls == []

    def test_other_errors_reach_default_handler(self, monkeypatch):
        """测试其他输出异常仍交给默认错误处理"""
        calls = []
        monkeypatch.setattr(logging.Handler, 'handleError', lambda self, record: calls.append(record))
        handler = SafeStreamHandler(_FailingStream(ValueError('closed')))
        record = _record()
        handler.emit(record)
        assert calls == [record]


class TestSafeLog:
    """safe_log 测试类"""

    @pytest.mark.parametrize("level,expected", [
        ('info', logging.INFO),
        ('warning', logging.WARNING),
        ('error', logging.ERROR),
        ('unknown', logging.INFO),
    ])
    def test_levels(self, caplog, level, expected):
        """测试按级别名称输出，未知级别按 info 处理"""
        with caplog.at_level(logging.DEBUG, logger='saju_core'):
            safe_log(level, '📊 流水线日志')
        assert caplog.records[-1].levelno == expected
        assert caplog.records[-1].getMessage() == '📊 流水线日志'
