# -*- coding: utf-8 -*-
"""分析流水线"""
