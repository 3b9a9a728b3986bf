# -*- coding: utf-8 -*-
"""计算配置"""
