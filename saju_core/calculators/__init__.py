# -*- coding: utf-8 -*-
"""基础计算器：循环运算、十神、十二运星、评分、刑冲合害"""
