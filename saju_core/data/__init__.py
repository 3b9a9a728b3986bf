# -*- coding: utf-8 -*-
"""静态数据：干支表、藏干表、JSON 目录"""
