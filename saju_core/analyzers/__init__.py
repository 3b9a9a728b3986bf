# -*- coding: utf-8 -*-
"""分析器：旺衰、格局、用神、神煞、运势、宫位"""
