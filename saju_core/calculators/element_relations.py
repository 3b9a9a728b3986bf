#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
五行生克关系模块

提供五行生克关系的常量定义和计算函数。
"""

from enum import Enum

from saju_core.data.stems_branches import Element


class ElementRelation(str, Enum):
    """以日主五行为参照的关系类型"""
    SAME = "SAME"                      # 同我
    ME_GENERATING = "ME_GENERATING"    # 我生
    ME_CONTROLLING = "ME_CONTROLLING"  # 我克
    GENERATING_ME = "GENERATING_ME"    # 生我
    CONTROLLING_ME = "CONTROLLING_ME"  # 克我


# 五行生克关系定义
ELEMENT_RELATIONS = {
    Element.WOOD: {'generates': Element.FIRE, 'controls': Element.EARTH,
                   'generated_by': Element.WATER, 'controlled_by': Element.METAL},
    Element.FIRE: {'generates': Element.EARTH, 'controls': Element.METAL,
                   'generated_by': Element.WOOD, 'controlled_by': Element.WATER},
    Element.EARTH: {'generates': Element.METAL, 'controls': Element.WATER,
                    'generated_by': Element.FIRE, 'controlled_by': Element.WOOD},
    Element.METAL: {'generates': Element.WATER, 'controls': Element.WOOD,
                    'generated_by': Element.EARTH, 'controlled_by': Element.FIRE},
    Element.WATER: {'generates': Element.WOOD, 'controls': Element.FIRE,
                    'generated_by': Element.METAL, 'controlled_by': Element.EARTH},
}


def generates(element: Element) -> Element:
    """我生者"""
    return ELEMENT_RELATIONS[element]['generates']


def controls(element: Element) -> Element:
    """我克者"""
    return ELEMENT_RELATIONS[element]['controls']


def generated_by(element: Element) -> Element:
    """生我者"""
    return ELEMENT_RELATIONS[element]['generated_by']


def controlled_by(element: Element) -> Element:
    """克我者"""
    return ELEMENT_RELATIONS[element]['controlled_by']


def get_element_relation(day_element: Element, target_element: Element) -> ElementRelation:
    """
    判断五行生克关系

    Args:
        day_element: 日主五行
        target_element: 目标五行

    Returns:
        ElementRelation: 关系类型
    """
    if day_element == target_element:
        return ElementRelation.SAME

    relations = ELEMENT_RELATIONS[day_element]
    if target_element == relations['generates']:
        return ElementRelation.ME_GENERATING
    if target_element == relations['controls']:
        return ElementRelation.ME_CONTROLLING
    if target_element == relations['generated_by']:
        return ElementRelation.GENERATING_ME
    return ElementRelation.CONTROLLING_ME
