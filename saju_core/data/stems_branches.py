#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
天干地支基础数据

天干索引 0-9：甲乙丙丁戊己庚辛壬癸
地支索引 0-11：子丑寅卯辰巳午未申酉戌亥
阴阳约定：偶数索引为阳（天干甲丙戊庚壬，地支子寅辰午申戌）。
"""

from enum import Enum


class Element(str, Enum):
    """五行（오행）"""
    WOOD = "WOOD"    # 木
    FIRE = "FIRE"    # 火
    EARTH = "EARTH"  # 土
    METAL = "METAL"  # 金
    WATER = "WATER"  # 水


class Polarity(str, Enum):
    """阴阳"""
    YANG = "YANG"
    YIN = "YIN"


# 五行固定顺序（木火土金水），用于稳定输出
ELEMENT_ORDER = (Element.WOOD, Element.FIRE, Element.EARTH, Element.METAL, Element.WATER)

STEM_COUNT = 10
BRANCH_COUNT = 12

STEM_HANJA = ('甲', '乙', '丙', '丁', '戊', '己', '庚', '辛', '壬', '癸')
STEM_HANGUL = ('갑', '을', '병', '정', '무', '기', '경', '신', '임', '계')
BRANCH_HANJA = ('子', '丑', '寅', '卯', '辰', '巳', '午', '未', '申', '酉', '戌', '亥')
BRANCH_HANGUL = ('자', '축', '인', '묘', '진', '사', '오', '미', '신', '유', '술', '해')

STEM_ELEMENTS = (
    Element.WOOD, Element.WOOD,
    Element.FIRE, Element.FIRE,
    Element.EARTH, Element.EARTH,
    Element.METAL, Element.METAL,
    Element.WATER, Element.WATER,
)

BRANCH_ELEMENTS = (
    Element.WATER,  # 子
    Element.EARTH,  # 丑
    Element.WOOD,   # 寅
    Element.WOOD,   # 卯
    Element.EARTH,  # 辰
    Element.FIRE,   # 巳
    Element.FIRE,   # 午
    Element.EARTH,  # 未
    Element.METAL,  # 申
    Element.METAL,  # 酉
    Element.EARTH,  # 戌
    Element.WATER,  # 亥
)

ELEMENT_HANJA = {
    Element.WOOD: '木',
    Element.FIRE: '火',
    Element.EARTH: '土',
    Element.METAL: '金',
    Element.WATER: '水',
}


def parse_stem(text: str) -> int:
    """汉字或韩文天干转索引"""
    if text in STEM_HANJA:
        return STEM_HANJA.index(text)
    if text in STEM_HANGUL:
        return STEM_HANGUL.index(text)
    raise ValueError(f"未知天干: {text}")


def parse_branch(text: str) -> int:
    """汉字或韩文地支转索引"""
    if text in BRANCH_HANJA:
        return BRANCH_HANJA.index(text)
    if text in BRANCH_HANGUL:
        return BRANCH_HANGUL.index(text)
    raise ValueError(f"未知地支: {text}")
