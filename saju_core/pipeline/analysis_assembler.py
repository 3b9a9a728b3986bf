#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
四柱分析汇总器

按固定顺序执行各分析阶段，每个阶段写入若干结果键并记录追踪节点，
最终输出以 AnalysisKey 为键的分析对象。
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from saju_core.analyzers.gyeokguk_classifier import GyeokgukClassifier, GyeokgukResult
from saju_core.analyzers.luck_interaction_analyzer import (
    DaeunPillar, LuckInteractionAnalyzer, SaeunCalculator,
)
from saju_core.analyzers.palace_analyzer import analyze_palaces
from saju_core.analyzers.shinsal_composite import ShinsalCompositeInterpreter
from saju_core.analyzers.shinsal_detector import ShinsalDetector
from saju_core.analyzers.shinsal_weight import ShinsalWeightCalculator
from saju_core.analyzers.strength_analyzer import StrengthAnalyzer, StrengthResult
from saju_core.analyzers.yongshin_decision_support import (
    YongshinDecisionSupport, YongshinResult, count_chart_elements,
)
from saju_core.calculators.branch_relations import find_branch_relation_hits, resolve_branch_relations
from saju_core.calculators.gongmang import calculate_gongmang
from saju_core.calculators.hapwha import HapHwaEvaluation, evaluate_hap_hwa
from saju_core.calculators.life_stage import life_stage_of
from saju_core.calculators.saju_logging import safe_log
from saju_core.calculators.scoring import ChartScore, score_pillars
from saju_core.calculators.stem_relations import detect_stem_relations, score_stem_relations
from saju_core.calculators.ten_gods import TEN_GOD_ORDER, branch_ten_gods, ten_god_of
from saju_core.config.calculation_config import CalculationConfig, DEFAULT_CONFIG
from saju_core.data.stems_branches import ELEMENT_ORDER
from saju_core.models import Pillar, PillarPosition, PillarSet


class AnalysisKey(str, Enum):
    STRENGTH = "STRENGTH"
    YONGSHIN = "YONGSHIN"
    GYEOKGUK = "GYEOKGUK"
    HAPWHA = "HAPWHA"
    SIBI_UNSEONG = "SIBI_UNSEONG"
    GONGMANG = "GONGMANG"
    SHINSAL = "SHINSAL"
    WEIGHTED_SHINSAL = "WEIGHTED_SHINSAL"
    SHINSAL_COMPOSITES = "SHINSAL_COMPOSITES"
    PALACE = "PALACE"
    DAEUN = "DAEUN"
    SAEUN = "SAEUN"
    CHEONGAN_RELATIONS = "CHEONGAN_RELATIONS"
    RESOLVED_JIJI = "RESOLVED_JIJI"
    SCORED_CHEONGAN = "SCORED_CHEONGAN"
    TRACE = "TRACE"
    OHAENG_DISTRIBUTION = "OHAENG_DISTRIBUTION"
    TEN_GODS = "TEN_GODS"


def _plain(value: Any) -> Any:
    """结果对象 → JSON 可序列化的普通值"""
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {(k.value if isinstance(k, Enum) else k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class SajuAnalysis:
    pillars: PillarSet
    results: Dict[AnalysisKey, Any]

    def get(self, key: AnalysisKey, default: Any = None) -> Any:
        return self.results.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        data = {key.value: _plain(value) for key, value in self.results.items()}
        data['PILLARS'] = self.pillars.to_dict()
        return data

    def to_canonical_json(self) -> str:
        """稳定序列化：键排序、缩进 2"""
        return json.dumps(self.to_dict(), sort_keys=True, indent=2, ensure_ascii=False)


@dataclass
class _Context:
    pillars: PillarSet
    days_since_jeol: Optional[int]
    daeun_pillars: Sequence[DaeunPillar]
    saeun_start_year: Optional[int]
    saeun_count: int
    current_daeun: Optional[Pillar]
    score: Optional[ChartScore] = None
    hap_hwa: List[HapHwaEvaluation] = field(default_factory=list)
    strength: Optional[StrengthResult] = None
    gyeokguk: Optional[GyeokgukResult] = None
    yongshin: Optional[YongshinResult] = None
    results: Dict[AnalysisKey, Any] = field(default_factory=dict)
    trace: List[Dict[str, Any]] = field(default_factory=list)


class SajuAnalysisAssembler:
    """四柱分析汇总器"""

    def __init__(self, config: Optional[CalculationConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._stages: Tuple[Tuple[str, Callable[[_Context], Tuple[AnalysisKey, ...]]], ...] = (
            ('hapwha', self._stage_hapwha),
            ('scoring', self._stage_scoring),
            ('relations', self._stage_relations),
            ('strength', self._stage_strength),
            ('gyeokguk', self._stage_gyeokguk),
            ('yongshin', self._stage_yongshin),
            ('life_stage', self._stage_life_stage),
            ('gongmang', self._stage_gongmang),
            ('shinsal', self._stage_shinsal),
            ('palace', self._stage_palace),
            ('luck', self._stage_luck),
        )

    def assemble(self, pillars: PillarSet,
                 days_since_jeol: Optional[int] = None,
                 daeun_pillars: Sequence[DaeunPillar] = (),
                 saeun_start_year: Optional[int] = None,
                 saeun_count: int = 10,
                 current_daeun: Optional[Pillar] = None) -> SajuAnalysis:
        """
        执行完整分析

        Args:
            pillars: 四柱
            days_since_jeol: 距上一个节的天数
            daeun_pillars: 大运列表
            saeun_start_year: 流年起始年份，为空时不分析流年
            saeun_count: 流年年数
            current_daeun: 当前大运干支，流年分析时并入

        Returns:
            SajuAnalysis
        """
        safe_log('info', f"🔍 开始四柱分析: {' '.join(p.label for _, p in pillars.iter_positions())}")
        ctx = _Context(pillars, days_since_jeol, daeun_pillars, saeun_start_year, saeun_count, current_daeun)
        for name, stage in self._stages:
            keys = stage(ctx)
            ctx.trace.append({'stage': name, 'outputs': [k.value for k in keys]})
            safe_log('debug', f"   阶段 {name} 完成: {[k.value for k in keys]}")
        ctx.results[AnalysisKey.TRACE] = ctx.trace
        safe_log('info', "✅ 四柱分析完成")
        return SajuAnalysis(pillars, ctx.results)

    # ==================== 各阶段 ====================

    def _stage_scoring(self, ctx: _Context):
        config = self.config
        score = score_pillars(
            ctx.pillars, config.hidden_stem_scheme, config.hidden_stem_weights,
            config.stem_weight, config.branch_weight, config.include_branch_yin_yang,
        )
        ctx.score = score
        day_master = ctx.pillars.day_master
        ctx.results[AnalysisKey.OHAENG_DISTRIBUTION] = {
            'scores': {e.value: round(score.elements[e], 6) for e in ELEMENT_ORDER},
            'ratios': {e.value: round(score.element_ratio(e), 6) for e in ELEMENT_ORDER},
            'polarities': score.to_dict()['polarities'],
            'dominant': score.dominant_elements()[0].value,
            'counts': {
                e.value: c for e, c in count_chart_elements(ctx.pillars, ctx.hap_hwa).items()
            },
        }
        ctx.results[AnalysisKey.TEN_GODS] = {
            'tally': {t.value: round(score.ten_gods[t], 6) for t in TEN_GOD_ORDER},
            'positions': {
                position.value: {
                    'stem': None if position == PillarPosition.DAY else ten_god_of(day_master, pillar.stem).value,
                    'branch': [t.value for t in branch_ten_gods(day_master, pillar.branch)],
                }
                for position, pillar in ctx.pillars.iter_positions()
            },
        }
        return AnalysisKey.OHAENG_DISTRIBUTION, AnalysisKey.TEN_GODS

    def _stage_relations(self, ctx: _Context):
        stems = [p.stem for _, p in ctx.pillars.iter_positions()]
        ctx.results[AnalysisKey.CHEONGAN_RELATIONS] = detect_stem_relations(stems)
        ctx.results[AnalysisKey.SCORED_CHEONGAN] = score_stem_relations(ctx.pillars)
        ctx.results[AnalysisKey.RESOLVED_JIJI] = resolve_branch_relations(find_branch_relation_hits(ctx.pillars))
        return AnalysisKey.CHEONGAN_RELATIONS, AnalysisKey.SCORED_CHEONGAN, AnalysisKey.RESOLVED_JIJI

    def _stage_hapwha(self, ctx: _Context):
        ctx.hap_hwa = evaluate_hap_hwa(ctx.pillars)
        ctx.results[AnalysisKey.HAPWHA] = ctx.hap_hwa
        return (AnalysisKey.HAPWHA,)

    def _stage_strength(self, ctx: _Context):
        ctx.strength = StrengthAnalyzer(self.config).analyze(ctx.pillars, ctx.days_since_jeol, ctx.hap_hwa)
        ctx.results[AnalysisKey.STRENGTH] = ctx.strength
        return (AnalysisKey.STRENGTH,)

    def _stage_gyeokguk(self, ctx: _Context):
        ctx.gyeokguk = GyeokgukClassifier.classify(ctx.pillars, ctx.strength, ctx.score, ctx.hap_hwa)
        ctx.results[AnalysisKey.GYEOKGUK] = ctx.gyeokguk
        return (AnalysisKey.GYEOKGUK,)

    def _stage_yongshin(self, ctx: _Context):
        ctx.yongshin = YongshinDecisionSupport(self.config).decide(
            ctx.pillars, ctx.strength, ctx.score, ctx.gyeokguk, ctx.hap_hwa,
        )
        ctx.results[AnalysisKey.YONGSHIN] = ctx.yongshin
        return (AnalysisKey.YONGSHIN,)

    def _stage_life_stage(self, ctx: _Context):
        day_master = ctx.pillars.day_master
        ctx.results[AnalysisKey.SIBI_UNSEONG] = {
            position.value: life_stage_of(day_master, pillar.branch,
                                          self.config.earth_life_stage_rule, self.config.yin_reversal).value
            for position, pillar in ctx.pillars.iter_positions()
        }
        return (AnalysisKey.SIBI_UNSEONG,)

    def _stage_gongmang(self, ctx: _Context):
        ctx.results[AnalysisKey.GONGMANG] = calculate_gongmang(ctx.pillars)
        return (AnalysisKey.GONGMANG,)

    def _stage_shinsal(self, ctx: _Context):
        hits = ShinsalDetector().detect(ctx.pillars)
        ctx.results[AnalysisKey.SHINSAL] = hits
        ctx.results[AnalysisKey.WEIGHTED_SHINSAL] = ShinsalWeightCalculator.weight_all(hits)
        ctx.results[AnalysisKey.SHINSAL_COMPOSITES] = ShinsalCompositeInterpreter.detect(hits)
        return AnalysisKey.SHINSAL, AnalysisKey.WEIGHTED_SHINSAL, AnalysisKey.SHINSAL_COMPOSITES

    def _stage_palace(self, ctx: _Context):
        ctx.results[AnalysisKey.PALACE] = analyze_palaces(
            ctx.pillars, self.config.earth_life_stage_rule, self.config.yin_reversal,
        )
        return (AnalysisKey.PALACE,)

    def _stage_luck(self, ctx: _Context):
        analyzer = LuckInteractionAnalyzer(
            ctx.pillars, ctx.yongshin.yongshin, ctx.yongshin.gisin,
            self.config.earth_life_stage_rule, self.config.yin_reversal,
        )
        ctx.results[AnalysisKey.DAEUN] = analyzer.analyze_all_daeun(ctx.daeun_pillars)
        saeun = []
        if ctx.saeun_start_year is not None:
            saeun_pillars = SaeunCalculator.calculate(ctx.saeun_start_year, ctx.saeun_count)
            analyses = analyzer.analyze_saeun(saeun_pillars, ctx.current_daeun)
            saeun = [{'year': s.year, 'analysis': a.to_dict()} for s, a in zip(saeun_pillars, analyses)]
        ctx.results[AnalysisKey.SAEUN] = saeun
        return AnalysisKey.DAEUN, AnalysisKey.SAEUN
