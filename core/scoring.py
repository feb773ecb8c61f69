"""
匹配评分：候选结构与借款人画像的匹配度 (0-100)

评分项：
- 基础分 70
- 月供/预算比：<=0.8 +10，<=1.0 +5，<=1.2 -5，否则 -10（预算为 0 时跳过）
- 期限偏好：命中 +10*权重，否则 -5*权重
- 首付偏好：同上
- 产品类型与请求一致 +5
结果截断到 [0, 100]。纯函数，相同输入得到相同分数。
"""
import dataclasses
from typing import Iterable, List, Optional, Sequence

from config.constants import (
    DownPaymentPreference, TermPreference, PARAM_DOWN_PAYMENT, PARAM_TERM,
)
from config.settings import (
    BASE_MATCH_SCORE, BUDGET_OVERRUN_PENALTY, BUDGET_RATIO_TIERS, INSTRUMENT_MATCH_BONUS,
    LONG_TERM_MIN, MAX_MATCH_SCORE, MEDIUM_TERM_RANGE, MIN_MATCH_SCORE, MINIMAL_DOWN_MAX,
    PREFERENCE_BONUS, PREFERENCE_PENALTY, SHORT_TERM_MAX, STANDARD_DOWN_RANGE,
    SUBSTANTIAL_DOWN_MIN,
)
from core.models import DealStructureCandidate, FinancialProfile, MatchingParameter, ScoreAdjustment


def _find_param(weights: Iterable[MatchingParameter], param_id: str) -> Optional[MatchingParameter]:
    return next((p for p in weights if p.id == param_id), None)


def term_matches(preference: str, term: int) -> bool:
    if preference == TermPreference.SHORT.value:
        return term <= SHORT_TERM_MAX
    if preference == TermPreference.MEDIUM.value:
        low, high = MEDIUM_TERM_RANGE
        return low <= term <= high
    if preference == TermPreference.LONG.value:
        return term >= LONG_TERM_MIN
    return False


def down_payment_matches(preference: str, down_payment_percent: float) -> bool:
    if preference == DownPaymentPreference.MINIMAL.value:
        return down_payment_percent <= MINIMAL_DOWN_MAX
    if preference == DownPaymentPreference.STANDARD.value:
        low, high = STANDARD_DOWN_RANGE
        return low <= down_payment_percent <= high
    if preference == DownPaymentPreference.SUBSTANTIAL.value:
        return down_payment_percent >= SUBSTANTIAL_DOWN_MIN
    return False


def _budget_adjustment(monthly_payment: float, budget: float) -> ScoreAdjustment:
    ratio = monthly_payment / budget
    for ceiling, delta in BUDGET_RATIO_TIERS:
        if ratio <= ceiling:
            return ScoreAdjustment("budget", delta, f"payment/budget ratio {ratio:.2f} <= {ceiling}")
    return ScoreAdjustment("budget", BUDGET_OVERRUN_PENALTY, f"payment/budget ratio {ratio:.2f} > 1.2")


def _preference_adjustment(factor: str, param: MatchingParameter, matched: bool) -> ScoreAdjustment:
    weight = param.weight / 100
    if matched:
        return ScoreAdjustment(factor, PREFERENCE_BONUS * weight, f"matches '{param.value}' preference")
    return ScoreAdjustment(factor, -PREFERENCE_PENALTY * weight, f"outside '{param.value}' preference")


def explain(
    candidate: DealStructureCandidate,
    profile: Optional[FinancialProfile],
    weights: Sequence[MatchingParameter] = (),
    instrument_type: Optional[str] = None,
) -> List[ScoreAdjustment]:
    """返回构成分数的各项调整（不含基础分）"""
    adjustments = []

    budget = (profile.monthly_budget if profile else 0) or 0
    if budget > 0:
        adjustments.append(_budget_adjustment(candidate.monthly_payment, budget))

    term_param = _find_param(weights, PARAM_TERM)
    if term_param:
        matched = term_matches(str(term_param.value), candidate.term)
        adjustments.append(_preference_adjustment("term", term_param, matched))

    dp_param = _find_param(weights, PARAM_DOWN_PAYMENT)
    if dp_param:
        matched = down_payment_matches(str(dp_param.value), candidate.down_payment_percent)
        adjustments.append(_preference_adjustment("down_payment", dp_param, matched))

    if instrument_type and candidate.instrument_type == instrument_type:
        adjustments.append(ScoreAdjustment("instrument", INSTRUMENT_MATCH_BONUS, f"instrument is {instrument_type}"))

    return adjustments


def clamp_score(value: float) -> float:
    return min(MAX_MATCH_SCORE, max(MIN_MATCH_SCORE, value))


def score(
    candidate: DealStructureCandidate,
    profile: Optional[FinancialProfile],
    weights: Sequence[MatchingParameter] = (),
    instrument_type: Optional[str] = None,
) -> float:
    adjustments = explain(candidate, profile, weights, instrument_type)
    return clamp_score(BASE_MATCH_SCORE + sum(a.delta for a in adjustments))


def score_candidate(
    candidate: DealStructureCandidate,
    profile: Optional[FinancialProfile],
    weights: Sequence[MatchingParameter] = (),
    instrument_type: Optional[str] = None,
) -> DealStructureCandidate:
    """返回带分数和评分明细的新候选，原对象不变"""
    adjustments = explain(candidate, profile, weights, instrument_type)
    total = clamp_score(BASE_MATCH_SCORE + sum(a.delta for a in adjustments))
    return dataclasses.replace(candidate, match_score=total, score_breakdown=tuple(adjustments))
