"""
交易结构生成与排序

状态：idle -> generating -> ranked。
generating 从同一本金生成固定四个候选（低月供、均衡、低首付、最低总成本），
ranked 对四个候选评分并按分数降序排列，同分保持生成顺序。候选不会被丢弃。
"""
import logging
from typing import Iterable, List, Optional, Sequence, Union

from config.constants import (
    FinancingType, InstrumentType, SynthesizerState, TermPreference, PARAM_TERM,
)
from config.settings import (
    CASH_ON_HAND_USABLE_FRACTION, CREDIT_SCORE_RATE_TIERS, DEFAULT_DOWN_PAYMENT_FRACTION,
    DEFAULT_CREDIT_SCORE, DEFAULT_INSTRUMENT_TYPE, DEFAULT_MATCHING_PARAMETERS, FALLBACK_BASE_RATE,
    LOWEST_COST_TERM, MINIMAL_DOWN_FRACTION, STRUCTURE_RATE_OFFSETS,
)
from core.calculator import compute_payment, round_half_up
from core.models import (
    DealStructureCandidate, FinancialProfile, LenderRateProfile, LoanParameters,
    MatchingParameter, RateRequest,
)
from core.rate_adjustment import credit_tier_for_score, resolve_effective_rate
from core.schedule_generator import generate_schedule
from core.scoring import score_candidate

logger = logging.getLogger(__name__)


def base_rate_for_credit_score(credit_score: float) -> float:
    """按信用分取基准利率(%)"""
    for floor, rate in CREDIT_SCORE_RATE_TIERS:
        if credit_score >= floor:
            return rate
    return FALLBACK_BASE_RATE


def default_matching_parameters() -> List[MatchingParameter]:
    return [MatchingParameter.from_dict(p) for p in DEFAULT_MATCHING_PARAMETERS]


def max_down_payment(principal: float, profile: FinancialProfile) -> float:
    """可用首付上限：min(意愿上限, 现金的 80%)，未填写时按本金 20%"""
    fallback = principal * DEFAULT_DOWN_PAYMENT_FRACTION
    preferred = profile.max_down_payment if (profile.max_down_payment or 0) > 0 else fallback
    from_cash = profile.cash_on_hand * CASH_ON_HAND_USABLE_FRACTION if (profile.cash_on_hand or 0) > 0 else fallback
    return max(0.0, min(preferred, from_cash, principal))


class StructureSynthesizer:
    """单次请求的结构生成器，实例不跨请求复用"""

    def __init__(
        self,
        loan: LoanParameters,
        profile: Optional[FinancialProfile] = None,
        lender_catalogue: Optional[Iterable[Union[LenderRateProfile, dict]]] = None,
        weights: Optional[Sequence[MatchingParameter]] = None,
        instrument_type: Optional[str] = None,
    ):
        self.loan = loan
        self.profile = profile or FinancialProfile()
        self.lenders = [
            lender if isinstance(lender, LenderRateProfile) else LenderRateProfile.from_dict(lender)
            for lender in (lender_catalogue or [])
        ]
        self.weights = list(weights) if weights is not None else default_matching_parameters()
        self.instrument_type = instrument_type
        self.state = SynthesizerState.IDLE
        self.candidates: List[DealStructureCandidate] = []

    @property
    def term_preference(self) -> str:
        param = next((p for p in self.weights if p.id == PARAM_TERM), None)
        return str(param.value) if param else TermPreference.MEDIUM.value

    def _rate_for(self, structure_id: str, term: int, down_payment_percent: float):
        """无贷方表时用基准利率加结构偏移；有贷方表时取最低有效利率（同利率取靠前的贷方）"""
        if not self.lenders:
            return self.loan.annual_rate_percent + STRUCTURE_RATE_OFFSETS[structure_id], None

        request = RateRequest(
            term_months=term,
            credit_tier=credit_tier_for_score(self.profile.credit_score or DEFAULT_CREDIT_SCORE),
            down_payment_percent=down_payment_percent,
        )
        best_rate, best_lender = None, None
        for lender in self.lenders:
            rate = resolve_effective_rate(lender, request)
            if best_rate is None or rate < best_rate:
                best_rate, best_lender = rate, lender.lender_id
        return best_rate, best_lender

    def _build(
        self,
        structure_id: str,
        name: str,
        term: int,
        down_payment: float,
        residual_percent: float,
        instrument_type: str,
        financing_type: str,
        reason: str,
    ) -> DealStructureCandidate:
        principal = self.loan.principal
        # 首付比例按未取整的首付计算，取整到百分点
        dp_percent = float(round_half_up(down_payment / principal * 100)) if principal > 0 else 0.0
        down_payment = float(round_half_up(down_payment))
        rate, lender_id = self._rate_for(structure_id, term, dp_percent)

        params = LoanParameters(
            principal=principal,
            annual_rate_percent=rate,
            term_months=term,
            down_payment=down_payment,
            residual_percent=residual_percent,
        )
        financed = params.financed_amount
        payment = compute_payment(financed, term, rate)
        schedule = generate_schedule(financed, term, rate, payment)

        return DealStructureCandidate(
            id=structure_id,
            name=name,
            term=term,
            rate=rate,
            down_payment=down_payment,
            down_payment_percent=dp_percent,
            monthly_payment=payment,
            total_interest=schedule.total_interest,
            residual_value=float(round_half_up(params.residual_value)),
            residual_value_percent=residual_percent,
            instrument_type=instrument_type,
            financing_type=financing_type,
            recommendation_reason=reason,
            lender_id=lender_id,
        )

    def generate(self) -> List[DealStructureCandidate]:
        self.state = SynthesizerState.GENERATING
        principal = self.loan.principal
        preferred_term = int(self.profile.preferred_term_months or 0)
        term_pref = self.term_preference
        max_down = max_down_payment(principal, self.profile)
        instrument = self.instrument_type or DEFAULT_INSTRUMENT_TYPE

        if preferred_term > 0:
            affordable_term = max(preferred_term, 60)
            balanced_term = preferred_term
            min_down_term = min(preferred_term, 48)
        else:
            affordable_term = 84 if term_pref == TermPreference.LONG.value else 72
            balanced_term = 60 if term_pref == TermPreference.MEDIUM.value else 48
            min_down_term = 36 if term_pref == TermPreference.SHORT.value else 48

        self.candidates = [
            self._build(
                "match-affordable", "Low Monthly Payment", affordable_term,
                max_down * 0.8, 10.0, instrument, FinancingType.LEASE_TO_OWN.value,
                "Optimized for lowest monthly payments while keeping down payment reasonable.",
            ),
            self._build(
                "match-balanced", "Balanced Solution", balanced_term,
                max_down * 0.6, 5.0, instrument, FinancingType.TERM_LOAN.value,
                "Balanced solution with moderate down payment and competitive rate.",
            ),
            self._build(
                "match-min-down", "Minimal Down Payment", min_down_term,
                principal * MINIMAL_DOWN_FRACTION, 0.0, instrument, FinancingType.TERM_LOAN.value,
                "Minimizes initial cash outlay with slightly higher monthly payments.",
            ),
            self._build(
                "match-lowest-cost", "Lowest Total Cost", LOWEST_COST_TERM,
                max_down, 0.0, self.instrument_type or InstrumentType.EQUIPMENT_LOAN.value,
                FinancingType.TERM_LOAN.value,
                "Minimizes total financing cost with larger down payment and shorter term.",
            ),
        ]
        logger.debug("Generated candidates", extra={"count": len(self.candidates), "principal": principal})
        return list(self.candidates)

    def rank(self) -> List[DealStructureCandidate]:
        if self.state != SynthesizerState.GENERATING:
            raise RuntimeError(f"cannot rank from state {self.state.value}")
        scored = [
            score_candidate(c, self.profile, self.weights, self.instrument_type)
            for c in self.candidates
        ]
        # sorted 稳定，同分保持生成顺序
        ranked = sorted(scored, key=lambda c: c.match_score, reverse=True)
        self.candidates = ranked
        self.state = SynthesizerState.RANKED
        logger.info(
            "Ranked deal structures",
            extra={"order": [c.id for c in ranked], "scores": [c.match_score for c in ranked]},
        )
        return list(ranked)

    def run(self) -> List[DealStructureCandidate]:
        self.generate()
        return self.rank()


def synthesize_and_rank(
    loan_parameters: LoanParameters,
    financial_profile: Optional[FinancialProfile] = None,
    lender_catalogue: Optional[Iterable[Union[LenderRateProfile, dict]]] = None,
    weights: Optional[Sequence[MatchingParameter]] = None,
    instrument_type: Optional[str] = None,
) -> List[DealStructureCandidate]:
    """生成四个候选结构并按匹配分降序返回"""
    synthesizer = StructureSynthesizer(
        loan_parameters, financial_profile, lender_catalogue, weights, instrument_type,
    )
    return synthesizer.run()
