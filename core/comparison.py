"""方案对比：贷方报价对比、候选结构对比表"""
import logging
from typing import Iterable, List, Sequence, Union

import pandas as pd

from config.constants import CANDIDATE_COMPARISON_COLUMNS, RATE_COMPARISON_COLUMNS
from config.settings import AMOUNT_PRECISION, RATE_PRECISION
from core.calculator import compute_payment
from core.models import DealStructureCandidate, LenderRateProfile, LoanParameters, RateQuote, RateRequest
from core.rate_adjustment import resolve_effective_rate

logger = logging.getLogger(__name__)


def _as_profile(lender: Union[LenderRateProfile, dict]) -> LenderRateProfile:
    if isinstance(lender, LenderRateProfile):
        return lender
    return LenderRateProfile.from_dict(lender)


def quote_lender(
    params: LoanParameters,
    credit_tier: str,
    lender: Union[LenderRateProfile, dict],
) -> RateQuote:
    """单个贷方报价：按有效利率重算月供"""
    profile = _as_profile(lender)
    request = RateRequest(
        term_months=params.term_months,
        credit_tier=credit_tier,
        down_payment_percent=params.down_payment_percent,
    )
    rate = resolve_effective_rate(profile, request)
    financed = params.financed_amount
    payment = compute_payment(financed, params.term_months, rate)
    total_paid = payment * params.term_months
    return RateQuote(
        lender_id=profile.lender_id,
        lender_name=profile.name,
        rate=rate,
        monthly_payment=payment,
        total_interest=total_paid - financed if payment > 0 else 0.0,
        total_cost=total_paid + params.down_payment,
    )


def compare_lenders(
    params: LoanParameters,
    credit_tier: str,
    catalogue: Iterable[Union[LenderRateProfile, dict]],
) -> List[RateQuote]:
    """对比多个贷方，按月供升序（月供相同保持原顺序）"""
    quotes = [quote_lender(params, credit_tier, lender) for lender in catalogue]
    ranked = sorted(quotes, key=lambda q: q.monthly_payment)
    logger.info(
        "Compared lenders",
        extra={"lenders": len(ranked), "best": ranked[0].lender_id if ranked else None},
    )
    return ranked


def rate_comparison_frame(quotes: Sequence[RateQuote]) -> pd.DataFrame:
    rows = [
        {
            "lender_id": q.lender_id,
            "lender_name": q.lender_name,
            "effective_rate": round(q.rate, RATE_PRECISION),
            "monthly_payment": round(q.monthly_payment, AMOUNT_PRECISION),
            "total_interest": round(q.total_interest, AMOUNT_PRECISION),
            "total_cost": round(q.total_cost, AMOUNT_PRECISION),
        }
        for q in quotes
    ]
    return pd.DataFrame(rows, columns=RATE_COMPARISON_COLUMNS)


def compare_candidates(candidates: Sequence[DealStructureCandidate]) -> pd.DataFrame:
    """
    候选结构对比表，按传入顺序编号。
    candidates: 已排序的候选列表
    """
    rows = []
    for rank, c in enumerate(candidates, start=1):
        rows.append({
            "rank": rank,
            "name": c.name,
            "match_score": round(c.match_score, 2),
            "term": c.term,
            "rate": round(c.rate, RATE_PRECISION),
            "down_payment": round(c.down_payment, AMOUNT_PRECISION),
            "down_payment_percent": round(c.down_payment_percent, 2),
            "monthly_payment": round(c.monthly_payment, AMOUNT_PRECISION),
            "total_interest": round(c.total_interest, AMOUNT_PRECISION),
            "residual_value": round(c.residual_value, AMOUNT_PRECISION),
            "residual_value_percent": c.residual_value_percent,
            "instrument_type": c.instrument_type,
            "financing_type": c.financing_type,
            "lender_id": c.lender_id,
        })
    return pd.DataFrame(rows, columns=CANDIDATE_COMPARISON_COLUMNS)
