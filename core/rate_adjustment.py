"""贷方利率加点：基准利率 + 期限/信用等级/首付比例加点"""
import logging
from typing import Mapping, Tuple, Union

from config.settings import CREDIT_SCORE_TIERS, FALLBACK_CREDIT_TIER
from core.models import LenderRateProfile, RateRequest

logger = logging.getLogger(__name__)

Key = Union[int, float, str]


def nearest_bucket(table: Mapping[Key, float], value: float) -> Tuple[Key, float]:
    """
    线性扫描找数值最接近 value 的键，返回 (键, 加点)。
    距离相同时取数值较小的键，与字典顺序无关。
    """
    best_key = None
    best_num = None
    best_dist = None
    for key in table:
        num = float(key)
        dist = abs(num - value)
        if (
            best_key is None
            or dist < best_dist
            or (dist == best_dist and num < best_num)
        ):
            best_key, best_num, best_dist = key, num, dist
    if best_key is None:
        raise ValueError("adjustment table is empty")
    return best_key, float(table[best_key])


def credit_tier_adjustment(table: Mapping[str, float], credit_tier: str) -> float:
    """信用等级按标签精确匹配，未配置的等级不加点"""
    if credit_tier in table:
        return float(table[credit_tier])
    logger.warning("Credit tier not in lender table", extra={"credit_tier": credit_tier})
    return 0.0


def resolve_effective_rate(profile: LenderRateProfile, request: RateRequest) -> float:
    """有效利率 = 基准 + 期限加点 + 信用加点 + 首付加点，不做上下限截断"""
    term_key, term_adj = nearest_bucket(profile.term_adjustments, request.term_months)
    dp_key, dp_adj = nearest_bucket(profile.down_payment_adjustments, request.down_payment_percent)
    tier_adj = credit_tier_adjustment(profile.credit_tier_adjustments, request.credit_tier)

    rate = profile.base_rate + term_adj + tier_adj + dp_adj
    logger.debug(
        "Resolved effective rate",
        extra={
            "lender_id": profile.lender_id,
            "term_bucket": term_key,
            "down_payment_bucket": dp_key,
            "credit_tier": request.credit_tier,
            "effective_rate": rate,
        },
    )
    return rate


def credit_tier_for_score(credit_score: float) -> str:
    for floor, tier in CREDIT_SCORE_TIERS:
        if credit_score >= floor:
            return tier
    return FALLBACK_CREDIT_TIER
