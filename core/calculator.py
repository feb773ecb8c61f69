"""核心计算：等额月供、融资额、APR、IRR"""
import logging
import math
from typing import Sequence

import numpy as np
from scipy import optimize

from config.settings import AMOUNT_PRECISION, RATE_PRECISION
from core.models import LoanParameters

logger = logging.getLogger(__name__)


def periodic_rate(annual_rate_percent: float) -> float:
    """年利率(%) -> 月利率，负利率按 0 处理"""
    if annual_rate_percent < 0:
        logger.warning(
            "Negative annual rate treated as zero",
            extra={"annual_rate_percent": annual_rate_percent},
        )
        return 0.0
    return annual_rate_percent / 100 / 12


def compute_payment(
    financed_amount: float,
    term_months: int,
    annual_rate_percent: float,
) -> float:
    """等额月供（保留两位小数）。融资额或期数非正时返回 0"""
    if financed_amount <= 0 or term_months <= 0:
        logger.debug(
            "Degenerate payment input",
            extra={"financed_amount": financed_amount, "term_months": term_months},
        )
        return 0.0
    n = int(term_months)
    r = periodic_rate(annual_rate_percent)
    if r == 0:
        return round(financed_amount / n, AMOUNT_PRECISION)
    growth = (1 + r) ** n
    monthly = financed_amount * r * growth / (growth - 1)
    return round(monthly, AMOUNT_PRECISION)


def round_half_up(value: float) -> int:
    """四舍五入到整数，.5 向上"""
    return math.floor(value + 0.5)


def compute_loan_payment(params: LoanParameters) -> float:
    return compute_payment(params.financed_amount, params.term_months, params.annual_rate_percent)


def _npv(rate: float, cash_flows: np.ndarray) -> float:
    periods = np.arange(len(cash_flows))
    return float(np.sum(cash_flows / (1 + rate) ** periods))


def _solve_monthly_irr(cash_flows: np.ndarray) -> float:
    return optimize.brentq(_npv, -0.5, 1.0, args=(cash_flows,))


def calc_irr(principal: float, payments: Sequence[float]) -> float:
    """用 IRR 法计算真实年化率(%)，复利口径"""
    if principal <= 0 or len(payments) == 0:
        return 0.0
    cash_flows = np.array([-principal, *payments], dtype=float)
    try:
        monthly_irr = _solve_monthly_irr(cash_flows)
    except (ValueError, RuntimeError):
        logger.debug("IRR root not bracketed", extra={"principal": principal})
        return 0.0
    annual_irr = (1 + monthly_irr) ** 12 - 1
    return round(annual_irr * 100, RATE_PRECISION)


def calc_apr(
    loan_amount: float,
    annual_rate_percent: float,
    term_months: int,
    fees: float = 0.0,
) -> float:
    """含前置费用的名义 APR(%)：月供按全额计算，放款净额扣除费用"""
    payment = compute_payment(loan_amount, term_months, annual_rate_percent)
    if payment <= 0:
        return 0.0
    if fees <= 0:
        return round(max(annual_rate_percent, 0.0), RATE_PRECISION)
    net_proceeds = loan_amount - fees
    if net_proceeds <= 0:
        return 0.0
    cash_flows = np.array([-net_proceeds] + [payment] * int(term_months), dtype=float)
    try:
        monthly_rate = _solve_monthly_irr(cash_flows)
    except (ValueError, RuntimeError):
        logger.debug("APR root not bracketed", extra={"loan_amount": loan_amount, "fees": fees})
        return 0.0
    return round(monthly_rate * 12 * 100, RATE_PRECISION)
