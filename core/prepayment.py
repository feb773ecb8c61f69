"""提前还款：每月额外还本金，缩短期限"""
import logging
import math
from typing import Dict

from config.settings import AMOUNT_PRECISION
from core.calculator import periodic_rate
from core.models import PaymentPeriod, PaymentSchedule
from core.schedule_generator import generate_schedule

logger = logging.getLogger(__name__)


def calc_shortened_term(financed_amount: float, annual_rate_percent: float, monthly_outlay: float) -> int:
    """月供不变时还清所需期数：n = -ln(1 - P*r/M) / ln(1+r)"""
    if financed_amount <= 0 or monthly_outlay <= 0:
        return 0
    r = periodic_rate(annual_rate_percent)
    if r == 0:
        return math.ceil(financed_amount / monthly_outlay)
    ratio = financed_amount * r / monthly_outlay
    if ratio >= 1:
        # 月供不足以覆盖利息，永远还不清
        return 0
    return math.ceil(-math.log(1 - ratio) / math.log(1 + r))


def generate_schedule_with_extra_principal(
    financed_amount: float,
    term_months: int,
    annual_rate_percent: float,
    payment: float,
    extra_principal: float,
) -> PaymentSchedule:
    """
    每期在月供之外额外还 extra_principal 本金，余额还清即结束。
    最后一期只还剩余本金和当期利息，余额为 0。
    """
    if extra_principal <= 0:
        return generate_schedule(financed_amount, term_months, annual_rate_percent, payment)
    if financed_amount <= 0 or term_months <= 0:
        return PaymentSchedule(financed_amount=max(financed_amount, 0.0), annual_rate_percent=annual_rate_percent)

    r = periodic_rate(annual_rate_percent)
    outlay = payment + extra_principal
    balance = financed_amount
    cum_principal = 0.0
    cum_interest = 0.0
    periods = []
    for index in range(1, int(term_months) + 1):
        interest = balance * r
        principal = outlay - interest
        is_last = principal >= balance or index == term_months
        if is_last:
            principal = balance
        balance = 0.0 if is_last else balance - principal
        cum_principal += principal
        cum_interest += interest
        periods.append(PaymentPeriod(
            index=index,
            payment_amount=principal + interest if is_last else outlay,
            principal_portion=principal,
            interest_portion=interest,
            remaining_balance=balance,
            cumulative_principal=cum_principal,
            cumulative_interest=cum_interest,
        ))
        if is_last:
            break

    logger.debug(
        "Extra principal schedule",
        extra={"term_months": term_months, "paid_off_in": len(periods), "extra_principal": extra_principal},
    )
    return PaymentSchedule(
        periods=tuple(periods),
        total_interest=cum_interest,
        total_payments=financed_amount + cum_interest,
        payment=outlay,
        financed_amount=financed_amount,
        annual_rate_percent=annual_rate_percent,
    )


def calc_interest_saved(
    financed_amount: float,
    term_months: int,
    annual_rate_percent: float,
    payment: float,
    extra_principal: float,
) -> Dict:
    """对比原计划与额外还本计划的利息和期数"""
    base = generate_schedule(financed_amount, term_months, annual_rate_percent, payment)
    accelerated = generate_schedule_with_extra_principal(
        financed_amount, term_months, annual_rate_percent, payment, extra_principal,
    )
    saved = base.total_interest - accelerated.total_interest
    return {
        "original_term": len(base),
        "new_term": len(accelerated),
        "months_saved": len(base) - len(accelerated),
        "estimated_term": calc_shortened_term(financed_amount, annual_rate_percent, payment + extra_principal),
        "original_total_interest": round(base.total_interest, AMOUNT_PRECISION),
        "new_total_interest": round(accelerated.total_interest, AMOUNT_PRECISION),
        "interest_saved": round(max(saved, 0), AMOUNT_PRECISION),
    }
