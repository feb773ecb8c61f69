"""
还款计划生成器

由融资额、期数、利率和月供逐期推导完整还款计划。每期记录由上一期状态
纯函数推出，结果为不可变序列；任何参数变化都整体重新生成。
"""
import logging
import math
from datetime import date
from typing import NamedTuple, Optional, Tuple

import pandas as pd

from config.constants import PAYMENT_SCHEDULE_COLUMNS
from config.settings import AMOUNT_PRECISION, PAYMENTS_PER_PAGE
from core.calculator import compute_payment, periodic_rate
from core.models import LoanParameters, PaymentPeriod, PaymentSchedule
from utils.date_utils import get_due_date

logger = logging.getLogger(__name__)


class _Carry(NamedTuple):
    balance: float
    cumulative_principal: float
    cumulative_interest: float


def _next_period(
    carry: _Carry,
    index: int,
    payment: float,
    rate: float,
    is_last: bool,
) -> Tuple[PaymentPeriod, _Carry]:
    interest = carry.balance * rate
    principal = payment - interest
    balance = carry.balance - principal

    # 最后一期尾差调整：剩余本金并入本期本金，余额归零
    if is_last:
        principal += balance
        balance = 0.0

    cum_principal = carry.cumulative_principal + principal
    cum_interest = carry.cumulative_interest + interest
    period = PaymentPeriod(
        index=index,
        payment_amount=payment,
        principal_portion=principal,
        interest_portion=interest,
        remaining_balance=balance,
        cumulative_principal=cum_principal,
        cumulative_interest=cum_interest,
    )
    return period, _Carry(balance, cum_principal, cum_interest)


def generate_schedule(
    financed_amount: float,
    term_months: int,
    annual_rate_percent: float,
    payment: float,
) -> PaymentSchedule:
    """生成等额还款计划表。融资额或期数非正时返回空计划"""
    if financed_amount <= 0 or term_months <= 0:
        logger.debug(
            "Degenerate schedule input",
            extra={"financed_amount": financed_amount, "term_months": term_months},
        )
        return PaymentSchedule(financed_amount=max(financed_amount, 0.0), annual_rate_percent=annual_rate_percent)

    n = int(term_months)
    r = periodic_rate(annual_rate_percent)
    carry = _Carry(financed_amount, 0.0, 0.0)
    periods = []
    for index in range(1, n + 1):
        period, carry = _next_period(carry, index, payment, r, index == n)
        periods.append(period)

    total_interest = carry.cumulative_interest
    return PaymentSchedule(
        periods=tuple(periods),
        total_interest=total_interest,
        total_payments=financed_amount + total_interest,
        payment=payment,
        financed_amount=financed_amount,
        annual_rate_percent=annual_rate_percent,
    )


def build_schedule(params: LoanParameters) -> PaymentSchedule:
    """由贷款参数计算月供并生成计划"""
    financed = params.financed_amount
    payment = compute_payment(financed, params.term_months, params.annual_rate_percent)
    return generate_schedule(financed, params.term_months, params.annual_rate_percent, payment)


def total_pages(schedule: PaymentSchedule, per_page: int = PAYMENTS_PER_PAGE) -> int:
    if per_page <= 0:
        return 0
    return math.ceil(len(schedule) / per_page)


def paginate(
    schedule: PaymentSchedule,
    page: int,
    per_page: int = PAYMENTS_PER_PAGE,
) -> Tuple[PaymentPeriod, ...]:
    """分页取期数，页码超出范围时夹到 [1, 总页数]"""
    pages = total_pages(schedule, per_page)
    if pages == 0:
        return ()
    page = max(1, min(page, pages))
    start = (page - 1) * per_page
    return schedule.periods[start:start + per_page]


def schedule_to_frame(
    schedule: PaymentSchedule,
    start_date: Optional[date] = None,
    repayment_day: int = 1,
) -> pd.DataFrame:
    """还款计划 -> DataFrame，金额保留两位小数"""
    records = []
    for p in schedule:
        due = get_due_date(start_date, p.index, repayment_day) if start_date else None
        records.append({
            "period": p.index,
            "due_date": due.strftime("%Y-%m-%d") if due else None,
            "payment_amount": round(p.payment_amount, AMOUNT_PRECISION),
            "principal": round(p.principal_portion, AMOUNT_PRECISION),
            "interest": round(p.interest_portion, AMOUNT_PRECISION),
            "remaining_balance": round(p.remaining_balance, AMOUNT_PRECISION),
            "cumulative_principal": round(p.cumulative_principal, AMOUNT_PRECISION),
            "cumulative_interest": round(p.cumulative_interest, AMOUNT_PRECISION),
            "applied_rate": schedule.annual_rate_percent,
        })
    return pd.DataFrame(records, columns=PAYMENT_SCHEDULE_COLUMNS)
