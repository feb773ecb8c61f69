import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def get_due_date(start_date: date, period: int, repayment_day: int = 1) -> date:
    """计算第 period 期的还款日，还款日不超过当月最大天数"""
    target = start_date + relativedelta(months=period)
    max_day = calendar.monthrange(target.year, target.month)[1]
    return target.replace(day=min(max(repayment_day, 1), max_day))
