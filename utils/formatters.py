def fmt_amount(value: float) -> str:
    """格式化金额：1234567.891 -> $1,234,567.89"""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def fmt_rate(value: float) -> str:
    """格式化利率百分比：5.99 -> 5.99%"""
    return f"{value:.2f}%"


def fmt_months(months: int) -> str:
    """格式化月数：60 -> 5 yr，66 -> 5 yr 6 mo"""
    years = months // 12
    remain = months % 12
    if remain == 0:
        return f"{years} yr"
    if years == 0:
        return f"{remain} mo"
    return f"{years} yr {remain} mo"
