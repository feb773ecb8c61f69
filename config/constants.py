from enum import Enum


class CreditTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class TermPreference(str, Enum):
    SHORT = "short"  # <= 36 个月
    MEDIUM = "medium"  # 48-60
    LONG = "long"  # >= 72


class DownPaymentPreference(str, Enum):
    MINIMAL = "minimal"  # <= 10%
    STANDARD = "standard"  # 10-20%
    SUBSTANTIAL = "substantial"  # >= 20%


class InstrumentType(str, Enum):
    EQUIPMENT_FINANCE = "equipment_finance"
    EQUIPMENT_LOAN = "equipment_loan"
    FINANCE_LEASE = "finance_lease"
    COMMERCIAL_MORTGAGE = "commercial_mortgage"


class FinancingType(str, Enum):
    LEASE_TO_OWN = "lease_to_own"
    TERM_LOAN = "term_loan"


class SynthesizerState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    RANKED = "ranked"


# 匹配参数 id
PARAM_TERM = "term"
PARAM_DOWN_PAYMENT = "downPayment"
PARAM_MONTHLY_PAYMENT = "monthlyPayment"
PARAM_RESIDUAL_VALUE = "residualValue"
PARAM_RATE = "rate"

# 列定义
PAYMENT_SCHEDULE_COLUMNS = [
    "period", "due_date", "payment_amount",
    "principal", "interest", "remaining_balance",
    "cumulative_principal", "cumulative_interest",
    "applied_rate",
]

RATE_COMPARISON_COLUMNS = [
    "lender_id", "lender_name", "effective_rate",
    "monthly_payment", "total_interest", "total_cost",
]

CANDIDATE_COMPARISON_COLUMNS = [
    "rank", "name", "match_score", "term", "rate",
    "down_payment", "down_payment_percent", "monthly_payment",
    "total_interest", "residual_value", "residual_value_percent",
    "instrument_type", "financing_type", "lender_id",
]
