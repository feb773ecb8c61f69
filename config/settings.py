import os

from config.constants import (
    CreditTier, DownPaymentPreference, InstrumentType, TermPreference,
    PARAM_TERM, PARAM_DOWN_PAYMENT, PARAM_MONTHLY_PAYMENT, PARAM_RESIDUAL_VALUE, PARAM_RATE,
)

SERVICE_NAME = "deal-engine"
LOG_LEVEL = os.environ.get("DEAL_ENGINE_LOG_LEVEL", "INFO")

# 默认利率 (%)
DEFAULT_ANNUAL_RATE = 5.99
DEFAULT_TERM_MONTHS = 60

# 信用分 -> 基准利率 (%)，按分数从高到低匹配
CREDIT_SCORE_RATE_TIERS = [
    (800, 4.25),
    (750, 4.75),
    (700, 5.25),
    (650, 5.75),
    (600, 6.5),
]
FALLBACK_BASE_RATE = 7.5

# 信用分 -> 信用等级
CREDIT_SCORE_TIERS = [
    (750, CreditTier.EXCELLENT.value),
    (700, CreditTier.GOOD.value),
    (650, CreditTier.FAIR.value),
]
FALLBACK_CREDIT_TIER = CreditTier.POOR.value
DEFAULT_CREDIT_SCORE = 700

# 评分
BASE_MATCH_SCORE = 70.0
MIN_MATCH_SCORE = 0.0
MAX_MATCH_SCORE = 100.0
INSTRUMENT_MATCH_BONUS = 5.0
PREFERENCE_BONUS = 10.0
PREFERENCE_PENALTY = 5.0

# (payment/budget 上限, 分数调整)
BUDGET_RATIO_TIERS = [
    (0.8, 10.0),
    (1.0, 5.0),
    (1.2, -5.0),
]
BUDGET_OVERRUN_PENALTY = -10.0

SHORT_TERM_MAX = 36
MEDIUM_TERM_RANGE = (48, 60)
LONG_TERM_MIN = 72
MINIMAL_DOWN_MAX = 10.0
STANDARD_DOWN_RANGE = (10.0, 20.0)
SUBSTANTIAL_DOWN_MIN = 20.0

# 方案生成
DEFAULT_DOWN_PAYMENT_FRACTION = 0.2  # 无上限时按本金的 20%
CASH_ON_HAND_USABLE_FRACTION = 0.8
MINIMAL_DOWN_FRACTION = 0.05
LOWEST_COST_TERM = 36

STRUCTURE_RATE_OFFSETS = {
    "match-affordable": 0.25,
    "match-balanced": 0.0,
    "match-min-down": 0.5,
    "match-lowest-cost": -0.25,
}

DEFAULT_MATCHING_PARAMETERS = [
    {"id": PARAM_TERM, "name": "Term Length", "value": TermPreference.MEDIUM.value, "weight": 80},
    {"id": PARAM_DOWN_PAYMENT, "name": "Down Payment", "value": DownPaymentPreference.STANDARD.value, "weight": 85},
    {"id": PARAM_MONTHLY_PAYMENT, "name": "Monthly Payment", "value": "affordable", "weight": 90},
    {"id": PARAM_RESIDUAL_VALUE, "name": "Residual Value", "value": "low", "weight": 60},
    {"id": PARAM_RATE, "name": "Interest Rate", "value": "competitive", "weight": 75},
]

DEFAULT_INSTRUMENT_TYPE = InstrumentType.EQUIPMENT_FINANCE.value

# 示例贷方利率表
SAMPLE_LENDER_CATALOGUE = [
    {
        "lender_id": "lender1",
        "name": "Premier Finance",
        "base_rate": 5.49,
        "term_adjustments": {24: -0.5, 36: -0.25, 48: 0, 60: 0.25, 72: 0.5, 84: 0.75},
        "credit_tier_adjustments": {"excellent": -0.5, "good": 0, "fair": 1.5, "poor": 3.0},
        "down_payment_adjustments": {0: 0.25, 10: 0, 20: -0.25, 30: -0.5},
    },
    {
        "lender_id": "lender2",
        "name": "Business Capital Corp",
        "base_rate": 5.75,
        "term_adjustments": {24: -0.75, 36: -0.5, 48: -0.25, 60: 0, 72: 0.25, 84: 0.5},
        "credit_tier_adjustments": {"excellent": -0.75, "good": -0.25, "fair": 1.0, "poor": 2.5},
        "down_payment_adjustments": {0: 0.5, 10: 0.25, 20: 0, 30: -0.25},
    },
    {
        "lender_id": "lender3",
        "name": "Industrial Funding",
        "base_rate": 5.25,
        "term_adjustments": {24: -0.25, 36: 0, 48: 0.25, 60: 0.5, 72: 0.75, 84: 1.0},
        "credit_tier_adjustments": {"excellent": -0.25, "good": 0.25, "fair": 1.75, "poor": 3.5},
        "down_payment_adjustments": {0: 0.5, 10: 0.25, 20: 0, 30: -0.25},
    },
    {
        "lender_id": "lender4",
        "name": "Alliance Financial",
        "base_rate": 5.99,
        "term_adjustments": {24: -0.5, 36: -0.25, 48: 0, 60: 0.25, 72: 0.5, 84: 0.75},
        "credit_tier_adjustments": {"excellent": -1.0, "good": -0.5, "fair": 0.75, "poor": 2.25},
        "down_payment_adjustments": {0: 0.25, 10: 0, 20: -0.25, 30: -0.5},
    },
    {
        "lender_id": "lender5",
        "name": "CrossCountry Equipment",
        "base_rate": 5.35,
        "term_adjustments": {24: -0.35, 36: -0.1, 48: 0.15, 60: 0.4, 72: 0.65, 84: 0.9},
        "credit_tier_adjustments": {"excellent": -0.6, "good": 0, "fair": 1.25, "poor": 2.75},
        "down_payment_adjustments": {0: 0.3, 10: 0.1, 20: -0.1, 30: -0.3},
    },
]

# 分页
PAYMENTS_PER_PAGE = 12

# 金额精度
AMOUNT_PRECISION = 2
RATE_PRECISION = 4

# 校验上限
MAX_TERM_MONTHS = 480
MAX_ANNUAL_RATE = 100.0
