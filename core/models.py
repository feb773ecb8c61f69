"""领域模型：不可变数据记录"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class LoanParameters:
    """贷款参数。residual_percent 作用于融资基数，不作用于月供"""

    principal: float
    annual_rate_percent: float
    term_months: int
    down_payment: float = 0.0
    residual_percent: float = 0.0

    @property
    def residual_value(self) -> float:
        return self.principal * self.residual_percent / 100

    @property
    def financed_amount(self) -> float:
        return self.principal - self.down_payment - self.residual_value

    @property
    def down_payment_percent(self) -> float:
        if self.principal <= 0:
            return 0.0
        return self.down_payment / self.principal * 100


@dataclass(frozen=True)
class PaymentPeriod:
    index: int
    payment_amount: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float
    cumulative_principal: float
    cumulative_interest: float


@dataclass(frozen=True)
class PaymentSchedule:
    periods: Tuple[PaymentPeriod, ...] = ()
    total_interest: float = 0.0
    total_payments: float = 0.0
    payment: float = 0.0
    financed_amount: float = 0.0
    annual_rate_percent: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.periods

    @property
    def term_months(self) -> int:
        return len(self.periods)

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self):
        return iter(self.periods)

    def __getitem__(self, item):
        return self.periods[item]


@dataclass(frozen=True)
class LenderRateProfile:
    """贷方利率政策：基准利率 + 三张加点表"""

    lender_id: str
    name: str
    base_rate: float
    term_adjustments: Mapping[Number, float]
    credit_tier_adjustments: Mapping[str, float]
    down_payment_adjustments: Mapping[Number, float]

    @classmethod
    def from_dict(cls, data: Dict) -> "LenderRateProfile":
        return cls(
            lender_id=str(data.get("lender_id") or data.get("id", "")),
            name=str(data.get("name", "")),
            base_rate=float(data["base_rate"]),
            term_adjustments=dict(data["term_adjustments"]),
            credit_tier_adjustments=dict(data["credit_tier_adjustments"]),
            down_payment_adjustments=dict(data["down_payment_adjustments"]),
        )


@dataclass(frozen=True)
class RateRequest:
    term_months: int
    credit_tier: str
    down_payment_percent: float = 0.0


@dataclass(frozen=True)
class RateQuote:
    lender_id: str
    lender_name: str
    rate: float
    monthly_payment: float
    total_interest: float
    total_cost: float


@dataclass(frozen=True)
class FinancialProfile:
    """借款人财务画像，评分只读"""

    max_down_payment: float = 0.0
    preferred_term_months: int = 0
    monthly_budget: float = 0.0
    credit_score: int = 700
    cash_on_hand: float = 0.0
    yearly_revenue: Optional[float] = None
    operating_history_years: Optional[float] = None
    collateral_value: Optional[float] = None
    debt_to_income_ratio: Optional[float] = None
    existing_loan_balance: Optional[float] = None
    industry_type: Optional[str] = None


@dataclass(frozen=True)
class MatchingParameter:
    id: str
    name: str
    value: Union[str, float]
    weight: float  # 0-100

    @classmethod
    def from_dict(cls, data: Dict) -> "MatchingParameter":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            value=data.get("value", ""),
            weight=float(data.get("weight", 0)),
        )


@dataclass(frozen=True)
class ScoreAdjustment:
    factor: str
    delta: float
    detail: str = ""


@dataclass(frozen=True)
class DealStructureCandidate:
    id: str
    name: str
    term: int
    rate: float
    down_payment: float
    down_payment_percent: float
    monthly_payment: float
    total_interest: float
    residual_value: float
    residual_value_percent: float
    instrument_type: str
    financing_type: str
    recommendation_reason: str
    match_score: float = 0.0
    lender_id: Optional[str] = None
    score_breakdown: Tuple[ScoreAdjustment, ...] = field(default_factory=tuple)
