from typing import Tuple

from config.settings import MAX_ANNUAL_RATE, MAX_TERM_MONTHS
from core.exceptions import InvalidLenderProfileError, InvalidLoanParametersError
from core.models import FinancialProfile, LenderRateProfile, LoanParameters


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


def validate_loan_parameters(params: LoanParameters) -> Tuple[bool, str]:
    """校验贷款参数，返回 (是否合法, 错误信息)"""
    if not _is_number(params.principal) or params.principal <= 0:
        return False, "Principal must be greater than 0"

    if not _is_number(params.annual_rate_percent) or params.annual_rate_percent < 0:
        return False, "Annual rate must not be negative"

    if params.annual_rate_percent > MAX_ANNUAL_RATE:
        return False, f"Annual rate must not exceed {MAX_ANNUAL_RATE}%"

    if not isinstance(params.term_months, int) or isinstance(params.term_months, bool) or params.term_months <= 0:
        return False, "Term must be a positive whole number of months"

    if params.term_months > MAX_TERM_MONTHS:
        return False, f"Term must not exceed {MAX_TERM_MONTHS} months"

    if not _is_number(params.down_payment) or params.down_payment < 0:
        return False, "Down payment must not be negative"

    if params.down_payment > params.principal:
        return False, "Down payment must not exceed the principal"

    if not _is_number(params.residual_percent) or not 0 <= params.residual_percent <= 100:
        return False, "Residual percent must be between 0 and 100"

    return True, ""


def validate_financial_profile(profile: FinancialProfile) -> Tuple[bool, str]:
    """校验财务画像"""
    for name in ("max_down_payment", "monthly_budget", "cash_on_hand"):
        value = getattr(profile, name)
        if not _is_number(value) or value < 0:
            return False, f"{name} must not be negative"

    if not _is_number(profile.preferred_term_months) or profile.preferred_term_months < 0:
        return False, "preferred_term_months must not be negative"

    if not _is_number(profile.credit_score) or not 300 <= profile.credit_score <= 850:
        return False, "credit_score must be between 300 and 850"

    if profile.debt_to_income_ratio is not None and not 0 <= profile.debt_to_income_ratio <= 1:
        return False, "debt_to_income_ratio must be between 0 and 1"

    return True, ""


def validate_lender_profile(profile: LenderRateProfile) -> Tuple[bool, str]:
    """校验利率表：三张加点表都不能为空，数值键可转为数字"""
    tables = {
        "term_adjustments": profile.term_adjustments,
        "credit_tier_adjustments": profile.credit_tier_adjustments,
        "down_payment_adjustments": profile.down_payment_adjustments,
    }
    for name, table in tables.items():
        if not table:
            return False, f"{profile.lender_id}: {name} must not be empty"

    for name in ("term_adjustments", "down_payment_adjustments"):
        try:
            [float(k) for k in tables[name]]
        except (TypeError, ValueError):
            return False, f"{profile.lender_id}: {name} keys must be numeric"

    return True, ""


def ensure_valid_loan_parameters(params: LoanParameters) -> LoanParameters:
    ok, msg = validate_loan_parameters(params)
    if not ok:
        raise InvalidLoanParametersError(msg)
    return params


def ensure_valid_lender_profile(profile: LenderRateProfile) -> LenderRateProfile:
    ok, msg = validate_lender_profile(profile)
    if not ok:
        raise InvalidLenderProfileError(msg)
    return profile
