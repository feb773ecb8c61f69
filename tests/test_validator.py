"""输入校验测试"""
import pytest

from core.exceptions import DealEngineError, InvalidLenderProfileError, InvalidLoanParametersError
from core.models import FinancialProfile, LenderRateProfile, LoanParameters
from core.validator import (
    ensure_valid_lender_profile, ensure_valid_loan_parameters, validate_financial_profile,
    validate_lender_profile, validate_loan_parameters,
)


class TestLoanParameters:
    def test_valid(self, loan):
        assert validate_loan_parameters(loan) == (True, "")

    @pytest.mark.parametrize("params", [
        LoanParameters(0, 5.0, 60),
        LoanParameters(-100_000, 5.0, 60),
        LoanParameters(100_000, -0.5, 60),
        LoanParameters(100_000, 150.0, 60),
        LoanParameters(100_000, 5.0, 0),
        LoanParameters(100_000, 5.0, 12.5),
        LoanParameters(100_000, 5.0, 1_200),
        LoanParameters(100_000, 5.0, 60, down_payment=-1),
        LoanParameters(100_000, 5.0, 60, down_payment=100_001),
        LoanParameters(100_000, 5.0, 60, residual_percent=101),
        LoanParameters(float("nan"), 5.0, 60),
    ])
    def test_invalid(self, params):
        ok, msg = validate_loan_parameters(params)
        assert not ok
        assert msg

    def test_zero_rate_is_valid(self):
        assert validate_loan_parameters(LoanParameters(50_000, 0, 36))[0]

    def test_ensure_raises(self):
        with pytest.raises(InvalidLoanParametersError):
            ensure_valid_loan_parameters(LoanParameters(100_000, 5.0, 0))

    def test_ensure_returns_params(self, loan):
        assert ensure_valid_loan_parameters(loan) is loan


class TestFinancialProfile:
    def test_valid(self, profile):
        assert validate_financial_profile(profile) == (True, "")

    @pytest.mark.parametrize("profile", [
        FinancialProfile(monthly_budget=-1),
        FinancialProfile(cash_on_hand=-5),
        FinancialProfile(credit_score=900),
        FinancialProfile(preferred_term_months=-12),
        FinancialProfile(debt_to_income_ratio=1.5),
    ])
    def test_invalid(self, profile):
        assert not validate_financial_profile(profile)[0]


class TestLenderProfile:
    def test_sample_catalogue_valid(self, catalogue):
        assert all(validate_lender_profile(lender)[0] for lender in catalogue)

    def test_empty_table(self):
        lender = LenderRateProfile("x", "X", 5.0, {}, {"good": 0}, {0: 0})
        with pytest.raises(InvalidLenderProfileError):
            ensure_valid_lender_profile(lender)

    def test_non_numeric_keys(self):
        lender = LenderRateProfile("x", "X", 5.0, {"long": 0.5}, {"good": 0}, {0: 0})
        ok, msg = validate_lender_profile(lender)
        assert not ok
        assert "numeric" in msg

    def test_errors_share_base(self):
        assert issubclass(InvalidLenderProfileError, DealEngineError)
        assert issubclass(InvalidLoanParametersError, DealEngineError)
