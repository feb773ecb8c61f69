"""月供与 APR 测试"""
import pytest

from core.calculator import (
    calc_apr, calc_irr, compute_loan_payment, compute_payment, periodic_rate, round_half_up,
)
from core.models import LoanParameters


class TestComputePayment:
    """等额月供测试"""

    def test_scenario_five_year(self):
        """10 万, 60 期, 5.99% -> 月供约 1932.82"""
        r = 5.99 / 100 / 12
        expected = 100_000 * r * (1 + r) ** 60 / ((1 + r) ** 60 - 1)
        monthly = compute_payment(100_000, 60, 5.99)
        assert monthly == round(expected, 2)
        assert monthly == pytest.approx(1932.82, abs=0.05)

    def test_six_percent_five_year(self):
        assert compute_payment(100_000, 60, 6.0) == pytest.approx(1933.28, abs=0.01)

    def test_zero_rate(self):
        """5 万, 0%, 36 期 -> 1388.89"""
        assert compute_payment(50_000, 36, 0) == 1388.89

    def test_zero_rate_is_simple_division(self):
        assert compute_payment(120_000, 12, 0) == 10_000.0

    def test_rounded_to_cents(self):
        monthly = compute_payment(123_456.789, 77, 4.56789)
        assert monthly == round(monthly, 2)

    def test_standard_mortgage(self):
        """10 万, 30 年, 5% -> 536.82"""
        assert compute_payment(100_000, 360, 5.0) == pytest.approx(536.82, abs=0.01)

    def test_short_term(self):
        assert compute_payment(50_000, 12, 8.0) == 4349.42

    @pytest.mark.parametrize("financed, term", [(0, 60), (-5_000, 60), (100_000, 0), (100_000, -12)])
    def test_degenerate_inputs_return_zero(self, financed, term):
        assert compute_payment(financed, term, 5.0) == 0.0

    def test_negative_rate_treated_as_zero(self):
        assert periodic_rate(-1.0) == 0.0
        assert compute_payment(12_000, 12, -3.0) == 1000.0

    def test_higher_rate_higher_payment(self):
        assert compute_payment(100_000, 60, 8.0) > compute_payment(100_000, 60, 4.0)


class TestFinancedAmount:
    def test_down_payment_and_residual(self):
        params = LoanParameters(100_000, 6.0, 48, down_payment=10_000, residual_percent=10)
        assert params.residual_value == 10_000
        assert params.financed_amount == 80_000
        assert params.down_payment_percent == 10

    def test_non_positive_financed_amount_gives_zero_payment(self):
        params = LoanParameters(100_000, 6.0, 48, down_payment=95_000, residual_percent=10)
        assert params.financed_amount < 0
        assert compute_loan_payment(params) == 0.0


class TestRoundHalfUp:
    @pytest.mark.parametrize("value, expected", [
        (20.4, 20), (20.5, 21), (19.5, 20), (500.5, 501), (0.49, 0), (7.0, 7),
    ])
    def test_half_rounds_up(self, value, expected):
        assert round_half_up(value) == expected


class TestAPR:
    def test_no_fees_equals_rate(self):
        assert calc_apr(100_000, 5.0, 360, 0) == pytest.approx(5.0)

    def test_fees_raise_apr(self):
        apr = calc_apr(100_000, 5.0, 360, 2_000)
        assert 5.0 < apr < 5.5

    def test_reasonable_spread(self):
        apr = calc_apr(200_000, 4.5, 360, 3_000)
        assert 0 < apr - 4.5 < 1.0

    def test_degenerate(self):
        assert calc_apr(0, 5.0, 60, 100) == 0.0
        assert calc_apr(1_000, 5.0, 60, 1_000) == 0.0


class TestIRR:
    def test_irr_close_to_nominal(self):
        """IRR（复利口径）应略高于名义利率"""
        monthly = compute_payment(100_000, 60, 6.0)
        irr = calc_irr(100_000, [monthly] * 60)
        assert 6.0 < irr < 6.3

    def test_empty_payments(self):
        assert calc_irr(100_000, []) == 0.0
