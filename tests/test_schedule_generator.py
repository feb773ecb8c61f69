"""还款计划生成测试"""
from datetime import date

import pytest

from config.constants import PAYMENT_SCHEDULE_COLUMNS
from core.calculator import compute_payment
from core.models import LoanParameters
from core.schedule_generator import build_schedule, generate_schedule, paginate, schedule_to_frame, total_pages


def _schedule(financed, term, rate):
    return generate_schedule(financed, term, rate, compute_payment(financed, term, rate))


class TestScheduleGeneration:

    def test_length_and_indexes(self):
        sch = _schedule(100_000, 60, 5.99)
        assert len(sch) == 60
        assert sch[0].index == 1
        assert sch[-1].index == 60

    def test_final_balance_exactly_zero(self):
        sch = _schedule(100_000, 60, 5.99)
        assert sch[-1].remaining_balance == 0.0

    def test_principal_conservation(self):
        """各期本金之和 = 融资额（误差 1 元内）"""
        for financed, term, rate in [(100_000, 60, 5.99), (123_456.78, 77, 4.5), (50_000, 36, 0)]:
            sch = _schedule(financed, term, rate)
            assert abs(sum(p.principal_portion for p in sch) - financed) < 1
            assert sch[-1].cumulative_principal == pytest.approx(financed)

    def test_balance_non_increasing(self):
        sch = _schedule(250_000, 84, 7.25)
        balances = [p.remaining_balance for p in sch]
        assert all(a >= b for a, b in zip(balances, balances[1:]))

    def test_payment_consistency(self):
        """每期月供等于 compute_payment，仅末期本金可能有尾差"""
        payment = compute_payment(100_000, 60, 5.99)
        sch = generate_schedule(100_000, 60, 5.99, payment)
        assert all(p.payment_amount == payment for p in sch)
        for p in sch.periods[:-1]:
            assert p.principal_portion + p.interest_portion == pytest.approx(payment)
        last = sch[-1]
        assert abs(last.principal_portion + last.interest_portion - payment) < 1

    def test_scenario_totals(self):
        """10 万, 60 期, 6%: 总利息约 15996.80"""
        sch = _schedule(100_000, 60, 6.0)
        assert sch.payment == pytest.approx(1933.28, abs=0.01)
        assert sch.total_interest == pytest.approx(15_996.80, abs=0.1)
        assert sch.total_payments == pytest.approx(100_000 + sch.total_interest)
        assert sch[-1].remaining_balance == 0.0

    def test_zero_rate(self):
        """5 万, 0%, 36 期：无利息"""
        sch = _schedule(50_000, 36, 0)
        assert sch.payment == 1388.89
        assert sch.total_interest == 0
        assert all(p.interest_portion == 0 for p in sch)
        assert sch[-1].remaining_balance == 0.0

    def test_cumulative_values(self):
        sch = _schedule(500_000, 120, 4.0)
        running = 0.0
        for p in sch:
            running += p.interest_portion
            assert p.cumulative_interest == pytest.approx(running)
        assert sch[-1].cumulative_interest == pytest.approx(sch.total_interest)

    def test_first_period_interest(self):
        sch = _schedule(100_000, 360, 6.0)
        assert sch[0].interest_portion == pytest.approx(500.0)
        assert sch[0].principal_portion == pytest.approx(99.55, abs=0.01)

    @pytest.mark.parametrize("financed, term", [(0, 60), (-1_000, 60), (10_000, 0)])
    def test_degenerate_inputs(self, financed, term):
        sch = generate_schedule(financed, term, 5.0, 100.0)
        assert sch.is_empty
        assert len(sch) == 0
        assert sch.total_interest == 0
        assert sch.total_payments == 0

    def test_recomputed_not_mutated(self):
        a = _schedule(80_000, 48, 5.0)
        b = _schedule(80_000, 48, 5.0)
        assert a == b
        assert a is not b


class TestBuildSchedule:
    def test_uses_financed_amount(self):
        params = LoanParameters(100_000, 5.0, 48, down_payment=10_000, residual_percent=10)
        sch = build_schedule(params)
        assert sch.financed_amount == 80_000
        assert sch[-1].cumulative_principal == pytest.approx(80_000)

    def test_residual_larger_than_principal_is_empty(self):
        params = LoanParameters(100_000, 5.0, 48, down_payment=60_000, residual_percent=50)
        assert build_schedule(params).is_empty


class TestPagination:
    def test_pages(self):
        sch = _schedule(100_000, 60, 5.99)
        assert total_pages(sch) == 5
        page = paginate(sch, 2)
        assert [p.index for p in page] == list(range(13, 25))

    def test_page_is_clamped(self):
        sch = _schedule(100_000, 30, 5.99)
        assert [p.index for p in paginate(sch, 99)] == list(range(25, 31))
        assert paginate(sch, 0)[0].index == 1

    def test_empty_schedule(self):
        assert paginate(generate_schedule(0, 12, 5.0, 0.0), 1) == ()


class TestScheduleFrame:
    def test_columns_and_rounding(self):
        sch = _schedule(100_000, 60, 5.99)
        df = schedule_to_frame(sch)
        assert list(df.columns) == PAYMENT_SCHEDULE_COLUMNS
        assert len(df) == 60
        assert df.iloc[-1]["remaining_balance"] == 0.0
        assert df["due_date"].isna().all()

    def test_due_dates(self):
        sch = _schedule(10_000, 3, 5.0)
        df = schedule_to_frame(sch, date(2024, 1, 31), repayment_day=31)
        assert df["due_date"].tolist() == ["2024-02-29", "2024-03-31", "2024-04-30"]
