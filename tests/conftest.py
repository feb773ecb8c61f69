import sys
import pytest
from pathlib import Path

# 确保项目根目录在 sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config.settings import SAMPLE_LENDER_CATALOGUE  # noqa: E402
from core.models import FinancialProfile, LenderRateProfile, LoanParameters  # noqa: E402


@pytest.fixture
def loan():
    """10 万, 60 期, 5.99%, 无首付"""
    return LoanParameters(principal=100_000, annual_rate_percent=5.99, term_months=60)


@pytest.fixture
def profile():
    return FinancialProfile(
        max_down_payment=30_000,
        preferred_term_months=0,
        monthly_budget=0,
        credit_score=720,
        cash_on_hand=50_000,
    )


@pytest.fixture
def catalogue():
    return [LenderRateProfile.from_dict(item) for item in SAMPLE_LENDER_CATALOGUE]


@pytest.fixture
def premier(catalogue):
    return catalogue[0]
