import json
from datetime import datetime

import click

from config.constants import CreditTier, InstrumentType
from config.settings import DEFAULT_ANNUAL_RATE, DEFAULT_CREDIT_SCORE, DEFAULT_TERM_MONTHS, LOG_LEVEL, SAMPLE_LENDER_CATALOGUE
from core.calculator import calc_apr, compute_payment
from core.comparison import compare_candidates, compare_lenders, rate_comparison_frame
from core.exceptions import DealEngineError
from core.models import FinancialProfile, LenderRateProfile, LoanParameters
from core.prepayment import generate_schedule_with_extra_principal
from core.rate_adjustment import credit_tier_for_score
from core.schedule_generator import paginate, schedule_to_frame
from core.synthesizer import base_rate_for_credit_score, synthesize_and_rank
from core.validator import ensure_valid_lender_profile, ensure_valid_loan_parameters, validate_financial_profile
from utils.formatters import fmt_amount, fmt_months, fmt_rate
from utils.log_setup import setup_logging


def _loan(principal, annual_rate, term_months, down_payment=0.0, residual_percent=0.0) -> LoanParameters:
    params = LoanParameters(
        principal=principal,
        annual_rate_percent=annual_rate,
        term_months=term_months,
        down_payment=down_payment,
        residual_percent=residual_percent,
    )
    try:
        return ensure_valid_loan_parameters(params)
    except DealEngineError as exc:
        raise click.UsageError(str(exc))


def _load_lenders(lenders_file):
    if lenders_file is None:
        raw = SAMPLE_LENDER_CATALOGUE
    else:
        with open(lenders_file, encoding="utf-8") as fh:
            raw = json.load(fh)
    try:
        return [ensure_valid_lender_profile(LenderRateProfile.from_dict(item)) for item in raw]
    except (KeyError, TypeError, ValueError) as exc:
        raise click.BadParameter(f"malformed lender entry: {exc}", param_hint="--lenders-file")
    except DealEngineError as exc:
        raise click.BadParameter(str(exc), param_hint="--lenders-file")


@click.group()
@click.option('--log-level', default=LOG_LEVEL, show_default=True, help='Logging level')
def cli(log_level):
    """A CLI for the deal structure engine."""
    setup_logging(log_level)


@cli.command()
@click.option('--principal', type=float, required=True, help='Transaction amount')
@click.option('--annual-rate', type=float, default=DEFAULT_ANNUAL_RATE, show_default=True, help='Annual interest rate (%)')
@click.option('--term-months', type=int, default=DEFAULT_TERM_MONTHS, show_default=True, help='Term in months')
@click.option('--down-payment', type=float, default=0.0, help='Down payment amount')
@click.option('--residual-percent', type=float, default=0.0, help='Residual value as % of principal')
def payment(principal, annual_rate, term_months, down_payment, residual_percent):
    """Calculates the fixed monthly payment."""
    params = _loan(principal, annual_rate, term_months, down_payment, residual_percent)
    monthly = compute_payment(params.financed_amount, params.term_months, params.annual_rate_percent)
    click.echo(f"Amount financed: {fmt_amount(params.financed_amount)}")
    click.echo(f"Monthly payment: {fmt_amount(monthly)}")
    click.echo(f"Term: {fmt_months(params.term_months)} at {fmt_rate(params.annual_rate_percent)}")


@cli.command('schedule')
@click.option('--principal', type=float, required=True, help='Transaction amount')
@click.option('--annual-rate', type=float, default=DEFAULT_ANNUAL_RATE, show_default=True, help='Annual interest rate (%)')
@click.option('--term-months', type=int, default=DEFAULT_TERM_MONTHS, show_default=True, help='Term in months')
@click.option('--down-payment', type=float, default=0.0, help='Down payment amount')
@click.option('--residual-percent', type=float, default=0.0, help='Residual value as % of principal')
@click.option('--extra-principal', type=float, default=0.0, help='Extra principal paid each month')
@click.option('--start-date', type=str, default=None, help='Start date (YYYY-MM-DD)')
@click.option('--repayment-day', type=int, default=1, help='Repayment day')
@click.option('--page', type=int, default=None, help='Only print this page of 12 periods')
def schedule_command(principal, annual_rate, term_months, down_payment, residual_percent,
                     extra_principal, start_date, repayment_day, page):
    """Generates an amortization schedule and outputs it as CSV."""
    params = _loan(principal, annual_rate, term_months, down_payment, residual_percent)
    start_date_obj = datetime.strptime(start_date, '%Y-%m-%d').date() if start_date else None
    financed = params.financed_amount
    monthly = compute_payment(financed, params.term_months, params.annual_rate_percent)
    schedule = generate_schedule_with_extra_principal(
        financed, params.term_months, params.annual_rate_percent, monthly, extra_principal,
    )
    frame = schedule_to_frame(schedule, start_date_obj, repayment_day)
    if page is not None:
        indexes = [p.index for p in paginate(schedule, page)]
        frame = frame[frame["period"].isin(indexes)]
    click.echo(frame.to_csv(index=False))


@cli.command('apr')
@click.option('--loan-amount', type=float, required=True, help='Loan amount')
@click.option('--annual-rate', type=float, required=True, help='Annual interest rate (%)')
@click.option('--term-months', type=int, required=True, help='Term in months')
@click.option('--fees', type=float, default=0.0, help='Up-front fees')
def apr_command(loan_amount, annual_rate, term_months, fees):
    """Calculates the APR including up-front fees."""
    _loan(loan_amount, annual_rate, term_months)
    click.echo(f"APR: {calc_apr(loan_amount, annual_rate, term_months, fees):.4f}%")


@cli.command('compare-rates')
@click.option('--principal', type=float, required=True, help='Transaction amount')
@click.option('--term-months', type=int, default=DEFAULT_TERM_MONTHS, show_default=True, help='Term in months')
@click.option('--down-payment', type=float, default=0.0, help='Down payment amount')
@click.option('--credit-tier', type=click.Choice([t.value for t in CreditTier]), default=None, help='Credit tier')
@click.option('--credit-score', type=int, default=DEFAULT_CREDIT_SCORE, show_default=True, help='Used when no tier is given')
@click.option('--lenders-file', type=click.Path(exists=True), default=None, help='JSON lender catalogue')
def compare_rates_command(principal, term_months, down_payment, credit_tier, credit_score, lenders_file):
    """Compares lender quotes, cheapest monthly payment first."""
    # 利率由贷方表决定，这里的 0 只用于参数校验
    params = _loan(principal, 0.0, term_months, down_payment)
    tier = credit_tier or credit_tier_for_score(credit_score)
    quotes = compare_lenders(params, tier, _load_lenders(lenders_file))
    click.echo(f"--- Rate comparison ({tier}) ---")
    click.echo(rate_comparison_frame(quotes).to_string(index=False))


@cli.command('structures')
@click.option('--principal', type=float, required=True, help='Transaction amount')
@click.option('--annual-rate', type=float, default=None, help='Base annual rate (%); derived from credit score if omitted')
@click.option('--max-down-payment', type=float, default=0.0, help='Largest acceptable down payment')
@click.option('--preferred-term', type=int, default=0, help='Preferred term in months')
@click.option('--monthly-budget', type=float, default=0.0, help='Monthly budget')
@click.option('--credit-score', type=int, default=DEFAULT_CREDIT_SCORE, show_default=True, help='Credit score')
@click.option('--cash-on-hand', type=float, default=0.0, help='Cash on hand')
@click.option('--instrument-type', type=click.Choice([t.value for t in InstrumentType]), default=None, help='Requested instrument')
@click.option('--with-lenders', is_flag=True, help='Price structures against the lender catalogue')
@click.option('--lenders-file', type=click.Path(exists=True), default=None, help='JSON lender catalogue')
def structures_command(principal, annual_rate, max_down_payment, preferred_term, monthly_budget,
                       credit_score, cash_on_hand, instrument_type, with_lenders, lenders_file):
    """Generates and ranks candidate deal structures."""
    profile = FinancialProfile(
        max_down_payment=max_down_payment,
        preferred_term_months=preferred_term,
        monthly_budget=monthly_budget,
        credit_score=credit_score,
        cash_on_hand=cash_on_hand,
    )
    ok, msg = validate_financial_profile(profile)
    if not ok:
        raise click.UsageError(msg)

    rate = annual_rate if annual_rate is not None else base_rate_for_credit_score(credit_score)
    params = _loan(principal, rate, preferred_term or DEFAULT_TERM_MONTHS)
    lenders = _load_lenders(lenders_file) if (with_lenders or lenders_file) else None

    ranked = synthesize_and_rank(params, profile, lenders, instrument_type=instrument_type)
    click.echo("--- Ranked deal structures ---")
    click.echo(compare_candidates(ranked).to_string(index=False))
    for c in ranked:
        click.echo(f"\n{c.name} ({c.match_score:.1f}): {c.recommendation_reason}")
        for adj in c.score_breakdown:
            click.echo(f"  {adj.factor:<13} {adj.delta:+.2f}  {adj.detail}")


if __name__ == "__main__":
    cli()
