"""Mortgage affordability calculations.

All functions are pure: they read their arguments, return a frozen record
and never touch the clock unless the caller leaves a date argument unset.
Degenerate inputs (zero income, zero price, zero rate) return zeroed or
clamped results instead of raising.  NaN is not screened out and flows
through the arithmetic untouched.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .models import (
    AmortizationRow,
    AmortizationSchedule,
    ClosingCostBreakdown,
    ClosingCostInputs,
    DebtObligations,
    DeductionYear,
    DTIResult,
    HouseholdIncome,
    IncomeScenarios,
    LoanTerms,
    PMIResult,
    SavingsGoalResult,
    ScenarioResult,
    StressTestResult,
    TaxDeductionResult,
    TaxExemptions,
    TaxResult,
    YearlySummary,
)
from .presets import (
    DEDUCTION_YEARS,
    DTI_BACK_END_BANDS,
    DTI_CEILING_FACTORS,
    DTI_FRONT_END_BANDS,
    PMI_DEFAULTS,
    SAVINGS_GOAL_DEFAULTS,
    SCENARIO_AFFORDABLE_PCT,
    STANDARD_DEDUCTION,
    STRESS_BANDS,
    STRESS_RATE_INCREMENTS,
    TX_EXEMPTIONS,
    VETERAN_EXEMPTIONS,
    VETERAN_FULL_EXEMPTION_RATING,
)

logger = logging.getLogger(__name__)


def add_months(start: date, months: int) -> date:
    """Shift ``start`` by whole calendar months, clipping to the month end."""

    return (pd.Timestamp(start) + pd.DateOffset(months=int(months))).date()


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end``; days are ignored."""

    return (end.year - start.year) * 12 + (end.month - start.month)


# ---------------------------------------------------------------------------
# Amortization
# ---------------------------------------------------------------------------


def calculate_mortgage_payment(principal, annual_rate_pct, years):
    """Fully amortizing monthly payment for a fixed-rate loan.

    ``annual_rate_pct`` is the nominal yearly rate (``6.5`` for 6.5%) and
    ``years`` the amortization term.  A non-positive principal pays nothing
    and a zero rate amortizes straight-line.  Negative terms are the caller's
    problem; the function only guards against an empty term.
    """

    if principal <= 0:
        return 0.0
    n = int(years * 12)
    if n <= 0:
        return 0.0
    if annual_rate_pct <= 0:
        return principal / n
    r = annual_rate_pct / 100 / 12
    growth = (1 + r) ** n
    return (principal * (r * growth)) / (growth - 1)


def generate_amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    years: int,
    start_date: Optional[date] = None,
) -> AmortizationSchedule:
    """Month-by-month schedule with running totals.

    The balance is clamped at zero so rounding drift in the last payment
    cannot push it negative.  ``total_payments`` is ``monthly_payment * n``
    rather than the sum of the rows; the two can differ by float noise.
    """

    monthly_payment = calculate_mortgage_payment(principal, annual_rate_pct, years)
    monthly_rate = annual_rate_pct / 100 / 12
    n = int(years * 12)
    if monthly_rate == 0:
        logger.debug("Zero-rate schedule for %s over %s months", principal, n)

    rows: List[AmortizationRow] = []
    balance = principal
    cumulative_interest = 0.0
    cumulative_principal = 0.0
    for month in range(1, n + 1):
        interest = balance * monthly_rate
        principal_paid = monthly_payment - interest
        balance = balance - principal_paid
        if balance < 0:
            balance = 0.0
        cumulative_interest += interest
        cumulative_principal += principal_paid
        rows.append(
            AmortizationRow(
                month=month,
                year=math.ceil(month / 12),
                payment=monthly_payment,
                principal=principal_paid,
                interest=interest,
                balance=balance,
                cumulative_interest=cumulative_interest,
                cumulative_principal=cumulative_principal,
            )
        )

    start = start_date or date.today()
    return AmortizationSchedule(
        rows=tuple(rows),
        total_payments=monthly_payment * n,
        total_interest=cumulative_interest,
        total_principal=principal,
        payoff_date=add_months(start, n),
        monthly_payment=monthly_payment,
    )


def amortize(terms: LoanTerms, start_date: Optional[date] = None) -> AmortizationSchedule:
    """Schedule for a :class:`LoanTerms` record."""

    return generate_amortization_schedule(
        terms.principal, terms.annual_rate_pct, terms.term_years, start_date
    )


def get_yearly_summary(schedule: AmortizationSchedule) -> List[YearlySummary]:
    """Roll the monthly rows up into loan years."""

    buckets: Dict[int, Dict[str, float]] = {}
    for row in schedule.rows:
        b = buckets.setdefault(
            row.year, {"payments": 0.0, "principal": 0.0, "interest": 0.0, "balance": 0.0}
        )
        b["payments"] += row.payment
        b["principal"] += row.principal
        b["interest"] += row.interest
        b["balance"] = row.balance
    return [
        YearlySummary(
            year=year,
            total_payments=b["payments"],
            total_principal=b["principal"],
            total_interest=b["interest"],
            ending_balance=b["balance"],
        )
        for year, b in buckets.items()
    ]


def calculate_monthly_housing(mortgage_payment, annual_property_tax, annual_insurance, monthly_utilities):
    """Payment plus monthly shares of tax and insurance plus utilities."""

    return mortgage_payment + annual_property_tax / 12 + annual_insurance / 12 + monthly_utilities


def calculate_affordability_percentage(monthly_housing, monthly_income):
    """Housing cost as a percentage of income; ``0`` without income."""

    if monthly_income <= 0:
        return 0.0
    return monthly_housing / monthly_income * 100


# ---------------------------------------------------------------------------
# Texas property tax
# ---------------------------------------------------------------------------


def _exemption_total(home_price: float, exemptions: TaxExemptions) -> Optional[float]:
    """Stack the exemptions; ``None`` means the value is fully exempt."""

    total = 0.0
    if exemptions.homestead:
        total += TX_EXEMPTIONS["homestead"]
    # Over-65 and disabled cannot be combined; the credit is taken once.
    if exemptions.over_65 or exemptions.disabled:
        total += TX_EXEMPTIONS["over_65_or_disabled"]
    if exemptions.veteran_disability == VETERAN_FULL_EXEMPTION_RATING:
        return None
    total += VETERAN_EXEMPTIONS.get(exemptions.veteran_disability, 0.0)
    if exemptions.local_optional_pct > 0:
        total += max(
            home_price * exemptions.local_optional_pct / 100,
            TX_EXEMPTIONS["local_optional_min"],
        )
    if exemptions.agricultural:
        total += home_price * TX_EXEMPTIONS["agricultural_pct"] / 100
    if exemptions.custom_amount > 0:
        total += exemptions.custom_amount
    return min(total, home_price)


def calculate_texas_property_tax(home_price, tax_rate_pct, exemptions: TaxExemptions) -> TaxResult:
    """Annual and monthly property tax after Texas exemptions.

    Exemptions stack in a fixed order (homestead, over-65/disabled, veteran
    rating, local optional percentage, agricultural use, custom amount) and
    are capped at the home price.  A 100% disabled veteran owes nothing
    regardless of the other flags.
    """

    total = _exemption_total(home_price, exemptions)
    if total is None:
        logger.debug("Full veteran exemption on %s", home_price)
        return TaxResult(
            assessed_value=home_price,
            total_exemptions=home_price,
            taxable_value=0.0,
            annual_tax=0.0,
            monthly_tax=0.0,
            effective_rate=0.0,
        )
    taxable = max(0.0, home_price - total)
    annual_tax = taxable * tax_rate_pct / 100
    return TaxResult(
        assessed_value=home_price,
        total_exemptions=total,
        taxable_value=taxable,
        annual_tax=annual_tax,
        monthly_tax=annual_tax / 12,
        effective_rate=annual_tax / home_price * 100 if home_price > 0 else 0.0,
    )


# ---------------------------------------------------------------------------
# Income scenarios and affordability
# ---------------------------------------------------------------------------


def calculate_income_scenarios(income: HouseholdIncome) -> IncomeScenarios:
    """Three income bases for planning around the second earner.

    ``full`` counts everything, ``conservative`` drops the primary earner and
    ``family_planning`` keeps only the second earner's base pay.
    """

    return IncomeScenarios(
        full_income=income.primary + income.secondary_base + income.secondary_variable,
        conservative_income=income.secondary_base + income.secondary_variable,
        family_planning_income=income.secondary_base,
    )


def calculate_scenario(
    home_price,
    down_payment,
    interest_rate,
    loan_term,
    annual_property_tax,
    annual_insurance,
    monthly_utilities,
    income_scenarios: IncomeScenarios,
) -> ScenarioResult:
    """Housing cost of one purchase scenario against each income basis.

    The loan is not clamped: a down payment above the price yields a negative
    loan and a zero payment.
    """

    loan_amount = home_price - down_payment
    payment = calculate_mortgage_payment(loan_amount, interest_rate, loan_term)
    housing = calculate_monthly_housing(payment, annual_property_tax, annual_insurance, monthly_utilities)

    full_pct = calculate_affordability_percentage(housing, income_scenarios.full_income)
    conservative_pct = calculate_affordability_percentage(housing, income_scenarios.conservative_income)
    family_pct = calculate_affordability_percentage(housing, income_scenarios.family_planning_income)

    if family_pct <= SCENARIO_AFFORDABLE_PCT:
        status = "affordable"
    elif conservative_pct <= SCENARIO_AFFORDABLE_PCT:
        status = "requires-variable"
    else:
        status = "not-affordable"

    return ScenarioResult(
        down_payment=down_payment,
        loan_amount=loan_amount,
        mortgage_payment=payment,
        total_monthly_housing=housing,
        full_percentage=full_pct,
        conservative_percentage=conservative_pct,
        family_percentage=family_pct,
        affordability_status=status,
    )


# ---------------------------------------------------------------------------
# Debt-to-income
# ---------------------------------------------------------------------------


def _ratio_status(ratio, bands):
    if ratio <= bands["good"]:
        return "good"
    if ratio <= bands["acceptable"]:
        return "acceptable"
    return "high"


def calculate_dti(gross_monthly_income, housing_costs, debts: Optional[DebtObligations] = None) -> DTIResult:
    """Front-end and back-end debt-to-income ratios with qualification.

    Without income the ratios are meaningless, so they are reported as ``0``
    and the borrower is ``not-qualified``.
    """

    debts = debts or DebtObligations()
    if gross_monthly_income <= 0:
        logger.debug("DTI requested without income; reporting not-qualified")
        return DTIResult(
            front_end_ratio=0.0,
            back_end_ratio=0.0,
            front_end_status="good",
            back_end_status="good",
            max_housing_payment_28=0.0,
            max_total_debt_36=0.0,
            qualification_status="not-qualified",
            total_monthly_debt=housing_costs,
        )

    total_monthly_debt = housing_costs + debts.total
    fe = housing_costs / gross_monthly_income * 100
    be = total_monthly_debt / gross_monthly_income * 100

    if fe <= DTI_FRONT_END_BANDS["good"] and be <= DTI_BACK_END_BANDS["good"]:
        qualification = "qualified"
    elif fe <= DTI_FRONT_END_BANDS["acceptable"] and be <= DTI_BACK_END_BANDS["acceptable"]:
        qualification = "marginal"
    else:
        qualification = "not-qualified"

    return DTIResult(
        front_end_ratio=fe,
        back_end_ratio=be,
        front_end_status=_ratio_status(fe, DTI_FRONT_END_BANDS),
        back_end_status=_ratio_status(be, DTI_BACK_END_BANDS),
        max_housing_payment_28=gross_monthly_income * DTI_CEILING_FACTORS["housing"],
        max_total_debt_36=gross_monthly_income * DTI_CEILING_FACTORS["total_debt"],
        qualification_status=qualification,
        total_monthly_debt=total_monthly_debt,
    )


# ---------------------------------------------------------------------------
# Stress testing
# ---------------------------------------------------------------------------


def stress_test_scenario(
    principal,
    base_rate,
    loan_term,
    annual_property_tax,
    annual_insurance,
    monthly_utilities,
    gross_monthly_income,
    debts: Optional[DebtObligations] = None,
    rate_increments: Iterable[float] = STRESS_RATE_INCREMENTS,
) -> List[StressTestResult]:
    """Re-price the loan at ``base_rate + increment`` for each increment.

    Increments are used in the order given, duplicates included.  The verdict
    looks only at the front-end ratio, with cutoffs that differ from both the
    scenario check and the DTI qualification.
    """

    results: List[StressTestResult] = []
    for increment in rate_increments:
        rate = base_rate + increment
        payment = calculate_mortgage_payment(principal, rate, loan_term)
        housing = calculate_monthly_housing(payment, annual_property_tax, annual_insurance, monthly_utilities)
        dti_result = calculate_dti(gross_monthly_income, housing, debts)
        if dti_result.front_end_ratio <= STRESS_BANDS["affordable"]:
            status = "affordable"
        elif dti_result.front_end_ratio <= STRESS_BANDS["requires_variable"]:
            status = "requires-variable"
        else:
            status = "not-affordable"
        results.append(
            StressTestResult(
                rate=rate,
                rate_increase=increment,
                monthly_payment=payment,
                total_monthly_housing=housing,
                dti_result=dti_result,
                affordability_status=status,
            )
        )
    return results


# ---------------------------------------------------------------------------
# PMI
# ---------------------------------------------------------------------------


def compute_ltv(home_price, loan_amount):
    """Loan-to-value percentage; ``0`` when there is no price."""

    if home_price == 0:
        return 0.0
    return loan_amount / home_price * 100


def calculate_pmi(
    loan_amount,
    home_price,
    annual_pmi_rate_pct=PMI_DEFAULTS["annual_rate_pct"],
    schedule: Optional[AmortizationSchedule] = None,
) -> PMIResult:
    """Private mortgage insurance and when it drops off.

    PMI applies above 80% LTV and is charged on the original loan amount for
    its whole life.  With a schedule, removal is the first month whose
    balance reaches 80% of the price.
    """

    threshold = PMI_DEFAULTS["ltv_threshold_pct"]
    ltv = compute_ltv(home_price, loan_amount)
    if ltv <= threshold:
        return PMIResult(
            required=False,
            monthly_pmi=0.0,
            annual_pmi=0.0,
            ltv=ltv,
            months_until_removal=None,
            total_pmi_cost=0.0,
        )

    annual_pmi = loan_amount * annual_pmi_rate_pct / 100
    monthly_pmi = annual_pmi / 12
    months_until_removal = None
    total_cost = 0.0
    if schedule is not None:
        target_balance = home_price * (threshold / 100)
        for row in schedule.rows:
            if row.balance <= target_balance:
                months_until_removal = row.month
                total_cost = monthly_pmi * row.month
                break

    return PMIResult(
        required=True,
        monthly_pmi=monthly_pmi,
        annual_pmi=annual_pmi,
        ltv=ltv,
        months_until_removal=months_until_removal,
        total_pmi_cost=total_cost,
    )


# ---------------------------------------------------------------------------
# Closing costs
# ---------------------------------------------------------------------------


def estimate_closing_costs(
    home_price,
    loan_amount,
    annual_property_tax,
    annual_insurance,
    interest_rate,
    inputs: Optional[ClosingCostInputs] = None,
) -> ClosingCostBreakdown:
    """Itemized closing costs from percentage and flat-fee assumptions."""

    i = inputs or ClosingCostInputs()
    origination = loan_amount * i.loan_origination_pct / 100
    title = home_price * i.title_insurance_pct / 100
    escrow = (annual_property_tax + annual_insurance) / 12 * i.escrow_months
    prepaid = loan_amount * interest_rate / 100 / 365 * i.prepaid_days
    total = (
        origination
        + i.appraisal
        + i.inspection
        + title
        + escrow
        + i.recording_fees
        + i.attorney_fees
        + prepaid
    )
    return ClosingCostBreakdown(
        loan_origination=origination,
        appraisal=i.appraisal,
        inspection=i.inspection,
        title_insurance=title,
        escrow_deposit=escrow,
        recording_fees=i.recording_fees,
        attorney_fees=i.attorney_fees,
        prepaid_interest=prepaid,
        total=total,
    )


# ---------------------------------------------------------------------------
# Savings
# ---------------------------------------------------------------------------


def calculate_savings_accumulation(current_savings, monthly_savings, months):
    return current_savings + monthly_savings * months


def calculate_months_to_date(target_date, today: Optional[date] = None) -> int:
    """Whole months from ``today`` until ``target_date`` (never negative).

    ``target_date`` is a ``date`` or an ISO ``YYYY-MM-DD`` string; an empty
    value counts as no wait at all.
    """

    if not target_date:
        return 0
    if isinstance(target_date, str):
        target_date = date.fromisoformat(target_date)
    return max(0, months_between(today or date.today(), target_date))


def calculate_savings_goal(
    home_price,
    target_down_payment_pct=SAVINGS_GOAL_DEFAULTS["down_payment_pct"],
    closing_costs=0.0,
    reserve_months=SAVINGS_GOAL_DEFAULTS["reserve_months"],
    monthly_housing_cost=0.0,
    current_savings=0.0,
    monthly_savings=0.0,
    target_date: Optional[date] = None,
    today: Optional[date] = None,
) -> SavingsGoalResult:
    """Cash needed to buy (down payment, closing costs, reserves) and progress.

    Two questions are answered independently: when the goal is reached at
    the current savings rate (``months_to_goal``), and what monthly amount
    reaches it by ``target_date`` (``monthly_required``).  The reported
    ``target_date`` is the caller's date when given, otherwise the projected
    one.
    """

    down_payment_target = home_price * target_down_payment_pct / 100
    reserves_target = monthly_housing_cost * reserve_months
    target_amount = down_payment_target + closing_costs + reserves_target

    remaining = max(0.0, target_amount - current_savings)
    if target_amount > 0:
        progress = min(100.0, current_savings / target_amount * 100)
    else:
        progress = 100.0

    if isinstance(target_date, str):
        target_date = date.fromisoformat(target_date)
    today = today or date.today()
    months_to_goal = None
    projected_date = None
    monthly_required = None
    if remaining > 0:
        if monthly_savings > 0:
            months_to_goal = math.ceil(remaining / monthly_savings)
            projected_date = add_months(today, months_to_goal)
        if target_date is not None:
            months_left = months_between(today, target_date)
            if months_left > 0:
                monthly_required = remaining / months_left

    return SavingsGoalResult(
        target_amount=target_amount,
        down_payment_target=down_payment_target,
        closing_costs_target=closing_costs,
        reserves_target=reserves_target,
        current_progress=current_savings,
        remaining_needed=remaining,
        months_to_goal=months_to_goal,
        target_date=target_date if target_date is not None else projected_date,
        monthly_required=monthly_required,
        progress_percentage=progress,
    )


# ---------------------------------------------------------------------------
# Mortgage interest deduction
# ---------------------------------------------------------------------------


def calculate_mortgage_interest_deduction(
    schedule: AmortizationSchedule,
    marginal_tax_rate,
    standard_deduction=STANDARD_DEDUCTION,
    years_to_analyze=DEDUCTION_YEARS,
) -> TaxDeductionResult:
    """Rough value of itemizing mortgage interest over the first few years.

    ``marginal_tax_rate`` is a fraction (``0.22`` for the 22% bracket).  This
    ignores the SALT cap, loan limits and every other deduction; it only
    tells whether interest alone beats the standard deduction.
    """

    summary: Sequence[YearlySummary] = get_yearly_summary(schedule)
    window = max(0, min(int(years_to_analyze), len(summary)))
    by_year = [
        DeductionYear(year=y.year, interest=y.total_interest, savings=y.total_interest * marginal_tax_rate)
        for y in summary[:window]
    ]
    if window == 0:
        return TaxDeductionResult(
            annual_deductible_interest=0.0,
            tax_savings=0.0,
            effective_monthly_benefit=0.0,
            worth_itemizing=False,
            deductible_by_year=(),
        )

    total_interest = sum(d.interest for d in by_year)
    total_savings = sum(d.savings for d in by_year)
    avg_interest = total_interest / window
    return TaxDeductionResult(
        annual_deductible_interest=avg_interest,
        tax_savings=total_savings / window,
        effective_monthly_benefit=total_savings / (window * 12),
        worth_itemizing=avg_interest > standard_deduction,
        deductible_by_year=tuple(by_year),
    )
