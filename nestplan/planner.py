"""Compose the calculators over a household's calculator state.

``build_plan`` prices the four purchase scenarios (early or delayed purchase
date, current or alternative rate).  ``analyze_plan`` digs into the early,
current-rate scenario: schedule, PMI, DTI, stress test, closing costs,
savings goal and, when a tax bracket is known, the interest deduction.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Optional

from .calculators import (
    calculate_dti,
    calculate_income_scenarios,
    calculate_months_to_date,
    calculate_mortgage_interest_deduction,
    calculate_pmi,
    calculate_savings_accumulation,
    calculate_savings_goal,
    calculate_scenario,
    calculate_texas_property_tax,
    estimate_closing_costs,
    generate_amortization_schedule,
    get_yearly_summary,
    stress_test_scenario,
)
from .models import (
    CalculatorState,
    DebtObligations,
    HouseholdIncome,
    Plan,
    PlanAnalysis,
)
from .presets import PLAN_STRESS_INCREMENTS, PMI_DEFAULTS, SAVINGS_GOAL_DEFAULTS

logger = logging.getLogger(__name__)

SCENARIO_KEYS = ("early_current_rate", "delayed_current_rate", "early_alt_rate", "delayed_alt_rate")


def effective_income(state: CalculatorState) -> HouseholdIncome:
    """Household income with the detailed variable timeline folded in.

    In detailed mode the second earner's variable pay is the rounded average
    of the month-by-month entries up to the early purchase date.
    """

    inc = state.income
    variable = inc.secondary_variable
    early = state.detailed_variable_income.early
    if inc.variable_mode == "detailed" and early:
        variable = float(math.floor(sum(early) / len(early) + 0.5))
    return HouseholdIncome(
        primary=inc.primary,
        secondary_base=inc.secondary_base,
        secondary_variable=variable,
    )


def monthly_savings_rate(state: CalculatorState, full_income: float) -> float:
    if state.savings.manual_override:
        return state.savings.monthly
    return max(0.0, full_income - state.expenses)


def build_plan(state: CalculatorState, today: Optional[date] = None) -> Plan:
    """Savings at each purchase date and the four resulting scenarios."""

    today = today or date.today()
    incomes = calculate_income_scenarios(effective_income(state))
    savings_rate = monthly_savings_rate(state, incomes.full_income)

    months_early = calculate_months_to_date(state.purchase_dates.early, today)
    months_delayed = calculate_months_to_date(state.purchase_dates.delayed, today)
    early_savings = calculate_savings_accumulation(state.savings.current, savings_rate, months_early)
    delayed_savings = calculate_savings_accumulation(state.savings.current, savings_rate, months_delayed)

    prop = state.property
    tax = calculate_texas_property_tax(prop.price, prop.property_tax_rate, prop.exemptions)

    def scenario(down_payment, rate):
        return calculate_scenario(
            prop.price,
            down_payment,
            rate,
            prop.loan_term,
            tax.annual_tax,
            prop.insurance,
            prop.utilities,
            incomes,
        )

    scenarios = dict(
        zip(
            SCENARIO_KEYS,
            (
                scenario(early_savings, prop.current_rate),
                scenario(delayed_savings, prop.current_rate),
                scenario(early_savings, prop.alt_rate),
                scenario(delayed_savings, prop.alt_rate),
            ),
        )
    )
    logger.debug(
        "Plan built: %s/%s months to purchase, savings %.2f/month",
        months_early,
        months_delayed,
        savings_rate,
    )
    return Plan(
        income_scenarios=incomes,
        monthly_savings=savings_rate,
        months_to_early=months_early,
        months_to_delayed=months_delayed,
        early_savings=early_savings,
        delayed_savings=delayed_savings,
        tax_result=tax,
        scenarios=scenarios,
    )


def analyze_plan(
    state: CalculatorState,
    plan: Optional[Plan] = None,
    debts: Optional[DebtObligations] = None,
    marginal_tax_rate: Optional[float] = None,
    start_date: Optional[date] = None,
    today: Optional[date] = None,
) -> PlanAnalysis:
    """Detailed analysis of the early purchase at the current rate."""

    today = today or date.today()
    plan = plan or build_plan(state, today)
    debts = debts or DebtObligations()
    prop = state.property
    scenario = plan.scenarios["early_current_rate"]
    loan_amount = scenario.loan_amount
    annual_tax = plan.tax_result.annual_tax
    housing = scenario.total_monthly_housing
    gross_income = plan.income_scenarios.full_income

    schedule = generate_amortization_schedule(
        loan_amount, prop.current_rate, prop.loan_term, start_date or today
    )
    pmi = calculate_pmi(loan_amount, prop.price, PMI_DEFAULTS["annual_rate_pct"], schedule)
    dti = calculate_dti(gross_income, housing, debts)

    if loan_amount > 0:
        stress = stress_test_scenario(
            loan_amount,
            prop.current_rate,
            prop.loan_term,
            annual_tax,
            prop.insurance,
            prop.utilities,
            gross_income,
            debts,
            PLAN_STRESS_INCREMENTS,
        )
    else:
        logger.debug("Savings cover the price; skipping stress test")
        stress = []

    closing = estimate_closing_costs(prop.price, loan_amount, annual_tax, prop.insurance, prop.current_rate)
    goal = calculate_savings_goal(
        prop.price,
        SAVINGS_GOAL_DEFAULTS["down_payment_pct"],
        closing.total,
        SAVINGS_GOAL_DEFAULTS["reserve_months"],
        housing,
        state.savings.current,
        plan.monthly_savings,
        today=today,
    )
    deduction = None
    if marginal_tax_rate is not None:
        deduction = calculate_mortgage_interest_deduction(schedule, marginal_tax_rate)

    return PlanAnalysis(
        scenario=scenario,
        schedule=schedule,
        yearly_summary=tuple(get_yearly_summary(schedule)),
        pmi=pmi,
        dti=dti,
        stress_tests=tuple(stress),
        closing_costs=closing,
        savings_goal=goal,
        deduction=deduction,
    )
