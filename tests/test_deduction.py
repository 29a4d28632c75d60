from datetime import date

import pytest

from nestplan.calculators import (
    calculate_mortgage_interest_deduction,
    generate_amortization_schedule,
    get_yearly_summary,
)

START = date(2025, 1, 1)


def test_deduction_averages_first_years():
    sched = generate_amortization_schedule(400000, 7, 30, START)
    interest = [y.total_interest for y in get_yearly_summary(sched)[:5]]
    res = calculate_mortgage_interest_deduction(sched, 0.24)
    avg = sum(interest) / 5
    assert [d.year for d in res.deductible_by_year] == [1, 2, 3, 4, 5]
    assert res.annual_deductible_interest == pytest.approx(avg)
    assert res.tax_savings == pytest.approx(avg * 0.24)
    assert res.effective_monthly_benefit == pytest.approx(avg * 0.24 / 12)
    assert res.deductible_by_year[0].savings == pytest.approx(interest[0] * 0.24)
    assert res.worth_itemizing is False


def test_large_loan_worth_itemizing():
    sched = generate_amortization_schedule(600000, 7, 30, START)
    res = calculate_mortgage_interest_deduction(sched, 0.32)
    assert res.annual_deductible_interest > 29200
    assert res.worth_itemizing is True


def test_custom_standard_deduction():
    sched = generate_amortization_schedule(400000, 7, 30, START)
    res = calculate_mortgage_interest_deduction(sched, 0.24, standard_deduction=14600)
    assert res.worth_itemizing is True


def test_window_clipped_to_schedule():
    sched = generate_amortization_schedule(100000, 5, 3, START)
    res = calculate_mortgage_interest_deduction(sched, 0.22, years_to_analyze=10)
    assert len(res.deductible_by_year) == 3
    assert res.annual_deductible_interest == pytest.approx(sched.total_interest / 3)


def test_empty_window():
    sched = generate_amortization_schedule(100000, 5, 30, START)
    res = calculate_mortgage_interest_deduction(sched, 0.22, years_to_analyze=0)
    assert res.deductible_by_year == ()
    assert res.annual_deductible_interest == 0
    assert res.worth_itemizing is False
