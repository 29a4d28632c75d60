import math

import pytest

from nestplan.calculators import (
    _ratio_status,
    calculate_dti,
    calculate_income_scenarios,
    calculate_scenario,
    stress_test_scenario,
)
from nestplan.models import DebtObligations, HouseholdIncome, IncomeScenarios
from nestplan.presets import DTI_BACK_END_BANDS, DTI_FRONT_END_BANDS


def _incomes(full, conservative, family):
    return IncomeScenarios(full_income=full, conservative_income=conservative, family_planning_income=family)


def test_income_scenarios():
    res = calculate_income_scenarios(HouseholdIncome(primary=6000, secondary_base=4000, secondary_variable=1000))
    assert res.full_income == 11000
    assert res.conservative_income == 5000
    assert res.family_planning_income == 4000


# Zero-rate, 20-year loan of 240k pays 1000/month; 2400 tax and 1200
# insurance add 300, so housing is 1300.
def _scenario(incomes, down_payment=10000):
    return calculate_scenario(250000, down_payment, 0, 20, 2400, 1200, 0, incomes)


def test_scenario_amounts():
    res = _scenario(_incomes(13000, 6500, 5200))
    assert res.loan_amount == 240000
    assert res.mortgage_payment == 1000
    assert res.total_monthly_housing == pytest.approx(1300)
    assert res.full_percentage == pytest.approx(10)
    assert res.conservative_percentage == pytest.approx(20)


def test_scenario_affordable_at_25_pct_family_income():
    res = _scenario(_incomes(13000, 6500, 5200))
    assert res.family_percentage == 25.0
    assert res.affordability_status == "affordable"


def test_scenario_requires_variable():
    res = _scenario(_incomes(13000, 5200, 4000))
    assert res.affordability_status == "requires-variable"


def test_scenario_not_affordable():
    res = _scenario(_incomes(13000, 5000, 4000))
    assert res.affordability_status == "not-affordable"


def test_scenario_missing_income_reads_as_zero_pct():
    res = _scenario(_incomes(0, 0, 0))
    assert res.family_percentage == 0
    assert res.affordability_status == "affordable"


def test_scenario_down_payment_above_price():
    res = _scenario(_incomes(13000, 6500, 5200), down_payment=260000)
    assert res.loan_amount == -10000
    assert res.mortgage_payment == 0


def test_ratio_bands_are_inclusive():
    assert _ratio_status(28.0, DTI_FRONT_END_BANDS) == "good"
    assert _ratio_status(28.01, DTI_FRONT_END_BANDS) == "acceptable"
    assert _ratio_status(31.0, DTI_FRONT_END_BANDS) == "acceptable"
    assert _ratio_status(31.01, DTI_FRONT_END_BANDS) == "high"
    assert _ratio_status(36.0, DTI_BACK_END_BANDS) == "good"
    assert _ratio_status(43.0, DTI_BACK_END_BANDS) == "acceptable"


def test_dti_front_end_keeps_float_noise():
    # 2800 / 10000 * 100 is 28.000000000000004, just past the good band.
    res = calculate_dti(10000, 2800)
    assert res.front_end_ratio == 2800 / 10000 * 100
    assert res.front_end_ratio > 28.0
    assert res.front_end_status == "acceptable"
    assert res.qualification_status == "marginal"


def test_dti_front_end_good_band():
    res = calculate_dti(10000, 2500)
    assert res.front_end_ratio == 25.0
    assert res.front_end_status == "good"
    assert res.qualification_status == "qualified"

    over = calculate_dti(10000, 2801)
    assert over.front_end_ratio == pytest.approx(28.01)
    assert over.front_end_status == "acceptable"
    assert over.qualification_status == "marginal"


def test_dti_back_end_bands():
    debts = DebtObligations(car_payments=500, student_loans=250, credit_cards=150)
    res = calculate_dti(10000, 2700, debts)
    assert res.total_monthly_debt == 3600
    assert res.back_end_ratio == 36.0
    assert res.back_end_status == "good"
    assert res.qualification_status == "qualified"

    res = calculate_dti(10000, 2700, DebtObligations(other_debt=901))
    assert res.back_end_status == "acceptable"
    assert res.qualification_status == "marginal"

    res = calculate_dti(10000, 2700, DebtObligations(child_support=1700))
    assert res.back_end_ratio == 44.0
    assert res.back_end_status == "high"
    assert res.qualification_status == "not-qualified"


def test_dti_high_front_end():
    res = calculate_dti(10000, 3200)
    assert res.front_end_status == "high"
    assert res.qualification_status == "not-qualified"


def test_dti_ceilings():
    res = calculate_dti(10000, 2000)
    assert res.max_housing_payment_28 == pytest.approx(2800)
    assert res.max_total_debt_36 == pytest.approx(3600)


def test_dti_without_income():
    res = calculate_dti(0, 1500, DebtObligations(car_payments=300))
    assert res.front_end_ratio == 0
    assert res.back_end_ratio == 0
    assert res.qualification_status == "not-qualified"
    assert res.total_monthly_debt == 1500
    assert res.max_housing_payment_28 == 0


def test_dti_nan_housing_propagates():
    res = calculate_dti(10000, float("nan"))
    assert math.isnan(res.front_end_ratio)
    assert math.isnan(res.back_end_ratio)


def test_stress_monotonic_in_rate():
    results = stress_test_scenario(300000, 6, 30, 6000, 1800, 250, 12000, DebtObligations(), [0, 0.5, 1, 2, 3])
    payments = [r.monthly_payment for r in results]
    housing = [r.total_monthly_housing for r in results]
    assert payments == sorted(payments)
    assert housing == sorted(housing)
    assert [r.rate for r in results] == [6, 6.5, 7, 8, 9]


def test_stress_keeps_order_and_duplicates():
    results = stress_test_scenario(200000, 5, 30, 0, 0, 0, 8000, None, [2, 0, 2])
    assert [r.rate_increase for r in results] == [2, 0, 2]
    assert results[0].monthly_payment == results[2].monthly_payment
    assert results[1].monthly_payment < results[0].monthly_payment


def test_stress_default_increments():
    results = stress_test_scenario(200000, 5, 30, 0, 0, 0, 8000)
    assert [r.rate for r in results] == [6, 7, 8]


def test_stress_bands_differ_from_scenario_policy():
    # Housing of 3000 on 10000 income is a 30% front-end ratio.
    stressed = stress_test_scenario(240000, 0, 20, 0, 0, 2000, 10000, None, [0])[0]
    assert stressed.dti_result.front_end_ratio == 30.0
    assert stressed.affordability_status == "requires-variable"
    assert stressed.dti_result.qualification_status == "marginal"

    scenario = calculate_scenario(250000, 10000, 0, 20, 0, 0, 2000, _incomes(10000, 10000, 10000))
    assert scenario.total_monthly_housing == stressed.total_monthly_housing
    assert scenario.affordability_status == "not-affordable"


def test_stress_front_end_36_boundary():
    at = stress_test_scenario(240000, 0, 20, 0, 0, 2600, 10000, None, [0])[0]
    over = stress_test_scenario(240000, 0, 20, 0, 0, 2601, 10000, None, [0])[0]
    assert at.affordability_status == "requires-variable"
    assert over.affordability_status == "not-affordable"
