from datetime import date

from nestplan.models import CalculatorState, IncomeInputs, PropertyInputs, SavingsInputs, TaxExemptions
from nestplan.planner import analyze_plan
from nestplan.rules import evaluate_plan, has_blocking

TODAY = date(2026, 1, 1)


def _codes(state):
    return {r.code for r in evaluate_plan(state, analyze_plan(state, today=TODAY))}


def _earning_state(**kw):
    args = dict(
        income=IncomeInputs(primary=8000, secondary_base=5000, secondary_variable=1000),
        expenses=9000,
        savings=SavingsInputs(current=20000),
    )
    args.update(kw)
    return CalculatorState(**args)


def test_no_income_is_blocking():
    state = CalculatorState()
    res = evaluate_plan(state, analyze_plan(state, today=TODAY))
    codes = {r.code for r in res}
    assert "NO_INCOME" in codes
    assert "SAVINGS_STALLED" in codes
    assert "DTI_NOT_QUALIFIED" not in codes
    assert has_blocking(res)


def test_pmi_flagged_for_small_down_payment():
    state = _earning_state()
    res = evaluate_plan(state, analyze_plan(state, today=TODAY))
    pmi = [r for r in res if r.code == "PMI_REQUIRED"]
    assert pmi and pmi[0].context["months_until_removal"] is not None
    assert not has_blocking(res)


def test_exemption_overlap():
    prop = PropertyInputs(exemptions=TaxExemptions(homestead=True, over_65=True, disabled=True))
    assert "EXEMPTION_OVERLAP" in _codes(_earning_state(property=prop))
    assert "EXEMPTION_OVERLAP" not in _codes(_earning_state())


def test_stretched_household():
    state = _earning_state(
        income=IncomeInputs(primary=2500, secondary_base=1500, secondary_variable=500),
        expenses=4500,
        property=PropertyInputs(price=450000, current_rate=7.5),
    )
    codes = _codes(state)
    assert "DTI_NOT_QUALIFIED" in codes
    assert "NOT_AFFORDABLE" in codes
    assert "STRESS_BREAKPOINT" in codes
    assert "SAVINGS_STALLED" in codes


def test_stress_breakpoint_reported_once():
    state = _earning_state(
        income=IncomeInputs(primary=2500, secondary_base=1500, secondary_variable=500),
        property=PropertyInputs(price=450000, current_rate=7.5),
    )
    res = evaluate_plan(state, analyze_plan(state, today=TODAY))
    assert [r.code for r in res].count("STRESS_BREAKPOINT") == 1
