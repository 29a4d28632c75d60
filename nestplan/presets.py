DISCLAIMER = (
    "Estimates only. Affordability, qualification and tax figures use common rules of thumb "
    "(28/36 DTI bands, Texas exemption amounts, a flat PMI rate) and do not replace a lender's "
    "underwriting, an appraisal district's assessment, or tax advice."
)

# Housing cost as a share of the family-planning (or conservative) income.
SCENARIO_AFFORDABLE_PCT = 25.0

# Conventional underwriting bands: (good, acceptable). Anything above is "high".
DTI_FRONT_END_BANDS = {"good": 28.0, "acceptable": 31.0}
DTI_BACK_END_BANDS = {"good": 36.0, "acceptable": 43.0}
DTI_CEILING_FACTORS = {"housing": 0.28, "total_debt": 0.36}

# Stress testing classifies on the front-end ratio alone, with its own cutoffs.
STRESS_BANDS = {"affordable": 28.0, "requires_variable": 36.0}
STRESS_RATE_INCREMENTS = (1.0, 2.0, 3.0)
PLAN_STRESS_INCREMENTS = (0.0, 1.0, 2.0, 3.0, 4.0)

TX_EXEMPTIONS = {
    "homestead": 100000.0,
    "over_65_or_disabled": 10000.0,
    "local_optional_min": 5000.0,
    "agricultural_pct": 50.0,
}
# Rating -> dollar exemption. A 100% rating exempts the whole value.
VETERAN_EXEMPTIONS = {10: 5000.0, 30: 7500.0, 50: 10000.0, 70: 12000.0}
VETERAN_FULL_EXEMPTION_RATING = 100

PMI_DEFAULTS = {"annual_rate_pct": 0.5, "ltv_threshold_pct": 80.0}

CLOSING_COST_DEFAULTS = {
    "loan_origination_pct": 1.0,
    "appraisal": 500.0,
    "inspection": 400.0,
    "title_insurance_pct": 0.5,
    "escrow_months": 2,
    "recording_fees": 125.0,
    "attorney_fees": 500.0,
    "prepaid_days": 15,
}

# 2024 married filing jointly.
STANDARD_DEDUCTION = 29200.0
DEDUCTION_YEARS = 5

SAVINGS_GOAL_DEFAULTS = {"down_payment_pct": 20.0, "reserve_months": 3}

PLAN_DEFAULTS = {
    "price": 275000.0,
    "current_rate": 6.3,
    "alt_rate": 3.5,
    "loan_term": 20,
    "property_tax_rate": 1.53,
    "insurance": 2875.0,
    "utilities": 500.0,
    "early_date": "2026-05-01",
    "delayed_date": "2026-12-01",
}
