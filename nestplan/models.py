"""Value records exchanged with the calculators.

Every record is frozen.  Fields are snake_case in Python and dump with
camelCase aliases (``model_dump(by_alias=True)``), which is the shape the
export layer writes to CSV rows and share links.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .presets import CLOSING_COST_DEFAULTS, PLAN_DEFAULTS

AffordabilityStatus = Literal["affordable", "requires-variable", "not-affordable"]
RatioStatus = Literal["good", "acceptable", "high"]
QualificationStatus = Literal["qualified", "marginal", "not-qualified"]


class Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class LoanTerms(Record):
    principal: float
    annual_rate_pct: float
    term_years: int


class AmortizationRow(Record):
    month: int
    year: int
    payment: float
    principal: float
    interest: float
    balance: float
    cumulative_interest: float
    cumulative_principal: float


class AmortizationSchedule(Record):
    rows: Tuple[AmortizationRow, ...]
    total_payments: float
    total_interest: float
    total_principal: float
    payoff_date: date
    monthly_payment: float


class YearlySummary(Record):
    year: int
    total_payments: float
    total_principal: float
    total_interest: float
    ending_balance: float


class TaxExemptions(Record):
    homestead: bool = False
    over_65: bool = Field(default=False, alias="over65")
    disabled: bool = False
    veteran_disability: int = 0  # 0, 10, 30, 50, 70 or 100
    local_optional_pct: float = Field(default=0.0, alias="localOptionalPercent")
    agricultural: bool = Field(default=False, alias="agriculturalExemption")
    custom_amount: float = Field(default=0.0, alias="customExemptionAmount")


class TaxResult(Record):
    assessed_value: float
    total_exemptions: float
    taxable_value: float
    annual_tax: float
    monthly_tax: float
    effective_rate: float


class HouseholdIncome(Record):
    """Monthly gross income of a two-earner household.

    ``secondary_variable`` is the part of the second earner's pay that may
    stop (commission, overtime, or leave around a new child).
    """

    primary: float = 0.0
    secondary_base: float = 0.0
    secondary_variable: float = 0.0


class IncomeScenarios(Record):
    full_income: float
    conservative_income: float
    family_planning_income: float


class ScenarioResult(Record):
    down_payment: float
    loan_amount: float
    mortgage_payment: float
    total_monthly_housing: float
    full_percentage: float
    conservative_percentage: float
    family_percentage: float
    affordability_status: AffordabilityStatus


class DebtObligations(Record):
    car_payments: float = 0.0
    student_loans: float = 0.0
    credit_cards: float = 0.0
    other_debt: float = 0.0
    child_support: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.car_payments
            + self.student_loans
            + self.credit_cards
            + self.other_debt
            + self.child_support
        )


class DTIResult(Record):
    front_end_ratio: float
    back_end_ratio: float
    front_end_status: RatioStatus
    back_end_status: RatioStatus
    max_housing_payment_28: float
    max_total_debt_36: float
    qualification_status: QualificationStatus
    total_monthly_debt: float


class StressTestResult(Record):
    rate: float
    rate_increase: float
    monthly_payment: float
    total_monthly_housing: float
    dti_result: DTIResult
    affordability_status: AffordabilityStatus


class PMIResult(Record):
    required: bool
    monthly_pmi: float = Field(alias="monthlyPMI")
    annual_pmi: float = Field(alias="annualPMI")
    ltv: float
    months_until_removal: Optional[int] = None
    total_pmi_cost: float = Field(alias="totalPMICost")


class ClosingCostInputs(Record):
    loan_origination_pct: float = Field(
        default=CLOSING_COST_DEFAULTS["loan_origination_pct"], alias="loanOriginationPercent"
    )
    appraisal: float = CLOSING_COST_DEFAULTS["appraisal"]
    inspection: float = CLOSING_COST_DEFAULTS["inspection"]
    title_insurance_pct: float = Field(
        default=CLOSING_COST_DEFAULTS["title_insurance_pct"], alias="titleInsurancePercent"
    )
    escrow_months: float = CLOSING_COST_DEFAULTS["escrow_months"]
    recording_fees: float = CLOSING_COST_DEFAULTS["recording_fees"]
    attorney_fees: float = CLOSING_COST_DEFAULTS["attorney_fees"]
    prepaid_days: float = CLOSING_COST_DEFAULTS["prepaid_days"]


class ClosingCostBreakdown(Record):
    loan_origination: float
    appraisal: float
    inspection: float
    title_insurance: float
    escrow_deposit: float
    recording_fees: float
    attorney_fees: float
    prepaid_interest: float
    total: float


class SavingsGoalResult(Record):
    target_amount: float
    down_payment_target: float
    closing_costs_target: float
    reserves_target: float
    current_progress: float
    remaining_needed: float
    months_to_goal: Optional[int] = None
    target_date: Optional[date] = None
    monthly_required: Optional[float] = None
    progress_percentage: float


class DeductionYear(Record):
    year: int
    interest: float
    savings: float


class TaxDeductionResult(Record):
    annual_deductible_interest: float
    tax_savings: float
    effective_monthly_benefit: float
    worth_itemizing: bool
    deductible_by_year: Tuple[DeductionYear, ...]


# Calculator state supplied by the surrounding application.


class IncomeInputs(Record):
    primary: float = 0.0
    secondary_base: float = 0.0
    secondary_variable: float = 0.0
    variable_mode: Literal["simple", "detailed"] = "simple"


class PropertyInputs(Record):
    price: float = PLAN_DEFAULTS["price"]
    current_rate: float = PLAN_DEFAULTS["current_rate"]
    alt_rate: float = PLAN_DEFAULTS["alt_rate"]
    loan_term: int = PLAN_DEFAULTS["loan_term"]
    property_tax_rate: float = PLAN_DEFAULTS["property_tax_rate"]
    insurance: float = PLAN_DEFAULTS["insurance"]
    utilities: float = PLAN_DEFAULTS["utilities"]
    exemptions: TaxExemptions = Field(default_factory=lambda: TaxExemptions(homestead=True))


class SavingsInputs(Record):
    current: float = 0.0
    monthly: float = 0.0
    manual_override: bool = False


class PurchaseDates(Record):
    early: str = PLAN_DEFAULTS["early_date"]
    delayed: str = PLAN_DEFAULTS["delayed_date"]


class DetailedVariableIncome(Record):
    early: Tuple[float, ...] = ()
    delayed: Tuple[float, ...] = ()


class CalculatorState(Record):
    income: IncomeInputs = Field(default_factory=IncomeInputs)
    expenses: float = 0.0
    property: PropertyInputs = Field(default_factory=PropertyInputs)
    savings: SavingsInputs = Field(default_factory=SavingsInputs)
    purchase_dates: PurchaseDates = Field(default_factory=PurchaseDates)
    detailed_variable_income: DetailedVariableIncome = Field(default_factory=DetailedVariableIncome)


class Plan(Record):
    income_scenarios: IncomeScenarios
    monthly_savings: float
    months_to_early: int
    months_to_delayed: int
    early_savings: float
    delayed_savings: float
    tax_result: TaxResult
    scenarios: Dict[str, ScenarioResult]


class PlanAnalysis(Record):
    scenario: ScenarioResult
    schedule: AmortizationSchedule
    yearly_summary: Tuple[YearlySummary, ...]
    pmi: PMIResult
    dti: DTIResult
    stress_tests: Tuple[StressTestResult, ...]
    closing_costs: ClosingCostBreakdown
    savings_goal: SavingsGoalResult
    deduction: Optional[TaxDeductionResult] = None
