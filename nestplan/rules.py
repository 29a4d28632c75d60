from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field

from .models import CalculatorState, PlanAnalysis
from .planner import effective_income


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_plan(state: CalculatorState, analysis: PlanAnalysis) -> List[RuleResult]:
    res: List[RuleResult] = []

    dti = analysis.dti
    scenario = analysis.scenario
    inc = effective_income(state)
    full_income = inc.primary + inc.secondary_base + inc.secondary_variable

    if full_income <= 0:
        res.append(
            RuleResult(
                code="NO_INCOME",
                severity="critical",
                message="No income entered; DTI and affordability are not meaningful.",
            )
        )

    if full_income > 0 and dti.qualification_status == "not-qualified":
        res.append(
            RuleResult(
                code="DTI_NOT_QUALIFIED",
                severity="warn",
                message="Debt-to-income ratios exceed conventional limits.",
                context={"front_end": dti.front_end_ratio, "back_end": dti.back_end_ratio},
            )
        )
    elif dti.qualification_status == "marginal":
        res.append(
            RuleResult(
                code="DTI_MARGINAL",
                severity="info",
                message="Debt-to-income ratios are above 28/36 but within 31/43.",
                context={"front_end": dti.front_end_ratio, "back_end": dti.back_end_ratio},
            )
        )

    if scenario.affordability_status == "not-affordable":
        res.append(
            RuleResult(
                code="NOT_AFFORDABLE",
                severity="warn",
                message="Housing exceeds 25% of income even counting variable pay.",
                context={"conservative_pct": scenario.conservative_percentage},
            )
        )

    pmi = analysis.pmi
    if pmi.required:
        res.append(
            RuleResult(
                code="PMI_REQUIRED",
                severity="info",
                message="Loan-to-value above 80%; private mortgage insurance applies.",
                context={
                    "ltv": pmi.ltv,
                    "monthly_pmi": pmi.monthly_pmi,
                    "months_until_removal": pmi.months_until_removal,
                },
            )
        )

    for st in analysis.stress_tests:
        if st.affordability_status == "not-affordable":
            res.append(
                RuleResult(
                    code="STRESS_BREAKPOINT",
                    severity="warn",
                    message="Payment becomes unaffordable if rates rise.",
                    context={"rate": st.rate, "rate_increase": st.rate_increase},
                )
            )
            break

    goal = analysis.savings_goal
    if goal.remaining_needed > 0 and goal.months_to_goal is None:
        res.append(
            RuleResult(
                code="SAVINGS_STALLED",
                severity="warn",
                message="Savings goal not met and no monthly savings to close the gap.",
                context={"remaining": goal.remaining_needed},
            )
        )

    ex = state.property.exemptions
    if ex.over_65 and ex.disabled:
        res.append(
            RuleResult(
                code="EXEMPTION_OVERLAP",
                severity="info",
                message="Over-65 and disabled exemptions do not stack; counted once.",
            )
        )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
