"""Mortgage affordability calculations for household planning.

This module also exposes the package version for runtime display."""

from importlib import metadata

from .calculators import (
    calculate_dti,
    calculate_income_scenarios,
    calculate_mortgage_interest_deduction,
    calculate_mortgage_payment,
    calculate_pmi,
    calculate_savings_goal,
    calculate_scenario,
    calculate_texas_property_tax,
    estimate_closing_costs,
    generate_amortization_schedule,
    get_yearly_summary,
    stress_test_scenario,
)
from .planner import analyze_plan, build_plan
from .presets import DISCLAIMER

try:
    __version__ = metadata.version("nestplan")
except metadata.PackageNotFoundError:  # pragma: no cover - during local dev
    __version__ = "0.1.0"

__all__ = [
    "DISCLAIMER",
    "__version__",
    "analyze_plan",
    "build_plan",
    "calculate_dti",
    "calculate_income_scenarios",
    "calculate_mortgage_interest_deduction",
    "calculate_mortgage_payment",
    "calculate_pmi",
    "calculate_savings_goal",
    "calculate_scenario",
    "calculate_texas_property_tax",
    "estimate_closing_costs",
    "generate_amortization_schedule",
    "get_yearly_summary",
    "stress_test_scenario",
]
