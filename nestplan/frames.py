"""Tabular views of calculator output.

Column headers match what the CSV exporter writes.  Values are left
unrounded; formatting to cents is the exporter's job.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .models import AmortizationSchedule, StressTestResult, YearlySummary

SCHEDULE_COLUMNS = [
    "Month",
    "Year",
    "Payment",
    "Principal",
    "Interest",
    "Balance",
    "Cumulative Principal",
    "Cumulative Interest",
]
YEARLY_COLUMNS = ["Year", "Total Payments", "Principal", "Interest", "Ending Balance"]
STRESS_COLUMNS = [
    "Rate",
    "Rate Increase",
    "Monthly Payment",
    "Total Monthly Housing",
    "Front-End DTI",
    "Back-End DTI",
    "Status",
]


def schedule_frame(schedule: AmortizationSchedule) -> pd.DataFrame:
    """One row per month of the schedule."""

    return pd.DataFrame(
        [
            [
                r.month,
                r.year,
                r.payment,
                r.principal,
                r.interest,
                r.balance,
                r.cumulative_principal,
                r.cumulative_interest,
            ]
            for r in schedule.rows
        ],
        columns=SCHEDULE_COLUMNS,
    )


def yearly_summary_frame(summary: Iterable[YearlySummary]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [y.year, y.total_payments, y.total_principal, y.total_interest, y.ending_balance]
            for y in summary
        ],
        columns=YEARLY_COLUMNS,
    )


def stress_test_frame(results: Iterable[StressTestResult]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                r.rate,
                r.rate_increase,
                r.monthly_payment,
                r.total_monthly_housing,
                r.dti_result.front_end_ratio,
                r.dti_result.back_end_ratio,
                r.affordability_status,
            ]
            for r in results
        ],
        columns=STRESS_COLUMNS,
    )
