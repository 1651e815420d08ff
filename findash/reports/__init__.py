"""Aggregation and reporting package."""

from findash.reports.aggregations import (
    MonthlyBucket,
    MonthlySeries,
    MonthSummary,
    add_months,
    goal_bar_width,
    goal_progress,
    month_summary,
    monthly_expense,
    monthly_income,
    net_balance_for_month,
    shift_month,
    total_balance,
    transactions_for_month,
)

__all__ = [
    "MonthlyBucket",
    "MonthlySeries",
    "MonthSummary",
    "add_months",
    "goal_bar_width",
    "goal_progress",
    "month_summary",
    "monthly_expense",
    "monthly_income",
    "net_balance_for_month",
    "shift_month",
    "total_balance",
    "transactions_for_month",
]
