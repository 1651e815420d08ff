"""
Aggregations over the transaction collection

DESIGN DECISION: Everything here is a pure function of the transactions
it is given (plus a reference month where one applies). Nothing reads the
store or the clock implicitly; callers pass `today` when they want "now".

This is what the dashboard cards, the trend chart and the goal bars are
computed from, so the same numbers come out no matter which page asks.
"""

import calendar
from collections.abc import Iterable, Iterator
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from findash.config import get_settings
from findash.formatting import month_label
from findash.models.finance import GoalData, TransactionData, TransactionType


class MonthSummary(BaseModel):
    """Income, expense and balance for one calendar month."""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense


class MonthlyBucket(BaseModel):
    """One point of the trend chart."""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    label: str
    income: float = 0.0
    expense: float = 0.0


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by `delta` months, crossing years as needed."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def add_months(moment: datetime, delta: int) -> datetime:
    """
    Same day `delta` months away, e.g. for the duplicate default.

    The day is clamped to the length of the target month, so
    Jan 31 + 1 month is Feb 28 (or 29).
    """
    year, month = shift_month(moment.year, moment.month, delta)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _in_month(transaction: TransactionData, year: int, month: int) -> bool:
    return transaction.date.year == year and transaction.date.month == month


def _sum_for_month(
    transactions: Iterable[TransactionData],
    year: int,
    month: int,
    type_: TransactionType,
) -> float:
    return sum(
        t.amount for t in transactions
        if t.type == type_ and _in_month(t, year, month)
    )


def monthly_income(
    transactions: Iterable[TransactionData],
    year: int,
    month: int,
) -> float:
    """Sum of income amounts dated in the given month."""
    return _sum_for_month(transactions, year, month, TransactionType.INCOME)


def monthly_expense(
    transactions: Iterable[TransactionData],
    year: int,
    month: int,
) -> float:
    """Sum of expense amounts dated in the given month."""
    return _sum_for_month(transactions, year, month, TransactionType.EXPENSE)


def net_balance_for_month(
    transactions: Iterable[TransactionData],
    year: int,
    month: int,
) -> float:
    """Income minus expense for the given month."""
    return month_summary(transactions, year, month).balance


def month_summary(
    transactions: Iterable[TransactionData],
    year: int,
    month: int,
) -> MonthSummary:
    """Income and expense for a month in a single pass."""
    income = 0.0
    expense = 0.0
    for t in transactions:
        if not _in_month(t, year, month):
            continue
        if t.is_income:
            income += t.amount
        else:
            expense += t.amount
    return MonthSummary(year=year, month=month, income=income, expense=expense)


def total_balance(transactions: Iterable[TransactionData]) -> float:
    """Lifetime balance: income adds, expenses subtract, no date filter."""
    return sum(t.signed_amount for t in transactions)


def goal_progress(goal: GoalData) -> float:
    """
    Raw progress percentage, used for the text label.

    May exceed 100 when the goal is over-funded. A non-positive target
    yields 0 rather than a division error.
    """
    if goal.target_amount <= 0:
        return 0.0
    return goal.current_amount / goal.target_amount * 100


def goal_bar_width(goal: GoalData) -> float:
    """Progress clamped to [0, 100], used for the progress bar."""
    return min(max(goal_progress(goal), 0.0), 100.0)


def transactions_for_month(
    transactions: Iterable[TransactionData],
    year: int,
    month: int,
    type_filter: Optional[TransactionType] = None,
) -> list[TransactionData]:
    """Transactions of a month, newest first, optionally of one type only."""
    selected = [
        t for t in transactions
        if _in_month(t, year, month)
        and (type_filter is None or t.type == type_filter)
    ]
    return sorted(selected, key=lambda t: t.date, reverse=True)


class MonthlySeries:
    """
    Trailing-months income/expense series for the trend chart.

    Lazy: totals are computed when iterated, not when constructed.
    Restartable: every iteration starts over from the oldest month.
    Finite: exactly `months` buckets, oldest to newest, zero-filled.
    """

    def __init__(
        self,
        transactions: Iterable[TransactionData],
        months: Optional[int] = None,
        today: Optional[date] = None,
    ):
        if months is None:
            months = get_settings().app.chart_months
        if months < 1:
            raise ValueError("months must be at least 1")
        self._transactions = tuple(transactions)
        self._months = months
        self._today = today or date.today()

    def __len__(self) -> int:
        return self._months

    def month_keys(self) -> list[tuple[int, int]]:
        """(year, month) pairs covered by the series, oldest first."""
        return [
            shift_month(self._today.year, self._today.month, -offset)
            for offset in range(self._months - 1, -1, -1)
        ]

    def __iter__(self) -> Iterator[MonthlyBucket]:
        keys = self.month_keys()
        totals = {key: [0.0, 0.0] for key in keys}

        for t in self._transactions:
            bucket = totals.get((t.date.year, t.date.month))
            if bucket is None:
                continue
            if t.is_income:
                bucket[0] += t.amount
            else:
                bucket[1] += t.amount

        for year, month in keys:
            income, expense = totals[(year, month)]
            yield MonthlyBucket(
                year=year,
                month=month,
                label=month_label(month),
                income=income,
                expense=expense,
            )
