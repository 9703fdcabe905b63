from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from events import YearGoal, of_type
from financial_math import empty_daily_series, growth_all_time


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass(frozen=True)
class Goal:
    name: str
    year: int
    percentage: float
    start: float
    end: float
    expected: float
    expected_monthly: float

    def expected_value(self, month: int) -> float:
        """Straight-line value expected at the end of `month` (1-12)."""
        return self.start + self.expected_monthly * month


@dataclass(frozen=True)
class MonthSummary:
    month: int
    date: pd.Timestamp
    start: float
    value: float
    growth_amount: float
    transacted_amount: float
    self_growth_amount: float
    # Goal name -> value the goal expects at this month end
    expected_values: dict


@dataclass(frozen=True)
class YearSummary:
    year: int
    start: float
    end: float
    growth_amount: float
    growth_year: float
    wealth_index: float
    salary: float
    transaction_total: float
    transaction_growth_percent: float
    self_growth_percent: float
    daily_values: pd.Series
    transactions: pd.DataFrame
    months: dict
    goals: tuple


# ------------------------------------------------------------
# Goals
# ------------------------------------------------------------

def year_goals(events) -> dict:
    """Year-goal events grouped by year."""
    grouped = {}
    for goal in of_type(events, YearGoal):
        grouped.setdefault(goal.year, []).append(goal)
    return grouped


def project_goal(goal: YearGoal, start: float) -> Goal:
    """
    Expected trajectory for a growth-percentage goal:

      end      = start * (1 + pct / 100)
      expected = end − start, spread evenly over 12 months
    """
    end = start * (1 + goal.percentage / 100)
    expected = end - start
    return Goal(
        name=f"{goal.percentage:g}%",
        year=goal.year,
        percentage=goal.percentage,
        start=start,
        end=end,
        expected=expected,
        expected_monthly=expected / 12,
    )


# ------------------------------------------------------------
# Months
# ------------------------------------------------------------

def month_snapshots(daily: pd.Series, now: pd.Timestamp) -> pd.Series:
    """
    One value per month: the last calendar day of the month, or today for
    the month still in progress. Today wins a tie.
    """
    if daily.empty:
        return daily

    today = pd.Timestamp(now).normalize()
    mask = daily.index.is_month_end | (daily.index == today)
    snaps = daily[mask]
    # Within a month the later snapshot (today) overrides
    return snaps.groupby(snaps.index.to_period("M")).tail(1)


def build_months(
    start: float,
    daily: pd.Series,
    transactions: pd.DataFrame,
    now: pd.Timestamp,
    goals=(),
) -> dict:
    """
    Month rollup inside one calendar year.

    Growth is measured from the previous month's snapshot, or from the
    year start when there is no previous month in this year. Each month
    also carries what every year goal expects at that month end.
    """
    if transactions.empty:
        transacted = {}
    else:
        transacted = transactions.groupby(transactions["date"].dt.month)["amount"].sum().to_dict()

    snaps = month_snapshots(daily, now)
    by_month = {d.month: (d, float(v)) for d, v in snaps.items()}

    months = {}
    for month, (date, value) in sorted(by_month.items()):
        prev_value = by_month[month - 1][1] if (month - 1) in by_month else start
        change = value - prev_value
        amount = float(transacted.get(month, 0.0))
        months[month] = MonthSummary(
            month=month,
            date=date,
            start=prev_value,
            value=value,
            growth_amount=change,
            transacted_amount=amount,
            self_growth_amount=change - amount,
            expected_values={g.name: g.expected_value(month) for g in goals},
        )
    return months


# ------------------------------------------------------------
# Years
# ------------------------------------------------------------

def _first_last_delta(values: pd.Series) -> float:
    if values.empty:
        return 0.0
    return float(values.iloc[-1]) - float(values.iloc[0])


def build_years(
    daily: pd.Series,
    transactions: pd.DataFrame,
    daily_salaries: pd.Series,
    daily_wi: pd.DataFrame,
    goals_by_year: dict,
    now: pd.Timestamp,
) -> dict:
    """
    Calendar-year rollup of a daily series and its transactions.

      - end   = last value in the year
      - start = previous year's end (0 for the first year)
      - transaction growth % = 100 * contributions / (end − start)
      - self growth %        = 100 − transaction growth %
    Both percentages are 0 when the year did not move.

    Returns:
        dict: {year: YearSummary}, ordered by year.
    """
    if daily.empty:
        return {}

    tx_years = transactions["date"].dt.year

    wi_values = daily_wi.get("wealth_index", empty_daily_series())

    years = {}
    prev_end = 0.0
    for year, year_daily in daily.groupby(daily.index.year):
        year = int(year)
        year_tx = transactions[tx_years == year]
        start = prev_end
        end = float(year_daily.iloc[-1])
        total = end - start
        transaction_total = float(year_tx["amount"].sum()) if not year_tx.empty else 0.0
        goals = tuple(project_goal(g, start) for g in goals_by_year.get(year, []))

        if total == 0:
            transaction_growth_percent = 0.0
            self_growth_percent = 0.0
        else:
            transaction_growth_percent = 100 * transaction_total / total
            self_growth_percent = 100 - transaction_growth_percent

        years[year] = YearSummary(
            year=year,
            start=start,
            end=end,
            growth_amount=total,
            growth_year=growth_all_time(year_daily),
            wealth_index=_first_last_delta(wi_values[wi_values.index.year == year]),
            salary=_first_last_delta(daily_salaries[daily_salaries.index.year == year]),
            transaction_total=transaction_total,
            transaction_growth_percent=transaction_growth_percent,
            self_growth_percent=self_growth_percent,
            daily_values=year_daily,
            transactions=year_tx.reset_index(drop=True),
            months=build_months(start, year_daily, year_tx, now, goals),
            goals=goals,
        )
        prev_end = end

    return years
