import numbers

import numpy as np
import pandas as pd

# ============================================================
# CONFIG / CONSTANTS
# ============================================================
DAILY = "D"

# Transaction frame layout shared by assets, groups, and rollups
TRANSACTION_COLUMNS = ["date", "amount", "running_total"]


def empty_daily_series() -> pd.Series:
    return pd.Series(
        [], index=pd.DatetimeIndex([], name="date"), dtype=float, name="value"
    )


# ------------------------------------------------------------
# Forward-fill daily series
# ------------------------------------------------------------

def daily_values(records: pd.DataFrame, now: pd.Timestamp, value_col: str = "value") -> pd.Series:
    """
    Build one value per calendar day from the earliest record through `now`.

      - Records are sorted by date (stable, so input order breaks ties).
      - The value on day d is the value of the last record dated <= d.
      - Several records on the same day collapse to the last one.
      - Records dated after `now` never show up.

    Args:
        records (pd.DataFrame): Must contain a "date" column and `value_col`.
        now (pd.Timestamp): Inclusive end of the series (midnight).
        value_col (str): Column holding the value to carry forward.

    Returns:
        pd.Series indexed by a gap-free daily DatetimeIndex named "date".
        Empty when there are no records or the first record is after `now`.
    """
    if records.empty:
        return empty_daily_series()

    ordered = records.sort_values("date", kind="stable")
    # Last record of each day wins
    per_day = ordered.groupby("date", sort=True)[value_col].last().astype(float)

    start = per_day.index.min()
    end = pd.Timestamp(now).normalize()
    if start > end:
        return empty_daily_series()

    days = pd.date_range(start, end, freq=DAILY, name="date")
    series = per_day.reindex(days, method="ffill")
    series.name = "value"
    return series


def sum_daily_values(series_list) -> pd.Series:
    """
    Sum several daily series on shared dates.

    A series that has not started yet on a date contributes nothing to it.
    The union of gap-free series that all end on the same day is itself
    gap-free.
    """
    series_list = [s for s in series_list if not s.empty]
    if not series_list:
        return empty_daily_series()

    combined = pd.concat(series_list, axis=1).sum(axis=1, min_count=1).sort_index()
    combined = combined.asfreq(DAILY).fillna(0.0)
    combined.index.name = "date"
    combined.name = "value"
    return combined


# ------------------------------------------------------------
# Growth metrics
# ------------------------------------------------------------

def _is_number(x) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool) and bool(np.isfinite(x))


def growth_percentage(start=None, end=None) -> float:
    """
    Percentage change from `start` to `end`.

    Zero when either side is zero or not a number: growth from (or to) an
    empty base is treated as undefined rather than infinite.
    """
    if not (_is_number(start) and _is_number(end)):
        return 0.0
    if start == 0 or end == 0:
        return 0.0
    return 100.0 * (float(end) / float(start) - 1.0)


def growth_all_time(values: pd.Series) -> float:
    if values.empty:
        return 0.0
    return growth_percentage(float(values.iloc[0]), float(values.iloc[-1]))


def growth_year(values: pd.Series, now: pd.Timestamp) -> float:
    """Growth over the days of the current calendar year."""
    year_start = pd.Timestamp(year=now.year, month=1, day=1)
    return growth_all_time(values[values.index >= year_start])


def growth_month(values: pd.Series) -> float:
    """Growth between the last two daily points."""
    return growth_all_time(values.iloc[-2:])


def growth_amount(values: pd.Series) -> float:
    if values.empty:
        return 0.0
    return float(values.iloc[-1]) - float(values.iloc[0])


# ------------------------------------------------------------
# Contributions
# ------------------------------------------------------------

def contribution_amount(transactions: pd.DataFrame) -> float:
    if transactions.empty:
        return 0.0
    return float(transactions["amount"].sum())


def with_running_total(transactions: pd.DataFrame) -> pd.DataFrame:
    """
    Sort transactions by date and attach the cumulative contribution.

    Returns a new frame with TRANSACTION_COLUMNS; the input is not touched.
    """
    if transactions.empty:
        return pd.DataFrame(
            {
                "date": pd.Series([], dtype="datetime64[ns]"),
                "amount": pd.Series([], dtype=float),
                "running_total": pd.Series([], dtype=float),
            },
            columns=TRANSACTION_COLUMNS,
        )

    tx = transactions[["date", "amount"]].sort_values("date", kind="stable").reset_index(drop=True)
    tx["amount"] = tx["amount"].astype(float)
    tx["running_total"] = tx["amount"].cumsum()
    return tx[TRANSACTION_COLUMNS]


# ------------------------------------------------------------
# Wealth index / compounding
# ------------------------------------------------------------

def wealth_index(asset_value, monthly_salary, age_years) -> float:
    """
    WI = (asset value / annual salary) / (age / 10).

    Zero when the salary or the age is zero.
    """
    if not (_is_number(asset_value) and _is_number(monthly_salary) and _is_number(age_years)):
        return 0.0
    if monthly_salary == 0 or age_years == 0:
        return 0.0
    return (asset_value / (12.0 * monthly_salary)) / (age_years / 10.0)


def monthly_interest(annual_percentage: float) -> float:
    """Monthly growth factor for an annual percentage compounded monthly."""
    return 1.0 + annual_percentage / 1200.0


def age_in_years(birthday: pd.Timestamp, on: pd.Timestamp) -> int:
    """Whole years elapsed between `birthday` and `on`."""
    years = on.year - birthday.year
    if (on.month, on.day) < (birthday.month, birthday.day):
        years -= 1
    return years
