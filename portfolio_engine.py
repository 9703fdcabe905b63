from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

import config
from calendar_rollup import build_years, year_goals
from events import (
    ASSET_EVENTS,
    AssetValue,
    CloseAsset,
    DateOfBirth,
    MalformedEvent,
    MoneyLifetimeParams,
    OpenAsset,
    OrphanAssetEvent,
    Salary,
    Transaction,
    WealthIndexGoal,
    of_type,
    parse_event,
    timestamped,
)
from financial_math import (
    age_in_years,
    contribution_amount,
    daily_values,
    growth_all_time,
    growth_amount,
    growth_month,
    growth_percentage,
    growth_year,
    sum_daily_values,
    wealth_index,
    with_running_total,
)
from money_lifetime import money_lifetimes

# Global set of (event kind, name, date) already warned about, to avoid console spam
_REPORTED_FUTURE = set()

WEALTH_INDEX_COLUMNS = ["salary", "asset_value", "age", "wealth_index"]


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass(frozen=True)
class Birthday:
    date: pd.Timestamp
    age: int


@dataclass(frozen=True)
class Asset:
    name: str
    asset_type: str
    include_in_net: bool
    closed: bool
    units: float
    opened: pd.Timestamp
    values: pd.DataFrame
    transactions: pd.DataFrame
    daily_values: pd.Series
    start_value: float
    value: float
    contribution_amount: float
    growth_amount: float
    self_growth_amount: float
    self_growth_percentage: float
    growth_all_time: float
    growth_year: float
    growth_month: float


@dataclass(frozen=True)
class AssetGroup:
    asset_type: str
    assets: tuple
    transactions: pd.DataFrame
    daily_values: pd.Series
    start_value: float
    value: float
    contribution_amount: float
    growth_amount: float
    self_growth_amount: float
    self_growth_percentage: float
    growth_all_time: float
    growth_year: float
    growth_month: float


@dataclass(frozen=True)
class WealthIndexGoalProjection:
    name: str
    wealth_index: float
    age: float
    target_date: pd.Timestamp
    # Two rows: (now, current WI) and (birthday + age, goal WI)
    graph: pd.DataFrame


@dataclass(frozen=True)
class CurrentValues:
    date: pd.Timestamp
    salary: float
    asset_value: float
    age: int
    wealth_index: float
    growth_year: float
    growth_month: float


@dataclass(frozen=True)
class Report:
    now: pd.Timestamp
    birthday: Birthday
    salaries: pd.DataFrame
    daily_salaries: pd.Series
    assets: dict
    daily_asset_values: pd.Series
    daily_wealth_index: pd.DataFrame
    asset_groups: dict
    years: dict
    wi_goals: list
    money_lifetimes: list
    current_values: CurrentValues
    net_assets: dict


# ------------------------------------------------------------
# Birthday / salaries
# ------------------------------------------------------------

def build_birthday(events, now: pd.Timestamp) -> Birthday:
    births = of_type(events, DateOfBirth)
    if births:
        date = births[0].date
    else:
        print("⚠️ WARNING: No date-of-birth event found. Using default birthday "
              f"{config.DEFAULT_BIRTHDAY[0]:04d}-{config.DEFAULT_BIRTHDAY[1]:02d}-{config.DEFAULT_BIRTHDAY[2]:02d}.")
        date = timestamped(*config.DEFAULT_BIRTHDAY)
    return Birthday(date=date, age=age_in_years(date, now))


def build_salaries(events) -> pd.DataFrame:
    """Salary events as a date-sorted frame (name, date, value)."""
    rows = [{"name": e.name, "date": e.date, "value": e.value} for e in of_type(events, Salary)]
    if not rows:
        return pd.DataFrame(
            {
                "name": pd.Series([], dtype=object),
                "date": pd.Series([], dtype="datetime64[ns]"),
                "value": pd.Series([], dtype=float),
            }
        )
    return pd.DataFrame(rows).sort_values("date", kind="stable").reset_index(drop=True)


# ------------------------------------------------------------
# Shared growth / contribution shape
# ------------------------------------------------------------

def _growth_shape(daily: pd.Series, transactions: pd.DataFrame, now: pd.Timestamp) -> dict:
    """
    Metrics shared by assets and asset groups.

      - contribution = Σ transaction amounts (opening deposit included)
      - self growth  = current value − contribution
    """
    value = float(daily.iloc[-1]) if not daily.empty else 0.0
    start_value = float(daily.iloc[0]) if not daily.empty else 0.0
    contribution = contribution_amount(transactions)
    return {
        "start_value": start_value,
        "value": value,
        "contribution_amount": contribution,
        "growth_amount": growth_amount(daily),
        "self_growth_amount": value - contribution,
        "self_growth_percentage": growth_percentage(contribution, value),
        "growth_all_time": growth_all_time(daily),
        "growth_year": growth_year(daily, now),
        "growth_month": growth_month(daily),
    }


# ------------------------------------------------------------
# Asset reconstruction
# ------------------------------------------------------------

def build_asset(name: str, asset_events, now: pd.Timestamp) -> Asset:
    """
    Assemble one asset from every event carrying its name.

    The open-asset value is booked as the opening deposit. The earliest
    close-asset dated on or before `now` books a withdrawal of the pre-close
    value and marks the asset at 0 from the close date on; a later close
    leaves the asset open. Same-day ties in the value timeline resolve in
    the order open, transaction, value, close.
    """
    opens = of_type(asset_events, OpenAsset)
    if not opens:
        raise OrphanAssetEvent(f"Asset '{name}' has events but no open-asset event.")
    if len(opens) > 1:
        raise MalformedEvent(f"Asset '{name}' has {len(opens)} open-asset events; expected one.")

    (details,) = opens
    deposits = of_type(asset_events, Transaction)
    marks = of_type(asset_events, AssetValue)
    closes = sorted(of_type(asset_events, CloseAsset), key=lambda e: e.date)
    close = closes[0] if closes else None
    if close is not None and close.date > now:
        key = ("close", name, close.date)
        if key not in _REPORTED_FUTURE:
            _REPORTED_FUTURE.add(key)
            print(f"⚠️ WARNING: Asset '{name}' closes on {close.date.date()}, after {now.date()}; "
                  "it is reported as open.")
        close = None

    # ----- Value timeline -----
    value_rows = [{"date": details.date, "value": details.value, "kind": "open"}]
    value_rows += [{"date": e.date, "value": e.value, "kind": "transaction"} for e in deposits]
    value_rows += [{"date": e.date, "value": e.value, "kind": "value"} for e in marks]

    # ----- Transaction timeline -----
    tx_rows = [{"date": details.date, "amount": details.value}]
    tx_rows += [{"date": e.date, "amount": e.amount} for e in deposits]

    if close is not None:
        value_rows.append({"date": close.date, "value": 0.0, "kind": "close"})
        tx_rows.append({"date": close.date, "amount": -close.value})

    values = (
        pd.DataFrame(value_rows)
        .sort_values("date", kind="stable")
        .reset_index(drop=True)
    )
    transactions = with_running_total(pd.DataFrame(tx_rows))
    daily = daily_values(values, now)

    return Asset(
        name=name,
        asset_type=details.asset_type,
        include_in_net=details.include_in_net,
        closed=close is not None,
        units=details.units + sum(e.units for e in deposits),
        opened=details.date,
        values=values,
        transactions=transactions,
        daily_values=daily,
        **_growth_shape(daily, transactions, now),
    )


def build_assets(events, now: pd.Timestamp) -> dict:
    """Reconstruct every asset, keyed by asset name."""
    by_name = {}
    for e in of_type(events, *ASSET_EVENTS):
        by_name.setdefault(e.name, []).append(e)

    return {name: build_asset(name, asset_events, now) for name, asset_events in by_name.items()}


def net_assets(assets: dict) -> dict:
    return {name: a for name, a in assets.items() if a.include_in_net}


def daily_asset_values(assets) -> pd.Series:
    """Total value per day across assets."""
    return sum_daily_values([a.daily_values for a in assets])


def combined_transactions(assets) -> pd.DataFrame:
    frames = [a.transactions for a in assets if not a.transactions.empty]
    if not frames:
        return with_running_total(pd.DataFrame())
    return with_running_total(pd.concat(frames, ignore_index=True))


# ------------------------------------------------------------
# Asset groups
# ------------------------------------------------------------

def build_asset_groups(assets: dict, now: pd.Timestamp) -> dict:
    """
    Group assets by asset type and compute the same growth shape over the
    summed daily series and the merged transactions.
    """
    by_type = {}
    for a in assets.values():
        by_type.setdefault(a.asset_type, []).append(a)

    groups = {}
    for asset_type, members in by_type.items():
        daily = daily_asset_values(members)
        transactions = combined_transactions(members)
        groups[asset_type] = AssetGroup(
            asset_type=asset_type,
            assets=tuple(members),
            transactions=transactions,
            daily_values=daily,
            **_growth_shape(daily, transactions, now),
        )
    return groups


# ------------------------------------------------------------
# Wealth index
# ------------------------------------------------------------

def build_daily_wealth_index(
    birthday: Birthday,
    daily_salaries: pd.Series,
    daily_assets: pd.Series,
) -> pd.DataFrame:
    """
    One wealth-index row per salary day.

    Days before the first net asset count as an asset value of 0.
    """
    if daily_salaries.empty:
        return pd.DataFrame(
            columns=WEALTH_INDEX_COLUMNS,
            index=pd.DatetimeIndex([], name="date"),
            dtype=float,
        )

    frame = pd.DataFrame({"salary": daily_salaries.astype(float)})
    frame["asset_value"] = daily_assets.reindex(frame.index).fillna(0.0)
    frame["age"] = [age_in_years(birthday.date, d) for d in frame.index]
    frame["wealth_index"] = [
        wealth_index(row.asset_value, row.salary, row.age)
        for row in frame.itertuples()
    ]
    frame.index.name = "date"
    return frame[WEALTH_INDEX_COLUMNS]


def build_current_values(
    birthday: Birthday,
    daily_wi: pd.DataFrame,
    daily_assets: pd.Series,
    now: pd.Timestamp,
) -> CurrentValues:
    if daily_wi.empty:
        return CurrentValues(
            date=now,
            salary=0.0,
            asset_value=float(daily_assets.iloc[-1]) if not daily_assets.empty else 0.0,
            age=birthday.age,
            wealth_index=0.0,
            growth_year=growth_year(daily_assets, now),
            growth_month=growth_month(daily_assets),
        )

    latest = daily_wi.iloc[-1]
    return CurrentValues(
        date=daily_wi.index[-1],
        salary=float(latest["salary"]),
        asset_value=float(latest["asset_value"]),
        age=int(latest["age"]),
        wealth_index=float(latest["wealth_index"]),
        growth_year=growth_year(daily_assets, now),
        growth_month=growth_month(daily_assets),
    )


def _years_offset(age: float) -> pd.DateOffset:
    whole = int(age)
    return pd.DateOffset(years=whole, months=int(round((age - whole) * 12)))


def build_wi_goals(events, birthday: Birthday, current: CurrentValues) -> list:
    """
    Straight-line target from today's wealth index to each goal.

    Visual target only; no trajectory is simulated.
    """
    goals = []
    for goal in of_type(events, WealthIndexGoal):
        target_date = birthday.date + _years_offset(goal.age)
        graph = pd.DataFrame(
            {
                "date": [current.date, target_date],
                "wealth_index": [current.wealth_index, goal.wealth_index],
            }
        )
        goals.append(
            WealthIndexGoalProjection(
                name=f"{goal.age:g}@{goal.wealth_index:g}",
                wealth_index=goal.wealth_index,
                age=goal.age,
                target_date=target_date,
                graph=graph,
            )
        )
    return goals


# ------------------------------------------------------------
# Orchestration
# ------------------------------------------------------------

def _warn_future_events(events, now: pd.Timestamp):
    for e in events:
        date = getattr(e, "date", None)
        if date is None or date <= now:
            continue
        key = (type(e).__name__, getattr(e, "name", ""), date)
        if key in _REPORTED_FUTURE:
            continue
        _REPORTED_FUTURE.add(key)
        print(f"⚠️ WARNING: {key[0]} '{key[1]}' dated {date.date()} is after {now.date()}; "
              "it will not appear in daily values.")


def run_engine(events, now=None) -> Report:
    """
    Derive the full report from an unordered collection of events.

    `events` may hold parsed events or raw mappings (parsed on entry, so a
    malformed event fails before any derivation). `now` is captured once;
    it defaults to BUCKS_AS_OF or the wall clock.
    """
    now = config.resolve_now(now)
    events = [
        parse_event(e, f"events[{i}]") if isinstance(e, dict) else e
        for i, e in enumerate(events)
    ]
    _warn_future_events(events, now)

    birthday = build_birthday(events, now)
    salaries = build_salaries(events)
    daily_salaries = daily_values(salaries, now)

    assets = build_assets(events, now)
    net = net_assets(assets)
    daily_assets = daily_asset_values(net.values())

    daily_wi = build_daily_wealth_index(birthday, daily_salaries, daily_assets)
    current = build_current_values(birthday, daily_wi, daily_assets, now)

    asset_groups = build_asset_groups(net, now)
    years = build_years(
        daily_assets,
        combined_transactions(net.values()),
        daily_salaries,
        daily_wi,
        year_goals(events),
        now,
    )
    wi_goals = build_wi_goals(events, birthday, current)
    lifetimes = money_lifetimes(current.salary, current.asset_value, of_type(events, MoneyLifetimeParams))

    return Report(
        now=now,
        birthday=birthday,
        salaries=salaries,
        daily_salaries=daily_salaries,
        assets=assets,
        daily_asset_values=daily_assets,
        daily_wealth_index=daily_wi,
        asset_groups=asset_groups,
        years=years,
        wi_goals=wi_goals,
        money_lifetimes=lifetimes,
        current_values=current,
        net_assets=net,
    )
