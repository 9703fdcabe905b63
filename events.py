"""
Event variants, the timestamp normalizer, and field-shape validation.

Raw events are mappings keyed by hyphenated field names, discriminated by
`data-type`:

    {"data-type": "transaction", "name": "TFSA", "year": 2020, "month": 2,
     "day": 1, "amount": 500, "value": 1500, "units": 0}

`parse_events` turns a collection of those into immutable event objects and
raises `MalformedEvent` before any derivation starts.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Iterable

import pandas as pd

import config


class MalformedEvent(ValueError):
    """Raised when a raw event is missing a field or has the wrong shape."""


class OrphanAssetEvent(ValueError):
    """Raised when asset events reference a name with no open-asset event."""


# ------------------------------------------------------------
# Timestamp normalizer
# ------------------------------------------------------------

def timestamped(year: int, month: int, day: int) -> pd.Timestamp:
    """
    Normalize a {year, month, day} triple (month is 1-12) to a midnight
    timestamp. Impossible dates such as Feb 30 raise ValueError.
    """
    return pd.Timestamp(year=int(year), month=int(month), day=int(day))


# ------------------------------------------------------------
# Event variants
# ------------------------------------------------------------

@dataclass(frozen=True)
class DateOfBirth:
    date: pd.Timestamp


@dataclass(frozen=True)
class Salary:
    name: str
    date: pd.Timestamp
    value: float


@dataclass(frozen=True)
class OpenAsset:
    name: str
    date: pd.Timestamp
    asset_type: str
    value: float
    units: float
    include_in_net: bool


@dataclass(frozen=True)
class CloseAsset:
    name: str
    date: pd.Timestamp
    value: float


@dataclass(frozen=True)
class Transaction:
    name: str
    date: pd.Timestamp
    amount: float
    value: float
    units: float


@dataclass(frozen=True)
class AssetValue:
    name: str
    date: pd.Timestamp
    value: float


@dataclass(frozen=True)
class WealthIndexGoal:
    wealth_index: float
    age: float


@dataclass(frozen=True)
class YearGoal:
    year: int
    percentage: float


@dataclass(frozen=True)
class MoneyLifetimeParams:
    inflation: float
    percent_of_salary: float
    asset_growth: float


ASSET_EVENTS = (OpenAsset, Transaction, AssetValue, CloseAsset)


# ------------------------------------------------------------
# Field readers
# ------------------------------------------------------------

def _missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _field(data: dict[str, Any], key: str, path: str) -> Any:
    # Accept both "include-in-net" and "include_in_net"
    for candidate in (key, key.replace("-", "_")):
        if candidate in data and not _missing(data[candidate]):
            return data[candidate]
    raise MalformedEvent(f"{path}.{key}: missing required field")


def _number(data: dict[str, Any], key: str, path: str) -> float:
    raw = _field(data, key, path)
    if isinstance(raw, bool):
        raise MalformedEvent(f"{path}.{key}: expected a number, got {raw!r}")
    if isinstance(raw, numbers.Real):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            raise MalformedEvent(f"{path}.{key}: expected a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise MalformedEvent(f"{path}.{key}: expected a finite number, got {raw!r}")
    return value


def _bounded_int(data: dict[str, Any], key: str, path: str, low: int, high: int) -> int:
    value = _number(data, key, path)
    if not value.is_integer() or not (low <= value <= high):
        raise MalformedEvent(f"{path}.{key}: expected a whole number in [{low}, {high}], got {value:g}")
    return int(value)


def _positive(data: dict[str, Any], key: str, path: str) -> float:
    value = _number(data, key, path)
    if value <= 0:
        raise MalformedEvent(f"{path}.{key}: must be positive, got {value:g}")
    return value


def _name(data: dict[str, Any], path: str) -> str:
    raw = _field(data, "name", path)
    if not isinstance(raw, str):
        raise MalformedEvent(f"{path}.name: expected a non-empty string")
    return raw.strip()


def _date(data: dict[str, Any], path: str) -> pd.Timestamp:
    year = _bounded_int(data, "year", path, 1900, 2999)
    month = _bounded_int(data, "month", path, 1, 12)
    day = _bounded_int(data, "day", path, 1, 31)
    try:
        return timestamped(year, month, day)
    except ValueError as exc:
        raise MalformedEvent(f"{path}: {year:04d}-{month:02d}-{day:02d} is not a calendar date") from exc


def _include_in_net(data: dict[str, Any], path: str) -> bool:
    raw = _field(data, "include-in-net", path)
    if isinstance(raw, bool):
        return raw
    flag = str(raw).strip().lower()
    if flag == config.YES:
        return True
    if flag == config.NO:
        return False
    raise MalformedEvent(f"{path}.include-in-net: expected {config.YES!r} or {config.NO!r}, got {raw!r}")


def _asset_type(data: dict[str, Any], path: str, asset_types: Iterable[str]) -> str:
    raw = str(_field(data, "asset-type", path)).strip()
    if raw not in asset_types:
        raise MalformedEvent(
            f"{path}.asset-type: {raw!r} is not one of {', '.join(asset_types)}"
        )
    return raw


# ------------------------------------------------------------
# Parsing
# ------------------------------------------------------------

def parse_event(data: dict[str, Any], path: str = "event", asset_types: Iterable[str] = config.ASSET_TYPES):
    """
    Build one immutable event from a raw mapping.

    Args:
        data (dict): Raw fields, keyed by hyphenated (or underscored) names.
        path (str): Location used in error messages.
        asset_types (Iterable[str]): Allowed asset types for open-asset.

    Returns:
        One of the event dataclasses in this module.

    Raises:
        MalformedEvent: unknown data-type or a field of the wrong shape.
    """
    if not isinstance(data, dict):
        raise MalformedEvent(f"{path}: expected an object")

    asset_types = tuple(asset_types)
    data_type = str(_field(data, "data-type", path)).strip()

    if data_type == "date-of-birth":
        return DateOfBirth(date=_date(data, path))

    if data_type == "salary":
        return Salary(name=_name(data, path), date=_date(data, path), value=_number(data, "value", path))

    if data_type == "open-asset":
        return OpenAsset(
            name=_name(data, path),
            date=_date(data, path),
            asset_type=_asset_type(data, path, asset_types),
            value=_number(data, "value", path),
            units=_number(data, "units", path),
            include_in_net=_include_in_net(data, path),
        )

    if data_type == "close-asset":
        return CloseAsset(name=_name(data, path), date=_date(data, path), value=_number(data, "value", path))

    if data_type == "transaction":
        return Transaction(
            name=_name(data, path),
            date=_date(data, path),
            amount=_number(data, "amount", path),
            value=_number(data, "value", path),
            units=_number(data, "units", path),
        )

    if data_type == "value":
        return AssetValue(name=_name(data, path), date=_date(data, path), value=_number(data, "value", path))

    if data_type == "wi-goal":
        return WealthIndexGoal(
            wealth_index=_positive(data, "wealth-index", path),
            age=_positive(data, "age", path),
        )

    if data_type == "year-goal":
        percentage = _number(data, "percentage", path)
        if not (0 <= percentage <= 100):
            raise MalformedEvent(f"{path}.percentage: expected 0-100, got {percentage:g}")
        return YearGoal(year=_bounded_int(data, "year", path, 1900, 2999), percentage=percentage)

    if data_type == "money-lifetime":
        inflation = _number(data, "inflation", path)
        if inflation < 0:
            raise MalformedEvent(f"{path}.inflation: must not be negative, got {inflation:g}")
        return MoneyLifetimeParams(
            inflation=inflation,
            percent_of_salary=_positive(data, "percent-of-salary", path),
            asset_growth=_number(data, "asset-growth", path),
        )

    raise MalformedEvent(f"{path}.data-type: unknown data type {data_type!r}")


def parse_events(raw_events: Iterable[dict[str, Any]], asset_types: Iterable[str] = config.ASSET_TYPES) -> list:
    """Parse every raw event, failing on the first malformed one."""
    asset_types = tuple(asset_types)
    return [
        parse_event(data, f"events[{i}]", asset_types)
        for i, data in enumerate(raw_events)
    ]


def of_type(events: Iterable, *types) -> list:
    return [e for e in events if isinstance(e, types)]
