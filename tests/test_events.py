import pandas as pd
import pytest

from events import (
    AssetValue,
    CloseAsset,
    DateOfBirth,
    MalformedEvent,
    MoneyLifetimeParams,
    OpenAsset,
    Salary,
    Transaction,
    WealthIndexGoal,
    YearGoal,
    of_type,
    parse_event,
    parse_events,
    timestamped,
)
from tests.helpers import event


def _open(**overrides):
    fields = dict(name="TFSA", asset_type="TFSA", value=1000, units=0, include_in_net="y")
    fields.update(overrides)
    return event("open-asset", "2020-01-01", **fields)


def test_timestamped_months_are_one_indexed():
    assert timestamped(2020, 1, 31) == pd.Timestamp("2020-01-31")
    assert timestamped(2020, 12, 1).month == 12


def test_timestamped_rejects_impossible_dates():
    with pytest.raises(ValueError):
        timestamped(2021, 2, 29)


def test_parse_every_data_type():
    parsed = parse_events(
        [
            event("date-of-birth", "1990-01-01"),
            event("salary", "2020-01-01", name="Acme", value=10000),
            _open(),
            event("close-asset", "2020-05-01", name="TFSA", value=1200),
            event("transaction", "2020-02-01", name="TFSA", amount=500, value=1500, units=1),
            event("value", "2020-03-01", name="TFSA", value=1600),
            event("wi-goal", wealth_index=2, age=40),
            event("year-goal", year=2020, percentage=10),
            event("money-lifetime", inflation=5, percent_of_salary=20, asset_growth=7),
        ]
    )

    assert [type(e) for e in parsed] == [
        DateOfBirth,
        Salary,
        OpenAsset,
        CloseAsset,
        Transaction,
        AssetValue,
        WealthIndexGoal,
        YearGoal,
        MoneyLifetimeParams,
    ]
    assert parsed[0].date == pd.Timestamp("1990-01-01")
    assert parsed[2].include_in_net is True
    assert parsed[4].amount == 500
    assert parsed[7] == YearGoal(year=2020, percentage=10)
    assert of_type(parsed, Salary, DateOfBirth) == [parsed[0], parsed[1]]


@pytest.mark.parametrize("flag,expected", [("y", True), ("n", False), ("Y", True), (True, True), (False, False)])
def test_include_in_net_flags(flag, expected):
    assert parse_event(_open(include_in_net=flag)).include_in_net is expected


def test_include_in_net_rejects_other_values():
    with pytest.raises(MalformedEvent, match="include-in-net"):
        parse_event(_open(include_in_net="maybe"))


def test_missing_field_reports_path():
    raw = event("transaction", "2020-02-01", name="TFSA", amount=500, value=1500, units=0)
    del raw["day"]

    with pytest.raises(MalformedEvent, match=r"events\[1\]\.day"):
        parse_events([_open(), raw])


@pytest.mark.parametrize(
    "raw",
    [
        event("salary", name="Acme", year=2020, month=13, day=1, value=1),
        event("salary", name="Acme", year=2021, month=2, day=29, value=1),
        event("salary", name="Acme", year=1800, month=1, day=1, value=1),
        event("salary", "2020-01-01", name="", value=1),
        event("salary", "2020-01-01", name="Acme", value="lots"),
        event("transaction", "2020-01-01", name="TFSA", amount=True, value=1, units=0),
        event("year-goal", year=2020, percentage=150),
        event("money-lifetime", inflation=-1, percent_of_salary=20, asset_growth=7),
        event("money-lifetime", inflation=1, percent_of_salary=0, asset_growth=7),
        event("wi-goal", wealth_index=2, age=0),
        event("wi-goal", wealth_index=-1, age=40),
        event("bonus", "2020-01-01", name="Acme", value=1),
        {"name": "no type"},
        "not a mapping",
    ],
)
def test_malformed_events(raw):
    with pytest.raises(MalformedEvent):
        parse_event(raw)


def test_asset_type_must_be_known():
    with pytest.raises(MalformedEvent, match="asset-type"):
        parse_event(_open(asset_type="House"))

    parsed = parse_event(_open(asset_type="House"), asset_types=("House",))
    assert parsed.asset_type == "House"


def test_numeric_text_and_underscored_keys():
    raw = {
        "data_type": "open-asset",
        "name": "Bitcoin",
        "year": "2020",
        "month": "1.0",
        "day": "15",
        "asset_type": "Crypto",
        "value": "1000.5",
        "units": "0.25",
        "include_in_net": "n",
    }

    parsed = parse_event(raw)

    assert parsed == OpenAsset(
        name="Bitcoin",
        date=pd.Timestamp("2020-01-15"),
        asset_type="Crypto",
        value=1000.5,
        units=0.25,
        include_in_net=False,
    )


def test_events_are_immutable():
    parsed = parse_event(event("value", "2020-01-01", name="TFSA", value=1))
    with pytest.raises(AttributeError):
        parsed.value = 2
