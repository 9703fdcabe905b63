from __future__ import annotations

import pandas as pd


def event(data_type: str, date: str | None = None, **fields) -> dict:
    """Raw event mapping; `date` ("YYYY-MM-DD") expands to year/month/day."""
    data = {"data-type": data_type}
    if date is not None:
        ts = pd.Timestamp(date)
        data.update({"year": ts.year, "month": ts.month, "day": ts.day})
    data.update({k.replace("_", "-"): v for k, v in fields.items()})
    return data


def records(*rows) -> pd.DataFrame:
    """Frame of (date, value) records for the daily series builder."""
    return pd.DataFrame(
        {"date": [pd.Timestamp(d) for d, _ in rows], "value": [v for _, v in rows]}
    )
