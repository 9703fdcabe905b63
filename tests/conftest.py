import pandas as pd
import pytest

from tests.helpers import event


@pytest.fixture
def now() -> pd.Timestamp:
    return pd.Timestamp("2020-03-15")


@pytest.fixture
def scenario_events() -> list:
    return [
        event("date-of-birth", "1990-01-01"),
        event("salary", "2020-01-01", name="Acme", value=10000),
        event(
            "open-asset",
            "2020-01-01",
            name="TFSA",
            asset_type="TFSA",
            value=1000,
            units=0,
            include_in_net="y",
        ),
        event("transaction", "2020-02-01", name="TFSA", amount=500, value=1500, units=0),
    ]
