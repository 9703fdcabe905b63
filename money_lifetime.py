from __future__ import annotations

from dataclasses import dataclass

import config
from events import MalformedEvent, MoneyLifetimeParams
from financial_math import monthly_interest


@dataclass(frozen=True)
class MoneyLifetime:
    inflation: float
    percent_of_salary: float
    asset_growth: float
    months_elapsed: int
    years: int
    months: int
    value: float
    monthly_deduction: float
    # True when the cap was hit before the money ran out
    capped: bool


def simulate_money_lifetime(
    salary: float,
    asset_value: float,
    params: MoneyLifetimeParams,
    cap_months: int = config.MONEY_LIFETIME_CAP_MONTHS,
) -> MoneyLifetime:
    """
    Months until monthly withdrawals exhaust a compounding balance.

    Each simulated month:
        value'     = (value − deduction) * (1 + asset_growth / 1200)
        deduction' = deduction * (1 + inflation / 1200)

    Stops when the next withdrawal would overdraw the balance, or once the
    month count passes `cap_months`.

    Args:
        salary (float): Current monthly salary; seeds the first deduction.
        asset_value (float): Current net asset value.
        params (MoneyLifetimeParams): inflation, percent of salary, asset growth.
        cap_months (int): Simulation ceiling (50 years by default).

    Returns:
        MoneyLifetime with years/months split of the elapsed months.
    """
    if params.inflation < 0:
        raise MalformedEvent(f"money-lifetime.inflation: must not be negative, got {params.inflation:g}")

    deduction = salary * params.percent_of_salary / 100
    inflation_factor = monthly_interest(params.inflation)
    growth_factor = monthly_interest(params.asset_growth)

    value = asset_value
    months = 0
    while value - deduction >= 0 and months <= cap_months:
        value = (value - deduction) * growth_factor
        deduction = deduction * inflation_factor
        months += 1

    return MoneyLifetime(
        inflation=params.inflation,
        percent_of_salary=params.percent_of_salary,
        asset_growth=params.asset_growth,
        months_elapsed=months,
        years=months // 12,
        months=months % 12,
        value=value,
        monthly_deduction=deduction,
        capped=months > cap_months,
    )


def money_lifetimes(salary: float, asset_value: float, params_list) -> list:
    """One simulation per declared parameter set, in declaration order."""
    return [simulate_money_lifetime(salary, asset_value, p) for p in params_list]
