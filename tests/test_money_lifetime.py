import pytest

from events import MalformedEvent, MoneyLifetimeParams
from money_lifetime import money_lifetimes, simulate_money_lifetime


def test_flat_balance_runs_out_linearly():
    result = simulate_money_lifetime(10000, 50000, MoneyLifetimeParams(0, 20, 0))

    # 50000 / 2000 = 25 withdrawals
    assert result.months_elapsed == 25
    assert (result.years, result.months) == (2, 1)
    assert result.value == 0
    assert result.monthly_deduction == 2000
    assert result.capped is False


def test_growth_and_inflation_fixture():
    params = MoneyLifetimeParams(inflation=5, percent_of_salary=20, asset_growth=7)

    result = simulate_money_lifetime(10000, 50000, params)

    assert result.capped is False
    assert result.months_elapsed == 25
    assert (result.years, result.months) == (2, 1)
    assert result.value == pytest.approx(1135.3314552593354)
    assert result.monthly_deduction == pytest.approx(2219.0905155796404)
    assert result.value - result.monthly_deduction < 0
    assert simulate_money_lifetime(10000, 50000, params) == result


def test_withdrawal_larger_than_balance_stops_immediately():
    result = simulate_money_lifetime(10000, 1000, MoneyLifetimeParams(0, 20, 0))

    assert result.months_elapsed == 0
    assert result.value == 1000


def test_simulation_is_capped_at_fifty_years():
    result = simulate_money_lifetime(1000, 1_000_000, MoneyLifetimeParams(0, 1, 12))

    assert result.capped is True
    assert result.months_elapsed == 601
    assert (result.years, result.months) == (50, 1)


def test_no_salary_never_runs_out():
    assert simulate_money_lifetime(0, 100, MoneyLifetimeParams(3, 20, 5)).capped is True


def test_higher_withdrawal_never_lasts_longer():
    months = [
        simulate_money_lifetime(10000, 500000, MoneyLifetimeParams(5, pct, 7)).months_elapsed
        for pct in (5, 10, 20, 40, 80)
    ]
    assert months == sorted(months, reverse=True)
    assert all(m <= 601 for m in months)


def test_negative_inflation_is_rejected():
    with pytest.raises(MalformedEvent):
        simulate_money_lifetime(10000, 50000, MoneyLifetimeParams(-1, 20, 7))


def test_one_result_per_parameter_set():
    params = [MoneyLifetimeParams(0, 20, 0), MoneyLifetimeParams(0, 10, 0)]

    results = money_lifetimes(10000, 50000, params)

    assert [r.percent_of_salary for r in results] == [20, 10]
    assert [r.months_elapsed for r in results] == [25, 50]
