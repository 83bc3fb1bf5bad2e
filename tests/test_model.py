import dataclasses

import pytest

from rent_vs_buy import (
    BuyProfile,
    GlobalSettings,
    RentSettings,
    closing_costs,
    compare_profiles,
    compare_scenario,
    project_rent,
    simulate,
)
from rent_vs_buy.model import deduction_cap


def test_zero_rate_scenario(zero_rate_profile, no_rent):
    settings = GlobalSettings(forecast_years=5)
    result = compare_scenario(zero_rate_profile, settings, no_rent)

    assert result.loan_amount == 240_000
    assert result.monthly_payment == 240_000 / 360
    assert result.monthly_payment == pytest.approx(666.667, abs=1e-3)
    assert len(result.rows) == 5
    for row in result.rows:
        assert row.interest_paid == 0
        assert row.tax_shield == 0
        assert row.mortgage_balance == pytest.approx(
            240_000 - result.monthly_payment * 12 * row.year
        )


def test_home_value_compounds_from_purchase(profile, settings, rent_settings):
    result = compare_scenario(profile, settings, rent_settings)
    for row in result.rows:
        expected = profile.purchase_price * (1 + profile.home_appreciation / 100) ** row.year
        assert row.home_value == pytest.approx(expected, rel=1e-12)


def test_balance_non_increasing_and_paid_off_at_term(profile, rent_settings):
    settings = GlobalSettings(forecast_years=35)
    rows = compare_scenario(profile, settings, rent_settings).rows
    balances = [row.mortgage_balance for row in rows]
    assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))
    assert rows[profile.mortgage_term - 1].mortgage_balance == pytest.approx(0, abs=1e-6)
    assert all(row.interest_paid == 0 for row in rows[profile.mortgage_term:])


def test_wealth_delta_identity(profile, settings, rent_settings):
    for row in compare_scenario(profile, settings, rent_settings).rows:
        assert row.wealth_delta == row.net_house_wealth - row.net_renter_wealth
        assert row.cash_flow_delta == row.buy_outlay - row.annual_rent


def test_simulation_is_deterministic(profile, settings, rent_settings):
    first = compare_scenario(profile, settings, rent_settings)
    second = compare_scenario(profile, settings, rent_settings)
    assert first == second


def test_breakeven_is_first_non_negative_year(profile, settings, rent_settings):
    result = compare_scenario(profile, settings, rent_settings)
    assert result.breakeven_year is not None
    crossing = [row.year for row in result.rows if row.wealth_delta >= 0]
    assert result.breakeven_year == crossing[0]
    assert (
        result.breakeven_year - 1
        <= result.precise_breakeven
        <= result.breakeven_year
    )


def test_no_breakeven_when_home_collapses(make_profile, no_rent):
    losing = make_profile(interest_rate=5.0, home_appreciation=-50.0)
    result = compare_scenario(losing, GlobalSettings(forecast_years=10), no_rent)
    assert result.breakeven_year is None
    assert result.precise_breakeven is None
    assert result.better_option == "renting"


def test_closing_costs_itemised(profile):
    costs = closing_costs(profile)
    assert costs.mansion_tax == pytest.approx(18_500)
    assert costs.mortgage_recording_tax == pytest.approx(35_612.5)
    assert costs.title_insurance == pytest.approx(11_100)
    assert costs.total == pytest.approx(73_462.5)


def test_precomputed_scalars(profile, settings, rent_settings):
    result = compare_scenario(profile, settings, rent_settings)
    assert result.down_payment == pytest.approx(370_000)
    assert result.loan_amount == pytest.approx(1_480_000)
    assert result.total_closing_costs == pytest.approx(73_462.5)
    assert result.initial_outlay == pytest.approx(443_462.5)


def test_deduction_cap():
    assert deduction_cap(0.0, 750_000) == 0.0
    assert deduction_cap(500_000, 750_000) == 1.0
    assert deduction_cap(1_500_000, 750_000) == 0.5


def test_tax_shield_uses_capped_interest(profile, rent_settings):
    settings = GlobalSettings(forecast_years=3, federal_tax_rate=30)
    row = compare_scenario(profile, settings, rent_settings).rows[0]
    cap = 750_000 / 1_480_000
    assert row.tax_shield == pytest.approx(row.interest_paid * cap * 0.30)


def test_deduction_limit_is_configurable(profile, rent_settings):
    settings = GlobalSettings(forecast_years=3, mortgage_deduction_limit=0.0)
    for row in compare_scenario(profile, settings, rent_settings).rows:
        assert row.tax_shield == 0


def test_all_cash_purchase_has_no_loan(make_profile, no_rent):
    cash = make_profile(down_payment_pct=100.0, interest_rate=6.0)
    result = compare_scenario(cash, GlobalSettings(forecast_years=3), no_rent)
    assert result.loan_amount == 0
    assert result.monthly_payment == 0
    for row in result.rows:
        assert row.mortgage_balance == 0
        assert row.tax_shield == 0


def test_maintenance_uses_year_start_value(make_profile, no_rent):
    owner = make_profile(
        down_payment_pct=100.0, home_appreciation=10.0, maintenance_pct=1.0
    )
    rows = compare_scenario(owner, GlobalSettings(forecast_years=2), no_rent).rows
    assert rows[0].buy_outlay == pytest.approx(3_000)
    assert rows[1].buy_outlay == pytest.approx(3_300)


def test_outlay_drops_once_mortgage_is_paid(make_profile, no_rent):
    short = make_profile(interest_rate=5.0, mortgage_term=5, annual_property_tax=1_200)
    result = compare_scenario(short, GlobalSettings(forecast_years=8), no_rent)
    assert result.rows[4].buy_outlay > result.rows[5].buy_outlay
    for row in result.rows[5:]:
        assert row.buy_outlay == pytest.approx(1_200)


def test_fractional_term_ends_mid_year(make_profile, no_rent):
    owner = make_profile(interest_rate=5.0, mortgage_term=15.5)
    settings = GlobalSettings(forecast_years=18, federal_tax_rate=0)
    result = compare_scenario(owner, settings, no_rent)
    rows = result.rows

    assert rows[14].buy_outlay == pytest.approx(result.monthly_payment * 12)
    assert rows[15].buy_outlay == pytest.approx(result.monthly_payment * 6)
    assert rows[15].interest_paid > 0
    assert rows[15].mortgage_balance == 0
    for row in rows[16:]:
        assert row.buy_outlay == 0
        assert row.interest_paid == 0


def test_property_tax_grows_from_first_year(make_profile, no_rent):
    owner = make_profile(
        down_payment_pct=100.0, annual_property_tax=10_000, prop_tax_growth=3.0
    )
    rows = compare_scenario(owner, GlobalSettings(forecast_years=3), no_rent).rows
    assert rows[0].buy_outlay == pytest.approx(10_000)
    assert rows[2].buy_outlay == pytest.approx(10_000 * 1.03**2)


def test_home_sale_taxes_gain_above_basis(make_profile, no_rent):
    owner = make_profile(down_payment_pct=100.0, home_appreciation=10.0)
    settings = GlobalSettings(forecast_years=1, cap_gains_rate=20.0)
    row = compare_scenario(owner, settings, no_rent).rows[0]
    # 330k sale, 300k basis: 20% of the 30k gain.
    assert row.net_house_wealth == pytest.approx(324_000)


def test_renter_portfolio_compounds(profile, rent_settings):
    settings = GlobalSettings(forecast_years=3, invest_return=5.0, cap_gains_rate=20.0)
    result = compare_scenario(profile, settings, rent_settings)
    first, second = result.rows[0], result.rows[1]

    assert first.renter_portfolio == pytest.approx(
        result.initial_outlay * 1.05 + first.cash_flow_delta
    )
    assert first.cum_invested == pytest.approx(
        result.initial_outlay + first.cash_flow_delta
    )
    assert second.renter_portfolio == pytest.approx(
        first.renter_portfolio * 1.05 + second.cash_flow_delta
    )
    gain = second.renter_portfolio - second.cum_invested
    assert second.renter_exit_tax == pytest.approx(max(0.0, gain * 0.20))
    assert second.net_renter_wealth == pytest.approx(
        second.renter_portfolio - second.renter_exit_tax
    )


def test_rent_past_stream_end_is_zero(profile):
    settings = GlobalSettings(forecast_years=5)
    stream = project_rent(RentSettings(monthly_rent=3_000), 3)
    rows = simulate(profile, settings, stream).rows
    assert rows[2].annual_rent == pytest.approx(36_000 * 1.05**2)
    assert rows[3].annual_rent == 0
    assert rows[4].annual_rent == 0


def test_compare_profiles_keys_results_by_id(profile, settings, rent_settings):
    cheaper = dataclasses.replace(profile, id="buy_2", purchase_price=1_200_000)
    results = compare_profiles([profile, cheaper], settings, rent_settings)
    assert list(results) == ["buy_1", "buy_2"]
    assert results["buy_2"] == compare_scenario(cheaper, settings, rent_settings)


def test_compare_profiles_rejects_duplicate_ids(profile, settings, rent_settings):
    with pytest.raises(ValueError):
        compare_profiles([profile, profile], settings, rent_settings)


def test_inputs_are_not_mutated(profile, settings, rent_settings):
    before = dataclasses.asdict(profile)
    compare_scenario(profile, settings, rent_settings)
    assert dataclasses.asdict(profile) == before
    assert isinstance(profile, BuyProfile)
