from __future__ import annotations

import logging
from typing import Dict, Iterable, Sequence

from .amortization import (
    annual_to_monthly_rate,
    interest_for_year,
    monthly_payment,
    payments_in_year,
    remaining_balance,
)
from .breakeven import find_breakeven
from .rent import project_rent
from .schemas import (
    BuyProfile,
    ClosingCosts,
    GlobalSettings,
    RentSettings,
    RentYear,
    SimulationResult,
    YearlyRow,
)

logger = logging.getLogger(__name__)


def simulate(
    profile: BuyProfile,
    settings: GlobalSettings,
    rent_stream: Sequence[RentYear],
) -> SimulationResult:
    """Project buy-side and rent-side wealth for each forecast year."""
    years = settings.forecast_years
    fed_tax_rate = settings.federal_tax_rate / 100.0
    invest_growth = settings.invest_return / 100.0
    cap_gains_rate = settings.cap_gains_rate / 100.0
    appreciation = profile.home_appreciation / 100.0

    price = profile.purchase_price
    down_payment = profile.down_payment
    total_closing = closing_costs(profile).total
    initial_outlay = down_payment + total_closing
    selling_cost_pct = (profile.seller_commission_pct + profile.transfer_tax_pct) / 100.0
    loan_amount = price - down_payment
    rate = annual_to_monthly_rate(profile.interest_rate)
    periods = profile.payment_count
    payment = monthly_payment(loan_amount, rate, periods)
    cap = deduction_cap(loan_amount, settings.mortgage_deduction_limit)

    rows = []
    renter_portfolio = 0.0
    cum_invested = 0.0

    for year in range(1, years + 1):
        home_value = price * (1 + appreciation) ** year

        balance = remaining_balance(loan_amount, payment, rate, periods, year * 12)
        interest_paid = interest_for_year(loan_amount, payment, rate, periods, year)
        tax_shield = interest_paid * cap * fed_tax_rate

        principal_and_interest = payment * payments_in_year(periods, year)
        property_tax = profile.annual_property_tax * (
            1 + profile.prop_tax_growth / 100.0
        ) ** (year - 1)
        hoa_insurance = profile.hoa_insurance_monthly * 12
        maintenance = (
            price * (1 + appreciation) ** (year - 1) * profile.maintenance_pct / 100.0
        )
        buy_outlay = (
            principal_and_interest + property_tax + hoa_insurance + maintenance - tax_shield
        )

        annual_rent = rent_stream[year - 1].annual_rent if year <= len(rent_stream) else 0.0

        net_sale_proceeds = home_value * (1 - selling_cost_pct)
        taxable_gain = (
            net_sale_proceeds - (price + total_closing) - profile.capital_gains_exclusion
        )
        home_cap_gains_tax = max(0.0, taxable_gain * cap_gains_rate)
        net_house_wealth = net_sale_proceeds - balance - home_cap_gains_tax

        # The renter invests the cash the buyer would have spent.
        cash_flow_delta = buy_outlay - annual_rent
        if year == 1:
            renter_portfolio = initial_outlay * (1 + invest_growth) + cash_flow_delta
            cum_invested = initial_outlay + cash_flow_delta
        else:
            renter_portfolio = renter_portfolio * (1 + invest_growth) + cash_flow_delta
            cum_invested += cash_flow_delta

        renter_gain = renter_portfolio - cum_invested
        renter_exit_tax = max(0.0, renter_gain * cap_gains_rate)
        net_renter_wealth = renter_portfolio - renter_exit_tax

        rows.append(
            YearlyRow(
                year=year,
                home_value=home_value,
                mortgage_balance=balance,
                interest_paid=interest_paid,
                tax_shield=tax_shield,
                buy_outlay=buy_outlay,
                annual_rent=annual_rent,
                net_house_wealth=net_house_wealth,
                renter_portfolio=renter_portfolio,
                cum_invested=cum_invested,
                renter_exit_tax=renter_exit_tax,
                net_renter_wealth=net_renter_wealth,
                wealth_delta=net_house_wealth - net_renter_wealth,
                cash_flow_delta=cash_flow_delta,
            )
        )

    breakeven = find_breakeven(rows, initial_outlay)
    logger.debug(
        "Simulated %s over %d years: payment=%.2f breakeven=%s",
        profile.label,
        years,
        payment,
        breakeven.year,
    )

    return SimulationResult(
        down_payment=down_payment,
        total_closing_costs=total_closing,
        loan_amount=loan_amount,
        monthly_payment=payment,
        breakeven_year=breakeven.year,
        precise_breakeven=breakeven.precise,
        rows=tuple(rows),
    )


def compare_scenario(
    profile: BuyProfile,
    settings: GlobalSettings,
    rent_settings: RentSettings,
) -> SimulationResult:
    rent_stream = project_rent(rent_settings, settings.forecast_years)
    return simulate(profile, settings, rent_stream)


def compare_profiles(
    profiles: Iterable[BuyProfile],
    settings: GlobalSettings,
    rent_settings: RentSettings,
) -> Dict[str, SimulationResult]:
    """Simulate several profiles against one shared rent stream, keyed by id."""
    rent_stream = project_rent(rent_settings, settings.forecast_years)
    results: Dict[str, SimulationResult] = {}
    for profile in profiles:
        if profile.id in results:
            raise ValueError(f"duplicate profile id {profile.id!r}")
        results[profile.id] = simulate(profile, settings, rent_stream)
    return results


def closing_costs(profile: BuyProfile) -> ClosingCosts:
    price = profile.purchase_price
    return ClosingCosts(
        mansion_tax=price * profile.mansion_tax_pct / 100.0,
        mortgage_recording_tax=price * profile.mortgage_recording_tax_pct / 100.0,
        title_insurance=price * profile.title_insurance_pct / 100.0,
        real_estate_attorney_fee=profile.real_estate_attorney_fee,
        bank_attorney_fee=profile.bank_attorney_fee,
        lender_fee=profile.lender_fee,
        recording_fee=profile.recording_fee,
    )


def deduction_cap(loan_amount: float, deduction_limit: float) -> float:
    """Share of mortgage interest that is deductible; 0 with no loan."""
    if loan_amount <= 0:
        return 0.0
    return min(1.0, deduction_limit / loan_amount)
