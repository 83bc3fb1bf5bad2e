"""Fixed-rate mortgage math on a monthly schedule."""

from __future__ import annotations


def annual_to_monthly_rate(annual_rate_pct: float) -> float:
    if annual_rate_pct <= 0:
        return 0.0
    return annual_rate_pct / 100.0 / 12.0


def monthly_payment(principal: float, monthly_rate: float, periods: int) -> float:
    if principal <= 0 or periods <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / periods
    growth = (1 + monthly_rate) ** periods
    return principal * monthly_rate * growth / (growth - 1)


def remaining_balance(
    principal: float,
    payment: float,
    monthly_rate: float,
    periods: int,
    elapsed: int,
) -> float:
    """Balance left after ``elapsed`` payments have been made."""
    remaining = periods - elapsed
    if remaining <= 0:
        return 0.0
    if monthly_rate > 0:
        return payment * (1 - (1 + monthly_rate) ** -remaining) / monthly_rate
    return principal - payment * elapsed


def payments_in_year(periods: int, year: int) -> int:
    return min(12, max(0, periods - (year - 1) * 12))


def interest_for_year(
    principal: float,
    payment: float,
    monthly_rate: float,
    periods: int,
    year: int,
) -> float:
    """
    Interest paid during forecast ``year`` (1-indexed).

    The start-of-year balance is rebuilt from the closed form, then the
    year is stepped month by month so that interest is separated from
    principal exactly as the schedule splits it.
    """
    elapsed = (year - 1) * 12
    if elapsed >= periods:
        return 0.0

    balance = remaining_balance(principal, payment, monthly_rate, periods, elapsed)
    interest = 0.0
    for _ in range(payments_in_year(periods, year)):
        month_interest = balance * monthly_rate
        interest += month_interest
        balance -= payment - month_interest
    return interest
