from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Optional, Tuple

from .config import MORTGAGE_INTEREST_DEDUCTION_LIMIT


class InvalidInputError(ValueError):
    """Raised when an input structure fails its precondition checks."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name} {message}")
        self.field_name = field_name


def _require_finite(obj: object) -> None:
    for item in fields(obj):
        value = getattr(obj, item.name)
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidInputError(item.name, "must be a finite number")


def _require_growth(name: str, value: float) -> None:
    if value <= -100:
        raise InvalidInputError(name, "must be greater than -100%")


@dataclass(frozen=True)
class GlobalSettings:
    """Settings shared by every profile in a comparison."""

    forecast_years: int = 30
    federal_tax_rate: float = 37.0  # percent
    invest_return: float = 4.0  # percent per year
    cap_gains_rate: float = 38.6  # percent
    mortgage_deduction_limit: float = MORTGAGE_INTEREST_DEDUCTION_LIMIT

    def __post_init__(self) -> None:
        if isinstance(self.forecast_years, bool) or not isinstance(
            self.forecast_years, int
        ):
            raise InvalidInputError("forecast_years", "must be an integer")
        if self.forecast_years <= 0:
            raise InvalidInputError("forecast_years", "must be positive")
        _require_finite(self)
        _require_growth("invest_return", self.invest_return)
        for name in ("federal_tax_rate", "cap_gains_rate"):
            if not 0 <= getattr(self, name) <= 100:
                raise InvalidInputError(name, "must be between 0 and 100")
        if self.mortgage_deduction_limit < 0:
            raise InvalidInputError("mortgage_deduction_limit", "must not be negative")


@dataclass(frozen=True)
class RentSettings:
    monthly_rent: float = 7050.0
    annual_rent_increase: float = 5.0  # percent, may be zero or negative

    def __post_init__(self) -> None:
        _require_finite(self)
        if self.monthly_rent < 0:
            raise InvalidInputError("monthly_rent", "must not be negative")
        _require_growth("annual_rent_increase", self.annual_rent_increase)


# Cost fields that must never be negative.
_NON_NEGATIVE_PROFILE_FIELDS = (
    "hoa_insurance_monthly",
    "annual_property_tax",
    "mansion_tax_pct",
    "mortgage_recording_tax_pct",
    "title_insurance_pct",
    "real_estate_attorney_fee",
    "bank_attorney_fee",
    "lender_fee",
    "recording_fee",
    "seller_commission_pct",
    "transfer_tax_pct",
    "capital_gains_exclusion",
    "maintenance_pct",
)


@dataclass(frozen=True)
class BuyProfile:
    """A candidate home purchase. All ``*_pct`` and rate fields are percentages."""

    id: str
    name: str = ""
    purchase_price: float = 1_850_000.0
    down_payment_pct: float = 20.0
    interest_rate: float = 6.3  # annual percentage
    mortgage_term: float = 30  # years, may be fractional
    home_appreciation: float = 2.0
    hoa_insurance_monthly: float = 919.0
    annual_property_tax: float = 2093.0
    prop_tax_growth: float = 2.0

    # Closing costs
    mansion_tax_pct: float = 1.0
    mortgage_recording_tax_pct: float = 1.925
    title_insurance_pct: float = 0.6
    real_estate_attorney_fee: float = 5000.0
    bank_attorney_fee: float = 1000.0
    lender_fee: float = 1500.0
    recording_fee: float = 750.0

    # Selling costs
    seller_commission_pct: float = 5.0
    transfer_tax_pct: float = 1.825
    capital_gains_exclusion: float = 500_000.0
    maintenance_pct: float = 0.0

    def __post_init__(self) -> None:
        _require_finite(self)
        if self.purchase_price <= 0:
            raise InvalidInputError("purchase_price", "must be positive")
        if not 0 <= self.down_payment_pct <= 100:
            raise InvalidInputError("down_payment_pct", "must be between 0 and 100")
        if self.interest_rate < 0:
            raise InvalidInputError("interest_rate", "must not be negative")
        if isinstance(self.mortgage_term, bool) or not isinstance(
            self.mortgage_term, (int, float)
        ):
            raise InvalidInputError("mortgage_term", "must be a number of years")
        if self.mortgage_term <= 0:
            raise InvalidInputError("mortgage_term", "must be positive")
        if self.payment_count < 1:
            raise InvalidInputError("mortgage_term", "must cover at least one monthly payment")
        _require_growth("home_appreciation", self.home_appreciation)
        _require_growth("prop_tax_growth", self.prop_tax_growth)
        for name in _NON_NEGATIVE_PROFILE_FIELDS:
            if getattr(self, name) < 0:
                raise InvalidInputError(name, "must not be negative")

    @property
    def payment_count(self) -> int:
        return round(self.mortgage_term * 12)

    @property
    def down_payment(self) -> float:
        return self.purchase_price * self.down_payment_pct / 100

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.down_payment

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class RentYear:
    year: int
    monthly_rent: float
    annual_rent: float


@dataclass(frozen=True)
class ClosingCosts:
    """Itemised buyer closing costs, in currency."""

    mansion_tax: float
    mortgage_recording_tax: float
    title_insurance: float
    real_estate_attorney_fee: float
    bank_attorney_fee: float
    lender_fee: float
    recording_fee: float

    @property
    def total(self) -> float:
        return (
            self.mansion_tax
            + self.mortgage_recording_tax
            + self.title_insurance
            + self.real_estate_attorney_fee
            + self.bank_attorney_fee
            + self.lender_fee
            + self.recording_fee
        )


@dataclass(frozen=True)
class YearlyRow:
    year: int
    home_value: float
    mortgage_balance: float
    interest_paid: float
    tax_shield: float
    buy_outlay: float
    annual_rent: float
    net_house_wealth: float
    renter_portfolio: float
    cum_invested: float
    renter_exit_tax: float
    net_renter_wealth: float
    wealth_delta: float
    cash_flow_delta: float


@dataclass(frozen=True)
class SimulationResult:
    down_payment: float
    total_closing_costs: float
    loan_amount: float
    monthly_payment: float
    breakeven_year: Optional[int]
    precise_breakeven: Optional[float]
    rows: Tuple[YearlyRow, ...] = field(default_factory=tuple)

    @property
    def initial_outlay(self) -> float:
        return self.down_payment + self.total_closing_costs

    @property
    def final_row(self) -> Optional[YearlyRow]:
        return self.rows[-1] if self.rows else None

    @property
    def better_option(self) -> str:
        last = self.final_row
        if last is None or last.wealth_delta == 0:
            return "tie"
        if last.wealth_delta > 0:
            return "buying"
        return "renting"
