import pytest

from rent_vs_buy import BuyProfile, GlobalSettings, RentSettings


@pytest.fixture
def settings() -> GlobalSettings:
    return GlobalSettings()


@pytest.fixture
def rent_settings() -> RentSettings:
    return RentSettings()


@pytest.fixture
def profile() -> BuyProfile:
    """The calculator's stock profile: $1.85M at 6.3% with NYC closing costs."""
    return BuyProfile(id="buy_1", name="Home 1")


def bare_profile(**overrides) -> BuyProfile:
    """A $300K purchase with every cost, fee and growth rate zeroed."""
    values = dict(
        id="bare",
        purchase_price=300_000.0,
        down_payment_pct=20.0,
        interest_rate=0.0,
        mortgage_term=30,
        home_appreciation=0.0,
        hoa_insurance_monthly=0.0,
        annual_property_tax=0.0,
        prop_tax_growth=0.0,
        mansion_tax_pct=0.0,
        mortgage_recording_tax_pct=0.0,
        title_insurance_pct=0.0,
        real_estate_attorney_fee=0.0,
        bank_attorney_fee=0.0,
        lender_fee=0.0,
        recording_fee=0.0,
        seller_commission_pct=0.0,
        transfer_tax_pct=0.0,
        capital_gains_exclusion=0.0,
        maintenance_pct=0.0,
    )
    values.update(overrides)
    return BuyProfile(**values)


@pytest.fixture
def zero_rate_profile() -> BuyProfile:
    return bare_profile()


@pytest.fixture
def no_rent() -> RentSettings:
    return RentSettings(monthly_rent=0.0, annual_rent_increase=0.0)


@pytest.fixture
def make_profile():
    return bare_profile
