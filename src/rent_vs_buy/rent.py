from __future__ import annotations

from typing import Tuple

from .schemas import RentSettings, RentYear


def project_rent(settings: RentSettings, years: int) -> Tuple[RentYear, ...]:
    """Rent for years 1..``years``, escalating once per year."""
    if years < 1:
        raise ValueError("years must be at least 1")
    growth = settings.annual_rent_increase / 100.0
    stream = []
    for year in range(1, years + 1):
        monthly = settings.monthly_rent * (1 + growth) ** (year - 1)
        stream.append(RentYear(year=year, monthly_rent=monthly, annual_rent=monthly * 12))
    return tuple(stream)
