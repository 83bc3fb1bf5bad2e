"""
Inverse solver: which price, rate or down payment hits a target breakeven?

Price and rate searches assume that lowering the value never delays the
breakeven. That holds for typical inputs but is not guaranteed (large
maintenance percentages, or appreciation above the investment return, can
break it); in those cases the bisection result is best effort.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from .config import (
    DEFAULT_BENCHMARK_YEAR,
    DOWN_PAYMENT_SCAN_MAX,
    DOWN_PAYMENT_SCAN_STEP,
    OPTIMIZER_ITERATIONS,
)
from .model import simulate
from .rent import project_rent
from .schemas import BuyProfile, GlobalSettings, RentSettings, RentYear

logger = logging.getLogger(__name__)


class OptimizationVariable(str, Enum):
    PRICE = "price"
    RATE = "rate"
    DOWN_PAYMENT = "downpayment"

    @property
    def field_name(self) -> str:
        return _PROFILE_FIELDS[self]


_PROFILE_FIELDS = {
    OptimizationVariable.PRICE: "purchase_price",
    OptimizationVariable.RATE: "interest_rate",
    OptimizationVariable.DOWN_PAYMENT: "down_payment_pct",
}


@dataclass(frozen=True)
class OptimizationSummary:
    profile_id: str
    breakeven_year: Optional[int]
    precise_breakeven: Optional[float]
    target_year: int
    price: Optional[float] = None
    rate: Optional[float] = None
    down_payment_pct: Optional[float] = None
    solved: bool = False

    @property
    def already_optimal(self) -> bool:
        return self.breakeven_year == 1


def find_optimized_value(
    target_year: int,
    variable: Union[OptimizationVariable, str],
    profile: BuyProfile,
    settings: GlobalSettings,
    rent_settings: RentSettings,
) -> Optional[float]:
    """
    Value of ``variable`` for which the breakeven lands in ``target_year`` or earlier.

    Everything else in ``profile`` is held fixed. Returns ``None`` when no
    probed value reaches the target.
    """
    if target_year < 1:
        raise ValueError("target_year must be at least 1")
    variable = OptimizationVariable(variable)
    rent_stream = project_rent(rent_settings, settings.forecast_years)
    meets_target = _target_check(target_year, variable, profile, settings, rent_stream)

    if variable is OptimizationVariable.DOWN_PAYMENT:
        return _scan_down_payment(meets_target)

    current = float(getattr(profile, variable.field_name))
    return _bisect_lower(meets_target, current)


def suggest_target_year(
    current_breakeven: Optional[int],
    benchmark_year: int = DEFAULT_BENCHMARK_YEAR,
) -> int:
    """Benchmark year if the profile misses it, else one year sooner than today."""
    if current_breakeven is None or current_breakeven > benchmark_year:
        return benchmark_year
    return max(1, current_breakeven - 1)


def optimize_profile(
    profile: BuyProfile,
    settings: GlobalSettings,
    rent_settings: RentSettings,
    target_year: Optional[int] = None,
    benchmark_year: int = DEFAULT_BENCHMARK_YEAR,
) -> OptimizationSummary:
    rent_stream = project_rent(rent_settings, settings.forecast_years)
    current = simulate(profile, settings, rent_stream)
    suggested = target_year is None
    if suggested:
        target_year = suggest_target_year(current.breakeven_year, benchmark_year)

    summary = OptimizationSummary(
        profile_id=profile.id,
        breakeven_year=current.breakeven_year,
        precise_breakeven=current.precise_breakeven,
        target_year=target_year,
    )
    # A suggested target of year 1 leaves nothing to improve.
    if suggested and summary.already_optimal:
        return summary

    return dataclasses.replace(
        summary,
        solved=True,
        price=find_optimized_value(
            target_year, OptimizationVariable.PRICE, profile, settings, rent_settings
        ),
        rate=find_optimized_value(
            target_year, OptimizationVariable.RATE, profile, settings, rent_settings
        ),
        down_payment_pct=find_optimized_value(
            target_year, OptimizationVariable.DOWN_PAYMENT, profile, settings, rent_settings
        ),
    )


def _target_check(
    target_year: int,
    variable: OptimizationVariable,
    profile: BuyProfile,
    settings: GlobalSettings,
    rent_stream: Sequence[RentYear],
) -> Callable[[float], bool]:
    def meets_target(value: float) -> bool:
        candidate = dataclasses.replace(profile, **{variable.field_name: value})
        breakeven = simulate(candidate, settings, rent_stream).breakeven_year
        logger.debug("%s=%.6g -> breakeven %s", variable.value, value, breakeven)
        return breakeven is not None and breakeven <= target_year

    return meets_target


def _scan_down_payment(meets_target: Callable[[float], bool]) -> Optional[float]:
    for pct in range(0, DOWN_PAYMENT_SCAN_MAX + 1, DOWN_PAYMENT_SCAN_STEP):
        if meets_target(float(pct)):
            return float(pct)
    return None


def _bisect_lower(
    meets_target: Callable[[float], bool], current: float
) -> Optional[float]:
    """Largest value in [0, current] found to meet the target."""
    if meets_target(current):
        return current

    low, high = 0.0, current
    best: Optional[float] = None
    for _ in range(OPTIMIZER_ITERATIONS):
        mid = (low + high) / 2
        if meets_target(mid):
            best = mid
            low = mid
        else:
            high = mid
    return best
