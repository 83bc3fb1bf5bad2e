from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from .schemas import YearlyRow


class Breakeven(NamedTuple):
    year: Optional[int]
    precise: Optional[float]


NO_BREAKEVEN = Breakeven(None, None)


def find_breakeven(rows: Sequence[YearlyRow], initial_deficit: float) -> Breakeven:
    """
    Locate the first year in which owning is at least as wealthy as renting.

    ``precise`` interpolates linearly between the previous year's wealth
    delta and the crossing year's. Before year 1 the delta is taken to be
    ``-initial_deficit``, the cash the buyer has sunk into the purchase.
    """
    for index, row in enumerate(rows):
        if row.wealth_delta >= 0:
            prev_delta = rows[index - 1].wealth_delta if index > 0 else -initial_deficit
            span = row.wealth_delta - prev_delta
            fraction = abs(prev_delta) / span if span != 0 else 0.0
            return Breakeven(row.year, index + fraction)
    return NO_BREAKEVEN
