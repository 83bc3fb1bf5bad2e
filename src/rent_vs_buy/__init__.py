"""
Rent vs. Buy comparison toolkit.

This package projects year-by-year wealth for buying a home with a
mortgage versus renting and investing the difference, finds the year in
which buying pulls ahead, and solves for the price, rate or down payment
that would move that breakeven to a target year.
"""

from .breakeven import Breakeven, find_breakeven
from .model import closing_costs, compare_profiles, compare_scenario, simulate
from .optimizer import (
    OptimizationSummary,
    OptimizationVariable,
    find_optimized_value,
    optimize_profile,
    suggest_target_year,
)
from .rent import project_rent
from .schemas import (
    BuyProfile,
    ClosingCosts,
    GlobalSettings,
    InvalidInputError,
    RentSettings,
    RentYear,
    SimulationResult,
    YearlyRow,
)

__all__ = [
    "Breakeven",
    "BuyProfile",
    "ClosingCosts",
    "GlobalSettings",
    "InvalidInputError",
    "OptimizationSummary",
    "OptimizationVariable",
    "RentSettings",
    "RentYear",
    "SimulationResult",
    "YearlyRow",
    "closing_costs",
    "compare_profiles",
    "compare_scenario",
    "find_breakeven",
    "find_optimized_value",
    "optimize_profile",
    "project_rent",
    "simulate",
    "suggest_target_year",
]
