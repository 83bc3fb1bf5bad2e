"""Named constants used by the engine.

The tax figures are jurisdiction-specific defaults, not laws of the model;
callers override them through ``GlobalSettings``.
"""

# Ceiling on mortgage principal whose interest is deductible (US, post-2017).
MORTGAGE_INTEREST_DEDUCTION_LIMIT = 750_000.0

# Bisection steps used for price and rate searches.
OPTIMIZER_ITERATIONS = 20

# Down payment scan: 0, 5, ..., 100 percent.
DOWN_PAYMENT_SCAN_STEP = 5
DOWN_PAYMENT_SCAN_MAX = 100

# Breakeven horizon a profile should beat before we suggest tighter targets.
DEFAULT_BENCHMARK_YEAR = 6

SCENARIO_FORMAT = "rent-vs-buy-analysis-v2"

DEFAULT_PROFILE_ID = "buy_1"
DEFAULT_PROFILE_NAME = "Home 1"
