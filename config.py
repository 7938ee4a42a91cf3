"""
Planner policy constants.

Every value can be overridden from the environment (or a .env file);
engine functions take these as keyword defaults so callers and tests can
pass their own.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _as_float(value, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_bool(value, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# ── Goal projection ──────────────────────────────────────────────────────

DAYS_PER_MONTH = _as_float(os.environ.get("DAYS_PER_MONTH"), 30.44)
MILESTONE_PERCENTAGES = (25, 50, 75, 100)

# ── Drift / rebalancing ──────────────────────────────────────────────────

DRIFT_THRESHOLD_PCT = _as_float(os.environ.get("DRIFT_THRESHOLD_PCT"), 5.0)
TRANSACTION_FEE_RATE = _as_float(os.environ.get("TRANSACTION_FEE_RATE"), 0.001)  # 0.1%
REBALANCE_TIMEFRAME = os.environ.get("REBALANCE_TIMEFRAME", "2-3 business days")
SETTLEMENT_DAYS = 3
MIN_TRANSACTION_AMOUNT = _as_float(os.environ.get("MIN_TRANSACTION_AMOUNT"), 1000.0)
REBALANCING_FREQUENCY = os.environ.get("REBALANCING_FREQUENCY", "quarterly")
AUTO_REBALANCING = _as_bool(os.environ.get("AUTO_REBALANCING"), False)
NOTIFICATIONS_ENABLED = _as_bool(os.environ.get("NOTIFICATIONS_ENABLED"), True)

DEFAULT_TARGET_ALLOCATION = {
    "stocks": 65,
    "bonds": 25,
    "cash": 7,
    "alternatives": 3,
}

EXECUTION_STEPS = [
    "Review and approve rebalancing plan",
    "Execute sell orders for overweight assets",
    "Wait for settlement (T+2)",
    "Execute buy orders for underweight assets",
    "Monitor and confirm new allocation",
]

# ── SIP schedule ─────────────────────────────────────────────────────────

# Monthly multiplier per contribution frequency
SIP_FREQUENCY_MULTIPLIERS = {
    "monthly": 1,
    "weekly": 4.33,
    "daily": 30,
}
