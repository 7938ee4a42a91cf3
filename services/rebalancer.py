"""
Rebalancing engine.

Given holdings and a drift analysis, compute the current allocation and
synthesize the trades needed to get back to target.
"""

import copy
import logging
import uuid
from datetime import datetime, timedelta, timezone

from config import (
    EXECUTION_STEPS,
    REBALANCE_TIMEFRAME,
    SETTLEMENT_DAYS,
    TRANSACTION_FEE_RATE,
)
from services.errors import ValidationError
from services.validation import require_number

LOGGER = logging.getLogger(__name__)

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

ASSESSMENT_FIELDS = ("needs_rebalancing", "assets", "recommendations")
RECOMMENDATION_FIELDS = ("asset", "action", "amount", "priority", "description")


def _require_fields(record, fields, name: str):
    if not isinstance(record, dict):
        raise ValidationError(f"{name} must be an object, got {record!r}", field=name)
    missing = [f for f in fields if f not in record]
    if missing:
        raise ValidationError(f"{name} is missing {', '.join(missing)}", field=f"{name}.{missing[0]}")


def _check_assessment(assessment):
    _require_fields(assessment, ASSESSMENT_FIELDS, "assessment")
    for key in ("assets", "recommendations"):
        if not isinstance(assessment[key], list):
            raise ValidationError(f"assessment.{key} must be a list", field=f"assessment.{key}")
    for rec in assessment["recommendations"]:
        _require_fields(rec, RECOMMENDATION_FIELDS, "recommendation")
        if rec["priority"] not in PRIORITY_ORDER:
            raise ValidationError(
                f"recommendation.priority must be one of {list(PRIORITY_ORDER)}",
                field="recommendation.priority",
            )
        require_number(rec["amount"], "recommendation.amount", minimum=0)


def compute_allocation(holdings) -> dict:
    """
    Aggregate holdings into an allocation vector by asset class.

    Returns:
        {
            "total_value": 100000,
            "allocation": {"stocks": 80.0, "bonds": 10.0, "cash": 10.0},
            "by_asset": {"stocks": {"value": 80000, "pct": 80.0}, ...},
        }
    """
    totals = {}
    for h in holdings:
        value = require_number(h.value, f"{h.ticker}.value", minimum=0)
        totals[h.asset_class] = totals.get(h.asset_class, 0) + value

    total_value = sum(totals.values())
    if total_value == 0:
        return {"total_value": 0, "allocation": {}, "by_asset": {}}

    by_asset = {
        k: {"value": round(v, 2), "pct": round(v / total_value * 100, 2)}
        for k, v in sorted(totals.items(), key=lambda x: -x[1])
    }
    return {
        "total_value": round(total_value, 2),
        "allocation": {k: info["pct"] for k, info in by_asset.items()},
        "by_asset": by_asset,
    }


def build_plan(assessment: dict, fee_rate: float = TRANSACTION_FEE_RATE,
               timeframe: str = REBALANCE_TIMEFRAME) -> dict:
    """
    Turn a drift analysis into a rebalancing plan.

    Transactions are ordered by priority (high first), then asset key.
    Fees are a flat fee_rate of each trade amount.
    """
    fee_rate = require_number(fee_rate, "fee_rate", minimum=0)
    _check_assessment(assessment)
    snapshot = copy.deepcopy(assessment)

    if not assessment["needs_rebalancing"]:
        return {
            "needs_rebalancing": False,
            "message": "Portfolio is well-balanced within target ranges",
            "analysis": snapshot,
            "transactions": [],
        }

    transactions = []
    for rec in assessment["recommendations"]:
        transactions.append(
            {
                "asset": rec["asset"],
                "action": rec["action"],
                "amount": rec["amount"],
                "estimated_fee": round(rec["amount"] * fee_rate, 2),
                "priority": rec["priority"],
                "description": rec["description"],
            }
        )
    transactions.sort(key=lambda t: (PRIORITY_ORDER[t["priority"]], t["asset"]))

    fees = round(sum(t["estimated_fee"] for t in transactions), 2)
    return {
        "needs_rebalancing": True,
        "analysis": snapshot,
        "transactions": transactions,
        "estimated_costs": {
            "transaction_fees": fees,
            "tax_implications": 0,
            "total": fees,
        },
        "execution_steps": list(EXECUTION_STEPS),
        "timeframe": timeframe,
    }


def summarize_plan(plan: dict) -> str:
    """Human-readable one-liner, e.g. "Sell $15,000 of stocks; Buy $15,000 of bonds"."""
    actions = []
    for t in plan["transactions"]:
        verb = "Sell" if t["action"] == "sell" else "Buy"
        actions.append(f"{verb} ${t['amount']:,.0f} of {t['asset']}")
    return "; ".join(actions) if actions else "Portfolio is balanced!"


def rebalancing_alerts(assessment: dict, created_at: datetime | None = None) -> list[dict]:
    """Critical alert for high-severity drift, warning for medium."""
    _require_fields(assessment, ("needs_rebalancing", "assets"), "assessment")
    if not assessment["needs_rebalancing"]:
        return []

    created_at = (created_at or datetime.now(timezone.utc)).isoformat()
    high = [a["asset"] for a in assessment["assets"] if a["severity"] == "high"]
    medium = [a["asset"] for a in assessment["assets"] if a["severity"] == "medium"]

    alerts = []
    if high:
        alerts.append(
            {
                "id": 1,
                "type": "critical",
                "title": "Critical Portfolio Drift Detected",
                "message": f"{len(high)} asset class(es) significantly out of balance",
                "assets": high,
                "recommended_action": "immediate_rebalancing",
                "created_at": created_at,
            }
        )
    if medium:
        alerts.append(
            {
                "id": 2,
                "type": "warning",
                "title": "Portfolio Rebalancing Recommended",
                "message": f"{len(medium)} asset class(es) approaching drift threshold",
                "assets": medium,
                "recommended_action": "schedule_rebalancing",
                "created_at": created_at,
            }
        )
    return alerts


def execute_plan(plan: dict, now: datetime | None = None) -> dict:
    """
    Simulate placing the plan's orders.

    No trades are sent anywhere; every transaction comes back pending with
    a generated order id.
    """
    _require_fields(plan, ("needs_rebalancing", "transactions"), "plan")
    if not plan["needs_rebalancing"] or not plan["transactions"]:
        raise ValidationError("Plan has no transactions to execute", field="transactions")
    _require_fields(plan, ("estimated_costs",), "plan")
    _require_fields(plan["estimated_costs"], ("total",), "plan.estimated_costs")
    for t in plan["transactions"]:
        _require_fields(t, ("asset", "action", "amount"), "transaction")

    now = now or datetime.now(timezone.utc)
    execution_id = f"RB_{int(now.timestamp() * 1000)}"
    result = {
        "success": True,
        "execution_id": execution_id,
        "start_time": now.isoformat(),
        "estimated_completion": (now + timedelta(days=SETTLEMENT_DAYS)).isoformat(),
        "transactions": [
            {**t, "status": "pending", "order_id": f"ORD_{uuid.uuid4().hex[:9]}"}
            for t in plan["transactions"]
        ],
        "total_cost": plan["estimated_costs"]["total"],
    }
    LOGGER.info(
        "Simulated rebalance %s with %d orders", execution_id, len(result["transactions"])
    )
    return result
