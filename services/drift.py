"""
Portfolio drift analyzer.

Compares current allocation percentages against targets, classifies how
far each asset class has drifted and whether the portfolio needs a
rebalance.
"""

import logging

from config import DRIFT_THRESHOLD_PCT
from services.validation import require_allocation, require_number

LOGGER = logging.getLogger(__name__)


def classify_severity(drift: float, threshold: float) -> str:
    if drift > threshold * 2:
        return "high"
    if drift > threshold:
        return "medium"
    return "low"


def analyze_drift(current_allocation: dict, target_allocation: dict,
                  total_value: float, threshold: float = DRIFT_THRESHOLD_PCT) -> dict:
    """
    Analyze allocation drift against the target.

    Args:
        current_allocation: {"stocks": 80, "bonds": 10, ...} in percent
        target_allocation: same shape; keys missing on either side count as 0
        total_value: portfolio value used to size buy/sell amounts
        threshold: drift (percentage points) above which an asset needs action

    Returns:
        {
            "total_value": 100000,
            "drift_threshold": 5,
            "overall_drift": 10.0,
            "needs_rebalancing": True,
            "risk_level": "medium",
            "assets": [
                {
                    "asset": "stocks",
                    "current": 80.0,
                    "target": 65.0,
                    "drift": 15.0,
                    "direction": "overweight",
                    "drift_percentage": 23.08,
                    "severity": "high",
                    "needs_action": True,
                    "recommended_action": "sell",
                    "recommended_amount": 15000.0,
                },
                ...
            ],
            "recommendations": [...]
        }
    """
    current = require_allocation(current_allocation, "current_allocation")
    target = require_allocation(target_allocation, "target_allocation")
    total_value = require_number(total_value, "total_value", minimum=0)
    threshold = require_number(threshold, "threshold", minimum=0)

    assets = []
    for asset in sorted(set(current) | set(target)):
        current_pct = current.get(asset, 0.0)
        target_pct = target.get(asset, 0.0)
        drift = abs(current_pct - target_pct)
        needs_action = drift > threshold

        item = {
            "asset": asset,
            "current": current_pct,
            "target": target_pct,
            "drift": drift,
            "direction": "overweight" if current_pct > target_pct else "underweight",
            "drift_percentage": round(drift / target_pct * 100, 2) if target_pct > 0 else 0.0,
            "severity": classify_severity(drift, threshold),
            "needs_action": needs_action,
            "recommended_action": "none",
            "recommended_amount": 0.0,
        }

        if needs_action:
            target_value = target_pct / 100 * total_value
            current_value = current_pct / 100 * total_value
            difference = target_value - current_value
            item["recommended_action"] = "buy" if difference > 0 else "sell"
            item["recommended_amount"] = round(abs(difference), 2)

        assets.append(item)

    overall_drift = sum(a["drift"] for a in assets) / len(assets) if assets else 0.0
    needs_rebalancing = any(a["needs_action"] for a in assets)

    LOGGER.debug(
        "Drift analysis: %d assets, overall %.2f, threshold %.2f",
        len(assets), overall_drift, threshold,
    )

    return {
        "total_value": total_value,
        "drift_threshold": threshold,
        "overall_drift": overall_drift,
        "needs_rebalancing": needs_rebalancing,
        "risk_level": classify_severity(overall_drift, threshold),
        "assets": assets,
        "recommendations": [_recommendation(a) for a in assets if a["needs_action"]],
    }


def _recommendation(item: dict) -> dict:
    verb = "Increase" if item["recommended_action"] == "buy" else "Decrease"
    return {
        "asset": item["asset"],
        "action": item["recommended_action"],
        "amount": item["recommended_amount"],
        "current_allocation": item["current"],
        "target_allocation": item["target"],
        "priority": item["severity"],
        "description": (
            f"{verb} {item['asset']} allocation by {item['drift']:.1f}% to reach target"
        ),
    }
