"""
Goal projection engine.

Pure functions over a goal's target amount, current amount and target
date. A "month" is DAYS_PER_MONTH days when counting time remaining, and a
calendar month when stepping dates forward.
"""

import logging
import math
from datetime import date

from dateutil.relativedelta import relativedelta

from config import DAYS_PER_MONTH, MILESTONE_PERCENTAGES
from services.validation import require_date, require_number

LOGGER = logging.getLogger(__name__)

MILESTONE_TITLES = {
    25: "Quarter Way There",
    50: "Halfway Point",
    75: "Three Quarters Done",
    100: "Goal Achieved",
}


def _goal_field(goal, name: str):
    if isinstance(goal, dict):
        return goal.get(name)
    return getattr(goal, name, None)


def _goal_amounts(goal) -> tuple[float, float]:
    target = require_number(_goal_field(goal, "target_amount"), "target_amount", minimum=0, strict=True)
    current = require_number(_goal_field(goal, "current_amount"), "current_amount", minimum=0)
    return target, current


def months_remaining(target_date, now, days_per_month: float = DAYS_PER_MONTH) -> int:
    """Months until target_date, rounded up; 0 once the date has passed."""
    target_date = require_date(target_date, "target_date")
    now = require_date(now, "now")

    days = (target_date - now).days
    if days <= 0:
        return 0
    return math.ceil(days / days_per_month)


def required_monthly_contribution(target_amount, current_amount, target_date, now,
                                  days_per_month: float = DAYS_PER_MONTH) -> float:
    """
    Contribution per month needed to hit the target by target_date.

    Returns 0 when no months remain, even if the goal is unmet. Callers
    should read that as "due now", not "nothing to pay".
    """
    target_amount = require_number(target_amount, "target_amount", minimum=0, strict=True)
    current_amount = require_number(current_amount, "current_amount", minimum=0)

    months = months_remaining(target_date, now, days_per_month=days_per_month)
    if months == 0:
        return 0.0
    return max(0.0, (target_amount - current_amount) / months)


def projected_completion_date(target_amount, current_amount, monthly_contribution, now) -> date | None:
    """
    Date the goal is reached at a steady monthly contribution.

    Returns:
        now when the goal is already met, None when it can never be met
        (zero contribution), otherwise now plus the months needed.
    """
    target_amount = require_number(target_amount, "target_amount", minimum=0, strict=True)
    current_amount = require_number(current_amount, "current_amount", minimum=0)
    now = require_date(now, "now")

    if current_amount >= target_amount:
        return now

    monthly_contribution = require_number(monthly_contribution, "monthly_contribution", minimum=0)
    if monthly_contribution == 0:
        return None

    months_needed = math.ceil((target_amount - current_amount) / monthly_contribution)
    return now + relativedelta(months=months_needed)


def generate_projection(goal, monthly_contribution, now,
                        days_per_month: float = DAYS_PER_MONTH) -> list[dict]:
    """
    Month-by-month balance series from now through the target date.

    Returns:
        [
            {"date": "2026-10", "amount": 2500.0, "projected": False},
            {"date": "2026-11", "amount": 3000.0, "projected": True},
            ...
        ]

    Amounts keep growing past the target; they are not capped.
    """
    _, current = _goal_amounts(goal)
    monthly_contribution = require_number(monthly_contribution, "monthly_contribution", minimum=0)
    now = require_date(now, "now")

    months = months_remaining(_goal_field(goal, "target_date"), now, days_per_month=days_per_month)
    LOGGER.debug("Projecting %d months at %.2f/month", months, monthly_contribution)

    points = []
    for step in range(months + 1):
        point_date = now + relativedelta(months=step)
        points.append(
            {
                "date": point_date.strftime("%Y-%m"),
                "amount": round(current + monthly_contribution * step, 2),
                "projected": step > 0,
            }
        )
    return points


def progress_percentage(goal) -> float:
    target, current = _goal_amounts(goal)
    return current / target * 100


def remaining_amount(goal) -> float:
    target, current = _goal_amounts(goal)
    return max(0.0, target - current)


def milestones(goal, checkpoints=MILESTONE_PERCENTAGES) -> list[dict]:
    """Fixed progress checkpoints, in ascending order, flagged once reached."""
    progress = progress_percentage(goal)
    return [
        {
            "percentage": pct,
            "title": MILESTONE_TITLES.get(pct, f"{pct}% Complete"),
            "achieved": progress >= pct,
        }
        for pct in sorted(checkpoints)
    ]
