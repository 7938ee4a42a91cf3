"""
SIP schedule math: monthly commitment and upcoming investment dates.
"""

from datetime import timedelta

from dateutil.relativedelta import relativedelta

from config import SIP_FREQUENCY_MULTIPLIERS
from services.errors import ValidationError
from services.validation import require_date, require_number

_STEPS = {
    "monthly": relativedelta(months=1),
    "weekly": timedelta(weeks=1),
    "daily": timedelta(days=1),
}


def monthly_equivalent(amount, frequency: str) -> float:
    amount = require_number(amount, "amount", minimum=0)
    if frequency not in SIP_FREQUENCY_MULTIPLIERS:
        raise ValidationError(f"Unknown SIP frequency: {frequency!r}", field="frequency")
    return amount * SIP_FREQUENCY_MULTIPLIERS[frequency]


def total_monthly_commitment(sips) -> float:
    """Sum of monthly equivalents over active SIPs; paused ones are skipped."""
    return round(
        sum(monthly_equivalent(s.amount, s.frequency) for s in sips if s.status == "active"),
        2,
    )


def next_investment_date(start_date, frequency: str, today):
    """First scheduled date on or after today."""
    start_date = require_date(start_date, "start_date")
    today = require_date(today, "today")
    if frequency not in _STEPS:
        raise ValidationError(f"Unknown SIP frequency: {frequency!r}", field="frequency")

    return _next_occurrence(start_date, frequency, today)[1]


def _next_occurrence(start_date, frequency: str, today):
    """(step index, date) of the first occurrence on or after today."""
    # Step from the start date so month-end anchors are not lost
    n = 0
    candidate = start_date
    while candidate < today:
        n += 1
        candidate = start_date + _STEPS[frequency] * n
    return n, candidate


def upcoming_investments(sips, today, days: int = 30) -> list[dict]:
    """
    Calendar of active SIP investments falling in [today, today + days].

    Returns:
        [{"date": "2026-11-01", "sip_id": 3, "goal_id": 1, "amount": 500.0}, ...]
    """
    today = require_date(today, "today")
    end = today + timedelta(days=days)

    events = []
    for sip in sips:
        if sip.status != "active":
            continue
        step = _STEPS[sip.frequency]
        start_date = require_date(sip.start_date, "start_date")
        n, occurrence = _next_occurrence(start_date, sip.frequency, today)
        while occurrence <= end:
            events.append(
                {
                    "date": occurrence.isoformat(),
                    "sip_id": sip.id,
                    "goal_id": sip.goal_id,
                    "amount": sip.amount,
                }
            )
            n += 1
            occurrence = start_date + step * n

    events.sort(key=lambda e: (e["date"], e["sip_id"] or 0))
    return events
