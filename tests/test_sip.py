from datetime import date
from types import SimpleNamespace

import pytest

from services.errors import ValidationError
from services.sip import (
    monthly_equivalent,
    next_investment_date,
    total_monthly_commitment,
    upcoming_investments,
)


def _sip(sip_id, amount, frequency, start, status="active", goal_id=None):
    return SimpleNamespace(
        id=sip_id, amount=amount, frequency=frequency, start_date=start,
        status=status, goal_id=goal_id,
    )


def test_monthly_equivalent_by_frequency() -> None:
    assert monthly_equivalent(100, "monthly") == 100
    assert monthly_equivalent(100, "weekly") == pytest.approx(433)
    assert monthly_equivalent(10, "daily") == 300


def test_monthly_equivalent_rejects_unknown_frequency() -> None:
    with pytest.raises(ValidationError):
        monthly_equivalent(100, "yearly")


def test_total_commitment_skips_paused_sips() -> None:
    sips = [
        _sip(1, 500, "monthly", date(2026, 1, 1)),
        _sip(2, 100, "weekly", date(2026, 1, 1)),
        _sip(3, 1000, "monthly", date(2026, 1, 1), status="paused"),
    ]
    assert total_monthly_commitment(sips) == 933.0


def test_next_investment_date(today) -> None:
    assert next_investment_date(date(2026, 11, 5), "monthly", today) == date(2026, 11, 5)
    assert next_investment_date(date(2026, 1, 5), "monthly", today) == date(2026, 11, 5)
    assert next_investment_date(date(2026, 1, 19), "monthly", today) == today
    assert next_investment_date(date(2026, 10, 1), "weekly", today) == date(2026, 10, 22)


def test_next_investment_date_keeps_month_end_anchor(today) -> None:
    assert next_investment_date(date(2026, 1, 31), "monthly", today) == date(2026, 10, 31)


def test_upcoming_investments_calendar(today) -> None:
    sips = [
        _sip(1, 500, "monthly", date(2026, 1, 25), goal_id=7),
        _sip(2, 50, "weekly", date(2026, 10, 1)),
        _sip(3, 999, "daily", date(2026, 1, 1), status="paused"),
    ]
    events = upcoming_investments(sips, today, days=14)
    assert [(e["date"], e["sip_id"]) for e in events] == [
        ("2026-10-22", 2),
        ("2026-10-25", 1),
        ("2026-10-29", 2),
    ]
    assert events[1]["goal_id"] == 7


def test_upcoming_investments_keep_month_end_anchor() -> None:
    sips = [_sip(1, 300, "monthly", date(2026, 1, 31))]
    events = upcoming_investments(sips, date(2026, 2, 20), days=45)
    assert [e["date"] for e in events] == ["2026-02-28", "2026-03-31"]
