from datetime import date

import pytest

from services.errors import ValidationError
from services.projection import (
    generate_projection,
    milestones,
    months_remaining,
    progress_percentage,
    projected_completion_date,
    remaining_amount,
    required_monthly_contribution,
)


def test_months_remaining_rounds_partial_months_up(today) -> None:
    assert months_remaining(date(2026, 11, 18), today) == 1  # 30 days
    assert months_remaining(date(2026, 11, 19), today) == 2  # 31 days
    assert months_remaining(date(2027, 10, 19), today) == 12


def test_months_remaining_is_zero_for_past_or_same_day(today) -> None:
    assert months_remaining(date(2020, 1, 1), today) == 0
    assert months_remaining(today, today) == 0


def test_months_remaining_accepts_iso_strings_and_datetimes(today) -> None:
    assert months_remaining("2027-10-19", "2026-10-19T09:30:00") == 12


def test_months_remaining_rejects_garbage_dates(today) -> None:
    with pytest.raises(ValidationError):
        months_remaining("next spring", today)
    with pytest.raises(ValidationError):
        months_remaining(None, today)


def test_required_monthly_contribution_twelve_month_goal(today) -> None:
    assert required_monthly_contribution(12000, 0, date(2027, 10, 19), today) == 1000


def test_required_monthly_contribution_past_target_is_zero(today) -> None:
    assert required_monthly_contribution(12000, 500, date(2025, 1, 1), today) == 0


def test_required_monthly_contribution_never_negative(today) -> None:
    assert required_monthly_contribution(1000, 5000, date(2027, 10, 19), today) == 0


def test_required_monthly_contribution_validates_amounts(today) -> None:
    with pytest.raises(ValidationError):
        required_monthly_contribution(0, 0, date(2027, 10, 19), today)
    with pytest.raises(ValidationError):
        required_monthly_contribution(1000, -1, date(2027, 10, 19), today)


def test_projected_completion_date_steps_calendar_months(today) -> None:
    assert projected_completion_date(10000, 4000, 1000, today) == date(2027, 4, 19)
    assert projected_completion_date(10000, 4000, 1500, today) == date(2027, 2, 19)


def test_projected_completion_date_goal_met_returns_now(today) -> None:
    assert projected_completion_date(10000, 10000, 0, today) == today
    assert projected_completion_date(10000, 12000, 250, today) == today


def test_projected_completion_date_without_contribution_is_none(today) -> None:
    assert projected_completion_date(10000, 4000, 0, today) is None


def test_projected_completion_date_rejects_negative_contribution(today) -> None:
    with pytest.raises(ValidationError):
        projected_completion_date(10000, 4000, -100, today)


def test_projected_completion_date_is_monotonic_in_contribution(today) -> None:
    dates = [projected_completion_date(50000, 1000, m, today) for m in (100, 250, 999, 1000, 5000, 60000)]
    assert dates == sorted(dates, reverse=True)


def test_generate_projection_series(today) -> None:
    goal = {"target_amount": 5000, "current_amount": 1000, "target_date": date(2027, 1, 19)}
    points = generate_projection(goal, 500, today)

    assert [p["date"] for p in points] == ["2026-10", "2026-11", "2026-12", "2027-01", "2027-02"]
    assert [p["amount"] for p in points] == [1000, 1500, 2000, 2500, 3000]
    assert points[0]["projected"] is False
    assert all(p["projected"] for p in points[1:])


def test_generate_projection_is_not_capped_at_target(today) -> None:
    goal = {"target_amount": 5000, "current_amount": 1000, "target_date": date(2027, 1, 19)}
    points = generate_projection(goal, 2000, today)
    assert points[-1]["amount"] == 9000


def test_generate_projection_past_target_has_only_current_point(today) -> None:
    goal = {"target_amount": 5000, "current_amount": 1000, "target_date": date(2026, 1, 1)}
    assert generate_projection(goal, 500, today) == [
        {"date": "2026-10", "amount": 1000, "projected": False}
    ]


def test_generate_projection_is_repeatable(today) -> None:
    goal = {"target_amount": 24000, "current_amount": 3000, "target_date": "2028-06-30"}
    assert generate_projection(goal, 750, today) == generate_projection(goal, 750, today)


def test_generate_projection_rejects_missing_fields(today) -> None:
    with pytest.raises(ValidationError):
        generate_projection({"current_amount": 10, "target_date": "2027-01-01"}, 100, today)


def test_milestones_all_achieved_when_goal_met(today) -> None:
    goal = {"target_amount": 10000, "current_amount": 10000, "target_date": date(2027, 1, 1)}
    result = milestones(goal)
    assert [m["percentage"] for m in result] == [25, 50, 75, 100]
    assert all(m["achieved"] for m in result)
    assert projected_completion_date(10000, 10000, 0, today) == today


def test_milestones_partial_progress() -> None:
    goal = {"target_amount": 10000, "current_amount": 5000, "target_date": date(2027, 1, 1)}
    assert [m["achieved"] for m in milestones(goal)] == [True, True, False, False]


def test_progress_and_remaining_amount() -> None:
    goal = {"target_amount": 8000, "current_amount": 2000, "target_date": date(2027, 1, 1)}
    assert progress_percentage(goal) == 25
    assert remaining_amount(goal) == 6000
    goal["current_amount"] = 9000
    assert remaining_amount(goal) == 0
