import pytest

from services.errors import ValidationError
from services.risk_profile import calculate_risk_profile


@pytest.mark.parametrize(
    "answers, expected",
    [
        ([1, 1, 1, 1, 1, 1], "Conservative"),
        ([2, 2, 2, 2, 2, 2], "Conservative"),
        ([2, 2, 2, 2, 2, 3], "Moderate"),
        ([3, 3, 3, 3, 3, 3], "Moderate"),
        ([4, 3, 3, 3, 3, 3], "Aggressive"),
        ([4, 4, 4, 4, 4, 4], "Aggressive"),
    ],
)
def test_score_bands(answers, expected) -> None:
    result = calculate_risk_profile(answers)
    assert result["profile"] == expected
    assert result["score"] == sum(answers)
    assert result["max_score"] == 24


def test_profile_allocation_sums_to_100() -> None:
    for answers in ([1] * 6, [3] * 6, [4] * 6):
        assert sum(calculate_risk_profile(answers)["allocation"].values()) == 100


@pytest.mark.parametrize("answers", [[1, 2, 3], [0, 1, 1, 1, 1, 1], [5, 4, 4, 4, 4, 4], None, [True] * 6])
def test_invalid_answers(answers) -> None:
    with pytest.raises(ValidationError):
        calculate_risk_profile(answers)
