"""
Risk questionnaire scoring.

Six questions, each answered with a score from 1 (most cautious) to 4
(most aggressive). The total picks a profile, and the profile's allocation
can be used as the target allocation vector.
"""

from services.errors import ValidationError

QUESTION_COUNT = 6
ANSWER_SCORES = (1, 2, 3, 4)

RISK_PROFILES = {
    "conservative": {
        "profile": "Conservative",
        "min_score": 6,
        "max_score": 12,
        "recommendations": [
            "Focus on high-grade bonds and fixed-income securities",
            "Consider CDs and money market accounts for short-term goals",
            "Limit stock exposure to dividend-paying, established companies",
            "Maintain a larger emergency fund (6-12 months of expenses)",
            "Review and rebalance portfolio quarterly",
        ],
        "allocation": {"bonds": 60, "stocks": 25, "cash": 15},
    },
    "moderate": {
        "profile": "Moderate",
        "min_score": 13,
        "max_score": 18,
        "recommendations": [
            "Diversify across stocks, bonds, and other asset classes",
            "Consider index funds and ETFs for broad market exposure",
            "Include both domestic and international investments",
            "Rebalance portfolio semi-annually",
            "Consider dollar-cost averaging for regular investments",
        ],
        "allocation": {"stocks": 60, "bonds": 30, "alternatives": 10},
    },
    "aggressive": {
        "profile": "Aggressive",
        "min_score": 19,
        "max_score": 24,
        "recommendations": [
            "Focus heavily on growth stocks and equity investments",
            "Consider emerging markets and small-cap stocks",
            "Explore alternative investments like REITs or commodities",
            "Minimize bond allocation to maximize growth potential",
            "Take advantage of tax-advantaged retirement accounts",
        ],
        "allocation": {"stocks": 80, "alternatives": 15, "bonds": 5},
    },
}


def score_answers(answers) -> int:
    """Total score for a list of per-question answer scores."""
    if not isinstance(answers, (list, tuple)) or len(answers) != QUESTION_COUNT:
        raise ValidationError(
            f"Expected {QUESTION_COUNT} answers, got {answers!r}", field="answers"
        )
    for score in answers:
        if isinstance(score, bool) or score not in ANSWER_SCORES:
            raise ValidationError(
                f"Each answer must be one of {ANSWER_SCORES}, got {score!r}", field="answers"
            )
    return sum(answers)


def calculate_risk_profile(answers) -> dict:
    total = score_answers(answers)

    if total <= RISK_PROFILES["conservative"]["max_score"]:
        key = "conservative"
    elif total <= RISK_PROFILES["moderate"]["max_score"]:
        key = "moderate"
    else:
        key = "aggressive"

    profile = RISK_PROFILES[key]
    return {
        "key": key,
        "profile": profile["profile"],
        "score": total,
        "max_score": QUESTION_COUNT * max(ANSWER_SCORES),
        "recommendations": list(profile["recommendations"]),
        "allocation": dict(profile["allocation"]),
    }
