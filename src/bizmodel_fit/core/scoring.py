"""Deterministic business-model fit scoring.

Scores a business model against a user's quiz answers as a weighted sum of
ten factors, each comparing one answer with the model's sweet-spot band.
This is the fallback whenever AI analysis is unavailable, so its output has
to be stable: same answers, same scores, same order.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Optional

from .catalog import BUSINESS_MODELS, CALL_HEAVY_MODELS, get_fit_profile
from .models import BusinessModel, QuizAnswers, ScoredBusinessModel

logger = logging.getLogger(__name__)

# Iteration order matters: scores are summed in this order.
WEIGHTS: dict[str, float] = {
    "income": 0.15,
    "timeline": 0.12,
    "budget": 0.10,
    "skills": 0.15,
    "communication": 0.12,
    "creativity": 0.10,
    "risk": 0.10,
    "time_commitment": 0.08,
    "motivation": 0.05,
    "work_style": 0.03,
}

NEUTRAL_FACTOR = 0.5
CLIENT_CALLS_PENALTY = 20

DEFAULT_INCOME_GOAL = 1000
DEFAULT_TIMELINE = "3-6-months"
DEFAULT_BUDGET = 0
DEFAULT_WEEKLY_HOURS = 20
DEFAULT_RATING = 3


def _first_present(current: Any, legacy: Any, default: Any) -> Any:
    if current is not None:
        return current
    if legacy is not None:
        return legacy
    return default


def resolve_answers(answers: QuizAnswers) -> dict[str, Any]:
    """Resolve the answers that exist under both a current and a legacy name."""
    return {
        "income_goal": _first_present(answers.success_income_goal, answers.income_goal, DEFAULT_INCOME_GOAL),
        "timeline": _first_present(answers.first_income_timeline, answers.time_to_first_income, DEFAULT_TIMELINE),
        "budget": _first_present(answers.upfront_investment, answers.startup_budget, DEFAULT_BUDGET),
        "weekly_hours": _first_present(answers.weekly_time_commitment, answers.time_commitment, DEFAULT_WEEKLY_HOURS),
        "tech_skills": _first_present(answers.tech_skills_rating, answers.technology_comfort, DEFAULT_RATING),
        "self_motivation": _first_present(answers.self_motivation_level, answers.self_motivation, DEFAULT_RATING),
        "risk_tolerance": _first_present(answers.risk_comfort_level, answers.risk_tolerance, DEFAULT_RATING),
    }


# ─── Factor matchers ─────────────────────────────────────────────────────────
# Each falloff outside the band is tuned per factor; keep them as they are.


def income_match(actual: float, low: float, high: float) -> float:
    if low <= actual <= high:
        return 1.0
    if actual < low:
        return max(0.0, 1 - (low - actual) / low)
    return max(0.0, 1 - (actual - high) / high)


def budget_match(actual: float, low: float, high: float) -> float:
    if low <= actual <= high:
        return 1.0
    if actual < low:
        return max(0.0, 1 - (low - actual) / (low + 1))
    return max(0.0, 1 - (actual - high) / (high + 1000))


def skills_match(actual: float, low: float, high: float) -> float:
    if low <= actual <= high:
        return 1.0
    if actual < low:
        return max(0.0, actual / low)
    return max(0.8, 1 - (actual - high) / 2)


def optional_rating_match(actual: Optional[float], low: float, high: float) -> float:
    """Communication and creativity: an unanswered rating is neutral."""
    if not actual:
        return NEUTRAL_FACTOR
    return skills_match(actual, low, high)


def risk_match(actual: float, low: float, high: float) -> float:
    if low <= actual <= high:
        return 1.0
    if actual < low:
        return max(0.0, actual / low)
    return max(0.7, 1 - (actual - high) / 2)


def time_match(actual: float, low: float, high: float) -> float:
    if low <= actual <= high:
        return 1.0
    if actual < low:
        return max(0.0, actual / low)
    return max(0.8, 1 - (actual - high) / high)


def motivation_match(actual: float, low: float, high: float) -> float:
    if actual < low:
        return max(0.0, actual / low)
    return 1.0


def timeline_match(actual: str, accepted: Iterable[str]) -> float:
    return 1.0 if actual in accepted else 0.3


def work_style_match(actual: Optional[str], accepted: Iterable[str]) -> float:
    if not actual:
        return NEUTRAL_FACTOR
    return 1.0 if actual in accepted else 0.5


def compute_factors(business_id: str, answers: QuizAnswers) -> dict[str, float]:
    """Score each of the ten factors in [0, 1] for one business model."""
    profile = get_fit_profile(business_id)
    if profile is None:
        return {name: NEUTRAL_FACTOR for name in WEIGHTS}

    r = resolve_answers(answers)
    communication = getattr(answers, profile["communication_field"])

    return {
        "income": income_match(r["income_goal"], *profile["income"]),
        "timeline": timeline_match(r["timeline"], profile["timeline"]),
        "budget": budget_match(r["budget"], *profile["budget"]),
        "skills": skills_match(r["tech_skills"], *profile["skills"]),
        "communication": optional_rating_match(communication, *profile["communication"]),
        "creativity": optional_rating_match(answers.creative_work_enjoyment, *profile["creativity"]),
        "risk": risk_match(r["risk_tolerance"], *profile["risk"]),
        "time_commitment": time_match(r["weekly_hours"], *profile["time_commitment"]),
        "motivation": motivation_match(r["self_motivation"], *profile["motivation"]),
        "work_style": work_style_match(answers.work_collaboration_preference, profile["work_style"]),
    }


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_fit_score(business_id: str, answers: QuizAnswers) -> int:
    """Fit score in [0, 100] for one business model."""
    factors = compute_factors(business_id, answers)

    score = 0.0
    for name, weight in WEIGHTS.items():
        score += factors[name] * weight * 100

    if answers.client_calls_comfort == "no" and business_id in CALL_HEAVY_MODELS:
        score -= CLIENT_CALLS_PENALTY

    return min(max(_round_half_up(score), 0), 100)


def score_business_model(model: BusinessModel, answers: QuizAnswers) -> ScoredBusinessModel:
    return ScoredBusinessModel(**model.model_dump(), fit_score=calculate_fit_score(model.id, answers))


def generate_personalized_paths(
    answers: QuizAnswers,
    catalog: Iterable[BusinessModel] = BUSINESS_MODELS,
) -> list[ScoredBusinessModel]:
    """Score every catalog entry and rank best fit first.

    sorted() is stable, so equal scores keep catalog order.
    """
    scored = [score_business_model(m, answers) for m in catalog]
    return sorted(scored, key=lambda m: m.fit_score, reverse=True)


def fit_label(score: int) -> str:
    if score >= 70:
        return "Best Fit"
    if score >= 50:
        return "Strong Fit"
    if score >= 30:
        return "Possible Fit"
    return "Poor Fit"
