"""Deterministic personality profile.

Each trait maps one 1-5 rating onto 0-100. Unanswered ratings count as the
middle of the scale, like the scorer's defaults.
"""

from __future__ import annotations

from typing import Optional

from .models import AnalysisSource, PersonalityAnalysis, PersonalityTrait, QuizAnswers
from .scoring import DEFAULT_RATING, resolve_answers

STRENGTH_THRESHOLD = 75
GROWTH_THRESHOLD = 50

# (label, text when high, text when low)
TRAITS: dict[str, tuple[str, str]] = {
    "Self-Motivation": (
        "You keep going without a boss or a deadline pushing you.",
        "You may need outside structure or accountability to stay on track.",
    ),
    "Risk Tolerance": (
        "You are comfortable betting time and money on uncertain outcomes.",
        "You prefer predictable paths with low downside.",
    ),
    "Tech Comfort": (
        "You pick up new software and platforms quickly.",
        "Technical setup work is likely to slow you down.",
    ),
    "Communication": (
        "You enjoy talking directly with clients and customers.",
        "You would rather work behind the scenes than on calls.",
    ),
    "Creativity": (
        "Creative work energizes you.",
        "You prefer clear, repeatable tasks over open-ended creative work.",
    ),
    "Consistency": (
        "You stick with long-term efforts that compound slowly.",
        "Long stretches without visible results are hard for you.",
    ),
    "Resilience": (
        "Setbacks rarely stop you for long.",
        "Early setbacks can shake your confidence.",
    ),
    "Organization": (
        "You keep projects, files and deadlines in order.",
        "Keeping many moving parts organized does not come naturally.",
    ),
}
MIDDLE_TEXT = "You are in the middle of the range here."

TRAIT_NAMES = tuple(TRAITS)


def rating_to_score(rating: Optional[float]) -> int:
    """Map a 1-5 rating onto 0-100."""
    value = DEFAULT_RATING if rating is None else rating
    return max(0, min(100, round((value - 1) * 25)))


def trait_ratings(answers: QuizAnswers) -> dict[str, Optional[float]]:
    r = resolve_answers(answers)
    return {
        "Self-Motivation": r["self_motivation"],
        "Risk Tolerance": r["risk_tolerance"],
        "Tech Comfort": r["tech_skills"],
        "Communication": answers.direct_communication_enjoyment,
        "Creativity": answers.creative_work_enjoyment,
        "Consistency": answers.long_term_consistency,
        "Resilience": answers.discouragement_resilience,
        "Organization": answers.organization_level,
    }


def _describe(name: str, score: int) -> str:
    high, low = TRAITS[name]
    if score >= STRENGTH_THRESHOLD:
        return high
    if score < GROWTH_THRESHOLD:
        return low
    return MIDDLE_TEXT


def fallback_personality_analysis(answers: QuizAnswers) -> PersonalityAnalysis:
    traits = []
    for name, rating in trait_ratings(answers).items():
        score = rating_to_score(rating)
        traits.append(PersonalityTrait(trait=name, score=score, description=_describe(name, score)))

    strengths = [t.trait for t in traits if t.score >= STRENGTH_THRESHOLD]
    growth_areas = [t.trait for t in traits if t.score < GROWTH_THRESHOLD]

    if strengths:
        summary = f"Your strongest entrepreneurial traits are {', '.join(strengths[:3])}."
    else:
        summary = "Your traits are balanced, with no single standout strength yet."
    if growth_areas:
        summary += f" Focus your development on {', '.join(growth_areas[:3])}."

    return PersonalityAnalysis(
        traits=traits,
        strengths=strengths,
        growth_areas=growth_areas,
        summary=summary,
        source=AnalysisSource.FALLBACK,
    )
