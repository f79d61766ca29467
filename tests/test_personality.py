from __future__ import annotations

import pytest

from bizmodel_fit.core.catalog import BUSINESS_MODELS
from bizmodel_fit.core.models import AnalysisSource, QuizAnswers
from bizmodel_fit.core.personality import TRAIT_NAMES, fallback_personality_analysis, rating_to_score
from bizmodel_fit.core.resources import get_business_resources


@pytest.mark.parametrize("rating, score", [(1, 0), (2, 25), (3, 50), (4, 75), (5, 100), (None, 50)])
def test_rating_to_score(rating, score):
    assert rating_to_score(rating) == score


def test_fallback_profile_from_ratings():
    answers = QuizAnswers.model_validate({
        "selfMotivation": 5,
        "riskComfortLevel": 1,
        "techSkillsRating": 4,
        "creativeWorkEnjoyment": 2,
    })
    analysis = fallback_personality_analysis(answers)
    scores = {t.trait: t.score for t in analysis.traits}

    assert [t.trait for t in analysis.traits] == list(TRAIT_NAMES)
    assert scores["Self-Motivation"] == 100
    assert scores["Risk Tolerance"] == 0
    assert scores["Communication"] == 50
    assert analysis.strengths == ["Self-Motivation", "Tech Comfort"]
    assert analysis.growth_areas == ["Risk Tolerance", "Creativity"]
    assert analysis.source == AnalysisSource.FALLBACK
    assert "Self-Motivation" in analysis.summary


def test_fallback_profile_without_answers_is_balanced():
    analysis = fallback_personality_analysis(QuizAnswers())

    assert {t.score for t in analysis.traits} == {50}
    assert analysis.strengths == []
    assert analysis.growth_areas == []
    assert analysis.summary.startswith("Your traits are balanced")


def test_every_catalog_model_has_resources():
    for model in BUSINESS_MODELS:
        resources = get_business_resources(model.id)
        assert resources is not None
        assert resources.name == model.name
        assert resources.tools and resources.learning and resources.communities
        assert all(r.url.startswith("https://") for r in resources.tools + resources.learning + resources.communities)


def test_unknown_model_has_no_resources():
    assert get_business_resources("crypto-mining") is None
