from __future__ import annotations

import itertools

import pytest

from bizmodel_fit.core.catalog import BUSINESS_MODELS
from bizmodel_fit.core.models import QuizAnswers
from bizmodel_fit.core.scoring import (
    calculate_fit_score,
    compute_factors,
    fit_label,
    generate_personalized_paths,
    resolve_answers,
)

# Every factor inside the high-ticket-sales sweet spot.
HIGH_TICKET_IDEAL = {
    "successIncomeGoal": 10000,
    "firstIncomeTimeline": "1-3-months",
    "upfrontInvestment": 500,
    "techSkillsRating": 3,
    "directCommunicationEnjoyment": 5,
    "creativeWorkEnjoyment": 4,
    "riskComfortLevel": 5,
    "weeklyTimeCommitment": 30,
    "selfMotivationLevel": 5,
    "workCollaborationPreference": "solo-only",
}


def test_defaults_when_nothing_answered():
    resolved = resolve_answers(QuizAnswers())
    assert resolved == {
        "income_goal": 1000,
        "timeline": "3-6-months",
        "budget": 0,
        "weekly_hours": 20,
        "tech_skills": 3,
        "self_motivation": 3,
        "risk_tolerance": 3,
    }


def test_current_names_win_over_legacy():
    answers = QuizAnswers.model_validate({"successIncomeGoal": 8000, "incomeGoal": 500, "techSkills": 2})
    resolved = resolve_answers(answers)
    assert resolved["income_goal"] == 8000
    assert resolved["tech_skills"] == 2


def test_legacy_aliases_are_read():
    answers = QuizAnswers.model_validate({"timeToIncome": "under-1-month", "budget": 750, "technologyComfort": 5})
    resolved = resolve_answers(answers)
    assert resolved["timeline"] == "under-1-month"
    assert resolved["budget"] == 750
    assert resolved["tech_skills"] == 5


def test_unknown_business_id_scores_neutral():
    assert calculate_fit_score("underwater-basket-weaving", QuizAnswers()) == 50
    factors = compute_factors("underwater-basket-weaving", QuizAnswers())
    assert set(factors.values()) == {0.5}


def test_ideal_answers_score_100():
    assert calculate_fit_score("high-ticket-sales", QuizAnswers.model_validate(HIGH_TICKET_IDEAL)) == 100


def test_client_calls_penalty_is_exactly_20():
    base = calculate_fit_score("high-ticket-sales", QuizAnswers.model_validate(HIGH_TICKET_IDEAL))
    said_yes = calculate_fit_score(
        "high-ticket-sales", QuizAnswers.model_validate({**HIGH_TICKET_IDEAL, "clientCallsComfort": "yes"})
    )
    said_no = calculate_fit_score(
        "high-ticket-sales", QuizAnswers.model_validate({**HIGH_TICKET_IDEAL, "clientCallsComfort": "no"})
    )
    assert said_yes == base
    assert said_no == base - 20


def test_client_calls_penalty_only_for_call_heavy_models():
    answers = QuizAnswers.model_validate({**HIGH_TICKET_IDEAL, "clientCallsComfort": "no"})
    without = QuizAnswers.model_validate(HIGH_TICKET_IDEAL)
    assert calculate_fit_score("freelancing", answers) == calculate_fit_score("freelancing", without)


def test_freelancer_profile_prefers_freelancing_over_dropshipping(freelancer_answers):
    answers = QuizAnswers.model_validate(freelancer_answers)
    assert calculate_fit_score("freelancing", answers) > calculate_fit_score("e-commerce-dropshipping", answers)


def test_content_creation_reads_brand_face_comfort():
    shy = QuizAnswers.model_validate({"brandFaceComfort": 1, "directCommunicationEnjoyment": 5})
    bold = QuizAnswers.model_validate({"brandFaceComfort": 5, "directCommunicationEnjoyment": 1})
    assert compute_factors("content-creation-ugc", shy)["communication"] < 1.0
    assert compute_factors("content-creation-ugc", bold)["communication"] == 1.0


@pytest.mark.parametrize(
    "income, budget, weekly, rating, timeline",
    list(itertools.product(
        [0, 100, 1_000_000],
        [0, 100_000],
        [0, 80],
        [1, 5],
        ["under-1-month", "no-rush"],
    )),
)
def test_scores_stay_in_range(income, budget, weekly, rating, timeline):
    answers = QuizAnswers.model_validate({
        "successIncomeGoal": income,
        "upfrontInvestment": budget,
        "weeklyTimeCommitment": weekly,
        "techSkillsRating": rating,
        "riskComfortLevel": rating,
        "selfMotivationLevel": rating,
        "firstIncomeTimeline": timeline,
        "clientCallsComfort": "no",
    })
    for model in BUSINESS_MODELS:
        assert 0 <= calculate_fit_score(model.id, answers) <= 100


def test_ranking_is_sorted_and_stable_on_ties():
    catalog_index = {m.id: i for i, m in enumerate(BUSINESS_MODELS)}
    ranked = generate_personalized_paths(QuizAnswers())

    assert len(ranked) == len(BUSINESS_MODELS)
    for first, second in zip(ranked, ranked[1:]):
        assert first.fit_score >= second.fit_score
        if first.fit_score == second.fit_score:
            assert catalog_index[first.id] < catalog_index[second.id]


def test_ranking_is_deterministic(freelancer_answers):
    answers = QuizAnswers.model_validate(freelancer_answers)
    first = [(m.id, m.fit_score) for m in generate_personalized_paths(answers)]
    second = [(m.id, m.fit_score) for m in generate_personalized_paths(answers)]
    assert first == second


@pytest.mark.parametrize(
    "score, label",
    [(100, "Best Fit"), (70, "Best Fit"), (69, "Strong Fit"), (50, "Strong Fit"), (30, "Possible Fit"), (29, "Poor Fit")],
)
def test_fit_label(score, label):
    assert fit_label(score) == label


def test_ratings_out_of_range_are_rejected():
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        QuizAnswers.model_validate({"techSkillsRating": 9})
