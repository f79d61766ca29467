"""AI-augmented analysis with deterministic fallback.

Every entry point that has a deterministic counterpart catches upstream
failures and returns the deterministic result instead: the caller never sees
an AI outage. Only the free-text insights have no fallback.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from .core.catalog import BUSINESS_MODELS, get_business_model
from .core.clients.chat import ChatClient
from .core.errors import UpstreamError
from .core.models import (
    AnalysisSource,
    BusinessMatch,
    BusinessModel,
    FitAnalysis,
    MatchAnalysis,
    MatchSummary,
    PersonalityAnalysis,
    QuizAnswers,
    ScoredBusinessModel,
    SkillAssessment,
    SkillsAnalysis,
)
from .core.personality import TRAIT_NAMES, fallback_personality_analysis
from .core.scoring import compute_factors, fit_label, generate_personalized_paths, resolve_answers
from .core.skills import bucket_assessments, fallback_skills_analysis

logger = logging.getLogger(__name__)

FIT_SYSTEM_PROMPT = (
    "You are an expert business consultant specializing in entrepreneurial personality matching. "
    "Score how well each business model fits the user and explain why."
)
SKILLS_SYSTEM_PROMPT = (
    "You are an expert career coach and skills assessor. Analyze user profiles and provide "
    "accurate skill assessments for business models."
)
DESCRIPTION_SYSTEM_PROMPT = (
    "You are an expert business consultant specializing in entrepreneurial personality matching. "
    "Generate personalized, specific explanations for why certain business models fit individual "
    "users based on their quiz responses."
)
INSIGHTS_SYSTEM_PROMPT = (
    "You are an expert business consultant and psychologist specializing in entrepreneurial "
    "assessment. Provide detailed, personalized analysis based on quiz responses."
)
PERSONALITY_SYSTEM_PROMPT = (
    "You are an expert entrepreneurial psychologist. Assess personality traits relevant to "
    "running a business from quiz responses, and be specific and encouraging."
)

FACTOR_STRENGTHS = {
    "income": "Your income goal fits what this model typically earns",
    "timeline": "Your timeline to first income is realistic for this model",
    "budget": "Your upfront budget covers what this model needs",
    "skills": "Your tech skills match the level this model requires",
    "communication": "Your communication style suits this model",
    "creativity": "Your enjoyment of creative work is an asset here",
    "risk": "Your risk comfort matches this model's uncertainty",
    "time_commitment": "Your weekly hours fit this model's workload",
    "motivation": "Your self-motivation supports working without a boss",
    "work_style": "Your collaboration preference fits how this model is run",
}
FACTOR_CHALLENGES = {
    "income": "Your income goal is outside this model's typical range",
    "timeline": "This model usually takes a different amount of time to first income",
    "budget": "Your budget is outside what this model usually needs",
    "skills": "This model expects a different level of tech skill",
    "communication": "This model relies on communication you may not enjoy",
    "creativity": "This model leans on creative work",
    "risk": "This model carries a different level of risk than you prefer",
    "time_commitment": "This model needs a different weekly time investment",
    "motivation": "This model needs a high level of self-motivation",
    "work_style": "This model is run differently from how you like to work",
}

RANK_WORDS = ["top", "second", "third"]


def _fmt(value: Any, suffix: str = "") -> str:
    if value is None:
        return "not specified"
    if isinstance(value, list):
        return ", ".join(value) if value else "None specified"
    return f"{value}{suffix}"


def build_user_profile(answers: QuizAnswers) -> str:
    """Plain-text profile used in every prompt."""
    r = resolve_answers(answers)
    lines = [
        f"Primary Motivation: {_fmt(answers.main_motivation)}",
        f"Income Goal: ${_fmt(r['income_goal'])}/month",
        f"First Income Timeline: {_fmt(r['timeline'])}",
        f"Upfront Investment: ${_fmt(r['budget'])}",
        f"Time Commitment: {_fmt(r['weekly_hours'])} hours/week",
        f"Learning Style: {_fmt(answers.learning_preference)}",
        f"Tech Skills: {_fmt(r['tech_skills'], '/5')}",
        f"Tools Experience: {_fmt(answers.familiar_tools or [])}",
        f"Communication Comfort: {_fmt(answers.direct_communication_enjoyment, '/5')}",
        f"Self-Motivation: {_fmt(r['self_motivation'], '/5')}",
        f"Risk Tolerance: {_fmt(r['risk_tolerance'], '/5')}",
        f"Organization Level: {_fmt(answers.organization_level, '/5')}",
        f"Brand Face Comfort: {_fmt(answers.brand_face_comfort, '/5')}",
        f"Creative Work Enjoyment: {_fmt(answers.creative_work_enjoyment, '/5')}",
        f"Trial/Error Comfort: {_fmt(answers.trial_error_comfort, '/5')}",
        f"Uncertainty Handling: {_fmt(answers.uncertainty_handling, '/5')}",
        f"Tool Learning Willingness: {_fmt(answers.tool_learning_willingness)}",
        f"Work Preference: {_fmt(answers.work_collaboration_preference)}",
        f"Work Structure: {_fmt(answers.work_structure_preference)}",
        f"Decision Making: {_fmt(answers.decision_making_style)}",
        f"Client Calls Comfort: {_fmt(answers.client_calls_comfort)}",
        f"Consistency: {_fmt(answers.long_term_consistency, '/5')}",
        f"Resilience: {_fmt(answers.discouragement_resilience, '/5')}",
        f"Passion Identity Alignment: {_fmt(answers.passion_identity_alignment, '/5')}",
        f"Competitiveness: {_fmt(answers.competitiveness_level, '/5')}",
    ]
    return "\n".join(lines)


def _catalog_listing(catalog: tuple[BusinessModel, ...]) -> str:
    return "\n".join(
        f"- {m.id}: {m.name}: {m.description} (time to profit {m.time_to_profit}, income {m.potential_income})"
        for m in catalog
    )


def deterministic_analysis(model: ScoredBusinessModel, answers: QuizAnswers) -> MatchAnalysis:
    """Rationale for a locally scored model, derived from its factor scores."""
    factors = compute_factors(model.id, answers)
    strengths = [FACTOR_STRENGTHS[name] for name, value in factors.items() if value >= 1.0]
    challenges = [FACTOR_CHALLENGES[name] for name, value in factors.items() if value < 0.6]
    label = fit_label(model.fit_score)
    reasoning = (
        f"{model.name} scored {model.fit_score}/100 ({label}) against your quiz answers. "
        f"{len(strengths)} of {len(factors)} fit factors are in this model's sweet spot."
    )
    return MatchAnalysis(
        fit_score=model.fit_score,
        reasoning=reasoning,
        strengths=strengths[:4],
        challenges=challenges[:3],
    )


def fallback_fit_description(answers: QuizAnswers, rank: int) -> str:
    r = resolve_answers(answers)
    motivation = "high self-motivation" if r["self_motivation"] >= 4 else "self-driven nature"
    tech = "strong" if r["tech_skills"] >= 4 else "adequate"
    risk = "high" if r["risk_tolerance"] >= 4 else "moderate"
    quality = ["perfect", "excellent", "good"][min(rank, 2)]
    rank_sentence = [
        "As your top match, this path offers the best alignment with your goals and preferences.",
        "This represents a strong secondary option that complements your primary strengths.",
        "This provides a solid alternative path that matches your core capabilities.",
    ][min(rank, 2)]
    learning = (answers.learning_preference or "hands-on").replace("-", " ")
    structure = (answers.work_structure_preference or "flexible").replace("-", " ")
    return (
        f"This business model aligns well with your {motivation} and {r['weekly_hours']:g} hours/week "
        f"availability. Your {tech} technical skills and {risk} risk tolerance make this a {quality} "
        f"match for your entrepreneurial journey.\n\n"
        f"{rank_sentence} Your {learning} learning style and {structure} work preference make this "
        f"business model particularly suitable for your success."
    )


class FitAnalysisService:
    """AI analysis over an injected chat client.

    With `chat=None` every call goes straight to the deterministic path.
    """

    def __init__(self, chat: Optional[ChatClient], catalog: tuple[BusinessModel, ...] = BUSINESS_MODELS):
        self.chat = chat
        self.catalog = catalog

    def _require_chat(self) -> ChatClient:
        if self.chat is None:
            raise UpstreamError("AI analysis is not configured")
        return self.chat

    # ─── Business fit ────────────────────────────────────────────────────────

    async def analyze_business_fit(self, answers: QuizAnswers) -> FitAnalysis:
        try:
            matches = await self._remote_business_fit(answers)
            return FitAnalysis(top_matches=matches, source=AnalysisSource.AI)
        except UpstreamError as exc:
            logger.warning("AI business fit analysis failed, using fallback scoring: %s", exc)
        return self.fallback_business_fit(answers)

    def fallback_business_fit(self, answers: QuizAnswers) -> FitAnalysis:
        ranked = generate_personalized_paths(answers, self.catalog)
        matches = [
            BusinessMatch(
                business_path=BusinessModel(**m.model_dump(exclude={"fit_score", "ai_analysis"})),
                analysis=deterministic_analysis(m, answers),
            )
            for m in ranked
        ]
        return FitAnalysis(top_matches=matches, source=AnalysisSource.FALLBACK)

    async def _remote_business_fit(self, answers: QuizAnswers) -> list[BusinessMatch]:
        chat = self._require_chat()
        prompt = f"""Score how well each business model below fits this user, from 0 to 100.

USER PROFILE:
{build_user_profile(answers)}

BUSINESS MODELS:
{_catalog_listing(self.catalog)}

Return a JSON object with this structure:
{{
  "topMatches": [
    {{
      "businessId": "one of the ids above",
      "fitScore": 0-100,
      "reasoning": "2-3 sentences referencing the user's answers",
      "strengths": ["..."],
      "challenges": ["..."],
      "confidenceLevel": 0-100
    }}
  ]
}}
Include every business model exactly once."""

        data = await chat.complete_json(
            [
                {"role": "system", "content": FIT_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
            max_tokens=2500,
        )

        raw_matches = data.get("topMatches")
        if not isinstance(raw_matches, list) or not raw_matches:
            raise UpstreamError("AI response has no topMatches")

        catalog_ids = {m.id for m in self.catalog}
        matches: list[BusinessMatch] = []
        seen: set[str] = set()
        for item in raw_matches:
            if not isinstance(item, dict):
                raise UpstreamError("AI match is not an object")
            business_id = item.get("businessId")
            if business_id not in catalog_ids or business_id in seen:
                raise UpstreamError(f"AI returned unknown or duplicate business id: {business_id!r}")
            seen.add(business_id)
            try:
                analysis = MatchAnalysis.model_validate(item)
            except PydanticValidationError as exc:
                raise UpstreamError(f"AI match for {business_id} is malformed") from exc
            matches.append(BusinessMatch(business_path=get_business_model(business_id), analysis=analysis))

        matches.sort(key=lambda m: m.analysis.fit_score, reverse=True)
        return matches

    async def generate_ai_personalized_paths(self, answers: QuizAnswers) -> list[ScoredBusinessModel]:
        """Ranked models with AI rationale; the deterministic ranking when AI fails."""
        analysis = await self.analyze_business_fit(answers)
        return [
            ScoredBusinessModel(
                **match.business_path.model_dump(),
                fit_score=match.analysis.fit_score,
                ai_analysis=match.analysis,
            )
            for match in analysis.top_matches
        ]

    # ─── Skills gap ──────────────────────────────────────────────────────────

    async def analyze_skills(
        self,
        answers: QuizAnswers,
        required_skills: list[str],
        business_model: str,
    ) -> SkillsAnalysis:
        if not required_skills:
            return fallback_skills_analysis([])
        try:
            return await self._remote_skills(answers, required_skills, business_model)
        except UpstreamError as exc:
            logger.warning("AI skills analysis failed for %s, using fallback: %s", business_model, exc)
        return fallback_skills_analysis(required_skills)

    async def _remote_skills(
        self,
        answers: QuizAnswers,
        required_skills: list[str],
        business_model: str,
    ) -> SkillsAnalysis:
        chat = self._require_chat()
        skill_lines = "\n".join(f"- {skill}" for skill in required_skills)
        prompt = f"""Based on this user's quiz responses, analyze their current skill level for each required skill for {business_model}:

USER PROFILE:
{build_user_profile(answers)}

REQUIRED SKILLS:
{skill_lines}

For each skill, determine:
1. Status: "have" (user already has this skill), "working-on" (user has some experience but needs development), or "need" (user doesn't have this skill)
2. Confidence: 1-10 score of how confident you are in this assessment
3. Reasoning: Brief explanation of why you categorized it this way

Return a JSON object with this structure:
{{
  "skillAssessments": [
    {{
      "skill": "skill name",
      "status": "have" | "working-on" | "need",
      "confidence": 1-10,
      "reasoning": "brief explanation"
    }}
  ]
}}"""

        data = await chat.complete_json(
            [
                {"role": "system", "content": SKILLS_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )

        raw = data.get("skillAssessments")
        if not isinstance(raw, list):
            raise UpstreamError("AI response has no skillAssessments")
        try:
            assessments = [SkillAssessment.model_validate(item) for item in raw]
        except PydanticValidationError as exc:
            raise UpstreamError("AI skill assessment is malformed") from exc

        returned = [a.skill for a in assessments]
        if sorted(returned) != sorted(required_skills):
            raise UpstreamError("AI skill assessments do not cover the required skills exactly once")

        return bucket_assessments(assessments, source=AnalysisSource.AI)

    # ─── Personality ─────────────────────────────────────────────────────────

    async def analyze_personality(self, answers: QuizAnswers) -> PersonalityAnalysis:
        try:
            return await self._remote_personality(answers)
        except UpstreamError as exc:
            logger.warning("AI personality analysis failed, using rating-based profile: %s", exc)
        return fallback_personality_analysis(answers)

    async def _remote_personality(self, answers: QuizAnswers) -> PersonalityAnalysis:
        chat = self._require_chat()
        trait_lines = "\n".join(f"- {name}" for name in TRAIT_NAMES)
        prompt = f"""Assess this user's entrepreneurial personality from their quiz responses.

USER PROFILE:
{build_user_profile(answers)}

Score each of these traits from 0 to 100:
{trait_lines}

Return a JSON object with this structure:
{{
  "traits": [
    {{"trait": "trait name from the list", "score": 0-100, "description": "one sentence about this user"}}
  ],
  "strengths": ["trait names the user is strongest in"],
  "growthAreas": ["trait names the user should develop"],
  "summary": "2-3 sentences"
}}
Include every trait exactly once."""

        data = await chat.complete_json(
            [
                {"role": "system", "content": PERSONALITY_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=1200,
        )

        try:
            analysis = PersonalityAnalysis.model_validate({**data, "source": AnalysisSource.AI})
        except PydanticValidationError as exc:
            raise UpstreamError("AI personality analysis is malformed") from exc

        if sorted(t.trait for t in analysis.traits) != sorted(TRAIT_NAMES):
            raise UpstreamError("AI personality analysis does not cover every trait exactly once")
        return analysis

    # ─── Write-ups ───────────────────────────────────────────────────────────

    async def generate_fit_descriptions(
        self,
        answers: QuizAnswers,
        matches: list[MatchSummary],
    ) -> list[dict[str, str]]:
        """One "why this fits you" description per match, in match order."""
        descriptions = []
        for rank, match in enumerate(matches):
            try:
                text = await self._remote_fit_description(answers, match, rank)
            except UpstreamError as exc:
                logger.warning("AI fit description failed for %s, using template: %s", match.id, exc)
                text = fallback_fit_description(answers, rank)
            descriptions.append({"businessId": match.id, "description": text})
        return descriptions

    async def _remote_fit_description(self, answers: QuizAnswers, match: MatchSummary, rank: int) -> str:
        chat = self._require_chat()
        rank_word = RANK_WORDS[rank] if rank < len(RANK_WORDS) else f"#{rank + 1}"
        prompt = f"""Based on this user's quiz responses, generate a detailed "Why This Fits You" description for their {rank_word} business match.

USER PROFILE:
{build_user_profile(answers)}

Business Match:
- Name: {match.name}
- Fit Score: {match.fit_score}%
- Description: {match.description}
- Time to Profit: {match.time_to_profit}
- Potential Income: {match.potential_income}

Generate a personalized 4-6 sentence description in two paragraphs explaining why this business model specifically fits this user. Be specific about how their personality, goals, skills, time availability and risk tolerance match the requirements, and what unique advantages they bring. Write in a supportive, consultative tone."""

        return await chat.complete(
            [
                {"role": "system", "content": DESCRIPTION_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=300,
        )

    async def generate_personalized_insights(self, answers: QuizAnswers, top_model: MatchSummary) -> str:
        """Three paragraphs on the user's fit with their top model. Raises UpstreamError."""
        chat = self._require_chat()
        prompt = f"""Based on this user's complete quiz responses, generate three detailed paragraphs that provide personalized insights about their entrepreneurial fit.

USER PROFILE:
{build_user_profile(answers)}

Top Business Match:
- Name: {top_model.name}
- Fit Score: {top_model.fit_score}%
- Description: {top_model.description}

Paragraph 1 - Personality & Work Style Match.
Paragraph 2 - Financial & Risk Profile.
Paragraph 3 - Success Prediction & Strategy.

Make each paragraph 4-6 sentences long and reference the user's actual responses."""

        return await chat.complete(
            [
                {"role": "system", "content": INSIGHTS_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=1000,
        )
