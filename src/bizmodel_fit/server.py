"""BizModelAI MCP Server.

FastMCP server exposing business model scoring, skills gap analysis and
quiz retake status as tools.
Run: bizmodel-fit-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError as PydanticValidationError

from .analysis import FitAnalysisService
from .core.catalog import BUSINESS_MODELS, get_business_model
from .core.clients.chat import ChatClient
from .core.models import QuizAnswers
from .core.scoring import WEIGHTS, calculate_fit_score, compute_factors, fit_label, generate_personalized_paths
from .db import close_db, init_db
from .entitlements import query_status

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
READ_ONLY_REMOTE = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=False, openWorldHint=True)
# Unknown user ids are created as guests on lookup.
PROVISIONING = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=True, openWorldHint=False)

_analysis: Optional[FitAnalysisService] = None


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Initialize the database and the AI analysis service."""
    global _analysis
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    await init_db()
    _analysis = FitAnalysisService(ChatClient.from_env())
    try:
        yield
    finally:
        _analysis = None
        await close_db()


mcp = FastMCP(
    "BizModelAI",
    instructions="Find the online business model that fits a person best. Score the catalog against their quiz answers, check the skills gap for a model, and look up quiz retake entitlements.",
    lifespan=lifespan,
)


def _parse_answers(quiz_data: dict) -> QuizAnswers:
    try:
        return QuizAnswers.model_validate(quiz_data)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid quiz data: {exc.errors()[0].get('msg', exc)}") from exc


def _get_analysis() -> FitAnalysisService:
    global _analysis
    if _analysis is None:
        _analysis = FitAnalysisService(ChatClient.from_env())
    return _analysis


# ─── Tool 1: Catalog ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def bizfit_catalog() -> dict:
    """All business models in the catalog, with time to profit and income potential. No arguments needed."""
    models = [m.model_dump(mode="json", by_alias=True) for m in BUSINESS_MODELS]
    return {
        "title": "Business Models",
        "business_models": models,
        "total": len(models),
    }


# ─── Tool 2: Ranking ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def bizfit_rank_models(quiz_data: dict, limit: int = 11) -> dict:
    """Rank every business model by fit with the user's quiz answers.

    Args:
        quiz_data: Quiz answers, camelCase keys. Examples: {"successIncomeGoal": 5000, "weeklyTimeCommitment": 20, "techSkillsRating": 4}.
        limit: How many top models to return. Default 11 (all).
    """
    answers = _parse_answers(quiz_data)
    ranked = generate_personalized_paths(answers)[: max(1, limit)]
    top = ranked[0]
    return {
        "title": "Business Model Ranking",
        "rankings": [
            {**m.model_dump(mode="json", by_alias=True, exclude={"ai_analysis"}), "fitLabel": fit_label(m.fit_score)}
            for m in ranked
        ],
        "summary": f"Best match: {top.name} ({top.fit_score}/100, {fit_label(top.fit_score)}).",
    }


# ─── Tool 3: Single model score ──────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def bizfit_score_model(business_id: str, quiz_data: dict) -> dict:
    """Fit score for one business model, with the per-factor breakdown.

    Args:
        business_id: Catalog id. Examples: 'freelancing', 'affiliate-marketing', 'high-ticket-sales'.
        quiz_data: Quiz answers, camelCase keys.
    """
    model = get_business_model(business_id)
    if model is None:
        valid = ", ".join(m.id for m in BUSINESS_MODELS)
        raise ValueError(f"Unknown business model '{business_id}'. Valid ids: {valid}")

    answers = _parse_answers(quiz_data)
    score = calculate_fit_score(business_id, answers)
    factors = compute_factors(business_id, answers)
    return {
        "title": model.name,
        "business_id": business_id,
        "fit_score": score,
        "fit_label": fit_label(score),
        "factors": {name: {"match": round(factors[name], 3), "weight": weight} for name, weight in WEIGHTS.items()},
        "summary": f"{model.name}: {score}/100 ({fit_label(score)}).",
    }


# ─── Tool 4: Skills gap ──────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY_REMOTE)
async def bizfit_skills_gap(quiz_data: dict, required_skills: list[str], business_model: str) -> dict:
    """Classify each required skill as have / working-on / need for this user.

    Uses the AI service when configured, otherwise a deterministic split.

    Args:
        quiz_data: Quiz answers, camelCase keys.
        required_skills: Skills the business model needs. Examples: ['Copywriting', 'SEO', 'Sales calls'].
        business_model: Business model name, used in the AI prompt.
    """
    answers = _parse_answers(quiz_data)
    analysis = await _get_analysis().analyze_skills(answers, required_skills, business_model)
    return {
        "title": f"Skills Gap: {business_model}",
        "source": analysis.source.value,
        "have": [a.model_dump(mode="json", by_alias=True) for a in analysis.have],
        "working_on": [a.model_dump(mode="json", by_alias=True) for a in analysis.working_on],
        "need": [a.model_dump(mode="json", by_alias=True) for a in analysis.need],
        "summary": f"{len(analysis.have)} have, {len(analysis.working_on)} working on, {len(analysis.need)} to learn.",
    }


# ─── Tool 5: Retake status (Stateful) ────────────────────────────────────────


@mcp.tool(annotations=PROVISIONING)
async def bizfit_retake_status(user_id: int) -> dict:
    """Quiz retake entitlement for a user: access pass, retakes left, attempts so far.

    Args:
        user_id: Numeric user id. Unknown ids are created as guests.
    """
    status = await query_status(user_id)
    if status.is_guest_user:
        summary = f"Guest user with {status.attempts_count} attempt(s); free attempts are unlimited."
    elif status.can_retake:
        summary = f"Access pass holder with {status.quiz_retakes_remaining} retake(s) left."
    else:
        summary = "Access pass holder with no retakes left. A retake bundle adds 5 more."
    return {
        "title": "Quiz Retake Status",
        **status.model_dump(mode="json", by_alias=True),
        "summary": summary,
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
