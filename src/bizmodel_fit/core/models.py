"""Pydantic data models: the shared business objects.

The HTTP API, the MCP server and the scoring engine all use these models.
Field names are snake_case in Python and camelCase on the wire, matching
the quiz front end.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class QuizAnswers(ApiModel):
    """A user's quiz responses.

    Every field is optional. Several answers exist under a current and a
    legacy name; the scorer resolves them current-first (see scoring.py).
    Ratings are on a 1-5 scale.
    """

    model_config = ConfigDict(extra="ignore")

    main_motivation: Optional[str] = None

    # Goals, current names
    success_income_goal: Optional[float] = Field(None, ge=0)
    first_income_timeline: Optional[str] = None
    upfront_investment: Optional[float] = Field(None, ge=0)
    weekly_time_commitment: Optional[float] = Field(None, ge=0)

    # Goals, legacy names
    income_goal: Optional[float] = Field(None, ge=0)
    time_to_first_income: Optional[str] = Field(
        None, validation_alias=AliasChoices("timeToFirstIncome", "timeToIncome"),
    )
    startup_budget: Optional[float] = Field(
        None, ge=0, validation_alias=AliasChoices("startupBudget", "budget"),
    )
    time_commitment: Optional[float] = Field(None, ge=0)

    # Ratings, current names
    tech_skills_rating: Optional[int] = Field(None, ge=1, le=5)
    self_motivation_level: Optional[int] = Field(None, ge=1, le=5)
    risk_comfort_level: Optional[int] = Field(None, ge=1, le=5)

    # Ratings, legacy names
    technology_comfort: Optional[int] = Field(
        None, ge=1, le=5, validation_alias=AliasChoices("technologyComfort", "techSkills"),
    )
    self_motivation: Optional[int] = Field(None, ge=1, le=5)
    risk_tolerance: Optional[int] = Field(None, ge=1, le=5)

    direct_communication_enjoyment: Optional[int] = Field(None, ge=1, le=5)
    brand_face_comfort: Optional[int] = Field(None, ge=1, le=5)
    creative_work_enjoyment: Optional[int] = Field(None, ge=1, le=5)
    long_term_consistency: Optional[int] = Field(None, ge=1, le=5)
    discouragement_resilience: Optional[int] = Field(None, ge=1, le=5)
    organization_level: Optional[int] = Field(None, ge=1, le=5)
    trial_error_comfort: Optional[int] = Field(None, ge=1, le=5)
    uncertainty_handling: Optional[int] = Field(None, ge=1, le=5)
    passion_identity_alignment: Optional[int] = Field(None, ge=1, le=5)
    competitiveness_level: Optional[int] = Field(None, ge=1, le=5)

    # Categorical choices
    work_collaboration_preference: Optional[str] = None
    work_structure_preference: Optional[str] = None
    learning_preference: Optional[str] = None
    decision_making_style: Optional[str] = None
    client_calls_comfort: Optional[str] = None
    tool_learning_willingness: Optional[str] = None
    familiar_tools: Optional[list[str]] = None

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready copy of the answers that were actually given."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BusinessModel(ApiModel):
    """A catalog entry. The catalog itself is immutable."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    time_to_profit: str
    potential_income: str
    difficulty: str
    icon: str = ""


class AnalysisSource(str, Enum):
    """Where a ranking or assessment came from."""

    AI = "ai"
    FALLBACK = "fallback"


class MatchAnalysis(ApiModel):
    """Rationale attached to a ranked business model."""

    fit_score: int = Field(ge=0, le=100)
    reasoning: str
    strengths: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    confidence_level: Optional[int] = Field(None, ge=0, le=100)


class ScoredBusinessModel(BusinessModel):
    """A catalog entry annotated with the user's fit score."""

    fit_score: int = Field(ge=0, le=100)
    ai_analysis: Optional[MatchAnalysis] = None


class MatchSummary(ApiModel):
    """A ranked match as the client sends it back for write-ups."""

    id: str
    name: str
    fit_score: int = Field(ge=0, le=100)
    description: str = ""
    time_to_profit: str = ""
    potential_income: str = ""


class BusinessMatch(ApiModel):
    business_path: BusinessModel
    analysis: MatchAnalysis


class FitAnalysis(ApiModel):
    """Ranked business matches for one set of answers."""

    top_matches: list[BusinessMatch]
    source: AnalysisSource
    computed_at: datetime = Field(default_factory=datetime.utcnow)


class SkillStatus(str, Enum):
    HAVE = "have"
    WORKING_ON = "working-on"
    NEED = "need"


class SkillAssessment(ApiModel):
    skill: str
    status: SkillStatus
    confidence: int = Field(ge=1, le=10)
    reasoning: str


class SkillsAnalysis(ApiModel):
    """Required skills split into have / working-on / need buckets."""

    have: list[SkillAssessment] = Field(default_factory=list)
    working_on: list[SkillAssessment] = Field(default_factory=list)
    need: list[SkillAssessment] = Field(default_factory=list)
    source: AnalysisSource

    @property
    def skill_assessments(self) -> list[SkillAssessment]:
        return [*self.have, *self.working_on, *self.need]


class EntitlementState(str, Enum):
    """Quiz entitlement states.

    GUEST: no access pass, unlimited free attempts.
    ENTITLED: access pass with retakes left.
    EXHAUSTED: access pass with no retakes left.
    """

    GUEST = "guest"
    ENTITLED = "entitled"
    EXHAUSTED = "exhausted"


class RetakeStatus(ApiModel):
    """Read-only entitlement snapshot for one user."""

    state: EntitlementState
    can_retake: bool
    attempts_count: int
    has_access_pass: bool
    quiz_retakes_remaining: int
    total_quiz_retakes_used: int
    is_first_quiz: bool
    is_free_quiz_used: bool
    is_guest_user: bool


class QuizAttemptRecord(ApiModel):
    id: int
    user_id: int
    quiz_data: dict[str, Any]
    completed_at: datetime


class PaymentType(str, Enum):
    ACCESS_PASS = "access_pass"
    RETAKE_BUNDLE = "retake_bundle"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentRecord(ApiModel):
    id: int
    user_id: int
    amount: str
    currency: str
    type: PaymentType
    status: PaymentStatus
    retakes_granted: int
    created_at: datetime
    completed_at: Optional[datetime] = None


class PersonalityTrait(ApiModel):
    trait: str
    score: int = Field(ge=0, le=100)
    description: str


class PersonalityAnalysis(ApiModel):
    """Entrepreneurial trait profile derived from the quiz."""

    traits: list[PersonalityTrait]
    strengths: list[str] = Field(default_factory=list)
    growth_areas: list[str] = Field(default_factory=list)
    summary: str
    source: AnalysisSource


class Resource(ApiModel):
    title: str
    url: str
    description: str


class BusinessResources(ApiModel):
    """Where to start with one business model: tools, learning, communities."""

    business_id: str
    name: str
    tools: list[Resource]
    learning: list[Resource]
    communities: list[Resource]
