"""Skills-gap bucketing.

The fallback split is positional, not content-aware: the first third of the
required skills is reported as "have", the second third as "working-on" and
the remainder as "need".
"""

from __future__ import annotations

import math
from typing import Iterable

from .models import AnalysisSource, SkillAssessment, SkillsAnalysis, SkillStatus

FALLBACK_BUCKETS: dict[SkillStatus, tuple[int, str]] = {
    SkillStatus.HAVE: (7, "Based on your quiz responses, you show strong aptitude for this skill"),
    SkillStatus.WORKING_ON: (6, "You have some experience but could benefit from further development"),
    SkillStatus.NEED: (8, "This skill would need to be developed for optimal success"),
}


def _assess(skills: list[str], status: SkillStatus) -> list[SkillAssessment]:
    confidence, reasoning = FALLBACK_BUCKETS[status]
    return [
        SkillAssessment(skill=skill, status=status, confidence=confidence, reasoning=reasoning)
        for skill in skills
    ]


def fallback_skills_analysis(required_skills: list[str]) -> SkillsAnalysis:
    third = math.ceil(len(required_skills) / 3)
    return SkillsAnalysis(
        have=_assess(required_skills[:third], SkillStatus.HAVE),
        working_on=_assess(required_skills[third:third * 2], SkillStatus.WORKING_ON),
        need=_assess(required_skills[third * 2:], SkillStatus.NEED),
        source=AnalysisSource.FALLBACK,
    )


def bucket_assessments(
    assessments: Iterable[SkillAssessment],
    source: AnalysisSource = AnalysisSource.AI,
) -> SkillsAnalysis:
    """Group flat assessments by status, keeping their order."""
    result = SkillsAnalysis(source=source)
    buckets = {
        SkillStatus.HAVE: result.have,
        SkillStatus.WORKING_ON: result.working_on,
        SkillStatus.NEED: result.need,
    }
    for assessment in assessments:
        buckets[assessment.status].append(assessment)
    return result
