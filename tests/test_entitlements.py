from __future__ import annotations

import asyncio

import pytest

from bizmodel_fit.core.errors import AccessPassAlreadyHeldError, AccessPassRequiredError, RetakesExhaustedError
from bizmodel_fit.core.models import EntitlementState, QuizAnswers
from bizmodel_fit.db import get_session_factory
from bizmodel_fit.entitlements import (
    grant_access_pass,
    grant_retake_bundle,
    list_attempts,
    query_status,
    record_attempt,
)
from bizmodel_fit.sqlmodels import User

pytestmark = pytest.mark.usefixtures("db")

ANSWERS = QuizAnswers.model_validate({"successIncomeGoal": 3000, "techSkillsRating": 4})


async def _set_retakes(user_id: int, remaining: int) -> None:
    async with get_session_factory()() as session:
        user = await session.get(User, user_id)
        user.quiz_retakes_remaining = remaining
        await session.commit()


async def test_unknown_user_is_provisioned_as_guest():
    status = await query_status(7)

    assert status.state == EntitlementState.GUEST
    assert status.can_retake is True
    assert status.is_guest_user is True
    assert status.is_first_quiz is True
    assert status.attempts_count == 0

    async with get_session_factory()() as session:
        user = await session.get(User, 7)
    assert user.username == "user7"


async def test_guest_records_attempts_indefinitely():
    for _ in range(4):
        await record_attempt(1, ANSWERS)

    status = await query_status(1)
    assert status.attempts_count == 4
    assert status.quiz_retakes_remaining == 0
    assert status.total_quiz_retakes_used == 0
    assert status.is_free_quiz_used is True
    assert status.can_retake is True


async def test_access_pass_grants_five_retakes_once():
    status = await grant_access_pass(2)
    assert status.state == EntitlementState.ENTITLED
    assert status.quiz_retakes_remaining == 5
    assert status.is_guest_user is False

    with pytest.raises(AccessPassAlreadyHeldError):
        await grant_access_pass(2)

    assert (await query_status(2)).quiz_retakes_remaining == 5


async def test_retake_bundle_requires_access_pass():
    with pytest.raises(AccessPassRequiredError):
        await grant_retake_bundle(3)

    await grant_access_pass(3)
    status = await grant_retake_bundle(3)
    assert status.quiz_retakes_remaining == 10


async def test_last_retake_exhausts_and_blocks_further_attempts():
    await grant_access_pass(4)
    await _set_retakes(4, 1)

    await record_attempt(4, ANSWERS)
    status = await query_status(4)
    assert status.state == EntitlementState.EXHAUSTED
    assert status.can_retake is False
    assert status.total_quiz_retakes_used == 1

    with pytest.raises(RetakesExhaustedError):
        await record_attempt(4, ANSWERS)

    after = await query_status(4)
    assert after.attempts_count == 1
    assert after.quiz_retakes_remaining == 0
    assert after.total_quiz_retakes_used == 1


async def test_attempts_store_answer_snapshot_newest_first():
    first = await record_attempt(5, QuizAnswers.model_validate({"incomeGoal": 1000}))
    second = await record_attempt(5, QuizAnswers.model_validate({"incomeGoal": 9000}))

    attempts = await list_attempts(5)
    assert [a.id for a in attempts] == [second.id, first.id]
    assert attempts[0].quiz_data == {"incomeGoal": 9000.0}


async def test_concurrent_attempts_never_overspend_retakes():
    await grant_access_pass(6)

    results = await asyncio.gather(*[record_attempt(6, ANSWERS) for _ in range(10)], return_exceptions=True)

    recorded = [r for r in results if not isinstance(r, BaseException)]
    refused = [r for r in results if isinstance(r, RetakesExhaustedError)]
    assert len(recorded) == 5
    assert len(refused) == 5

    status = await query_status(6)
    assert status.quiz_retakes_remaining == 0
    assert status.total_quiz_retakes_used == 5
    assert status.attempts_count == 5


async def test_concurrent_guests_all_record():
    user_ids = list(range(100, 108))

    results = await asyncio.gather(*[record_attempt(uid, ANSWERS) for uid in user_ids], return_exceptions=True)

    assert [type(r).__name__ for r in results] == ["QuizAttemptRecord"] * len(user_ids)
    for uid in user_ids:
        assert (await query_status(uid)).attempts_count == 1
