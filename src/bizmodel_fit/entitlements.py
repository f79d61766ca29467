"""Quiz entitlement tracker.

Guests (no access pass) take the quiz as often as they like. An access pass
grants a limited number of retakes; retake bundles top it up. Referencing an
unknown user id creates a guest record for it.

Recording an attempt is one transaction: the retake counter is decremented
with a conditional UPDATE, so concurrent attempts cannot both spend the
last retake.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .core.errors import AccessPassAlreadyHeldError, AccessPassRequiredError, RetakesExhaustedError
from .core.models import EntitlementState, QuizAnswers, QuizAttemptRecord, RetakeStatus
from .db import get_session_factory
from .sqlmodels import QuizAttempt, User

logger = logging.getLogger(__name__)

RETAKES_PER_PURCHASE = 5


def is_guest(user: User) -> bool:
    # A pass-less user with zero retakes is a guest; see DESIGN.md on revoked passes.
    return not user.has_access_pass and user.quiz_retakes_remaining == 0


def can_retake(user: User) -> bool:
    return is_guest(user) or (user.has_access_pass and user.quiz_retakes_remaining > 0)


def entitlement_state(user: User) -> EntitlementState:
    if not user.has_access_pass:
        return EntitlementState.GUEST
    if user.quiz_retakes_remaining > 0:
        return EntitlementState.ENTITLED
    return EntitlementState.EXHAUSTED


async def get_or_create_user(session: AsyncSession, user_id: int) -> User:
    """Load a user, creating a guest record on first reference."""
    user = await session.get(User, user_id)
    if user is not None:
        return user

    try:
        async with session.begin_nested():
            user = User(
                id=user_id,
                username=f"user{user_id}",
                has_access_pass=False,
                quiz_retakes_remaining=0,
                total_quiz_retakes_used=0,
                created_at=datetime.utcnow(),
            )
            session.add(user)
        logger.info("Provisioned guest user %d", user_id)
        return user
    except IntegrityError:
        # Another request created it first.
        user = await session.get(User, user_id, populate_existing=True)
        if user is None:
            raise
        return user


async def _count_attempts(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(QuizAttempt).where(QuizAttempt.user_id == user_id)
    )
    return result.scalar_one()


def _status(user: User, attempts_count: int) -> RetakeStatus:
    return RetakeStatus(
        state=entitlement_state(user),
        can_retake=can_retake(user),
        attempts_count=attempts_count,
        has_access_pass=user.has_access_pass,
        quiz_retakes_remaining=user.quiz_retakes_remaining,
        total_quiz_retakes_used=user.total_quiz_retakes_used,
        is_first_quiz=attempts_count == 0,
        is_free_quiz_used=attempts_count > 0,
        is_guest_user=is_guest(user),
    )


async def query_status(user_id: int) -> RetakeStatus:
    """Entitlement snapshot. Applies the same eligibility rule as record_attempt."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            user = await get_or_create_user(session, user_id)
            attempts_count = await _count_attempts(session, user_id)
            return _status(user, attempts_count)


async def record_attempt(user_id: int, answers: QuizAnswers) -> QuizAttemptRecord:
    """Record a quiz attempt, spending one retake for access-pass holders.

    Raises RetakesExhaustedError, recording nothing, when no retake is left.
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            user = await get_or_create_user(session, user_id)

            if user.has_access_pass:
                result = await session.execute(
                    update(User)
                    .where(
                        User.id == user_id,
                        User.has_access_pass.is_(True),
                        User.quiz_retakes_remaining > 0,
                    )
                    .values(
                        quiz_retakes_remaining=User.quiz_retakes_remaining - 1,
                        total_quiz_retakes_used=User.total_quiz_retakes_used + 1,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise RetakesExhaustedError(user_id)
            elif not is_guest(user):
                raise RetakesExhaustedError(user_id)

            attempt = QuizAttempt(
                user_id=user_id,
                quiz_data=answers.snapshot(),
                completed_at=datetime.utcnow(),
            )
            session.add(attempt)
            await session.flush()

    logger.info("Recorded quiz attempt %d for user %d", attempt.id, user_id)
    return QuizAttemptRecord.model_validate(attempt)


async def apply_access_pass(session: AsyncSession, user_id: int) -> None:
    """Grant the pass and its retakes inside the caller's transaction."""
    result = await session.execute(
        update(User)
        .where(User.id == user_id, User.has_access_pass.is_(False))
        .values(
            has_access_pass=True,
            quiz_retakes_remaining=User.quiz_retakes_remaining + RETAKES_PER_PURCHASE,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise AccessPassAlreadyHeldError(user_id)


async def apply_retake_bundle(session: AsyncSession, user_id: int) -> None:
    """Add a bundle of retakes inside the caller's transaction."""
    result = await session.execute(
        update(User)
        .where(User.id == user_id, User.has_access_pass.is_(True))
        .values(quiz_retakes_remaining=User.quiz_retakes_remaining + RETAKES_PER_PURCHASE)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise AccessPassRequiredError(user_id)


async def grant_access_pass(user_id: int) -> RetakeStatus:
    """Guest -> entitled with 5 retakes. Fails if the pass is already held."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            await get_or_create_user(session, user_id)
            await apply_access_pass(session, user_id)
    logger.info("Granted access pass to user %d", user_id)
    return await query_status(user_id)


async def grant_retake_bundle(user_id: int) -> RetakeStatus:
    """Add 5 retakes. Requires an access pass."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            await get_or_create_user(session, user_id)
            await apply_retake_bundle(session, user_id)
    logger.info("Granted retake bundle to user %d", user_id)
    return await query_status(user_id)


async def list_attempts(user_id: int) -> list[QuizAttemptRecord]:
    """Attempt history, newest first."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            await get_or_create_user(session, user_id)
            result = await session.execute(
                select(QuizAttempt)
                .where(QuizAttempt.user_id == user_id)
                .order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc())
            )
            rows = result.scalars().all()
    return [QuizAttemptRecord.model_validate(r) for r in rows]
