"""Emails left by users without an account, keyed by quiz session."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .core.models import QuizAnswers
from .db import get_session_factory
from .sqlmodels import UnpaidUserEmail

logger = logging.getLogger(__name__)


async def get_unpaid_user_email(session_id: str) -> Optional[str]:
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(
            select(UnpaidUserEmail.email).where(UnpaidUserEmail.session_id == session_id)
        )
        return result.scalar_one_or_none()


async def store_unpaid_user_email(session_id: str, email: str, answers: QuizAnswers) -> bool:
    """Store the email for a session. The first stored email wins.

    Returns False when the session already had an email.
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        existing = await session.execute(
            select(UnpaidUserEmail.id).where(UnpaidUserEmail.session_id == session_id)
        )
        if existing.scalar_one_or_none() is not None:
            return False
        session.add(UnpaidUserEmail(
            session_id=session_id,
            email=email.strip().lower(),
            quiz_data=answers.snapshot(),
            created_at=datetime.utcnow(),
        ))
        try:
            await session.commit()
        except IntegrityError:
            # Another request stored an email for this session first.
            await session.rollback()
            logger.info("Email for session %s was already stored", session_id)
            return False
    logger.info("Stored email for session %s", session_id)
    return True
