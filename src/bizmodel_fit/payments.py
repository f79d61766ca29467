"""Access pass and retake bundle purchases.

No payment gateway is integrated yet: a payment is created pending and
completed in the same transaction that grants the retakes.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .core.errors import AccessPassAlreadyHeldError, AccessPassRequiredError, NotFoundError
from .core.models import PaymentRecord, PaymentStatus, PaymentType
from .db import get_session_factory
from .entitlements import RETAKES_PER_PURCHASE, apply_access_pass, apply_retake_bundle
from .sqlmodels import Payment, User

logger = logging.getLogger(__name__)

PRICES: dict[PaymentType, str] = {
    PaymentType.ACCESS_PASS: "9.99",
    PaymentType.RETAKE_BUNDLE: "4.99",
}
CURRENCY = "usd"


async def _require_user(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _create_pending(session: AsyncSession, user_id: int, payment_type: PaymentType) -> Payment:
    payment = Payment(
        user_id=user_id,
        amount=PRICES[payment_type],
        currency=CURRENCY,
        type=payment_type.value,
        status=PaymentStatus.PENDING.value,
        retakes_granted=RETAKES_PER_PURCHASE,
        created_at=datetime.utcnow(),
    )
    session.add(payment)
    await session.flush()
    return payment


def _complete(payment: Payment) -> None:
    payment.status = PaymentStatus.COMPLETED.value
    payment.completed_at = datetime.utcnow()


async def purchase_access_pass(user_id: int) -> PaymentRecord:
    """Sell the $9.99 access pass: 5 retakes, once per user."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            user = await _require_user(session, user_id)
            if user.has_access_pass:
                raise AccessPassAlreadyHeldError(user_id)

            payment = await _create_pending(session, user_id, PaymentType.ACCESS_PASS)
            await apply_access_pass(session, user_id)
            _complete(payment)

    logger.info("Access pass payment %d completed for user %d", payment.id, user_id)
    return PaymentRecord.model_validate(payment)


async def purchase_retake_bundle(user_id: int) -> PaymentRecord:
    """Sell a $4.99 bundle of 5 more retakes to an access-pass holder."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            user = await _require_user(session, user_id)
            if not user.has_access_pass:
                raise AccessPassRequiredError(user_id)

            payment = await _create_pending(session, user_id, PaymentType.RETAKE_BUNDLE)
            await apply_retake_bundle(session, user_id)
            _complete(payment)

    logger.info("Retake bundle payment %d completed for user %d", payment.id, user_id)
    return PaymentRecord.model_validate(payment)


async def list_payments(user_id: int) -> list[PaymentRecord]:
    """Payment history, newest first. Unknown users have none."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        rows = result.scalars().all()
    return [PaymentRecord.model_validate(r) for r in rows]
