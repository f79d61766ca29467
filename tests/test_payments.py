from __future__ import annotations

import pytest

from bizmodel_fit.core.errors import AccessPassAlreadyHeldError, AccessPassRequiredError, NotFoundError
from bizmodel_fit.core.models import PaymentStatus, PaymentType
from bizmodel_fit.entitlements import query_status
from bizmodel_fit.payments import list_payments, purchase_access_pass, purchase_retake_bundle

pytestmark = pytest.mark.usefixtures("db")


async def test_payments_require_existing_user():
    with pytest.raises(NotFoundError):
        await purchase_access_pass(99)
    with pytest.raises(NotFoundError):
        await purchase_retake_bundle(99)
    assert await list_payments(99) == []


async def test_access_pass_purchase_completes_and_grants():
    await query_status(1)

    payment = await purchase_access_pass(1)

    assert payment.type == PaymentType.ACCESS_PASS
    assert payment.status == PaymentStatus.COMPLETED
    assert payment.amount == "9.99"
    assert payment.currency == "usd"
    assert payment.retakes_granted == 5
    assert payment.completed_at is not None

    status = await query_status(1)
    assert status.has_access_pass is True
    assert status.quiz_retakes_remaining == 5


async def test_second_access_pass_is_rejected_without_a_payment():
    await query_status(2)
    await purchase_access_pass(2)

    with pytest.raises(AccessPassAlreadyHeldError):
        await purchase_access_pass(2)

    assert len(await list_payments(2)) == 1


async def test_retake_bundle_purchase():
    await query_status(3)
    with pytest.raises(AccessPassRequiredError):
        await purchase_retake_bundle(3)

    await purchase_access_pass(3)
    bundle = await purchase_retake_bundle(3)

    assert bundle.amount == "4.99"
    assert (await query_status(3)).quiz_retakes_remaining == 10

    history = await list_payments(3)
    assert [p.id for p in history] == [bundle.id, history[1].id]
    assert history[1].type == PaymentType.ACCESS_PASS
