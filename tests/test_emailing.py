from __future__ import annotations

import json

import httpx

from bizmodel_fit.core.models import QuizAnswers
from bizmodel_fit.emailing import RESEND_API_URL, EmailSender

ANSWERS = QuizAnswers.model_validate({"successIncomeGoal": 4000, "techSkillsRating": 4})


async def test_sends_through_resend():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "abc"})

    sender = EmailSender(api_key="re_123", sender="Test <t@example.com>", transport=httpx.MockTransport(handler))

    assert await sender.send_quiz_results("user@example.com", ANSWERS) is True

    request = requests[0]
    payload = json.loads(request.content)
    assert str(request.url) == RESEND_API_URL
    assert request.headers["Authorization"] == "Bearer re_123"
    assert payload["from"] == "Test <t@example.com>"
    assert payload["subject"] == "Your Business Model Quiz Results"
    assert payload["html"].count("<tr>") == 4


async def test_full_report_lists_every_model():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content)["html"])
        return httpx.Response(200, json={"id": "abc"})

    sender = EmailSender(api_key="re_123", transport=httpx.MockTransport(handler))
    assert await sender.send_full_report("user@example.com", ANSWERS) is True
    assert "Freelancing" in bodies[0]
    assert "High-Ticket Sales" in bodies[0]


async def test_rejected_email_returns_false():
    sender = EmailSender(
        api_key="re_123",
        transport=httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "invalid to"})),
    )
    assert await sender.send_welcome_email("not-an-email") is False


async def test_network_error_returns_false():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    sender = EmailSender(api_key="re_123", transport=httpx.MockTransport(handler))
    assert await sender.send_welcome_email("user@example.com") is False


async def test_disabled_without_api_key(monkeypatch):
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    sender = EmailSender.from_env()

    assert sender.enabled is False
    assert await sender.send_welcome_email("user@example.com") is False
