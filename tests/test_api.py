from __future__ import annotations

import json

import httpx
import pytest

from bizmodel_fit import __version__
from bizmodel_fit.analysis import FitAnalysisService
from bizmodel_fit.api import app, get_analysis_service, get_email_sender
from bizmodel_fit.core.catalog import BUSINESS_MODELS
from bizmodel_fit.emailing import EmailSender


@pytest.fixture
def outbox() -> list[dict]:
    return []


@pytest.fixture
async def client(db, outbox):
    def resend(request: httpx.Request) -> httpx.Response:
        outbox.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "email-1"})

    sender = EmailSender(api_key="re_test", transport=httpx.MockTransport(resend))
    app.dependency_overrides[get_analysis_service] = lambda: FitAnalysisService(None)
    app.dependency_overrides[get_email_sender] = lambda: sender
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


async def test_business_models(client):
    response = await client.get("/api/business-models")
    body = response.json()
    assert [m["id"] for m in body] == [m.id for m in BUSINESS_MODELS]
    assert "timeToProfit" in body[0]


async def test_business_fit_scores_ranked(client, freelancer_answers):
    response = await client.post("/api/business-fit-scores", json={"quizData": freelancer_answers})
    body = response.json()
    scores = [m["fitScore"] for m in body]
    assert scores == sorted(scores, reverse=True)
    assert len(body) == len(BUSINESS_MODELS)


async def test_missing_quiz_data_is_400(client):
    response = await client.post("/api/business-fit-scores", json={})
    assert response.status_code == 400
    assert "error" in response.json()


async def test_ai_fit_analysis_falls_back(client, freelancer_answers):
    response = await client.post("/api/ai-business-fit-analysis", json={"quizData": freelancer_answers})
    body = response.json()
    assert response.status_code == 200
    assert body["source"] == "fallback"
    assert body["topMatches"][0]["businessPath"]["id"]
    assert "fitScore" in body["topMatches"][0]["analysis"]


async def test_analyze_skills(client, freelancer_answers):
    response = await client.post("/api/analyze-skills", json={
        "quizData": freelancer_answers,
        "requiredSkills": ["Writing", "SEO", "Outreach"],
        "businessModel": "Freelancing",
    })
    body = response.json()
    assert [a["skill"] for a in body["skillAssessments"]] == ["Writing", "SEO", "Outreach"]
    assert [a["status"] for a in body["skillAssessments"]] == ["have", "working-on", "need"]
    assert len(body["workingOn"]) == 1


async def test_fit_descriptions_without_ai(client, freelancer_answers):
    response = await client.post("/api/generate-business-fit-descriptions", json={
        "quizData": freelancer_answers,
        "businessMatches": [{"id": "freelancing", "name": "Freelancing", "fitScore": 93}],
    })
    descriptions = response.json()["descriptions"]
    assert descriptions[0]["businessId"] == "freelancing"
    assert "top match" in descriptions[0]["description"]


async def test_insights_without_ai_is_502(client, freelancer_answers):
    response = await client.post("/api/generate-personalized-insights", json={
        "quizData": freelancer_answers,
        "topBusinessPath": {"id": "freelancing", "name": "Freelancing", "fitScore": 93},
    })
    assert response.status_code == 502
    assert response.json() == {"error": "AI analysis is not configured"}


async def test_income_projections(client):
    freelancing = (await client.post("/api/generate-income-projections", json={"businessId": "freelancing"})).json()
    unknown = (await client.post("/api/generate-income-projections", json={"businessId": "nope"})).json()
    affiliate = (await client.post("/api/generate-income-projections", json={"businessId": "affiliate-marketing"})).json()

    assert len(freelancing["monthlyProjections"]) == 12
    assert freelancing["averageTimeToProfit"] == "1-2 months"
    assert unknown == affiliate


async def test_quiz_attempt_flow(client, freelancer_answers):
    status = (await client.get("/api/quiz-retake-status/12")).json()
    assert status["isGuestUser"] is True
    assert status["state"] == "guest"

    attempt = await client.post("/api/quiz-attempt", json={"userId": 12, "quizData": freelancer_answers})
    assert attempt.status_code == 200
    assert attempt.json()["success"] is True
    assert attempt.json()["message"] == "Quiz attempt recorded successfully"

    payment = await client.post("/api/create-access-pass-payment", json={"userId": 12})
    assert payment.json()["success"] is True

    status = (await client.get("/api/quiz-retake-status/12")).json()
    assert status["hasAccessPass"] is True
    assert status["quizRetakesRemaining"] == 5
    assert status["attemptsCount"] == 1

    again = await client.post("/api/create-access-pass-payment", json={"userId": 12})
    assert again.status_code == 400
    assert again.json() == {"error": "User already has access pass"}

    history = (await client.get("/api/payment-history/12")).json()
    assert [p["type"] for p in history] == ["access_pass"]

    attempts = (await client.get("/api/quiz-attempts/12")).json()
    assert attempts[0]["quizData"]["incomeGoal"] == 5000


async def test_exhausted_attempt_is_403(client):
    await client.get("/api/quiz-retake-status/13")
    await client.post("/api/create-access-pass-payment", json={"userId": 13})
    for _ in range(5):
        ok = await client.post("/api/quiz-attempt", json={"userId": 13, "quizData": {}})
        assert ok.status_code == 200

    blocked = await client.post("/api/quiz-attempt", json={"userId": 13, "quizData": {}})
    assert blocked.status_code == 403
    assert "No quiz retakes remaining" in blocked.json()["error"]


async def test_payment_for_unknown_user_is_404(client):
    response = await client.post("/api/create-retake-bundle-payment", json={"userId": 404})
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


async def test_generate_pdf(client, freelancer_answers):
    response = await client.post("/api/generate-pdf", json={"quizData": freelancer_answers, "userEmail": "a@b.co"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "business-report.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


async def test_send_quiz_results(client, outbox, freelancer_answers):
    response = await client.post("/api/send-quiz-results", json={"email": "Ana@Example.com", "quizData": freelancer_answers})
    assert response.json()["success"] is True
    assert outbox[0]["to"] == ["ana@example.com"]


async def test_email_failure_is_500(client, freelancer_answers):
    app.dependency_overrides[get_email_sender] = lambda: EmailSender(api_key="")
    response = await client.post("/api/send-welcome-email", json={"email": "ana@example.com"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send email"}


async def test_email_results_for_unpaid_user(client, outbox, freelancer_answers):
    missing = await client.post("/api/email-results", json={"sessionId": "s1", "quizData": freelancer_answers})
    assert missing.status_code == 400

    first = await client.post("/api/email-results", json={
        "sessionId": "s1", "email": "First@Example.com", "quizData": freelancer_answers,
    })
    assert first.json()["message"] == "Results sent to your email"

    again = await client.post("/api/email-results", json={
        "sessionId": "s1", "email": "other@example.com", "quizData": freelancer_answers,
    })
    assert again.json()["message"] == "Results sent to your email again"
    assert [m["to"] for m in outbox] == [["first@example.com"], ["first@example.com"]]

    stored = (await client.get("/api/get-stored-email/s1")).json()
    assert stored == {"email": "first@example.com"}
    assert (await client.get("/api/get-stored-email/unknown")).json() == {"email": None}


async def test_email_results_for_paid_user_sends_full_report(client, outbox, freelancer_answers):
    response = await client.post("/api/email-results", json={
        "sessionId": "s2", "email": "paid@example.com", "quizData": freelancer_answers, "isPaidUser": True,
    })
    assert response.json()["message"] == "Full report sent successfully"
    assert outbox[0]["subject"] == "Your Full Business Model Report"
    assert (await client.get("/api/get-stored-email/s2")).json() == {"email": None}


async def test_ai_personality_analysis_falls_back(client, freelancer_answers):
    response = await client.post("/api/ai-personality-analysis", json={"quizData": freelancer_answers})
    body = response.json()

    assert response.status_code == 200
    assert body["source"] == "fallback"
    assert "growthAreas" in body
    assert {t["trait"] for t in body["traits"]} >= {"Self-Motivation", "Tech Comfort"}


async def test_ai_personality_analysis_requires_quiz_data(client):
    response = await client.post("/api/ai-personality-analysis", json={})
    assert response.status_code == 400


async def test_business_resources(client):
    response = await client.get("/api/business-resources/freelancing")
    body = response.json()

    assert response.status_code == 200
    assert body["businessId"] == "freelancing"
    assert body["tools"][0]["url"].startswith("https://")

    missing = await client.get("/api/business-resources/crypto-mining")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Business model not found"}
