"""BizModelAI HTTP API.

FastAPI app serving scoring, AI analysis, the quiz entitlement tracker,
payments, the PDF report and result emails. JSON bodies are camelCase.
Run: bizmodel-fit-api
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncIterator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from . import __version__
from .analysis import FitAnalysisService
from .contacts import get_unpaid_user_email, store_unpaid_user_email
from .core.catalog import BUSINESS_MODELS
from .core.clients.chat import ChatClient
from .core.errors import BizFitError, InternalError, NotFoundError, ValidationError
from .core.models import ApiModel, MatchSummary, QuizAnswers
from .core.resources import get_business_resources
from .core.scoring import generate_personalized_paths
from .db import close_db, init_db
from .emailing import EmailSender
from .entitlements import list_attempts, query_status, record_attempt
from .payments import list_payments, purchase_access_pass, purchase_retake_bundle
from .reports import income_projections, render_pdf_report

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


# ─── App & lifespan ──────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper(), format=LOG_FORMAT)
    await init_db()
    try:
        yield
    finally:
        await close_db()


app = FastAPI(title="BizModelAI", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BizFitError)
async def bizfit_error_handler(request: Request, exc: BizFitError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ─── Dependencies ────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_analysis_service() -> FitAnalysisService:
    return FitAnalysisService(ChatClient.from_env())


@lru_cache(maxsize=1)
def get_email_sender() -> EmailSender:
    return EmailSender.from_env()


# ─── Request bodies ──────────────────────────────────────────────────────────


class QuizDataRequest(ApiModel):
    quiz_data: QuizAnswers


class SkillsRequest(QuizDataRequest):
    required_skills: list[str]
    business_model: str


class FitDescriptionsRequest(QuizDataRequest):
    business_matches: list[MatchSummary]


class InsightsRequest(QuizDataRequest):
    top_business_path: MatchSummary


class IncomeProjectionsRequest(ApiModel):
    business_id: str = Field(min_length=1)


class UserRequest(ApiModel):
    user_id: int


class QuizAttemptRequest(QuizDataRequest):
    user_id: int


class PdfRequest(QuizDataRequest):
    user_email: Optional[str] = None


class EmailRequest(ApiModel):
    email: str = Field(min_length=3)


class EmailQuizRequest(QuizDataRequest):
    email: str = Field(min_length=3)


class EmailResultsRequest(QuizDataRequest):
    session_id: str = Field(min_length=1)
    email: Optional[str] = None
    is_paid_user: bool = False


# ─── Catalog & scoring ───────────────────────────────────────────────────────


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@app.get("/api/business-models")
async def business_models() -> list[dict]:
    return [_dump(m) for m in BUSINESS_MODELS]


@app.get("/api/business-resources/{business_id}")
async def business_resources(business_id: str) -> dict:
    resources = get_business_resources(business_id)
    if resources is None:
        raise NotFoundError("Business model not found")
    return _dump(resources)


@app.post("/api/business-fit-scores")
async def business_fit_scores(body: QuizDataRequest) -> list[dict]:
    return [_dump(m) for m in generate_personalized_paths(body.quiz_data)]


# ─── AI analysis ─────────────────────────────────────────────────────────────


@app.post("/api/ai-business-fit-analysis")
async def ai_business_fit_analysis(
    body: QuizDataRequest,
    service: FitAnalysisService = Depends(get_analysis_service),
) -> dict:
    analysis = await service.analyze_business_fit(body.quiz_data)
    return _dump(analysis)


@app.post("/api/ai-personality-analysis")
async def ai_personality_analysis(
    body: QuizDataRequest,
    service: FitAnalysisService = Depends(get_analysis_service),
) -> dict:
    analysis = await service.analyze_personality(body.quiz_data)
    return _dump(analysis)


@app.post("/api/analyze-skills")
async def analyze_skills(
    body: SkillsRequest,
    service: FitAnalysisService = Depends(get_analysis_service),
) -> dict:
    analysis = await service.analyze_skills(body.quiz_data, body.required_skills, body.business_model)
    result = _dump(analysis)
    result["skillAssessments"] = [_dump(a) for a in analysis.skill_assessments]
    return result


@app.post("/api/generate-business-fit-descriptions")
async def generate_business_fit_descriptions(
    body: FitDescriptionsRequest,
    service: FitAnalysisService = Depends(get_analysis_service),
) -> dict:
    descriptions = await service.generate_fit_descriptions(body.quiz_data, body.business_matches)
    return {"descriptions": descriptions}


@app.post("/api/generate-personalized-insights")
async def generate_personalized_insights(
    body: InsightsRequest,
    service: FitAnalysisService = Depends(get_analysis_service),
) -> dict:
    insights = await service.generate_personalized_insights(body.quiz_data, body.top_business_path)
    return {"insights": insights}


@app.post("/api/generate-income-projections")
async def generate_income_projections(body: IncomeProjectionsRequest) -> dict:
    return income_projections(body.business_id)


# ─── Quiz entitlements ───────────────────────────────────────────────────────


@app.get("/api/quiz-retake-status/{user_id}")
async def quiz_retake_status(user_id: int) -> dict:
    return _dump(await query_status(user_id))


@app.post("/api/quiz-attempt")
async def quiz_attempt(body: QuizAttemptRequest) -> dict:
    attempt = await record_attempt(body.user_id, body.quiz_data)
    return {"success": True, "attemptId": attempt.id, "message": "Quiz attempt recorded successfully"}


@app.get("/api/quiz-attempts/{user_id}")
async def quiz_attempts(user_id: int) -> list[dict]:
    return [_dump(a) for a in await list_attempts(user_id)]


# ─── Payments ────────────────────────────────────────────────────────────────


@app.post("/api/create-access-pass-payment")
async def create_access_pass_payment(body: UserRequest) -> dict:
    payment = await purchase_access_pass(body.user_id)
    return {"success": True, "paymentId": payment.id, "message": "Access pass purchased successfully"}


@app.post("/api/create-retake-bundle-payment")
async def create_retake_bundle_payment(body: UserRequest) -> dict:
    payment = await purchase_retake_bundle(body.user_id)
    return {"success": True, "paymentId": payment.id, "message": "Quiz retakes purchased successfully"}


@app.get("/api/payment-history/{user_id}")
async def payment_history(user_id: int) -> list[dict]:
    return [_dump(p) for p in await list_payments(user_id)]


# ─── Report & email ──────────────────────────────────────────────────────────


@app.post("/api/generate-pdf")
async def generate_pdf(body: PdfRequest) -> Response:
    pdf = await asyncio.to_thread(render_pdf_report, body.quiz_data, body.user_email)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="business-report.pdf"'},
    )


def _email_result(sent: bool, message: str) -> dict:
    if not sent:
        raise InternalError("Failed to send email")
    return {"success": True, "message": message}


@app.post("/api/send-quiz-results")
async def send_quiz_results(body: EmailQuizRequest, sender: EmailSender = Depends(get_email_sender)) -> dict:
    sent = await sender.send_quiz_results(body.email, body.quiz_data)
    return _email_result(sent, "Quiz results sent successfully")


@app.post("/api/send-welcome-email")
async def send_welcome_email(body: EmailRequest, sender: EmailSender = Depends(get_email_sender)) -> dict:
    sent = await sender.send_welcome_email(body.email)
    return _email_result(sent, "Welcome email sent successfully")


@app.post("/api/send-full-report")
async def send_full_report(body: EmailQuizRequest, sender: EmailSender = Depends(get_email_sender)) -> dict:
    sent = await sender.send_full_report(body.email, body.quiz_data)
    return _email_result(sent, "Full report sent successfully")


@app.post("/api/email-results")
async def email_results(body: EmailResultsRequest, sender: EmailSender = Depends(get_email_sender)) -> dict:
    """Paid users get the full report; unpaid users get results at their stored address."""
    if body.is_paid_user:
        if not body.email:
            raise ValidationError("Email is required")
        sent = await sender.send_full_report(body.email, body.quiz_data)
        return _email_result(sent, "Full report sent successfully")

    stored = await get_unpaid_user_email(body.session_id)
    if stored:
        sent = await sender.send_quiz_results(stored, body.quiz_data)
        return _email_result(sent, "Results sent to your email again")

    if not body.email:
        raise ValidationError("Email is required for new users")
    recipient = body.email
    if not await store_unpaid_user_email(body.session_id, body.email, body.quiz_data):
        recipient = await get_unpaid_user_email(body.session_id) or body.email
    sent = await sender.send_quiz_results(recipient, body.quiz_data)
    return _email_result(sent, "Results sent to your email")


@app.get("/api/get-stored-email/{session_id}")
async def get_stored_email(session_id: str) -> dict:
    return {"email": await get_unpaid_user_email(session_id)}


def main():
    import uvicorn

    uvicorn.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=int(os.environ.get("PORT", "8000")))


if __name__ == "__main__":
    main()
