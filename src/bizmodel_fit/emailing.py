"""Result emails sent through the Resend HTTP API.

API docs: https://resend.com/docs/api-reference/emails/send-email
Sending never raises: every method reports success as a bool and failures
are logged. Without RESEND_API_KEY sending is disabled.
"""

from __future__ import annotations

import html
import logging
import os
from typing import Optional

import httpx

from .core.models import QuizAnswers
from .core.scoring import fit_label, generate_personalized_paths

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_FROM = "BizModelAI <noreply@bizmodelai.com>"
DEFAULT_TIMEOUT_SECONDS = 12.0


def _ranking_rows(answers: QuizAnswers, limit: Optional[int]) -> str:
    ranked = generate_personalized_paths(answers)
    if limit is not None:
        ranked = ranked[:limit]
    rows = []
    for rank, model in enumerate(ranked, start=1):
        rows.append(
            f"<tr><td>{rank}</td><td><b>{html.escape(model.name)}</b></td>"
            f"<td>{model.fit_score}% ({fit_label(model.fit_score)})</td>"
            f"<td>{html.escape(model.time_to_profit)}</td>"
            f"<td>{html.escape(model.potential_income)}</td></tr>"
        )
    return (
        "<table cellpadding='6'><tr><th>#</th><th>Business model</th><th>Fit</th>"
        "<th>Time to profit</th><th>Income potential</th></tr>" + "".join(rows) + "</table>"
    )


class EmailSender:
    def __init__(
        self,
        api_key: str = "",
        sender: str = DEFAULT_FROM,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls) -> "EmailSender":
        api_key = os.environ.get("RESEND_API_KEY", "")
        if not api_key:
            logger.warning("RESEND_API_KEY not set, email sending disabled")
        return cls(api_key=api_key, sender=os.environ.get("EMAIL_FROM", DEFAULT_FROM))

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send_email(self, to: str, subject: str, html_body: str) -> bool:
        if not self.enabled:
            logger.warning("Email to %s not sent: sending is disabled", to)
            return False

        payload = {
            "from": self.sender,
            "to": [to.strip().lower()],
            "subject": subject,
            "html": html_body,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(RESEND_API_URL, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Resend rejected email to %s: HTTP %d %s", to, exc.response.status_code, exc.response.text)
            return False
        except httpx.HTTPError as exc:
            logger.error("Resend request for %s failed: %s", to, exc)
            return False

        logger.info("Sent '%s' to %s", subject, to)
        return True

    async def send_quiz_results(self, to: str, answers: QuizAnswers) -> bool:
        """Top three matches, with a pointer to the full report."""
        body = (
            "<h2>Your Business Model Quiz Results</h2>"
            "<p>Here are the business models that fit you best:</p>"
            + _ranking_rows(answers, limit=3)
            + "<p>Unlock your full report to see every model, your skills gap and income projections.</p>"
        )
        return await self.send_email(to, "Your Business Model Quiz Results", body)

    async def send_welcome_email(self, to: str) -> bool:
        body = (
            "<h2>Welcome to BizModelAI</h2>"
            "<p>Take the quiz to find the business model that fits your goals, "
            "skills and schedule.</p>"
        )
        return await self.send_email(to, "Welcome to BizModelAI", body)

    async def send_full_report(self, to: str, answers: QuizAnswers) -> bool:
        """Every catalog model, ranked."""
        body = (
            "<h2>Your Full Business Model Report</h2>"
            "<p>All business models, ranked by how well they fit you:</p>"
            + _ranking_rows(answers, limit=None)
        )
        return await self.send_email(to, "Your Full Business Model Report", body)
