"""PDF business report and income projections.

The report is rendered with reportlab from the deterministic ranking, so it
never depends on the AI service being up.
"""

from __future__ import annotations

import html
import io
import logging
from datetime import datetime
from typing import Any, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .analysis import build_user_profile
from .core.errors import InternalError
from .core.models import QuizAnswers
from .core.scoring import fit_label, generate_personalized_paths

logger = logging.getLogger(__name__)

REPORT_TITLE = "Your Business Model Fit Report"
ACCENT = colors.HexColor("#2563eb")
LINE = colors.HexColor("#cbd5e1")


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("title", parent=base["Title"], textColor=ACCENT, fontSize=20, spaceAfter=6),
        "meta": ParagraphStyle("meta", parent=base["Normal"], textColor=colors.grey, fontSize=9),
        "h2": ParagraphStyle("h2", parent=base["Heading2"], textColor=ACCENT, spaceBefore=10, spaceAfter=4),
        "body": ParagraphStyle("body", parent=base["Normal"], fontSize=10, leading=13),
        "cell": ParagraphStyle("cell", parent=base["Normal"], fontSize=9, leading=11),
    }


def render_pdf_report(answers: QuizAnswers, email: Optional[str] = None) -> bytes:
    """Render the ranked business models and the user's profile as a PDF."""
    ranked = generate_personalized_paths(answers)
    styles = _styles()

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=44,
        rightMargin=44,
        topMargin=42,
        bottomMargin=34,
        title=REPORT_TITLE,
        author="BizModelAI",
    )

    story: list[Any] = [Paragraph(REPORT_TITLE, styles["title"])]
    meta = f"Generated {datetime.utcnow():%B %d, %Y}"
    if email:
        meta += f" for {html.escape(email)}"
    story.append(Paragraph(meta, styles["meta"]))
    story.append(HRFlowable(width="100%", color=LINE, thickness=0.9, spaceBefore=4, spaceAfter=8))

    top = ranked[0]
    story.append(Paragraph("Your Best Match", styles["h2"]))
    story.append(Paragraph(
        f"<b>{html.escape(top.name)}</b> ({top.fit_score}/100, {fit_label(top.fit_score)}). "
        f"{html.escape(top.description)}.",
        styles["body"],
    ))

    story.append(Paragraph("All Business Models", styles["h2"]))
    rows: list[list[Any]] = [["#", "Business model", "Fit", "Time to profit", "Income potential"]]
    for rank, model in enumerate(ranked, start=1):
        rows.append([
            str(rank),
            Paragraph(html.escape(model.name), styles["cell"]),
            Paragraph(f"{model.fit_score} · {fit_label(model.fit_score)}", styles["cell"]),
            Paragraph(html.escape(model.time_to_profit), styles["cell"]),
            Paragraph(html.escape(model.potential_income), styles["cell"]),
        ])
    table = Table(rows, colWidths=[22, doc.width * 0.36, doc.width * 0.2, doc.width * 0.17, None], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), ACCENT),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f1f5f9")]),
        ("BOX", (0, 0), (-1, -1), 0.6, LINE),
        ("LINEBELOW", (0, 0), (-1, -1), 0.3, LINE),
    ]))
    story.append(table)

    story.append(Paragraph("Your Profile", styles["h2"]))
    for line in build_user_profile(answers).splitlines():
        if "not specified" in line:
            continue
        story.append(Paragraph(html.escape(line), styles["body"]))
    story.append(Spacer(1, 6))

    try:
        doc.build(story)
    except Exception as exc:
        logger.error("PDF rendering failed: %s", exc, exc_info=True)
        raise InternalError(f"Failed to generate PDF: {exc}") from exc

    output.seek(0)
    return output.getvalue()


# ─── Income projections ──────────────────────────────────────────────────────


def _projection(months: list[tuple[int, list[str]]], time_to_profit: str, key_factors: list[str], assumptions: list[str]) -> dict:
    monthly = []
    cumulative = 0
    for i, (income, milestones) in enumerate(months, start=1):
        cumulative += income
        entry: dict[str, Any] = {"month": f"Month {i}", "income": income, "cumulativeIncome": cumulative}
        if milestones:
            entry["milestones"] = milestones
        monthly.append(entry)
    return {
        "monthlyProjections": monthly,
        "averageTimeToProfit": time_to_profit,
        "projectedYearOneIncome": cumulative,
        "keyFactors": key_factors,
        "assumptions": assumptions,
    }


INCOME_PROJECTIONS: dict[str, dict] = {
    "affiliate-marketing": _projection(
        [
            (0, ["Setup website", "Choose niche"]),
            (50, ["First content published"]),
            (200, ["First affiliate sale"]),
            (500, ["Traffic growth"]),
            (800, ["SEO improvement"]),
            (1200, ["Email list building"]),
            (1600, []), (2000, []), (2500, []), (3000, []), (3500, []), (4000, []),
        ],
        "3-4 months",
        ["Content quality", "SEO optimization", "Audience building", "Product selection"],
        ["20 hours/week commitment", "Consistent content creation", "Learning SEO basics"],
    ),
    "freelancing": _projection(
        [
            (500, ["Profile setup", "First client"]),
            (1200, ["Portfolio building"]),
            (2000, ["Client testimonials"]),
            (2800, ["Rate increase"]),
            (3500, ["Repeat clients"]),
            (4200, ["Referral network"]),
            (4800, []), (5200, []), (5600, []), (6000, []), (6200, []), (6500, []),
        ],
        "1-2 months",
        ["Skill level", "Portfolio quality", "Client communication", "Pricing strategy"],
        ["Existing marketable skills", "25 hours/week availability", "Professional presentation"],
    ),
}
DEFAULT_PROJECTION_ID = "affiliate-marketing"


def income_projections(business_id: str) -> dict:
    """Twelve-month projection; unknown ids get the affiliate-marketing table."""
    return INCOME_PROJECTIONS.get(business_id, INCOME_PROJECTIONS[DEFAULT_PROJECTION_ID])
