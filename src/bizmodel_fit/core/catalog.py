"""Business model catalog and per-model fit profiles.

The catalog order is significant: ranking ties keep this order.
Fit profiles hold the "sweet spot" bands the scorer compares answers
against. Bands are (min, max) inclusive; timeline and work style are sets
of accepted answers.
"""

from __future__ import annotations

from typing import Optional

from .models import BusinessModel

BUSINESS_MODELS: tuple[BusinessModel, ...] = (
    BusinessModel(
        id="content-creation-ugc",
        name="Content Creation & UGC",
        description="Create engaging content and user-generated content for brands",
        time_to_profit="2-4 weeks",
        potential_income="$2K-15K/month",
        difficulty="Beginner",
        icon="\U0001f4f1",
    ),
    BusinessModel(
        id="affiliate-marketing",
        name="Affiliate Marketing",
        description="Promote other people's products and earn commission on sales",
        time_to_profit="3-6 months",
        potential_income="$100-10K+/month",
        difficulty="Easy",
        icon="\U0001f517",
    ),
    BusinessModel(
        id="freelancing",
        name="Freelancing",
        description="Offer your skills and services to clients on a project basis",
        time_to_profit="1-2 weeks",
        potential_income="$500-8K/month",
        difficulty="Easy",
        icon="\U0001f4bc",
    ),
    BusinessModel(
        id="e-commerce-dropshipping",
        name="E-commerce / Dropshipping",
        description="Sell products online without holding inventory",
        time_to_profit="2-6 months",
        potential_income="$1K-50K/month",
        difficulty="Medium",
        icon="\U0001f6d2",
    ),
    BusinessModel(
        id="virtual-assistant",
        name="Virtual Assistant",
        description="Provide administrative support to businesses remotely",
        time_to_profit="1-3 weeks",
        potential_income="$300-5K/month",
        difficulty="Easy",
        icon="\U0001f4bb",
    ),
    BusinessModel(
        id="online-coaching-consulting",
        name="Online Coaching & Consulting",
        description="Share your expertise through 1-on-1 coaching or consulting",
        time_to_profit="4-8 weeks",
        potential_income="$1K-20K/month",
        difficulty="Medium",
        icon="\U0001f3af",
    ),
    BusinessModel(
        id="print-on-demand",
        name="Print on Demand",
        description="Design and sell custom products without inventory",
        time_to_profit="6-12 weeks",
        potential_income="$200-8K/month",
        difficulty="Easy",
        icon="\U0001f3a8",
    ),
    BusinessModel(
        id="youtube-automation",
        name="YouTube Automation",
        description="Create and monetize YouTube channels with outsourced content",
        time_to_profit="3-9 months",
        potential_income="$500-15K/month",
        difficulty="Medium",
        icon="\U0001f4f9",
    ),
    BusinessModel(
        id="local-service-arbitrage",
        name="Local Service Arbitrage",
        description="Connect local customers with service providers",
        time_to_profit="2-8 weeks",
        potential_income="$1K-12K/month",
        difficulty="Medium",
        icon="\U0001f3e0",
    ),
    BusinessModel(
        id="app-saas-development",
        name="App / SaaS Development",
        description="Build and sell software products on a subscription basis",
        time_to_profit="6-12 months",
        potential_income="$1K-50K+/month",
        difficulty="Hard",
        icon="\U0001f4f2",
    ),
    BusinessModel(
        id="high-ticket-sales",
        name="High-Ticket Sales",
        description="Close premium offers for other businesses on commission",
        time_to_profit="1-2 months",
        potential_income="$3K-25K/month",
        difficulty="Medium",
        icon="\U0001f4de",
    ),
)

_BY_ID: dict[str, BusinessModel] = {m.id: m for m in BUSINESS_MODELS}

SOLO = frozenset({"solo-only", "mostly-solo"})

# Each profile names the answer field feeding the communication factor;
# everything else reads the same field for every model.
FIT_PROFILES: dict[str, dict] = {
    "affiliate-marketing": {
        "income": (1000, 8000),
        "timeline": frozenset({"3-6-months", "6-12-months", "no-rush"}),
        "budget": (0, 500),
        "skills": (2, 4),
        "communication": (2, 4),
        "communication_field": "direct_communication_enjoyment",
        "creativity": (3, 5),
        "risk": (2, 4),
        "time_commitment": (10, 30),
        "motivation": (3, 5),
        "work_style": SOLO,
    },
    "freelancing": {
        "income": (2000, 10000),
        "timeline": frozenset({"under-1-month", "1-3-months"}),
        "budget": (0, 200),
        "skills": (3, 5),
        "communication": (3, 5),
        "communication_field": "direct_communication_enjoyment",
        "creativity": (2, 5),
        "risk": (2, 4),
        "time_commitment": (15, 40),
        "motivation": (4, 5),
        "work_style": SOLO,
    },
    "e-commerce-dropshipping": {
        "income": (3000, 15000),
        "timeline": frozenset({"3-6-months", "6-12-months"}),
        "budget": (500, 2000),
        "skills": (3, 5),
        "communication": (2, 4),
        "communication_field": "direct_communication_enjoyment",
        "creativity": (3, 5),
        "risk": (3, 5),
        "time_commitment": (20, 50),
        "motivation": (3, 5),
        "work_style": SOLO,
    },
    "content-creation-ugc": {
        "income": (1000, 6000),
        "timeline": frozenset({"6-12-months", "1-year-plus", "no-rush"}),
        "budget": (0, 500),
        "skills": (2, 4),
        "communication": (4, 5),
        "communication_field": "brand_face_comfort",
        "creativity": (4, 5),
        "risk": (2, 4),
        "time_commitment": (10, 30),
        "motivation": (3, 5),
        "work_style": SOLO,
    },
    "app-saas-development": {
        "income": (5000, 50000),
        "timeline": frozenset({"6-12-months", "1-year-plus"}),
        "budget": (0, 1000),
        "skills": (4, 5),
        "communication": (2, 4),
        "communication_field": "direct_communication_enjoyment",
        "creativity": (3, 5),
        "risk": (3, 5),
        "time_commitment": (30, 60),
        "motivation": (4, 5),
        "work_style": SOLO,
    },
    "high-ticket-sales": {
        "income": (5000, 25000),
        "timeline": frozenset({"under-1-month", "1-3-months"}),
        "budget": (0, 1000),
        "skills": (2, 4),
        "communication": (4, 5),
        "communication_field": "direct_communication_enjoyment",
        "creativity": (2, 4),
        "risk": (4, 5),
        "time_commitment": (20, 50),
        "motivation": (4, 5),
        "work_style": SOLO | {"team-focused"},
    },
    "online-coaching-consulting": {
        "income": (2000, 15000),
        "timeline": frozenset({"1-3-months", "3-6-months"}),
        "budget": (0, 500),
        "skills": (2, 4),
        "communication": (4, 5),
        "communication_field": "direct_communication_enjoyment",
        "creativity": (3, 5),
        "risk": (3, 5),
        "time_commitment": (15, 40),
        "motivation": (4, 5),
        "work_style": frozenset({"team-focused", "balanced"}),
    },
}

# Models that depend on live client calls.
CALL_HEAVY_MODELS = frozenset({"high-ticket-sales", "online-coaching-consulting"})


def get_business_model(business_id: str) -> Optional[BusinessModel]:
    return _BY_ID.get(business_id)


def get_fit_profile(business_id: str) -> Optional[dict]:
    return FIT_PROFILES.get(business_id)
