"""Starter resources for each business model in the catalog."""

from __future__ import annotations

from typing import Optional

from .catalog import get_business_model
from .models import BusinessResources, Resource


def _r(title: str, url: str, description: str) -> Resource:
    return Resource(title=title, url=url, description=description)


# business id -> (tools, learning, communities)
RESOURCES: dict[str, tuple[list[Resource], list[Resource], list[Resource]]] = {
    "content-creation-ugc": (
        [
            _r("CapCut", "https://www.capcut.com", "Free short-form video editor"),
            _r("Canva", "https://www.canva.com", "Thumbnails, graphics and brand kits"),
        ],
        [
            _r("YouTube Creator Academy", "https://www.youtube.com/creators", "Official lessons on growing a channel"),
            _r("TikTok Creator Portal", "https://www.tiktok.com/creators/creator-portal", "Platform guides for creators"),
        ],
        [
            _r("r/NewTubers", "https://www.reddit.com/r/NewTubers", "Feedback and support for new creators"),
        ],
    ),
    "affiliate-marketing": (
        [
            _r("WordPress", "https://wordpress.org", "Site builder for review and content sites"),
            _r("Amazon Associates", "https://affiliate-program.amazon.com", "Large general-purpose affiliate program"),
        ],
        [
            _r("Google Search Central", "https://developers.google.com/search/docs", "How search ranks content"),
            _r("Ahrefs Blog", "https://ahrefs.com/blog", "SEO and keyword research guides"),
        ],
        [
            _r("r/Affiliatemarketing", "https://www.reddit.com/r/Affiliatemarketing", "Discussion of programs and tactics"),
        ],
    ),
    "freelancing": (
        [
            _r("Upwork", "https://www.upwork.com", "Marketplace for freelance projects"),
            _r("Fiverr", "https://www.fiverr.com", "Sell fixed-price service packages"),
        ],
        [
            _r("Upwork Resources", "https://www.upwork.com/resources", "Guides on proposals and pricing"),
        ],
        [
            _r("r/freelance", "https://www.reddit.com/r/freelance", "Advice on clients, rates and contracts"),
        ],
    ),
    "e-commerce-dropshipping": (
        [
            _r("Shopify", "https://www.shopify.com", "Hosted store builder"),
            _r("AutoDS", "https://www.autods.com", "Product sourcing and order automation"),
        ],
        [
            _r("Shopify Learn", "https://www.shopify.com/learn", "Free courses on running an online store"),
        ],
        [
            _r("r/dropship", "https://www.reddit.com/r/dropship", "Supplier and product discussion"),
        ],
    ),
    "virtual-assistant": (
        [
            _r("Trello", "https://trello.com", "Task boards for client work"),
            _r("Google Workspace", "https://workspace.google.com", "Email, calendar and documents"),
        ],
        [
            _r("Coursera: Project Management", "https://www.coursera.org/professional-certificates/google-project-management", "Foundations of organizing client projects"),
        ],
        [
            _r("r/VirtualAssistant", "https://www.reddit.com/r/VirtualAssistant", "Finding and keeping VA clients"),
        ],
    ),
    "online-coaching-consulting": (
        [
            _r("Calendly", "https://calendly.com", "Session booking"),
            _r("Zoom", "https://zoom.us", "Video calls with clients"),
        ],
        [
            _r("International Coaching Federation", "https://coachingfederation.org", "Coaching standards and credentials"),
        ],
        [
            _r("r/lifecoaching", "https://www.reddit.com/r/lifecoaching", "Discussion among coaches"),
        ],
    ),
    "print-on-demand": (
        [
            _r("Printful", "https://www.printful.com", "Print-on-demand fulfilment"),
            _r("Etsy", "https://www.etsy.com/sell", "Marketplace for custom designs"),
        ],
        [
            _r("Printful Blog", "https://www.printful.com/blog", "Design and marketing guides"),
        ],
        [
            _r("r/printondemand", "https://www.reddit.com/r/printondemand", "Niche and design feedback"),
        ],
    ),
    "youtube-automation": (
        [
            _r("vidIQ", "https://vidiq.com", "Keyword and channel analytics"),
            _r("Descript", "https://www.descript.com", "Script-based video editing"),
        ],
        [
            _r("YouTube Creator Academy", "https://www.youtube.com/creators", "Official lessons on growing a channel"),
        ],
        [
            _r("r/PartneredYoutube", "https://www.reddit.com/r/PartneredYoutube", "Monetized channel owners"),
        ],
    ),
    "local-service-arbitrage": (
        [
            _r("Google Business Profile", "https://www.google.com/business", "Local search listing"),
            _r("Jobber", "https://getjobber.com", "Scheduling and invoicing for service businesses"),
        ],
        [
            _r("SBA Learning Center", "https://www.sba.gov/sba-learning-platform", "Small business fundamentals"),
        ],
        [
            _r("r/smallbusiness", "https://www.reddit.com/r/smallbusiness", "Small business owners' forum"),
        ],
    ),
    "app-saas-development": (
        [
            _r("GitHub", "https://github.com", "Code hosting and collaboration"),
            _r("Stripe", "https://stripe.com", "Subscription billing"),
        ],
        [
            _r("Y Combinator Startup School", "https://www.startupschool.org", "Free startup curriculum"),
        ],
        [
            _r("Indie Hackers", "https://www.indiehackers.com", "Founders building profitable software"),
        ],
    ),
    "high-ticket-sales": (
        [
            _r("HubSpot CRM", "https://www.hubspot.com/products/crm", "Free CRM for tracking deals"),
            _r("Calendly", "https://calendly.com", "Booking sales calls"),
        ],
        [
            _r("HubSpot Academy", "https://academy.hubspot.com", "Free sales courses"),
        ],
        [
            _r("r/sales", "https://www.reddit.com/r/sales", "Sales professionals' forum"),
        ],
    ),
}


def get_business_resources(business_id: str) -> Optional[BusinessResources]:
    """Resources for one catalog id, or None for unknown ids."""
    model = get_business_model(business_id)
    if model is None or business_id not in RESOURCES:
        return None
    tools, learning, communities = RESOURCES[business_id]
    return BusinessResources(
        business_id=business_id,
        name=model.name,
        tools=tools,
        learning=learning,
        communities=communities,
    )
