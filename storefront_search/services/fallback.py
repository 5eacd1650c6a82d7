"""
Canned search results.

Served whenever the live pipeline can't produce anything, so a widget never
renders an empty panel for a real query.
"""
import asyncio
import base64

from storefront_search.config import settings
from storefront_search.logging_config import get_logger
from storefront_search.models.schemas import FAQResult, ProductResult, SearchResult

logger = get_logger(__name__)

NO_IMAGE_LABEL = "No Image"

_PLACEHOLDER_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="200" height="200" viewBox="0 0 200 200">
  <rect width="200" height="200" fill="{background}"/>
  <g fill="{foreground}" transform="translate(60, 60)">
    <rect x="20" y="20" width="40" height="40" rx="4"/>
    <circle cx="30" cy="30" r="3"/>
    <path d="M20 50 l10-10 10 10 10-15 10 15"/>
  </g>
  <text x="100" y="130" text-anchor="middle" fill="{foreground}" font-family="Arial" font-size="12">{label}</text>
</svg>"""


def placeholder_image(label: str, background: str = "#f3f4f6", foreground: str = "#6b7280") -> str:
    """An inline SVG data URI. Same arguments, same string."""
    svg = _PLACEHOLDER_SVG.format(label=label, background=background, foreground=foreground)
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def fallback_results() -> list[SearchResult]:
    return [
        ProductResult(
            id=1,
            name="Wireless Headphones",
            price="$99.99",
            image=placeholder_image("Headphones", background="#f472b6", foreground="white"),
            rating=4.5,
            description="High-quality wireless headphones with noise cancellation",
        ),
        FAQResult(
            id=2,
            question="What is your return policy?",
            answer="We offer a 30-day return policy for all items in original condition.",
        ),
        ProductResult(
            id=3,
            name="Smart Watch",
            price="$199.99",
            image=placeholder_image("Smart Watch", background="#22d3ee", foreground="white"),
            rating=4.8,
            description="Feature-rich smartwatch with health monitoring",
        ),
        FAQResult(
            id=4,
            question="Do you offer free shipping?",
            answer="Yes, we offer free shipping on orders over $50.",
        ),
    ]


async def mock_search_results(
    query: str,
    limit: int | None = None,
    delay: float | None = None,
) -> list[SearchResult]:
    """The canned result set, after the same kind of wait a live search has."""
    logger.info("Serving fallback results for query %r", query)
    await asyncio.sleep(settings.MOCK_LATENCY_SECONDS if delay is None else delay)
    results = fallback_results()
    if limit is not None:
        results = results[:limit]
    return results
