"""
Turns raw tool responses into SearchResult objects.

Tools are routed by name: every route whose keywords appear in the tool
name gets a look at the decoded content. The product route reads
`products`, the FAQ route reads `articles`; anything else is ignored.
"""
import json
import math
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError

from storefront_search.logging_config import get_logger
from storefront_search.models.schemas import (
    FAQResult,
    ProductResult,
    SearchResult,
    ToolCallRecord,
)
from storefront_search.services.fallback import NO_IMAGE_LABEL, placeholder_image

logger = get_logger(__name__)

PRICE_NOT_AVAILABLE = "Price not available"
DEFAULT_CURRENCY = "USD"
# Storefront tools don't return ratings
PLACEHOLDER_RATING = 4.5


# --- Price formatting ---

def _to_amount(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return amount if math.isfinite(amount) else None


def format_price(price: Any) -> str:
    """
    `{"minVariantPrice": {"amount": "19.5", "currencyCode": "EUR"}}` -> "EUR 19.50",
    a bare number or numeric string -> "$<amount>", anything else -> PRICE_NOT_AVAILABLE.
    """
    if isinstance(price, dict):
        min_price = price.get("minVariantPrice")
        if not isinstance(min_price, dict):
            return PRICE_NOT_AVAILABLE
        amount = _to_amount(min_price.get("amount"))
        if amount is None:
            return PRICE_NOT_AVAILABLE
        currency = min_price.get("currencyCode") or DEFAULT_CURRENCY
        return f"{currency} {amount:.2f}"

    if isinstance(price, (str, int, float)):
        amount = _to_amount(price)
        if amount is None:
            return PRICE_NOT_AVAILABLE
        return f"${amount:.2f}"

    return PRICE_NOT_AVAILABLE


# --- Image resolution ---

def _image_url(image: Any) -> str | None:
    if isinstance(image, str) and image:
        return image
    if isinstance(image, dict) and isinstance(image.get("url"), str) and image["url"]:
        return image["url"]
    return None


def get_product_image(product: dict) -> str:
    """featuredImage, then images[0], then image. Placeholder if none of them has a URL."""
    featured = product.get("featuredImage")
    if isinstance(featured, dict) and _image_url(featured):
        return featured["url"]

    images = product.get("images")
    if isinstance(images, list) and images:
        url = _image_url(images[0])
        if url:
            return url

    url = _image_url(product.get("image"))
    if url:
        return url

    return placeholder_image(NO_IMAGE_LABEL)


# --- Content decoding ---

def decode_content(content: Any) -> Any:
    """JSON-decode string content. Undecodable text is passed through as-is."""
    if isinstance(content, (str, bytes)):
        try:
            return json.loads(content)
        except ValueError:
            return content
    return content


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


# --- Extraction handlers ---

@dataclass
class NormalizeContext:
    enable_products: bool
    enable_faq: bool
    limit: int
    results: list[SearchResult]

    @property
    def full(self) -> bool:
        return len(self.results) >= self.limit


def extract_products(content: Any, ctx: NormalizeContext) -> None:
    if not ctx.enable_products or not isinstance(content, dict):
        return

    for product in _as_list(content.get("products")):
        if ctx.full:
            break
        if not isinstance(product, dict):
            logger.debug("Dropping non-object product entry: %r", product)
            continue

        handle = product.get("handle")
        url = product.get("url") or (f"/products/{handle}" if handle else None)
        try:
            result = ProductResult(
                id=product.get("id") or f"product_{len(ctx.results)}",
                name=product.get("title") or product.get("name") or "Product",
                price=format_price(product.get("priceRange") or product.get("price")),
                image=get_product_image(product),
                rating=PLACEHOLDER_RATING,
                description=product.get("description") or product.get("excerpt") or "",
                handle=handle,
                url=url,
            )
        except ValidationError as e:
            logger.warning("Dropping malformed product entry: %s", e)
            continue
        ctx.results.append(result)


def extract_articles(content: Any, ctx: NormalizeContext) -> None:
    if not ctx.enable_faq or not isinstance(content, dict):
        return

    for article in _as_list(content.get("articles")):
        if ctx.full:
            break
        if not isinstance(article, dict):
            logger.debug("Dropping non-object article entry: %r", article)
            continue

        try:
            result = FAQResult(
                id=article.get("id") or f"faq_{len(ctx.results)}",
                question=article.get("title") or article.get("question") or "Question",
                answer=(
                    article.get("summary")
                    or article.get("content")
                    or article.get("answer")
                    or "Answer not available"
                ),
                url=article.get("url"),
            )
        except ValidationError as e:
            logger.warning("Dropping malformed article entry: %s", e)
            continue
        ctx.results.append(result)


@dataclass(frozen=True)
class ToolRoute:
    name: str
    keywords: tuple[str, ...]
    handler: Callable[[Any, NormalizeContext], None]

    def matches(self, tool_name: str) -> bool:
        lowered = tool_name.lower()
        return any(keyword in lowered for keyword in self.keywords)


TOOL_ROUTES: tuple[ToolRoute, ...] = (
    ToolRoute("products", ("search", "product"), extract_products),
    ToolRoute("faq", ("help", "faq", "support"), extract_articles),
)


def routes_for(tool_name: str) -> list[ToolRoute]:
    return [route for route in TOOL_ROUTES if route.matches(tool_name)]


def process_tool_responses(
    tool_calls: list[ToolCallRecord],
    enable_products: bool,
    enable_faq: bool,
    limit: int,
) -> list[SearchResult]:
    """Normalize tool call records, in order, into at most `limit` results."""
    ctx = NormalizeContext(
        enable_products=enable_products,
        enable_faq=enable_faq,
        limit=limit,
        results=[],
    )

    for record in tool_calls:
        if ctx.full:
            break
        raw = record.response.get("content")
        if not raw:
            continue

        content = decode_content(raw)
        routes = routes_for(record.tool_name)
        if not routes:
            logger.debug("No route for tool %s, ignoring its response", record.tool_name)
        for route in routes:
            route.handler(content, ctx)

    return ctx.results[:limit]
