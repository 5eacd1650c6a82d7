"""
Search widget client.

Owns one WidgetState, resolves which app endpoint to talk to, and performs
searches over the widget HTTP contract. Transport and server failures are
answered with the canned fallback set; a missing endpoint is not.
"""
from collections.abc import Mapping
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel

from storefront_search.errors import ConfigurationError
from storefront_search.logging_config import get_logger
from storefront_search.services.fallback import mock_search_results
from storefront_search.widget.state import (
    Event,
    QueryChanged,
    ResultsReceived,
    Submit,
    WidgetState,
    WidgetView,
    can_submit,
    transition,
    view,
)

logger = get_logger(__name__)

LOCAL_DEV_ENDPOINT = "http://localhost:3000/search"
NOT_CONFIGURED_MESSAGE = (
    "Search is not configured properly. Please contact the store administrator "
    "to set up the App URL in the widget settings."
)


class WidgetConfig(BaseModel):
    """Settings the theme renders into the page for the widget."""

    shop_domain: str | None = None
    shop_id: str | None = None
    enable_products: bool = True
    enable_faq: bool = True
    results_per_page: int = 4
    custom_api_endpoint: str | None = None
    # window.location.origin of the page hosting the widget
    page_origin: str | None = None


def resolve_api_endpoint(config: WidgetConfig, app_urls: Mapping[str, str]) -> str | None:
    """
    Pick the search endpoint for a widget: the custom endpoint, then the local
    dev server, then the app URL mapped for the shop, then the tunnel origin
    the page is served from. None when nothing applies.
    """
    if config.custom_api_endpoint:
        return config.custom_api_endpoint

    hostname = urlparse(config.page_origin or "").hostname or ""
    if hostname == "localhost" or "127.0.0.1" in hostname or "ngrok" in hostname:
        return LOCAL_DEV_ENDPOINT

    if config.shop_domain and config.shop_domain in app_urls:
        return f"{app_urls[config.shop_domain].rstrip('/')}/search"

    if "trycloudflare.com" in hostname:
        return f"{config.page_origin.rstrip('/')}/search"

    logger.error("App URL mapping not found for shop %s", config.shop_domain)
    return None


def coerce_results(payload) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        logger.warning("Search API returned non-array results, converting")
        return payload.get("results") or payload.get("data") or []
    return []


class SearchWidget:
    def __init__(
        self,
        config: WidgetConfig,
        app_urls: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        fallback_delay: float | None = None,
    ):
        self.config = config
        self.api_endpoint = resolve_api_endpoint(config, app_urls or {})
        self.state = WidgetState()
        self.fallback_delay = fallback_delay
        self._client = client or httpx.AsyncClient(timeout=30.0)
        self._owns_client = client is None

    @property
    def view(self) -> WidgetView:
        return view(self.state)

    def dispatch(self, event: Event) -> WidgetState:
        self.state = transition(self.state, event)
        return self.state

    def set_query(self, text: str) -> None:
        self.dispatch(QueryChanged(text))

    async def submit(self) -> WidgetState:
        """
        Run a search for the current query.

        Blank queries and submits during an in-flight search do nothing.
        Raises ConfigurationError when no endpoint could be resolved.
        """
        if not can_submit(self.state):
            return self.state

        if not self.api_endpoint:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

        self.dispatch(Submit())
        try:
            results = await self._fetch(self.state.query)
        except Exception as e:
            logger.error("Search error, falling back to mock data: %s", e)
            results = [
                result.model_dump(exclude_none=True)
                for result in await mock_search_results(
                    self.state.query,
                    limit=self.config.results_per_page or None,
                    delay=self.fallback_delay,
                )
            ]
        return self.dispatch(ResultsReceived(tuple(results)))

    async def _fetch(self, query: str) -> list:
        headers = {"Content-Type": "application/json"}
        if self.config.page_origin:
            headers["Origin"] = self.config.page_origin

        response = await self._client.post(
            self.api_endpoint,
            headers=headers,
            json={
                "query": query,
                "shopId": self.config.shop_id,
                "enableProducts": self.config.enable_products,
                "enableFAQ": self.config.enable_faq,
                "limit": self.config.results_per_page or 4,
            },
        )
        if response.status_code == 404:
            raise httpx.HTTPStatusError(
                f"Search endpoint not found (404). Please verify the App URL is correct: {self.api_endpoint}",
                request=response.request,
                response=response,
            )
        response.raise_for_status()
        return coerce_results(response.json())

    async def close(self):
        if self._owns_client:
            await self._client.aclose()
