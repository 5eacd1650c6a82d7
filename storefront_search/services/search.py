"""
Search orchestration.

One search request = discover storefront tools, run one Claude turn with
them, call every tool the model asks for, then normalize what came back.
Any failure along the way is answered with the canned fallback set.
"""
import asyncio
import json
from typing import Any, Callable

from storefront_search.config import settings
from storefront_search.errors import (
    DiscoveryError,
    EmptyResultError,
    FallbackError,
    InvocationError,
    TurnError,
)
from storefront_search.logging_config import get_logger
from storefront_search.models.schemas import SearchRequest, SearchResult, ToolCallRecord
from storefront_search.services.claude import ClaudeService
from storefront_search.services.endpoints import EndpointResolver
from storefront_search.services.fallback import mock_search_results
from storefront_search.services.mcp import MCPClient
from storefront_search.services.normalizer import process_tool_responses
from storefront_search.services.prompts import build_search_prompt

logger = get_logger(__name__)

ToolClientFactory = Callable[..., MCPClient]


class ToolCallCollector:
    """Receives tool_use blocks from a turn, invokes each tool and keeps the successes."""

    def __init__(self, tool_client: MCPClient):
        self.tool_client = tool_client
        self.records: list[ToolCallRecord] = []

    async def on_tool_use(self, block: Any) -> None:
        name = block.name
        args = dict(block.input or {})
        logger.info("Executing tool %s with args %s", name, json.dumps(args, default=str))

        try:
            response = await self.tool_client.call_tool(name, args)
        except InvocationError as e:
            logger.error("Error calling tool %s: %s", name, e)
            return
        except Exception:
            logger.exception("Unexpected error calling tool %s", name)
            return

        if not isinstance(response, dict):
            logger.warning("Tool %s returned a non-object response, skipping", name)
        elif response.get("error"):
            logger.error("Tool %s returned error: %s", name, response["error"])
        elif response.get("content"):
            self.records.append(ToolCallRecord(tool_name=name, arguments=args, response=response))
        else:
            logger.warning("Tool %s returned no content", name)


class SearchService:
    def __init__(
        self,
        claude_service: ClaudeService,
        endpoint_resolver: EndpointResolver | None = None,
        tool_client_factory: ToolClientFactory = MCPClient,
        timeout: float = settings.SEARCH_TIMEOUT_SECONDS,
        fallback_delay: float | None = None,
    ):
        self.claude_service = claude_service
        self.endpoint_resolver = endpoint_resolver
        self.tool_client_factory = tool_client_factory
        self.timeout = timeout
        self.fallback_delay = fallback_delay

    async def fallback(self, request: SearchRequest) -> list[SearchResult]:
        try:
            return await mock_search_results(
                request.query, limit=request.limit, delay=self.fallback_delay
            )
        except Exception as e:
            raise FallbackError("Search service temporarily unavailable") from e

    async def search(self, request: SearchRequest, shop_domain: str | None) -> list[SearchResult]:
        """Results for one request. Only raises FallbackError."""
        logger.info(
            "Processing search request: query=%r shop_id=%s products=%s faq=%s limit=%d",
            request.query,
            request.shop_id,
            request.enable_products,
            request.enable_faq,
            request.limit,
        )
        try:
            return await asyncio.wait_for(self._live_search(request, shop_domain), self.timeout)
        except DiscoveryError as e:
            logger.warning("Failed to discover MCP tools, falling back to mock data: %s", e)
        except TurnError as e:
            logger.error("Error executing search with Claude, falling back to mock data: %s", e)
        except EmptyResultError as e:
            logger.info("%s, falling back to mock data", e.message)
        except asyncio.TimeoutError:
            logger.error("Search exceeded %.1fs, falling back to mock data", self.timeout)
        except Exception:
            logger.exception("Unexpected error in search pipeline, falling back to mock data")
        return await self.fallback(request)

    async def _live_search(self, request: SearchRequest, shop_domain: str | None) -> list[SearchResult]:
        customer_endpoint = None
        if self.endpoint_resolver is not None:
            customer_endpoint = await self.endpoint_resolver.resolve(shop_domain)

        tool_client = self.tool_client_factory(shop_domain, customer_endpoint)
        try:
            tools = await tool_client.connect_to_storefront_server()
            if not tools:
                raise DiscoveryError("No MCP tools available")
            if customer_endpoint:
                tools = tools + await tool_client.connect_to_customer_server()
            logger.info("Available MCP tools: %s", ", ".join(t["name"] for t in tools))

            return await self.execute_search(request, tools, tool_client)
        finally:
            await tool_client.close()

    async def execute_search(
        self,
        request: SearchRequest,
        tools: list[dict],
        tool_client: MCPClient,
    ) -> list[SearchResult]:
        prompt = build_search_prompt(
            request.query, request.enable_products, request.enable_faq, request.limit
        )
        collector = ToolCallCollector(tool_client)

        def on_text(delta: str) -> None:
            if delta.strip():
                logger.debug("Claude text: %s", delta.strip())

        await self.claude_service.stream_conversation(
            messages=[{"role": "user", "content": prompt}],
            tools=tools,
            on_text=on_text,
            on_message=lambda message: logger.debug("Claude message completed"),
            on_tool_use=collector.on_tool_use,
        )
        logger.info("Completed Claude turn. Tool calls made: %d", len(collector.records))

        results = process_tool_responses(
            collector.records, request.enable_products, request.enable_faq, request.limit
        )
        logger.info(
            "Processed %d tool responses into %d search results",
            len(collector.records),
            len(results),
        )
        if not results:
            raise EmptyResultError("No results found through MCP tools")
        return results
