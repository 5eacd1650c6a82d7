"""
Minimal MCP client for the Shopify storefront and customer account MCP servers.

Speaks JSON-RPC 2.0 over plain HTTP POST: `tools/list` for discovery and
`tools/call` for invocation.
"""
import itertools
from typing import Any

import httpx

from storefront_search.config import settings
from storefront_search.errors import DiscoveryError, InvocationError
from storefront_search.logging_config import get_logger

logger = get_logger(__name__)

STOREFRONT_MCP_PATH = "/api/mcp"


class MCPResponseError(Exception):
    """The server answered, but not with a JSON-RPC response we can use."""


class MCPClient:
    def __init__(
        self,
        shop_domain: str | None,
        customer_mcp_endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.shop_domain = shop_domain.rstrip("/") if shop_domain else None
        self.storefront_mcp_endpoint = (
            f"{self.shop_domain}{STOREFRONT_MCP_PATH}" if self.shop_domain else None
        )
        self.customer_mcp_endpoint = customer_mcp_endpoint
        self.tools: list[dict] = []
        self._tool_endpoints: dict[str, str] = {}
        self._ids = itertools.count(1)
        self._client = client or httpx.AsyncClient(timeout=settings.MCP_TIMEOUT_SECONDS)
        self._owns_client = client is None

    # -- Low-level helpers --

    async def _rpc(self, endpoint: str, method: str, params: dict | None = None) -> dict:
        """Send one JSON-RPC request and return its `result` member."""
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "id": next(self._ids),
            "params": params or {},
        }
        response = await self._client.post(
            endpoint,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise MCPResponseError(f"expected a JSON-RPC object, got {type(data).__name__}")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise MCPResponseError(f"MCP error {error.get('code')}: {error.get('message')}")
            raise MCPResponseError(f"MCP error: {error}")

        result = data.get("result")
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise MCPResponseError(f"expected an object result, got {type(result).__name__}")
        return result

    @staticmethod
    def _format_tool(tool: dict) -> dict:
        """Convert an MCP tool description into Claude's tool shape."""
        return {
            "name": tool["name"],
            "description": tool.get("description", ""),
            "input_schema": tool.get("inputSchema") or {"type": "object", "properties": {}},
        }

    async def _list_tools(self, endpoint: str) -> list[dict]:
        result = await self._rpc(endpoint, "tools/list")
        listed = result.get("tools")
        if not isinstance(listed, list):
            listed = []
        tools = [
            self._format_tool(tool)
            for tool in listed
            if isinstance(tool, dict) and isinstance(tool.get("name"), str) and tool["name"]
        ]
        for tool in tools:
            self._tool_endpoints.setdefault(tool["name"], endpoint)
        self.tools.extend(tools)
        return tools

    # -- Discovery --

    async def connect_to_storefront_server(self) -> list[dict]:
        """List the storefront server's tools and register them on this client."""
        if not self.storefront_mcp_endpoint:
            raise DiscoveryError("No shop domain to reach the storefront MCP server")

        try:
            tools = await self._list_tools(self.storefront_mcp_endpoint)
        except (httpx.HTTPError, ValueError, MCPResponseError) as e:
            raise DiscoveryError(f"Storefront MCP discovery failed: {e}") from e

        logger.info("Discovered %d storefront tools at %s", len(tools), self.storefront_mcp_endpoint)
        return tools

    async def connect_to_customer_server(self) -> list[dict]:
        """
        List the customer account server's tools. Optional: any failure is
        logged and yields no tools, the storefront tools are enough to search.
        """
        if not self.customer_mcp_endpoint:
            return []

        try:
            tools = await self._list_tools(self.customer_mcp_endpoint)
        except (httpx.HTTPError, ValueError, MCPResponseError) as e:
            logger.warning("Customer MCP discovery failed at %s: %s", self.customer_mcp_endpoint, e)
            return []

        logger.info("Discovered %d customer tools at %s", len(tools), self.customer_mcp_endpoint)
        return tools

    # -- Invocation --

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> dict:
        """
        Invoke a discovered tool.

        Returns `{"content": ...}` on success. Text parts are joined into one
        string so callers can JSON-decode them. Tool-reported failures come
        back as `{"error": ...}`; transport and protocol failures raise
        InvocationError.
        """
        endpoint = self._tool_endpoints.get(name)
        if endpoint is None:
            raise InvocationError(name, "tool was not discovered")

        try:
            result = await self._rpc(endpoint, "tools/call", {"name": name, "arguments": arguments})
        except (httpx.HTTPError, ValueError, MCPResponseError) as e:
            raise InvocationError(name, str(e)) from e

        content = result.get("content")
        if result.get("isError"):
            return {"error": _join_text_parts(content) or "tool reported an error"}
        return {"content": _join_text_parts(content)}

    async def close(self):
        if self._owns_client:
            await self._client.aclose()


def _join_text_parts(content: Any) -> Any:
    if isinstance(content, list) and content and all(
        isinstance(part, dict) and part.get("type") == "text" for part in content
    ):
        return "".join(part.get("text", "") for part in content)
    return content
