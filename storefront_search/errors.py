"""
Error taxonomy for the search pipeline.

Server-side stage errors (discovery, turn, invocation, empty result) are
recovered locally by the fallback generator. Only InvalidQueryError and
FallbackError are ever rendered to a client.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from storefront_search.api.cors import get_cors_headers
from storefront_search.logging_config import get_logger

logger = get_logger(__name__)


class SearchError(Exception):
    """Base class for search errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidQueryError(SearchError):
    """Empty query or malformed search parameters."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(SearchError):
    """No search endpoint can be resolved for the shop."""


class DiscoveryError(SearchError):
    """The storefront MCP server could not list its tools."""


class TurnError(SearchError):
    """The Claude turn failed at the transport or API level."""


class InvocationError(SearchError):
    """A single tool call failed."""

    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(f"{tool_name}: {message}")


class EmptyResultError(SearchError):
    """Tool calls completed but nothing usable came out of normalization."""


class FallbackError(SearchError):
    """The mock result path itself failed."""


def error_body(exc: SearchError) -> dict:
    body: dict = {"error": exc.message}
    if exc.status_code >= 500:
        body["results"] = []
    return body


def setup_error_handlers(app: FastAPI) -> None:
    """Render any SearchError that escapes a route in the wire error shape."""

    @app.exception_handler(SearchError)
    async def search_error_handler(request: Request, exc: SearchError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log("%s on %s: %s", exc.__class__.__name__, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc),
            headers=get_cors_headers(request),
        )
