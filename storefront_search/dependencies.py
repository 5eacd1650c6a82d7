from functools import lru_cache

from storefront_search.config import settings
from storefront_search.services.claude import ClaudeService
from storefront_search.services.endpoints import EndpointResolver
from storefront_search.services.search import SearchService


def get_db_path() -> str:
    """Provide the database path to endpoint functions."""
    return settings.SQLITE_DB_PATH


@lru_cache
def get_claude_service() -> ClaudeService:
    return ClaudeService()


def get_search_service() -> SearchService:
    """A search service wired to the live Claude and Shopify collaborators."""
    endpoint_resolver = None
    if settings.ENABLE_CUSTOMER_TOOLS:
        endpoint_resolver = EndpointResolver(get_db_path())
    return SearchService(
        claude_service=get_claude_service(),
        endpoint_resolver=endpoint_resolver,
    )
