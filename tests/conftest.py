import pytest

from storefront_search.services.search import SearchService


@pytest.fixture
def make_service():
    """Build a SearchService around fakes, with no fallback latency."""

    def _make(tool_client, claude, timeout=5.0, endpoint_resolver=None):
        return SearchService(
            claude_service=claude,
            endpoint_resolver=endpoint_resolver,
            tool_client_factory=tool_client.factory,
            timeout=timeout,
            fallback_delay=0,
        )

    return _make
