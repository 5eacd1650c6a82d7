import pytest
from fastapi.testclient import TestClient

from storefront_search.dependencies import get_search_service
from storefront_search.errors import FallbackError
from storefront_search.main import app
from storefront_search.models.schemas import dump_results
from storefront_search.services.fallback import fallback_results

STOREFRONT = "https://demo.myshopify.com"


class RecordingService:
    def __init__(self, results=None, error=None):
        self.results = results if results is not None else fallback_results()
        self.error = error
        self.calls = []

    async def search(self, request, shop_domain):
        self.calls.append((request, shop_domain))
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture
def client(service):
    app.dependency_overrides[get_search_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_search_returns_result_array(client, service):
    response = client.post(
        "/search",
        json={"query": "headphones", "shopId": "42", "limit": 4},
        headers={"Origin": STOREFRONT},
    )

    assert response.status_code == 200
    assert response.json() == dump_results(fallback_results())
    request, shop_domain = service.calls[0]
    assert shop_domain == STOREFRONT
    assert request.query == "headphones"
    assert request.enable_products and request.enable_faq


def test_request_defaults(client, service):
    client.post("/search", json={"query": "mug", "enableProducts": None, "limit": 0})

    request, _ = service.calls[0]
    assert request.limit == 4
    assert request.enable_products is True
    assert request.shop_id is None


def test_explicit_false_disables_category(client, service):
    client.post("/search", json={"query": "mug", "enableFAQ": False, "shopId": 7})

    request, _ = service.calls[0]
    assert request.enable_faq is False
    assert request.shop_id == "7"


@pytest.mark.parametrize("body", [{"query": ""}, {"query": "   "}, {"shopId": "42"}, {"query": None}])
def test_blank_query_is_rejected_without_search(client, service, body):
    response = client.post("/search", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Search query is required"}
    assert service.calls == []


def test_negative_limit_is_rejected(client, service):
    response = client.post("/search", json={"query": "mug", "limit": -1})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid limit")
    assert service.calls == []


def test_unparseable_body_is_a_server_error(client, service):
    response = client.post(
        "/search", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Search service temporarily unavailable", "results": []}
    assert service.calls == []


def test_fallback_failure_is_a_server_error(client, service):
    service.error = FallbackError("Search service temporarily unavailable")

    response = client.post("/search", json={"query": "mug"}, headers={"Origin": STOREFRONT})

    assert response.status_code == 500
    assert response.json() == {"error": "Search service temporarily unavailable", "results": []}
    assert response.headers["access-control-allow-origin"] == STOREFRONT


def test_preflight(client):
    response = client.options("/search", headers={"Origin": STOREFRONT})

    assert response.status_code == 204
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == STOREFRONT
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["access-control-max-age"] == "86400"
    assert response.headers["vary"] == "Origin"


def test_get_is_not_supported(client):
    response = client.get("/search")

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize(
    "origin, allowed",
    [
        ("https://demo.myshopify.com", "https://demo.myshopify.com"),
        ("http://localhost:9292", "http://localhost:9292"),
        ("http://127.0.0.1:3000", "http://127.0.0.1:3000"),
        ("https://abc.ngrok.io", "https://abc.ngrok.io"),
        ("https://often-dialog.trycloudflare.com", "https://often-dialog.trycloudflare.com"),
        ("https://evil.example.com", "*"),
    ],
)
def test_cors_origin_policy(client, origin, allowed):
    response = client.post("/search", json={"query": "mug"}, headers={"Origin": origin})

    assert response.headers["access-control-allow-origin"] == allowed
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["vary"] == "Origin"


def test_referer_is_reduced_to_its_origin(client, service):
    response = client.post(
        "/search",
        json={"query": "mug"},
        headers={"Referer": "https://demo.myshopify.com/collections/all?page=2"},
    )

    assert response.headers["access-control-allow-origin"] == STOREFRONT
    _, shop_domain = service.calls[0]
    assert shop_domain == STOREFRONT


def test_origin_wins_over_referer(client, service):
    client.post(
        "/search",
        json={"query": "mug"},
        headers={"Origin": "http://localhost:9292", "Referer": "https://demo.myshopify.com/pages/faq"},
    )

    _, shop_domain = service.calls[0]
    assert shop_domain == "http://localhost:9292"


def test_cors_without_origin_is_wildcard(client):
    response = client.post("/search", json={"query": "mug"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
