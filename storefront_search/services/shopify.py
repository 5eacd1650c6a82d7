import httpx

from storefront_search.config import settings


class ShopifyError(Exception):
    """The Storefront API answered with GraphQL errors."""


class ShopifyClient:
    def __init__(
        self,
        store_domain: str,
        storefront_token: str,
        api_version: str = settings.SHOPIFY_API_VERSION,
        client: httpx.AsyncClient | None = None,
    ):
        self.storefront_url = f"https://{store_domain}/api/{api_version}/graphql.json"
        self._client = client or httpx.AsyncClient(timeout=15.0)
        self._owns_client = client is None

        self.storefront_headers = {
            "X-Shopify-Storefront-Access-Token": storefront_token,
            "Content-Type": "application/json",
        }

    # -- Low-level helpers --

    async def _storefront_query(self, query: str, variables: dict | None = None) -> dict:
        """Send a GraphQL query to the Storefront API."""
        response = await self._client.post(
            self.storefront_url,
            headers=self.storefront_headers,
            json={"query": query, "variables": variables or {}},
        )
        response.raise_for_status()
        data = response.json()
        if "errors" in data:
            raise ShopifyError(f"Shopify Storefront API error: {data['errors']}")
        return data["data"]

    # -- Shop methods --

    async def get_customer_account_url(self) -> str | None:
        """The shop's customer account base URL, used to reach the customer MCP server."""
        gql = """
        query shop {
            shop {
                customerAccountUrl
            }
        }
        """
        data = await self._storefront_query(gql)
        return (data.get("shop") or {}).get("customerAccountUrl")

    async def close(self):
        """Close the underlying HTTP client."""
        if self._owns_client:
            await self._client.aclose()
