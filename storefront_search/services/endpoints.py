from urllib.parse import urlparse

from storefront_search.config import settings
from storefront_search.logging_config import get_logger
from storefront_search.models.database import (
    get_customer_account_url,
    store_customer_account_url,
)
from storefront_search.services.shopify import ShopifyClient

logger = get_logger(__name__)

CUSTOMER_MCP_PATH = "/customer/api/mcp"


class EndpointResolver:
    """Resolves the customer MCP endpoint for a shop, cached per shop hostname."""

    def __init__(self, db_path: str, storefront_token: str = settings.SHOPIFY_STOREFRONT_ACCESS_TOKEN):
        self.db_path = db_path
        self.storefront_token = storefront_token

    def _shopify_client(self, hostname: str) -> ShopifyClient:
        return ShopifyClient(hostname, self.storefront_token)

    async def resolve(self, shop_domain: str | None) -> str | None:
        """Return `<customerAccountUrl>/customer/api/mcp`, or None when it can't be found."""
        hostname = urlparse(shop_domain or "").hostname
        if not hostname:
            logger.info("No shop domain on request, skipping customer endpoint lookup")
            return None

        try:
            cached = await get_customer_account_url(self.db_path, hostname)
            if cached:
                return f"{cached}{CUSTOMER_MCP_PATH}"

            shopify = self._shopify_client(hostname)
            try:
                account_url = await shopify.get_customer_account_url()
            finally:
                await shopify.close()

            if not account_url:
                return None
            await store_customer_account_url(self.db_path, hostname, account_url)
            return f"{account_url}{CUSTOMER_MCP_PATH}"
        except Exception as e:
            logger.error("Error getting customer MCP endpoint for %s: %s", hostname, e)
            return None
