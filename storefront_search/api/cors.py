from urllib.parse import urlparse

from starlette.requests import Request

from storefront_search.config import settings
from storefront_search.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_METHODS = "GET, POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Accept, Origin, Authorization, X-Requested-With"


def request_origin(request: Request) -> str | None:
    """The storefront origin of a widget request. Some themes only send Referer."""
    origin = request.headers.get("origin")
    if origin:
        return origin

    referer = urlparse(request.headers.get("referer") or "")
    if referer.scheme and referer.netloc:
        return f"{referer.scheme}://{referer.netloc}"
    return None


def resolve_allowed_origin(origin: str | None, markers: list[str] | None = None) -> str:
    """Echo storefront, local-dev and tunnel origins; everything else gets '*'."""
    if markers is None:
        markers = settings.CORS_ALLOWED_ORIGIN_MARKERS
    if origin and any(marker in origin for marker in markers):
        return origin
    return "*"


def get_cors_headers(request: Request) -> dict[str, str]:
    origin = request_origin(request)
    allowed_origin = resolve_allowed_origin(origin)
    logger.debug("CORS: request origin %s -> allowed origin %s", origin, allowed_origin)

    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Max-Age": str(settings.CORS_MAX_AGE),
        "Vary": "Origin",
    }
