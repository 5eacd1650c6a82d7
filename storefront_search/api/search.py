from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront_search.api.cors import get_cors_headers, request_origin
from storefront_search.dependencies import get_search_service
from storefront_search.errors import FallbackError, InvalidQueryError
from storefront_search.logging_config import get_logger
from storefront_search.models.schemas import SearchRequest, dump_results
from storefront_search.services.search import SearchService

logger = get_logger(__name__)

router = APIRouter(prefix="/search", tags=["search"])

API_UNSUPPORTED_MESSAGE = "This endpoint only accepts POST search requests"


def _invalid_request_message(exc: ValidationError) -> str:
    for error in exc.errors():
        if error.get("loc") == ("query",):
            return "Search query is required"
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"Invalid {field}: {first.get('msg', 'invalid value')}"


def parse_search_request(body: object) -> SearchRequest:
    if not isinstance(body, dict):
        raise InvalidQueryError("Search request body must be a JSON object")
    try:
        return SearchRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidQueryError(_invalid_request_message(e)) from e


@router.options("")
async def search_preflight(request: Request):
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=get_cors_headers(request))


@router.get("")
async def search_get(request: Request):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": API_UNSUPPORTED_MESSAGE},
        headers=get_cors_headers(request),
    )


@router.post("")
async def search(
    request: Request,
    search_service: SearchService = Depends(get_search_service),
):
    try:
        body = await request.json()
    except ValueError as e:
        logger.error("Search request body is not valid JSON")
        raise FallbackError("Search service temporarily unavailable") from e

    search_request = parse_search_request(body)
    results = await search_service.search(search_request, request_origin(request))
    return JSONResponse(content=dump_results(results), headers=get_cors_headers(request))
