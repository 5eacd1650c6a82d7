from contextlib import asynccontextmanager
from fastapi import FastAPI
from storefront_search.models.database import init_db
from storefront_search.config import settings
from storefront_search.errors import setup_error_handlers
from storefront_search.logging_config import setup_logging, get_logger
from storefront_search.api.middleware import RequestLoggingMiddleware
from storefront_search.api.router import router

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db(settings.SQLITE_DB_PATH)
    if not settings.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY is not set, searches will return fallback results")
    yield

app = FastAPI(
    title="Storefront Search",
    description="Search endpoint for the storefront search widget, backed by Claude and the shop's MCP tools.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
setup_error_handlers(app)

app.include_router(router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
