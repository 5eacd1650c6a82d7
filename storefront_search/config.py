from pathlib import Path
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    ANTHROPIC_API_KEY: str = ""             # empty means every search falls back to mock results
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    CLAUDE_MAX_TOKENS: int = 2000
    SHOPIFY_STOREFRONT_ACCESS_TOKEN: str = ""
    SHOPIFY_API_VERSION: str = "2025-01"
    ENABLE_CUSTOMER_TOOLS: bool = False     # also offer the shop's customer account MCP tools to Claude
    SQLITE_DB_PATH: str = str(BASE_DIR / "data" / "search.db")
    MCP_TIMEOUT_SECONDS: float = 15.0
    SEARCH_TIMEOUT_SECONDS: float = 30.0
    MOCK_LATENCY_SECONDS: float = 0.5
    DEFAULT_RESULT_LIMIT: int = 4
    CORS_ALLOWED_ORIGIN_MARKERS: list[str] = [
        ".myshopify.com",
        "localhost",
        "127.0.0.1",
        "ngrok",
        "trycloudflare.com",
    ]
    CORS_MAX_AGE: int = 86400
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings() #type: ignore
