from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront_search.config import settings


# --- Request schemas ---

class SearchRequest(BaseModel):
    """Widget search request. Wire names are camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    shop_id: str | None = Field(default=None, alias="shopId")
    enable_products: bool = Field(default=True, alias="enableProducts")
    enable_faq: bool = Field(default=True, alias="enableFAQ")
    limit: int = Field(default=settings.DEFAULT_RESULT_LIMIT, gt=0)

    @field_validator("query", mode="before")
    @classmethod
    def query_not_blank(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Search query is required")
        return value

    @field_validator("shop_id", mode="before")
    @classmethod
    def shop_id_as_text(cls, value: Any) -> Any:
        # Liquid renders shop.id as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("enable_products", "enable_faq", mode="before")
    @classmethod
    def flag_defaults_on(cls, value: Any) -> Any:
        # only an explicit false disables a category
        return True if value is None else value

    @field_validator("limit", mode="before")
    @classmethod
    def limit_default(cls, value: Any) -> Any:
        if value is None or value == 0:
            return settings.DEFAULT_RESULT_LIMIT
        return value


# --- Result schemas ---

class ProductResult(BaseModel):
    type: Literal["product"] = "product"
    id: str | int
    name: str
    price: str
    image: str
    rating: float = Field(ge=0, le=5)
    description: str = ""
    handle: str | None = None
    url: str | None = None


class FAQResult(BaseModel):
    type: Literal["faq"] = "faq"
    id: str | int
    question: str
    answer: str
    url: str | None = None


SearchResult = Annotated[ProductResult | FAQResult, Field(discriminator="type")]


def dump_results(results: list[SearchResult]) -> list[dict]:
    """Serialize results the way the widget expects them (absent fields omitted)."""
    return [result.model_dump(exclude_none=True) for result in results]


# --- Orchestration records ---

class ToolCallRecord(BaseModel):
    """One successful tool invocation made during a single search turn."""

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    response: dict[str, Any]
