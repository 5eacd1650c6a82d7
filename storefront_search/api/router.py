from fastapi import APIRouter
from storefront_search.api.search import router as search_router

router = APIRouter()
router.include_router(search_router)
