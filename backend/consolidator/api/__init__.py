from fastapi import APIRouter

from .imports import router as imports_router
from .profiles import router as profiles_router
from .rules import router as rules_router
from .categories import router as categories_router
from .transactions import router as transactions_router

api_router = APIRouter()

api_router.include_router(imports_router, prefix="/import", tags=["import"])
api_router.include_router(profiles_router, prefix="/profiles", tags=["profiles"])
api_router.include_router(rules_router, prefix="/rules", tags=["rules"])
api_router.include_router(categories_router, prefix="/categories", tags=["categories"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
