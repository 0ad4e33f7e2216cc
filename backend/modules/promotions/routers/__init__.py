# backend/modules/promotions/routers/__init__.py

from fastapi import APIRouter
from .promotion_router import router as promotion_router

# Create main promotions router
router = APIRouter(prefix="/api/v1")

router.include_router(promotion_router)

__all__ = ["router"]
