# backend/modules/promotions/__init__.py

from .routers import router as promotions_router
from .services.discount_service import DiscountService
from .services.promotion_service import PromotionService

__all__ = [
    "promotions_router",
    "DiscountService",
    "PromotionService",
]
