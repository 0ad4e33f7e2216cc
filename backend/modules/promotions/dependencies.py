# backend/modules/promotions/dependencies.py

from fastapi import Depends

from core.config import settings

from .data.promotion_registry import PromotionRegistry, default_registry
from .services.clock import Clock, utc_now
from .services.discount_service import DiscountService
from .services.promotion_service import PromotionService


def get_promotion_registry() -> PromotionRegistry:
    return default_registry()


def get_clock() -> Clock:
    return utc_now


def get_discount_service(
    registry: PromotionRegistry = Depends(get_promotion_registry),
    clock: Clock = Depends(get_clock),
) -> DiscountService:
    return DiscountService(
        registry,
        clock=clock,
        suggestion_max_distance=settings.suggestion_max_distance,
    )


def get_promotion_service(
    registry: PromotionRegistry = Depends(get_promotion_registry),
    clock: Clock = Depends(get_clock),
) -> PromotionService:
    return PromotionService(registry, clock=clock)
