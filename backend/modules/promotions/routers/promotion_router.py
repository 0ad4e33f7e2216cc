# backend/modules/promotions/routers/promotion_router.py

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from core.config import settings
from core.exceptions import APIError, ServiceError, ValidationError

from ..dependencies import get_discount_service, get_promotion_service
from ..models.promotion_models import CustomerType
from ..schemas.promotion_schemas import (
    ApplicablePromotionResponse,
    ApplicablePromotionsResponse,
    PromoCodeValidationRequest,
    PromoCodeValidationResponse,
    PromotionContextRequest,
    PromotionDisplay,
    PromotionListResponse,
)
from ..services.discount_service import DiscountService
from ..services.display_service import format_display
from ..services.promotion_service import PromotionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.post(
    "/validate",
    response_model=PromoCodeValidationResponse,
    response_model_exclude_none=True,
)
def validate_promo_code(
    request: PromoCodeValidationRequest,
    discount_service: DiscountService = Depends(get_discount_service),
):
    """Validate a promo code typed into the quote form"""
    if not request.code.strip():
        raise ValidationError("Promo code is required")

    try:
        now = discount_service.clock()
        result = discount_service.validate(request.code, request.to_context(), now=now)

        if not result.valid:
            return PromoCodeValidationResponse(
                valid=False,
                reason=result.reason,
                error=result.error or "Invalid promo code",
                suggestion=result.suggestion,
                hint=result.hint,
            )

        promotion = result.promotion
        return PromoCodeValidationResponse(
            valid=True,
            promotion=PromotionDisplay.build(promotion, format_display(promotion, now)),
            discount_amount=result.discount_amount,
            non_monetary_benefit=result.non_monetary_benefit or None,
        )
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Promo validation error: {str(e)}", exc_info=True)
        raise ServiceError("Failed to validate promo code")


@router.get(
    "",
    response_model=PromotionListResponse,
    response_model_exclude_none=True,
)
def list_promotions(
    location: Optional[str] = Query(None, max_length=100),
    customer_type: CustomerType = Query(
        CustomerType(settings.default_customer_type), alias="customerType"
    ),
    promotion_service: PromotionService = Depends(get_promotion_service),
):
    """Promotions to display for a visitor: banners, location and new-customer offers"""
    if customer_type == CustomerType.ANY:
        raise ValidationError("customerType must be 'new' or 'existing'")

    location_slug = (location or settings.default_location_slug).strip().lower()

    try:
        now = promotion_service.clock()
        promotions = promotion_service.list_active(
            location_slug,
            customer_type,
            limit=settings.promotion_display_limit,
            now=now,
        )
        return PromotionListResponse(
            promotions=[
                PromotionDisplay.build(p, format_display(p, now)) for p in promotions
            ]
        )
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Promo list error: {str(e)}", exc_info=True)
        raise ServiceError("Failed to fetch promotions")


@router.post(
    "/applicable",
    response_model=ApplicablePromotionsResponse,
    response_model_exclude_none=True,
)
def get_applicable_promotions(
    request: PromotionContextRequest,
    discount_service: DiscountService = Depends(get_discount_service),
):
    """Auto-apply promotions for a quote, with stacking rules applied"""
    try:
        now = discount_service.clock()
        context = request.to_context()
        applicable = discount_service.find_applicable(context, now=now)
        summary = discount_service.calculate_total_discount(
            applicable, context.order_value
        )

        return ApplicablePromotionsResponse(
            promotions=[
                ApplicablePromotionResponse(
                    **PromotionDisplay.build(
                        item.promotion, format_display(item.promotion, now)
                    ).model_dump(),
                    discount_amount=item.discount_amount,
                    discount_percent=item.discount_percent,
                    eligibility_reason=item.eligibility_reason,
                    stackable=item.stackable,
                )
                for item in summary.applied
            ],
            total_discount=summary.total_discount,
            skipped=[item.promotion.id for item in summary.skipped],
        )
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Applicable promotions error: {str(e)}", exc_info=True)
        raise ServiceError("Failed to calculate promotions")
