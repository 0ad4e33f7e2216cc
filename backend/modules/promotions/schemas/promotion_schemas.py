# backend/modules/promotions/schemas/promotion_schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional

from ..models.promotion_models import (
    CustomerType,
    DisplayPayload,
    Promotion,
    PromotionContext,
    ValidationReason,
)


class CamelModel(BaseModel):
    """Wire models use camelCase keys; snake_case is accepted on input too"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request schemas
class PromotionContextRequest(CamelModel):
    """Order context posted by the quote form"""

    service_ids: List[str] = Field(default_factory=list)
    location_slug: str = Field("columbus", max_length=100)
    customer_type: CustomerType = CustomerType.NEW
    order_value: float = Field(0.0, ge=0)
    service_prices: Optional[Dict[str, float]] = None

    @field_validator("customer_type")
    def customer_type_must_be_concrete(cls, v):
        if v == CustomerType.ANY:
            raise ValueError("customerType must be 'new' or 'existing'")
        return v

    def to_context(self) -> PromotionContext:
        return PromotionContext(
            service_ids=frozenset(self.service_ids),
            location_slug=self.location_slug.strip().lower(),
            customer_type=self.customer_type,
            order_value=self.order_value,
            service_prices=dict(self.service_prices or {}),
        )


class PromoCodeValidationRequest(PromotionContextRequest):
    """Schema for validating a promo code"""

    code: str = Field("", max_length=50)


# Response schemas
class PromotionDisplay(CamelModel):
    """Promotion as rendered on the site"""

    id: str
    name: str
    description: str
    badge: str
    code: Optional[str] = None
    banner_text: Optional[str] = None
    expires_text: str = ""

    @classmethod
    def build(cls, promotion: Promotion, display: DisplayPayload) -> "PromotionDisplay":
        return cls(
            id=promotion.id,
            name=promotion.name,
            description=promotion.description,
            badge=display.badge,
            code=promotion.code,
            banner_text=promotion.banner_text,
            expires_text=display.expires_text,
        )


class PromoCodeValidationResponse(CamelModel):
    """Result of a promo code validation"""

    valid: bool
    promotion: Optional[PromotionDisplay] = None
    discount_amount: Optional[float] = None
    reason: Optional[ValidationReason] = None
    error: Optional[str] = None
    suggestion: Optional[str] = None
    hint: Optional[str] = None
    non_monetary_benefit: Optional[bool] = None


class PromotionListResponse(CamelModel):
    promotions: List[PromotionDisplay]


class ApplicablePromotionResponse(PromotionDisplay):
    discount_amount: float
    discount_percent: float
    eligibility_reason: str
    stackable: bool


class ApplicablePromotionsResponse(CamelModel):
    """Auto-apply promotions for a quote and the combined discount"""

    promotions: List[ApplicablePromotionResponse]
    total_discount: float
    skipped: List[str] = Field(default_factory=list)
