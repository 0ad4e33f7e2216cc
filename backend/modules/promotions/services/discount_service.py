# backend/modules/promotions/services/discount_service.py

from datetime import datetime
from typing import List, Optional, Tuple
import logging

from ..data.promotion_registry import PromotionRegistry
from ..models.promotion_models import (
    ApplicablePromotion,
    CustomerType,
    DiscountKind,
    DiscountSummary,
    Promotion,
    PromotionContext,
    ValidationReason,
    ValidationResult,
)
from .clock import Clock, utc_now
from .code_matching import DEFAULT_MAX_DISTANCE, normalize_code, suggest_code
from .display_service import format_money
from .promotion_service import PromotionService

logger = logging.getLogger(__name__)


class DiscountService:
    """Validates promo codes and calculates the discounts they grant"""

    def __init__(
        self,
        registry: PromotionRegistry,
        clock: Optional[Clock] = None,
        suggestion_max_distance: int = DEFAULT_MAX_DISTANCE,
    ):
        self.registry = registry
        self.clock = clock or utc_now
        self.suggestion_max_distance = suggestion_max_distance

    def validate(
        self,
        code: str,
        context: PromotionContext,
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """
        Validate a promo code against an order context

        Args:
            code: Code as typed by the customer
            context: Services, location, customer type and order value
            now: Reference time; the clock is read once when omitted

        Returns:
            ValidationResult. Domain failures are reported, never raised.

        Raises:
            TypeError: If ``code`` is not a string
        """
        if not isinstance(code, str):
            raise TypeError(f"Promo code must be a string, got {type(code).__name__}")

        now = now or self.clock()

        if not normalize_code(code):
            return ValidationResult(
                valid=False,
                reason=ValidationReason.CODE_REQUIRED,
                error="Promo code is required",
            )

        promotion = self.registry.get_by_code(code)
        if promotion is None:
            suggestion = suggest_code(
                code, self.registry.codes(), self.suggestion_max_distance
            )
            logger.info(f"Unknown promo code '{code.strip()}' (suggestion: {suggestion})")
            return ValidationResult(
                valid=False,
                reason=ValidationReason.CODE_NOT_FOUND,
                error="Code not recognized",
                suggestion=suggestion,
            )

        failure = self.check_eligibility(promotion, context, now)
        if failure is not None:
            reason, error = failure
            logger.info(f"Promo code '{promotion.code}' rejected: {reason.value}")
            return ValidationResult(
                valid=False,
                promotion=promotion,
                reason=reason,
                error=error,
                hint=self._hint_for(reason, now),
            )

        discount_amount, non_monetary = self.calculate_discount(promotion, context)
        logger.info(
            f"Promo code '{promotion.code}' accepted, discount {discount_amount:.2f}"
        )
        return ValidationResult(
            valid=True,
            promotion=promotion,
            discount_amount=discount_amount,
            non_monetary_benefit=non_monetary,
        )

    def check_eligibility(
        self,
        promotion: Promotion,
        context: PromotionContext,
        now: datetime,
    ) -> Optional[Tuple[ValidationReason, str]]:
        """Run the applicability checks in order; return the first failure"""

        if promotion.starts_at and now < promotion.starts_at:
            return ValidationReason.NOT_YET_ACTIVE, "This code is not yet active"
        if promotion.ends_at and now > promotion.ends_at:
            return ValidationReason.EXPIRED, "This code has expired"

        if (
            promotion.customer_type != CustomerType.ANY
            and promotion.customer_type != context.customer_type
        ):
            return (
                ValidationReason.CUSTOMER_TYPE_MISMATCH,
                f"This offer is for {promotion.customer_type.value} customers only",
            )

        if promotion.restricts_services and not (
            promotion.applicable_services & context.service_ids
        ):
            return (
                ValidationReason.SERVICE_NOT_ELIGIBLE,
                "Code not valid for selected services",
            )

        if (
            promotion.restricts_locations
            and context.location_slug not in promotion.applicable_locations
        ):
            return (
                ValidationReason.LOCATION_NOT_ELIGIBLE,
                "Code not valid for your location",
            )

        if (
            promotion.min_order_value is not None
            and context.order_value < promotion.min_order_value
        ):
            return (
                ValidationReason.MINIMUM_NOT_MET,
                f"Minimum order of {format_money(promotion.min_order_value)} required",
            )

        if (
            promotion.max_redemptions is not None
            and promotion.redemptions_count >= promotion.max_redemptions
        ):
            return (
                ValidationReason.REDEMPTION_LIMIT_REACHED,
                "This code has reached maximum redemptions",
            )

        return None

    def calculate_discount(
        self, promotion: Promotion, context: PromotionContext
    ) -> Tuple[float, bool]:
        """
        Calculate the discount a promotion grants for a context

        Returns:
            (discount amount, whether the benefit is non-monetary)
        """
        order_value = max(0.0, context.order_value)
        non_monetary = False
        kind = promotion.discount_kind

        if kind == DiscountKind.PERCENTAGE:
            discount = order_value * promotion.discount_value / 100
            discount = min(max(discount, 0.0), order_value)

        elif kind in (
            DiscountKind.FIXED_AMOUNT,
            DiscountKind.BUNDLE,
            DiscountKind.REFERRAL_CREDIT,
        ):
            discount = min(max(promotion.discount_value, 0.0), order_value)

        elif kind == DiscountKind.FREE_SERVICE:
            price = self._free_service_price(promotion, context)
            if price is None:
                # No price list supplied: report the benefit, do not guess a value
                discount = 0.0
                non_monetary = True
            else:
                discount = min(price, order_value)

        else:
            raise ValueError(f"Unknown discount kind: {kind}")

        if promotion.max_discount is not None:
            discount = min(discount, promotion.max_discount)

        return round(discount, 2), non_monetary

    def _free_service_price(
        self, promotion: Promotion, context: PromotionContext
    ) -> Optional[float]:
        """Price of the cheapest requested service the promotion makes free"""
        covered = context.service_ids
        if promotion.restricts_services:
            covered = covered & promotion.applicable_services

        prices = [
            context.service_prices[service_id]
            for service_id in covered
            if service_id in context.service_prices
        ]
        if not prices:
            return None
        return max(0.0, min(prices))

    def _hint_for(self, reason: ValidationReason, now: datetime) -> Optional[str]:
        if reason == ValidationReason.CUSTOMER_TYPE_MISMATCH:
            return "Check out our referral program for existing customer benefits!"

        if reason == ValidationReason.MINIMUM_NOT_MET:
            return "Add more services to qualify for this promotion."

        if reason == ValidationReason.EXPIRED:
            promotions = PromotionService(self.registry, self.clock)
            banners = promotions.site_banners(now)
            if banners and banners[0].code:
                return f"Try code {banners[0].code} for our current promotion!"

        return None

    def find_applicable(
        self, context: PromotionContext, now: Optional[datetime] = None
    ) -> List[ApplicablePromotion]:
        """
        Find every auto-apply promotion the context qualifies for

        Returns:
            Applicable promotions, largest discount first
        """
        now = now or self.clock()
        applicable = []

        for promotion in self.registry:
            if not promotion.auto_apply or not promotion.is_active:
                continue
            if self.check_eligibility(promotion, context, now) is not None:
                continue

            discount_amount, _ = self.calculate_discount(promotion, context)
            applicable.append(
                ApplicablePromotion(
                    promotion=promotion,
                    discount_amount=discount_amount,
                    discount_percent=self._discount_percent(
                        promotion, context.order_value, discount_amount
                    ),
                    eligibility_reason=self._eligibility_reason(promotion, context),
                    stackable=self.is_stackable(promotion),
                )
            )

        # sorted() is stable, so equal discounts keep table order
        return sorted(applicable, key=lambda a: a.discount_amount, reverse=True)

    def calculate_total_discount(
        self, applicable: List[ApplicablePromotion], order_value: float
    ) -> DiscountSummary:
        """
        Combine applicable promotions. Only one percentage discount applies;
        fixed, bundle, referral and free-service benefits stack.
        """
        summary = DiscountSummary()
        has_percentage = False
        total = 0.0

        for item in sorted(applicable, key=lambda a: a.discount_amount, reverse=True):
            if item.promotion.discount_kind == DiscountKind.PERCENTAGE:
                if has_percentage and not item.stackable:
                    summary.skipped.append(item)
                    continue
                has_percentage = True

            summary.applied.append(item)
            total += item.discount_amount

        summary.total_discount = round(min(total, max(0.0, order_value)), 2)
        return summary

    @staticmethod
    def is_stackable(promotion: Promotion) -> bool:
        # Percentage discounts never stack with each other
        return promotion.discount_kind != DiscountKind.PERCENTAGE

    @staticmethod
    def _discount_percent(
        promotion: Promotion, order_value: float, discount_amount: float
    ) -> float:
        if promotion.discount_kind == DiscountKind.PERCENTAGE:
            return float(promotion.discount_value)
        if order_value > 0:
            return round(discount_amount / order_value * 100, 2)
        return 0.0

    @staticmethod
    def _eligibility_reason(promotion: Promotion, context: PromotionContext) -> str:
        if (
            promotion.customer_type == CustomerType.NEW
            and context.customer_type == CustomerType.NEW
        ):
            return "New customer welcome offer"
        if promotion.discount_kind == DiscountKind.BUNDLE:
            return "Bundle discount for multiple services"
        if promotion.restricts_locations:
            return "Location-specific offer"
        return "Auto-applied based on your order"
