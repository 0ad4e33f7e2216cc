# backend/modules/promotions/data/promotion_registry.py

"""
Static promotion table for Grandpa Ron's Lawns & Landscaping.

The table is compiled into the process and never changes while it runs.
Services receive a ``PromotionRegistry`` instead of reading the table
directly, so tests can substitute their own fixtures.
"""

from datetime import datetime, time, timezone
from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Tuple
import logging

from ..models.promotion_models import (
    CustomerType,
    DiscountKind,
    Promotion,
    PromotionStatus,
)
from ..services.code_matching import normalize_code

logger = logging.getLogger(__name__)


class PromotionRegistry:
    """Read-only lookup over an immutable set of promotions"""

    def __init__(self, promotions: Iterable[Promotion]):
        self._promotions: Tuple[Promotion, ...] = tuple(promotions)
        self._by_id = {}
        self._by_code = {}

        for promotion in self._promotions:
            if promotion.id in self._by_id:
                raise ValueError(f"Duplicate promotion id '{promotion.id}'")
            self._by_id[promotion.id] = promotion

            if promotion.code:
                key = normalize_code(promotion.code)
                if key in self._by_code:
                    raise ValueError(f"Duplicate promotion code '{promotion.code}'")
                self._by_code[key] = promotion

    def __iter__(self) -> Iterator[Promotion]:
        return iter(self._promotions)

    def __len__(self) -> int:
        return len(self._promotions)

    def get_by_id(self, promotion_id: str) -> Optional[Promotion]:
        return self._by_id.get(promotion_id)

    def get_by_code(self, code: str) -> Optional[Promotion]:
        """Find an active promotion by code, ignoring case and whitespace"""
        promotion = self._by_code.get(normalize_code(code))
        if promotion is None or not promotion.is_active:
            return None
        return promotion

    def codes(self) -> List[str]:
        """Codes of active promotions, in table order"""
        return [p.code for p in self._promotions if p.code and p.is_active]

    def by_campaign(self, campaign: str) -> List[Promotion]:
        return [p for p in self._promotions if p.campaign == campaign]


def _starts(day: str) -> datetime:
    return datetime.combine(
        datetime.strptime(day, "%Y-%m-%d").date(), time.min, tzinfo=timezone.utc
    )


def _ends(day: str) -> datetime:
    # End dates are inclusive of the whole day
    return datetime.combine(
        datetime.strptime(day, "%Y-%m-%d").date(), time.max, tzinfo=timezone.utc
    )


PROMOTIONS: Tuple[Promotion, ...] = (
    # ============================================
    # SEASONAL PROMOTIONS
    # ============================================
    Promotion(
        id="spring-early-bird-2026",
        name="Spring Early Bird Special",
        description=(
            "Book your spring services early and save 10%! Valid on mulching, "
            "landscaping, and spring cleanup."
        ),
        discount_kind=DiscountKind.PERCENTAGE,
        discount_value=10,
        code="SPRING26",
        banner_text="Early Bird Special: 10% off mulching & landscaping through March 15!",
        terms=(
            "Valid for services scheduled by May 31, 2026. Cannot be combined "
            "with other offers. $200 minimum order."
        ),
        applicable_services=frozenset({"mulching", "landscaping", "spring-cleanup"}),
        min_order_value=200,
        max_redemptions=100,
        starts_at=_starts("2026-02-01"),
        ends_at=_ends("2026-03-15"),
        campaign="spring-2026",
        status=PromotionStatus.SCHEDULED,
    ),
    Promotion(
        id="fall-aeration-2026",
        name="Fall Aeration & Seeding Package",
        description=(
            "Get both aeration and overseeding together and save $75. "
            "Best time for lawn renovation!"
        ),
        discount_kind=DiscountKind.BUNDLE,
        discount_value=75,
        banner_text="Fall Special: Aeration + Overseeding - Save $75!",
        terms="Services must be performed together. Valid August 15 - October 15, 2026.",
        applicable_services=frozenset({"overseeding", "aeration"}),
        starts_at=_starts("2026-08-15"),
        ends_at=_ends("2026-10-15"),
        auto_apply=True,
        campaign="fall-2026",
        status=PromotionStatus.DRAFT,
    ),
    Promotion(
        id="snow-contract-2026",
        name="Early Snow Contract Discount",
        description=(
            "Secure your spot for priority snow removal. Early contracts save "
            "15% on seasonal rates."
        ),
        discount_kind=DiscountKind.PERCENTAGE,
        discount_value=15,
        code="SNOW26",
        banner_text="Lock in 15% off your winter snow contract - book by Nov 1!",
        terms="Valid for seasonal contracts signed by November 1, 2026. Payment plan available.",
        applicable_services=frozenset({"snow-removal"}),
        starts_at=_starts("2026-09-01"),
        ends_at=_ends("2026-11-01"),
        campaign="snow-2026",
        status=PromotionStatus.DRAFT,
    ),
    # ============================================
    # CUSTOMER SEGMENT PROMOTIONS
    # ============================================
    Promotion(
        id="new-customer-2026",
        name="New Customer Welcome",
        description="Welcome to the Grandpa Ron's family! Enjoy 15% off your first service.",
        discount_kind=DiscountKind.PERCENTAGE,
        discount_value=15,
        code="WELCOME15",
        banner_text="New customers: 15% off your first service!",
        terms="Valid for first-time customers only. One use per household.",
        customer_type=CustomerType.NEW,
        starts_at=_starts("2026-01-01"),
        ends_at=_ends("2026-12-31"),
    ),
    Promotion(
        id="senior-discount",
        name="Senior Citizen Discount",
        description="We appreciate our senior customers! 10% off all services for customers 65+.",
        discount_kind=DiscountKind.PERCENTAGE,
        discount_value=10,
        terms="Must be 65 or older. Cannot be combined with other percentage discounts.",
        starts_at=_starts("2020-01-01"),
        ends_at=_ends("2030-12-31"),
    ),
    Promotion(
        id="veteran-discount",
        name="Veteran & Active Military Discount",
        description=(
            "Thank you for your service! 10% off all services for veterans "
            "and active military."
        ),
        discount_kind=DiscountKind.PERCENTAGE,
        discount_value=10,
        terms="Proof of service required. Cannot be combined with other percentage discounts.",
        starts_at=_starts("2020-01-01"),
        ends_at=_ends("2030-12-31"),
    ),
    # ============================================
    # REFERRAL PROMOTIONS
    # ============================================
    Promotion(
        id="referral-program",
        name="Referral Reward Program",
        description=(
            "When you refer a friend who books, you both save! You get $50 off, "
            "they get 15% off."
        ),
        discount_kind=DiscountKind.REFERRAL_CREDIT,
        discount_value=50,
        banner_text="Refer a friend, get $50 off your next service!",
        terms="Referred customer must complete first service. Credit applied to your next invoice.",
        customer_type=CustomerType.EXISTING,
        starts_at=_starts("2026-01-01"),
        ends_at=_ends("2026-12-31"),
    ),
    # ============================================
    # BUNDLE PROMOTIONS
    # ============================================
    Promotion(
        id="full-service-bundle",
        name="Full Property Care Package",
        description="Get weekly mowing + annual mulching + tree trimming. Save $150!",
        discount_kind=DiscountKind.BUNDLE,
        discount_value=150,
        terms="Requires annual mowing contract. Services can be scheduled throughout the year.",
        applicable_services=frozenset({"mowing", "mulching", "tree-trimming"}),
        min_order_value=1000,
        starts_at=_starts("2026-01-01"),
        ends_at=_ends("2026-12-31"),
        auto_apply=True,
    ),
    # ============================================
    # LOCATION-SPECIFIC PROMOTIONS
    # ============================================
    Promotion(
        id="new-albany-premium",
        name="New Albany Elite Service",
        description="Complimentary landscape lighting design with projects $5,000+",
        discount_kind=DiscountKind.FREE_SERVICE,
        badge_text="FREE UPGRADE",
        terms=(
            "Premium markets only. Design consultation included, installation "
            "priced separately."
        ),
        applicable_services=frozenset({"landscaping", "hardscaping"}),
        applicable_locations=frozenset({"new-albany-oh", "upper-arlington-oh", "bexley-oh"}),
        min_order_value=5000,
        starts_at=_starts("2026-01-01"),
        ends_at=_ends("2026-06-30"),
        display_on_site=False,
        auto_apply=True,
        status=PromotionStatus.SCHEDULED,
    ),
)


@lru_cache()
def default_registry() -> PromotionRegistry:
    """
    Get the process-wide registry built from the business table (cached).
    """
    registry = PromotionRegistry(PROMOTIONS)
    logger.info(f"Loaded {len(registry)} promotions into the registry")
    return registry
