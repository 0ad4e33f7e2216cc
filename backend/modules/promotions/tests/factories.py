# backend/modules/promotions/tests/factories.py

import factory
from factory import Faker, Sequence
from datetime import datetime, timedelta, timezone

from modules.promotions.models.promotion_models import (
    CustomerType,
    DiscountKind,
    Promotion,
    PromotionContext,
)

# Reference time shared by every fixture table
FIXED_NOW = datetime(2026, 4, 15, 12, 0, tzinfo=timezone.utc)


class PromotionFactory(factory.Factory):
    """Factory for creating promotions with an open window around FIXED_NOW."""

    class Meta:
        model = Promotion

    id = Sequence(lambda n: f"promo-{n}")
    name = Faker("catch_phrase")
    description = Faker("sentence")
    discount_kind = DiscountKind.PERCENTAGE
    discount_value = 10
    code = None
    banner_text = None

    customer_type = CustomerType.ANY
    applicable_services = frozenset()
    applicable_locations = frozenset()

    starts_at = FIXED_NOW - timedelta(days=30)
    ends_at = FIXED_NOW + timedelta(days=60)

    class Params:
        expired = factory.Trait(
            starts_at=FIXED_NOW - timedelta(days=60),
            ends_at=FIXED_NOW - timedelta(days=1),
        )
        upcoming = factory.Trait(
            starts_at=FIXED_NOW + timedelta(days=10),
            ends_at=FIXED_NOW + timedelta(days=40),
        )
        fixed = factory.Trait(discount_kind=DiscountKind.FIXED_AMOUNT)
        free_service = factory.Trait(discount_kind=DiscountKind.FREE_SERVICE, discount_value=0)


class PromotionContextFactory(factory.Factory):
    """Factory for order contexts posted by the quote form."""

    class Meta:
        model = PromotionContext

    service_ids = frozenset({"mowing"})
    location_slug = "columbus"
    customer_type = CustomerType.NEW
    order_value = 200.0
