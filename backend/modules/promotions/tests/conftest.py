# backend/modules/promotions/tests/conftest.py

import pytest
from datetime import timedelta
from fastapi.testclient import TestClient

from modules.promotions.data.promotion_registry import PromotionRegistry
from modules.promotions.dependencies import get_clock, get_promotion_registry
from modules.promotions.models.promotion_models import (
    CustomerType,
    DiscountKind,
    PromotionStatus,
)
from modules.promotions.services.discount_service import DiscountService
from modules.promotions.services.promotion_service import PromotionService

from modules.promotions.tests.factories import FIXED_NOW, PromotionFactory


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def promotions():
    """Fixture table covering every predicate and discount kind"""
    return [
        PromotionFactory(
            id="spring-20",
            name="Spring Savings",
            code="SPRING20",
            discount_value=20,
            banner_text="20% off all spring services!",
            priority_rank=1,
        ),
        PromotionFactory(
            id="fixed-25",
            name="Twenty Five Off",
            code="SAVE25",
            fixed=True,
            discount_value=25,
            banner_text="$25 off any visit",
            starts_at=FIXED_NOW - timedelta(days=5),
        ),
        PromotionFactory(
            id="welcome-15",
            name="New Customer Welcome",
            code="WELCOME15",
            discount_value=15,
            customer_type=CustomerType.NEW,
            starts_at=FIXED_NOW - timedelta(days=20),
        ),
        PromotionFactory(
            id="loyal-10",
            code="LOYAL10",
            customer_type=CustomerType.EXISTING,
        ),
        PromotionFactory(
            id="mulch-10",
            code="MULCH10",
            applicable_services=frozenset({"mulching", "landscaping"}),
        ),
        PromotionFactory(
            id="new-albany",
            code="ALBANY",
            applicable_locations=frozenset({"new-albany-oh"}),
            starts_at=FIXED_NOW - timedelta(days=2),
        ),
        PromotionFactory(
            id="big-order",
            code="BIG50",
            fixed=True,
            discount_value=50,
            min_order_value=500,
        ),
        PromotionFactory(
            id="half-capped",
            code="HALFOFF",
            discount_value=50,
            max_discount=100,
        ),
        PromotionFactory(
            id="free-mow",
            code="FREEMOW",
            free_service=True,
            applicable_services=frozenset({"mowing"}),
        ),
        PromotionFactory(
            id="sold-out",
            code="SOLDOUT",
            max_redemptions=10,
            redemptions_count=10,
        ),
        PromotionFactory(
            id="old-winter",
            code="WINTER25",
            expired=True,
            banner_text="Winter is over",
        ),
        PromotionFactory(
            id="summer-soon",
            code="SUMMER30",
            upcoming=True,
            discount_value=30,
            banner_text="Summer sale coming soon",
        ),
        PromotionFactory(
            id="draft-promo",
            code="DRAFT5",
            status=PromotionStatus.DRAFT,
            banner_text="Not published",
        ),
        PromotionFactory(
            id="auto-bundle",
            discount_kind=DiscountKind.BUNDLE,
            discount_value=75,
            applicable_services=frozenset({"aeration", "overseeding"}),
            auto_apply=True,
        ),
        PromotionFactory(
            id="auto-percent-5",
            discount_value=5,
            auto_apply=True,
            display_on_site=False,
        ),
        PromotionFactory(
            id="auto-percent-8",
            discount_value=8,
            auto_apply=True,
            display_on_site=False,
        ),
    ]


@pytest.fixture
def registry(promotions):
    return PromotionRegistry(promotions)


@pytest.fixture
def discount_service(registry, fixed_clock):
    return DiscountService(registry, clock=fixed_clock)


@pytest.fixture
def promotion_service(registry, fixed_clock):
    return PromotionService(registry, clock=fixed_clock)


@pytest.fixture
def client(registry, fixed_clock):
    """Test client serving the fixture table at FIXED_NOW"""
    from app.main import app

    app.dependency_overrides[get_promotion_registry] = lambda: registry
    app.dependency_overrides[get_clock] = lambda: fixed_clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
