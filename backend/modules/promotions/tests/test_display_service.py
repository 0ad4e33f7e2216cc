# backend/modules/promotions/tests/test_display_service.py

import pytest
from datetime import timedelta

from modules.promotions.models.promotion_models import DiscountKind
from modules.promotions.services.display_service import (
    badge_for,
    expires_text_for,
    format_display,
    format_money,
    is_expiring_soon,
)

from modules.promotions.tests.factories import FIXED_NOW, PromotionFactory


class TestFormatting:
    """Test cases for badge and money formatting"""

    @pytest.mark.parametrize("amount,expected", [
        (25, "$25"),
        (1000, "$1,000"),
        (12.5, "$12.50"),
    ])
    def test_format_money(self, amount, expected):
        assert format_money(amount) == expected

    @pytest.mark.parametrize("kind,value,expected", [
        (DiscountKind.PERCENTAGE, 20, "20% OFF"),
        (DiscountKind.FIXED_AMOUNT, 25, "$25 OFF"),
        (DiscountKind.BUNDLE, 75, "$75 OFF"),
        (DiscountKind.REFERRAL_CREDIT, 50, "$50 CREDIT"),
        (DiscountKind.FREE_SERVICE, 0, "FREE SERVICE"),
    ])
    def test_badge_by_discount_kind(self, kind, value, expected):
        promotion = PromotionFactory(discount_kind=kind, discount_value=value)

        assert badge_for(promotion) == expected

    def test_explicit_badge_text_wins(self):
        promotion = PromotionFactory(free_service=True, badge_text="FREE UPGRADE")

        assert badge_for(promotion) == "FREE UPGRADE"


class TestExpiresText:
    """Test cases for the expiry line under a promotion"""

    @pytest.mark.parametrize("ends_in,expected", [
        (timedelta(hours=-1), "Ended"),
        (timedelta(hours=6), "Ends today"),
        (timedelta(days=1), "Ends tomorrow"),
        (timedelta(days=5), "Ends in 5 days"),
        (timedelta(days=7), "Ends in 7 days"),
        (timedelta(days=20), "Valid through May 5"),
        (timedelta(days=60), ""),
    ])
    def test_expires_text(self, ends_in, expected):
        promotion = PromotionFactory(ends_at=FIXED_NOW + ends_in)

        assert expires_text_for(promotion, FIXED_NOW) == expected

    def test_open_ended_promotion(self):
        promotion = PromotionFactory(ends_at=None)

        assert expires_text_for(promotion, FIXED_NOW) == ""

    @pytest.mark.parametrize("ends_in,expected", [
        (timedelta(hours=-1), False),
        (timedelta(hours=6), False),
        (timedelta(days=3), True),
        (timedelta(days=20), False),
    ])
    def test_is_expiring_soon(self, ends_in, expected):
        promotion = PromotionFactory(ends_at=FIXED_NOW + ends_in)

        assert is_expiring_soon(promotion, FIXED_NOW) is expected


class TestFormatDisplay:
    """Test cases for format_display"""

    def test_payload_fields(self, registry, now):
        promotion = registry.get_by_id("spring-20")

        payload = format_display(promotion, now)

        assert payload.title == "Spring Savings"
        assert payload.description == promotion.description
        assert payload.badge == "20% OFF"
        assert payload.code == "SPRING20"
        assert payload.banner_text == "20% off all spring services!"
        assert payload.expires_text == ""

    def test_payload_without_code(self, registry, now):
        payload = format_display(registry.get_by_id("auto-bundle"), now)

        assert payload.code is None
        assert payload.badge == "$75 OFF"
