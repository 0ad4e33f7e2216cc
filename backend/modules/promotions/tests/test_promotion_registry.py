# backend/modules/promotions/tests/test_promotion_registry.py

import pytest

from modules.promotions.data.promotion_registry import (
    PROMOTIONS,
    PromotionRegistry,
    default_registry,
)
from modules.promotions.models.promotion_models import DiscountKind, PromotionStatus

from modules.promotions.tests.factories import PromotionFactory


class TestPromotionRegistry:
    """Test cases for PromotionRegistry lookups"""

    def test_duplicate_id_rejected(self):
        with pytest.raises(ValueError, match="Duplicate promotion id"):
            PromotionRegistry([
                PromotionFactory(id="same"),
                PromotionFactory(id="same"),
            ])

    def test_duplicate_code_rejected_ignoring_case(self):
        with pytest.raises(ValueError, match="Duplicate promotion code"):
            PromotionRegistry([
                PromotionFactory(code="SAVE10"),
                PromotionFactory(code=" save10"),
            ])

    def test_get_by_code(self, registry):
        assert registry.get_by_code(" spring20 ").id == "spring-20"
        assert registry.get_by_code("NOPE") is None

    def test_unpublished_code_hidden(self, registry):
        assert registry.get_by_code("DRAFT5") is None
        assert registry.get_by_id("draft-promo") is not None

    @pytest.mark.parametrize("status", [
        PromotionStatus.DRAFT,
        PromotionStatus.SCHEDULED,
        PromotionStatus.PAUSED,
        PromotionStatus.EXPIRED,
    ])
    def test_only_active_codes_match(self, status):
        registry = PromotionRegistry([PromotionFactory(code="HELD", status=status)])

        assert registry.get_by_code("HELD") is None
        assert registry.codes() == []

    def test_codes_in_table_order(self, registry):
        codes = registry.codes()

        assert codes[0] == "SPRING20"
        assert "DRAFT5" not in codes
        # Expired codes still count for suggestions
        assert "WINTER25" in codes

    def test_iteration_preserves_order(self, registry, promotions):
        assert list(registry) == promotions
        assert len(registry) == len(promotions)


class TestBusinessTable:
    """Sanity checks on the compiled promotion table"""

    def test_default_registry_loads(self):
        registry = default_registry()

        assert len(registry) == len(PROMOTIONS)
        assert default_registry() is registry

    def test_percentages_are_in_range(self):
        for promotion in PROMOTIONS:
            if promotion.discount_kind == DiscountKind.PERCENTAGE:
                assert 0 < promotion.discount_value <= 100, promotion.id

    def test_windows_are_ordered(self):
        for promotion in PROMOTIONS:
            if promotion.starts_at and promotion.ends_at:
                assert promotion.starts_at < promotion.ends_at, promotion.id

    def test_campaign_lookup(self):
        fall = default_registry().by_campaign("fall-2026")

        assert [p.id for p in fall] == ["fall-aeration-2026"]

    def test_draft_and_scheduled_codes_hidden(self):
        registry = default_registry()

        assert registry.get_by_code("SNOW26") is None
        assert registry.get_by_code("SPRING26") is None
        assert registry.get_by_code("WELCOME15").id == "new-customer-2026"
