# backend/modules/promotions/services/promotion_service.py

from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional
import logging

from ..data.promotion_registry import PromotionRegistry
from ..models.promotion_models import CustomerType, Promotion, PromotionStatus
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)

DISPLAY_LIMIT = 5
BANNER_LIMIT = 2

PromotionFilter = Callable[[Promotion, datetime], bool]


def _sort_key(promotion: Promotion):
    """Ranked promotions first (lowest rank wins), then newest window start"""
    if promotion.priority_rank is not None:
        return (0, promotion.priority_rank, 0.0, promotion.id)
    if promotion.starts_at is not None:
        return (1, 0, -promotion.starts_at.timestamp(), promotion.id)
    return (2, 0, 0.0, promotion.id)


def order_promotions(promotions: Iterable[Promotion]) -> List[Promotion]:
    return sorted(promotions, key=_sort_key)


class PromotionView:
    """
    Lazy, restartable selection over a registry.

    Nothing is evaluated until iteration starts; every pass re-reads the
    clock once (unless a fixed ``now`` was given) and filters the table again.
    """

    def __init__(
        self,
        registry: PromotionRegistry,
        predicate: PromotionFilter,
        clock: Clock,
        now: Optional[datetime] = None,
    ):
        self._registry = registry
        self._predicate = predicate
        self._clock = clock
        self._now = now

    def __iter__(self) -> Iterator[Promotion]:
        now = self._now or self._clock()
        matches = [p for p in self._registry if self._predicate(p, now)]
        return iter(order_promotions(matches))

    def first(self) -> Optional[Promotion]:
        return next(iter(self), None)


def combine_views(*views: Iterable[Promotion], limit: int = DISPLAY_LIMIT) -> List[Promotion]:
    """Concatenate views, keep the first occurrence of each id, cap to ``limit``"""
    seen = set()
    combined = []
    if limit <= 0:
        return combined
    for view in views:
        for promotion in view:
            if promotion.id in seen:
                continue
            seen.add(promotion.id)
            combined.append(promotion)
            if len(combined) >= limit:
                return combined
    return combined


class PromotionService:
    """Read-only selection views used by banners, location pages and quote forms"""

    def __init__(self, registry: PromotionRegistry, clock: Optional[Clock] = None):
        self.registry = registry
        self.clock = clock or utc_now

    def _view(self, predicate: PromotionFilter, now: Optional[datetime]) -> PromotionView:
        return PromotionView(self.registry, predicate, self.clock, now)

    def active_promotions(self, now: Optional[datetime] = None) -> PromotionView:
        """Published promotions inside their validity window"""
        return self._view(lambda p, at: p.is_live(at), now)

    def display_promotions(self, now: Optional[datetime] = None) -> PromotionView:
        return self._view(lambda p, at: p.is_live(at) and p.display_on_site, now)

    def banner_promotions(self, now: Optional[datetime] = None) -> PromotionView:
        """Promotions flagged for the site-wide banner"""
        return self._view(
            lambda p, at: p.is_live(at) and p.display_on_site and bool(p.banner_text),
            now,
        )

    def site_banners(self, now: Optional[datetime] = None) -> List[Promotion]:
        """Banners actually shown across the site, at most BANNER_LIMIT"""
        return combine_views(self.banner_promotions(now), limit=BANNER_LIMIT)

    def location_promotions(
        self, location_slug: str, now: Optional[datetime] = None
    ) -> PromotionView:
        """Promotions available at a location (unrestricted ones included)"""

        def matches(promotion: Promotion, at: datetime) -> bool:
            return (
                promotion.is_live(at)
                and promotion.display_on_site
                and (
                    not promotion.restricts_locations
                    or location_slug in promotion.applicable_locations
                )
            )

        return self._view(matches, now)

    def new_customer_promotions(self, now: Optional[datetime] = None) -> PromotionView:
        return self._view(
            lambda p, at: p.is_live(at)
            and p.display_on_site
            and p.customer_type in (CustomerType.NEW, CustomerType.ANY),
            now,
        )

    def service_promotions(
        self, service_id: str, now: Optional[datetime] = None
    ) -> PromotionView:
        """Promotions to show on a service page"""
        return self._view(
            lambda p, at: p.is_live(at)
            and p.display_on_site
            and (not p.restricts_services or service_id in p.applicable_services),
            now,
        )

    def upcoming_promotions(self, now: Optional[datetime] = None) -> PromotionView:
        """Scheduled promotions, and active ones whose window has not opened yet"""
        return self._view(
            lambda p, at: p.status == PromotionStatus.SCHEDULED
            or (p.is_active and p.starts_at is not None and p.starts_at > at),
            now,
        )

    def campaign_promotions(self, campaign: str) -> List[Promotion]:
        return order_promotions(self.registry.by_campaign(campaign))

    def list_active(
        self,
        location_slug: str,
        customer_type: CustomerType = CustomerType.NEW,
        limit: int = DISPLAY_LIMIT,
        now: Optional[datetime] = None,
    ) -> List[Promotion]:
        """
        Promotions to show a visitor: site banners, then location offers, then
        new-customer offers when the visitor is new.

        Args:
            location_slug: Location the visitor is browsing
            customer_type: Whether the visitor is a new or existing customer
            limit: Maximum number of promotions returned, never above 5
            now: Reference time, read from the clock when omitted

        Returns:
            Deduplicated list of at most ``limit`` promotions
        """
        now = now or self.clock()
        limit = max(0, min(limit, DISPLAY_LIMIT))

        views = [
            self.site_banners(now),
            self.location_promotions(location_slug, now),
        ]
        if customer_type == CustomerType.NEW:
            views.append(self.new_customer_promotions(now))

        promotions = combine_views(*views, limit=limit)
        logger.debug(
            f"Listing {len(promotions)} promotions for {location_slug} ({customer_type.value})"
        )
        return promotions
