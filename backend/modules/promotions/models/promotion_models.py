# backend/modules/promotions/models/promotion_models.py

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Mapping, Optional


class DiscountKind(str, Enum):
    """How a promotion's discount value is interpreted"""
    PERCENTAGE = "percentage"                   # 20% off
    FIXED_AMOUNT = "fixed_amount"               # $25 off
    FREE_SERVICE = "free_service"               # One service at no charge
    BUNDLE = "bundle"                           # $75 off a service combination
    REFERRAL_CREDIT = "referral_credit"         # $50 credit for a referral


class PromotionStatus(str, Enum):
    """Publication state of a promotion"""
    DRAFT = "draft"                             # Being written, not public
    SCHEDULED = "scheduled"                     # Published, window in the future
    ACTIVE = "active"                           # Published and running
    PAUSED = "paused"                           # Temporarily pulled
    EXPIRED = "expired"                         # Past end date


class CustomerType(str, Enum):
    """Customer segment a promotion targets"""
    NEW = "new"
    EXISTING = "existing"
    ANY = "any"


class ValidationReason(str, Enum):
    """Machine readable outcome of a promo code check"""
    CODE_REQUIRED = "code_required"
    CODE_NOT_FOUND = "code_not_found"
    NOT_YET_ACTIVE = "not_yet_active"
    EXPIRED = "expired"
    CUSTOMER_TYPE_MISMATCH = "customer_type_mismatch"
    SERVICE_NOT_ELIGIBLE = "service_not_eligible"
    LOCATION_NOT_ELIGIBLE = "location_not_eligible"
    MINIMUM_NOT_MET = "minimum_not_met"
    REDEMPTION_LIMIT_REACHED = "redemption_limit_reached"


@dataclass(frozen=True)
class Promotion:
    """A discount rule with eligibility predicates and display metadata.

    Instances are constant for the lifetime of the process. Empty
    ``applicable_services`` / ``applicable_locations`` mean "all".
    ``discount_value`` holds percentage points for percentage promotions and
    dollars for every other kind except free-service, where it is unused.
    """

    id: str
    name: str
    description: str
    discount_kind: DiscountKind
    discount_value: float = 0.0
    code: Optional[str] = None
    banner_text: Optional[str] = None
    terms: str = ""

    # Eligibility
    applicable_services: FrozenSet[str] = frozenset()
    applicable_locations: FrozenSet[str] = frozenset()
    customer_type: CustomerType = CustomerType.ANY
    min_order_value: Optional[float] = None
    max_discount: Optional[float] = None

    # Limits
    max_redemptions: Optional[int] = None
    redemptions_count: int = 0

    # Validity window
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None

    # Display
    badge_text: Optional[str] = None
    priority_rank: Optional[int] = None
    display_on_site: bool = True
    auto_apply: bool = False
    campaign: Optional[str] = None
    status: PromotionStatus = PromotionStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        """Only active promotions can be matched, listed or auto-applied"""
        return self.status == PromotionStatus.ACTIVE

    @property
    def restricts_services(self) -> bool:
        return bool(self.applicable_services)

    @property
    def restricts_locations(self) -> bool:
        return bool(self.applicable_locations)

    def is_within_window(self, now: datetime) -> bool:
        if self.starts_at and now < self.starts_at:
            return False
        if self.ends_at and now > self.ends_at:
            return False
        return True

    def is_live(self, now: datetime) -> bool:
        """Active and inside its validity window at ``now``"""
        return self.is_active and self.is_within_window(now)


@dataclass(frozen=True)
class PromotionContext:
    """Caller supplied facts a promotion is checked against"""

    service_ids: FrozenSet[str] = frozenset()
    location_slug: str = "columbus"
    customer_type: CustomerType = CustomerType.NEW
    order_value: float = 0.0
    # Only used to value free-service promotions
    service_prices: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a promo code check. Never raised, always returned."""

    valid: bool
    promotion: Optional[Promotion] = None
    discount_amount: Optional[float] = None
    reason: Optional[ValidationReason] = None
    error: Optional[str] = None
    suggestion: Optional[str] = None
    hint: Optional[str] = None
    non_monetary_benefit: bool = False


@dataclass(frozen=True)
class ApplicablePromotion:
    """An auto-apply promotion that passed every predicate for a context"""

    promotion: Promotion
    discount_amount: float
    discount_percent: float
    eligibility_reason: str
    stackable: bool


@dataclass
class DiscountSummary:
    """Result of combining several applicable promotions"""

    total_discount: float = 0.0
    applied: List[ApplicablePromotion] = field(default_factory=list)
    skipped: List[ApplicablePromotion] = field(default_factory=list)


@dataclass(frozen=True)
class DisplayPayload:
    """User facing rendering of a promotion"""

    title: str
    description: str
    badge: str
    code: Optional[str] = None
    banner_text: Optional[str] = None
    expires_text: str = ""
