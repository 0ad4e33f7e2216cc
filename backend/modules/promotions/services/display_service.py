# backend/modules/promotions/services/display_service.py

"""
Formatting of promotions for banners, quote forms and location pages.

Everything here is pure: the only time-dependent input is ``now``,
which callers may pass explicitly.
"""

from datetime import datetime
from typing import Optional

from ..models.promotion_models import DiscountKind, DisplayPayload, Promotion
from .clock import utc_now

EXPIRING_SOON_DAYS = 7
VALID_THROUGH_DAYS = 30


def format_money(amount: float) -> str:
    """$25, $1,000, $12.50"""
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def format_percent(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}%"
    return f"{value:g}%"


def badge_for(promotion: Promotion) -> str:
    """Short badge such as "20% OFF" derived from the discount kind"""
    if promotion.badge_text:
        return promotion.badge_text

    kind = promotion.discount_kind
    if kind == DiscountKind.PERCENTAGE:
        return f"{format_percent(promotion.discount_value)} OFF"
    elif kind in (DiscountKind.FIXED_AMOUNT, DiscountKind.BUNDLE):
        return f"{format_money(promotion.discount_value)} OFF"
    elif kind == DiscountKind.REFERRAL_CREDIT:
        return f"{format_money(promotion.discount_value)} CREDIT"
    elif kind == DiscountKind.FREE_SERVICE:
        return "FREE SERVICE"
    raise ValueError(f"Unknown discount kind: {kind}")


def days_remaining(promotion: Promotion, now: datetime) -> Optional[int]:
    """Calendar days until the promotion ends. None if open-ended."""
    if promotion.ends_at is None:
        return None
    return (promotion.ends_at.date() - now.date()).days


def expires_text_for(promotion: Promotion, now: Optional[datetime] = None) -> str:
    now = now or utc_now()
    if promotion.ends_at is None:
        return ""
    if now > promotion.ends_at:
        return "Ended"

    days_left = days_remaining(promotion, now)
    if days_left <= 0:
        return "Ends today"
    if days_left == 1:
        return "Ends tomorrow"
    if days_left <= EXPIRING_SOON_DAYS:
        return f"Ends in {days_left} days"
    if days_left <= VALID_THROUGH_DAYS:
        end = promotion.ends_at
        return f"Valid through {end.strftime('%b')} {end.day}"
    return ""


def format_display(
    promotion: Promotion, now: Optional[datetime] = None
) -> DisplayPayload:
    """
    Build the user facing payload for a promotion

    Args:
        promotion: Promotion to render
        now: Reference time for the expiry text, defaults to the current UTC time

    Returns:
        DisplayPayload with badge and expiry text
    """
    return DisplayPayload(
        title=promotion.name,
        description=promotion.description,
        badge=badge_for(promotion),
        code=promotion.code,
        banner_text=promotion.banner_text,
        expires_text=expires_text_for(promotion, now),
    )


def is_expiring_soon(promotion: Promotion, now: Optional[datetime] = None) -> bool:
    """True when the promotion ends within the next week"""
    now = now or utc_now()
    if promotion.ends_at is None or now > promotion.ends_at:
        return False
    days_left = days_remaining(promotion, now)
    return 0 < days_left <= EXPIRING_SOON_DAYS
