"""
Listing Filter Predicate

``matches_filters`` decides whether one listing passes the dashboard filter
selection. Every constraint is independent and they combine with AND, so
relaxing any single constraint can only grow the result.

Usage:
    from scopeperth.metrics.filters import FilterContext, apply_filters

    context = FilterContext.from_config(comparables, favourites, now)
    visible = apply_filters(listings, filters, context)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional

from scopeperth.config import MetricsConfig, get_config
from scopeperth.core import constants
from scopeperth.core.models import Comparable, FilterState, Listing
from scopeperth.metrics.classification import (
    ComparableIndex,
    MotivationRules,
    build_comparable_index,
    is_best_value,
    is_land_listing,
    is_motivated_seller,
)
from scopeperth.utils.property_types import normalize_property_type
from scopeperth.utils.suburbs import normalize_suburb


@dataclass(frozen=True)
class FilterContext:
    """Lookup tables and thresholds the predicate depends on."""

    comparables: ComparableIndex = field(default_factory=dict)
    favourites: FrozenSet[str] = frozenset()
    now: Optional[datetime] = None
    budget: int = constants.DEFAULT_BUDGET
    best_value_discount_pct: float = constants.DEFAULT_BEST_VALUE_DISCOUNT_PCT
    motivation: MotivationRules = MotivationRules()
    exclude_unpriced_under_max_price: bool = True

    @classmethod
    def from_config(
        cls,
        comparables: Iterable[Comparable] = (),
        favourites: Iterable[str] = (),
        now: Optional[datetime] = None,
        metrics: Optional[MetricsConfig] = None,
    ) -> "FilterContext":
        metrics = metrics or get_config().metrics
        return cls(
            comparables=build_comparable_index(comparables),
            favourites=frozenset(str(f) for f in favourites),
            now=now,
            budget=metrics.budget,
            best_value_discount_pct=metrics.best_value_discount_pct,
            motivation=MotivationRules(
                score_threshold=metrics.motivation_score_threshold,
                max_days_on_market=metrics.motivated_days_on_market,
            ),
            exclude_unpriced_under_max_price=metrics.exclude_unpriced_under_max_price,
        )


def _is_any(value: str) -> bool:
    return value.strip().lower() in constants.ANY_FILTER_VALUES


def matches_filters(listing: Listing, filters: FilterState, context: FilterContext) -> bool:
    """Return True if the listing passes every active constraint."""
    if not _is_any(filters.suburb) and listing.suburb != normalize_suburb(filters.suburb):
        return False

    if not _is_any(filters.property_type):
        if listing.property_type != normalize_property_type(filters.property_type):
            return False

    if (listing.bedrooms or 0) < filters.min_bedrooms:
        return False

    if filters.max_price is not None:
        if listing.price_numeric is None:
            if context.exclude_unpriced_under_max_price:
                return False
        elif listing.price_numeric > filters.max_price:
            return False

    if filters.pool_only and not listing.pool:
        return False

    if filters.under_budget:
        if listing.price_numeric is None or listing.price_numeric > context.budget:
            return False

    if filters.available_only and listing.under_offer:
        return False

    if filters.hide_land and (is_land_listing(listing) or (listing.bedrooms or 0) == 0):
        return False

    if filters.best_value and not is_best_value(
        listing, context.comparables, context.best_value_discount_pct
    ):
        return False

    if filters.motivated_seller:
        now = context.now or datetime.now()
        if not is_motivated_seller(listing, now, context.motivation):
            return False

    if filters.favourites_only and listing.id not in context.favourites:
        return False

    return True


def apply_filters(
    listings: Iterable[Listing],
    filters: FilterState,
    context: FilterContext,
) -> List[Listing]:
    """Filter listings, preserving their input order."""
    return [listing for listing in listings if matches_filters(listing, filters, context)]
