"""
Derived-metrics engine.

Pure functions over canonical records: filtering, suburb aggregation,
classification flags, the investment scorecard, inspection grouping and
sold price trends.
"""

from scopeperth.metrics.aggregation import (
    aggregate_by_suburb,
    best_investment_picks,
    rank_by_listing_count,
    summarize_listings,
    summarize_suburb_page,
    top_suburbs_by_median,
)
from scopeperth.metrics.classification import (
    beach_distance_km,
    build_comparable_index,
    is_best_value,
    is_land_listing,
    is_motivated_seller,
    is_near_beach,
    motivation_signal,
)
from scopeperth.metrics.filters import FilterContext, apply_filters, matches_filters
from scopeperth.metrics.inspections import group_inspections
from scopeperth.metrics.scorecard import build_scorecard, gross_yield
from scopeperth.metrics.trends import quarterly_medians, summarize_trends

__all__ = [
    "aggregate_by_suburb",
    "best_investment_picks",
    "rank_by_listing_count",
    "summarize_listings",
    "summarize_suburb_page",
    "top_suburbs_by_median",
    "beach_distance_km",
    "build_comparable_index",
    "is_best_value",
    "is_land_listing",
    "is_motivated_seller",
    "is_near_beach",
    "motivation_signal",
    "FilterContext",
    "apply_filters",
    "matches_filters",
    "group_inspections",
    "build_scorecard",
    "gross_yield",
    "quarterly_medians",
    "summarize_trends",
]
