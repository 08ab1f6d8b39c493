"""
Utility modules for the ScopePerth dashboard.

Provides parsing, normalisation and formatting helpers shared by the data
access layer, the metrics engine and the CLI.
"""

from scopeperth.utils.date_parser import (
    days_on_market,
    format_days_on_market,
    parse_date,
    parse_timestamp,
    quarter_label,
)
from scopeperth.utils.formatting import (
    format_percent,
    format_price,
    format_weekly_rent,
)
from scopeperth.utils.geo import distance_to_meridian_km, haversine_km
from scopeperth.utils.numbers import mean_median, round_half_up, upper_median
from scopeperth.utils.property_types import (
    PROPERTY_TYPE_MAP,
    is_house_type,
    is_land_type,
    normalize_property_type,
)
from scopeperth.utils.suburbs import deslugify, normalize_suburb, slugify, title_case

__all__ = [
    "days_on_market",
    "format_days_on_market",
    "parse_date",
    "parse_timestamp",
    "quarter_label",
    "format_percent",
    "format_price",
    "format_weekly_rent",
    "distance_to_meridian_km",
    "haversine_km",
    "mean_median",
    "round_half_up",
    "upper_median",
    "PROPERTY_TYPE_MAP",
    "is_house_type",
    "is_land_type",
    "normalize_property_type",
    "deslugify",
    "normalize_suburb",
    "slugify",
    "title_case",
]
