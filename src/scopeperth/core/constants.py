"""
Shared Constants for the ScopePerth dashboard

Contains all constant values used across the application.
"""

from typing import FrozenSet, List, Tuple

# Remote data store tables
TABLE_LISTINGS: str = "property_listings"
TABLE_COMPARABLES: str = "comparables"
TABLE_RENTALS: str = "rental_medians"
TABLE_SUBURB_SOLD_STATS: str = "suburb_sold_stats"
TABLE_SOLD: str = "sold_properties"

# Server-side aggregate functions
RPC_SUBURB_INVESTMENT_STATS: str = "get_suburb_investment_stats"
RPC_SUBURB_PAGE_STATS: str = "get_suburb_page_stats"
RPC_DISTINCT_SOLD_SUBURBS: str = "get_distinct_sold_suburbs"

# Listing status values
STATUS_ACTIVE: str = "active"

# Local preference store
TABLE_PREFERENCES: str = "preferences"
PREF_THEME: str = "theme"
PREF_HERO_DISMISSED: str = "hero_dismissed"
PREF_FAVOURITES: str = "favourites"
PREF_NOTES: str = "notes"

# Derived-metric defaults (overridable through MetricsConfig)
DEFAULT_BUDGET: int = 1_750_000
DEFAULT_BEST_VALUE_DISCOUNT_PCT: float = 15.0
DEFAULT_INVESTMENT_PICK_DISCOUNT_PCT: float = 10.0
DEFAULT_INVESTMENT_PICK_LIMIT: int = 6
DEFAULT_MIN_PRICED_FOR_MEDIAN: int = 3
DEFAULT_MOTIVATED_DAYS_ON_MARKET: int = 60
DEFAULT_MOTIVATION_SCORE_THRESHOLD: int = 3
DEFAULT_NEAR_BEACH_KM: float = 2.0
DEFAULT_NEW_LISTING_DAYS: int = 7

# Distinct filter selections kept memoised per day
FILTER_CACHE_SIZE: int = 32
DEFAULT_TIMEZONE: str = "Australia/Perth"

# Perth metro coastline, treated as a north-south line
DEFAULT_COAST_LONGITUDE: float = 115.75
EARTH_RADIUS_KM: float = 6371.0

# Suburb yield uses a fixed rental configuration
RENTAL_REFERENCE_BEDROOMS: int = 3
RENTAL_REFERENCE_PROPERTY_TYPE: str = "house"
WEEKS_PER_YEAR: int = 52

# Motivated-seller text signals (matched case-insensitively)
NEGOTIATION_KEYWORDS: Tuple[str, ...] = ("offer", "negotiable", "must sell", "reduced")

# Address fragments that identify a land listing when no property type is known
LAND_ADDRESS_MARKERS: Tuple[str, ...] = ("lot ", "proposed lot", "vacant land")

# Filter values that mean "no constraint"
ANY_FILTER_VALUES: FrozenSet[str] = frozenset({"", "all", "__all__"})

# Inspection buckets, in display order
BUCKET_TODAY: str = "Today"
BUCKET_TOMORROW: str = "Tomorrow"
BUCKET_THIS_WEEKEND: str = "This Weekend"
BUCKET_NEXT_WEEK: str = "Next Week"
BUCKET_LATER: str = "Later"
INSPECTION_BUCKETS: List[str] = [
    BUCKET_TODAY,
    BUCKET_TOMORROW,
    BUCKET_THIS_WEEKEND,
    BUCKET_NEXT_WEEK,
    BUCKET_LATER,
]

# Price trends
SOLD_QUERY_LIMIT: int = 5000
SOLD_HISTORY_START: str = "2000-01-01"
DAYS_PER_MONTH: float = 30.5
MAX_TREND_SUBURBS: int = 5
MIN_SALES_PER_QUARTER: int = 2
DEFAULT_TREND_SUBURBS: List[str] = ["SCARBOROUGH", "HILLARYS", "KARRINYUP"]
TREND_PERIOD_MONTHS: List[int] = [12, 24, 36, 60, 0]
DEFAULT_TREND_PERIOD_MONTHS: int = 36

# Dashboard views
VIEWS: Tuple[str, ...] = ("grid", "map", "investor", "inspections", "trends")
MODES: Tuple[str, ...] = ("buyer", "investor")

# Calendar export
ICS_PRODUCT_ID: str = "-//ScopePerth//Inspections//EN"
ICS_UID_DOMAIN: str = "scopeperth"

# Logging
LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
DEFAULT_QUIET_LOGGERS: Tuple[str, ...] = (
    "httpx",
    "httpcore",
    "hpack",
    "postgrest",
    "supabase",
    "urllib3",
    "werkzeug",
)
