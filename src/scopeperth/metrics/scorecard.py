"""
Investment Scorecard

Joins per-suburb ask statistics with reference rents and sold statistics
into one row per suburb, ranked by gross yield.
"""

from typing import Dict, Iterable, List, Optional

from scopeperth.core import constants
from scopeperth.core.models import (
    InvestmentScorecardRow,
    RentalRecord,
    SuburbSoldStats,
    SuburbStat,
)
from scopeperth.utils.numbers import percent_change
from scopeperth.utils.suburbs import normalize_suburb


def gross_yield(weekly_rent: Optional[float], median_ask: Optional[float]) -> Optional[float]:
    """Annual rent as a percentage of the asking price.

    Example:
        >>> round(gross_yield(700, 1_000_000), 2)
        3.64
    """
    if not weekly_rent or not median_ask:
        return None
    return weekly_rent * constants.WEEKS_PER_YEAR / median_ask * 100


def reference_rents(
    rentals: Iterable[RentalRecord],
    bedrooms: int = constants.RENTAL_REFERENCE_BEDROOMS,
    property_type: str = constants.RENTAL_REFERENCE_PROPERTY_TYPE,
) -> Dict[str, float]:
    """Weekly rent per suburb for the reference configuration (3-bed houses)."""
    rents: Dict[str, float] = {}
    for rental in rentals:
        if rental.bedrooms != bedrooms or rental.property_type != property_type:
            continue
        if not rental.median_weekly_rent:
            continue
        rents.setdefault(normalize_suburb(rental.suburb), rental.median_weekly_rent)
    return rents


def _sold_median(stats: Optional[SuburbSoldStats]) -> Optional[float]:
    if stats is None:
        return None
    return stats.median_sold_price_12m or stats.median_sold_price or None


def _sold_count(stats: Optional[SuburbSoldStats]) -> int:
    if stats is None:
        return 0
    return stats.sold_count_12m or stats.sold_count or 0


def build_scorecard(
    suburb_stats: Iterable[SuburbStat],
    rentals: Iterable[RentalRecord],
    sold_stats: Iterable[SuburbSoldStats],
    bedrooms: int = constants.RENTAL_REFERENCE_BEDROOMS,
    property_type: str = constants.RENTAL_REFERENCE_PROPERTY_TYPE,
) -> List[InvestmentScorecardRow]:
    """Build the investment scorecard.

    Args:
        suburb_stats: Ask statistics, one per suburb with listings.
        rentals: All rental medians; only the reference configuration is used.
        sold_stats: Server-aggregated sold statistics.
        bedrooms: Reference bedroom count for rents.
        property_type: Reference property type for rents.

    Returns:
        Rows sorted by gross yield, highest first. Suburbs without a yield
        rank as 0 and so come last.
    """
    rents = reference_rents(rentals, bedrooms, property_type)
    sold_by_suburb: Dict[str, SuburbSoldStats] = {}
    for stats in sold_stats:
        sold_by_suburb.setdefault(normalize_suburb(stats.suburb), stats)

    rows = []
    for stat in suburb_stats:
        if stat.count == 0:
            continue
        key = normalize_suburb(stat.suburb)
        rent = rents.get(key)
        sold = sold_by_suburb.get(key)
        median_sold = _sold_median(sold)

        ask_vs_sold = None
        if stat.median and median_sold:
            ask_vs_sold = percent_change(stat.median, median_sold)

        rows.append(
            InvestmentScorecardRow(
                suburb=key,
                listings=stat.count,
                median_ask=stat.median,
                weekly_rent=rent,
                gross_yield=gross_yield(rent, stat.median),
                median_sold=median_sold,
                sold_count=_sold_count(sold),
                ask_vs_sold_pct=ask_vs_sold,
                under_offer_rate=stat.under_offer / stat.count * 100,
            )
        )

    return sorted(rows, key=lambda row: row.gross_yield or 0, reverse=True)
