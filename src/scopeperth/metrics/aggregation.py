"""
Suburb Aggregation

Groups listings by suburb key and computes the ask-price statistics shown
in the investor view, the suburb directory and the suburb pages.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from scopeperth.core import constants
from scopeperth.core.models import Listing, SuburbStat
from scopeperth.metrics.classification import ComparableIndex, is_priced_below_benchmark
from scopeperth.utils.numbers import round_half_up, upper_median
from scopeperth.utils.suburbs import slugify, title_case


def group_by_suburb(listings: Iterable[Listing]) -> Dict[str, List[Listing]]:
    """Group listings by suburb key, suburbs in alphabetical order."""
    groups: Dict[str, List[Listing]] = {}
    for listing in listings:
        groups.setdefault(listing.suburb, []).append(listing)
    return OrderedDict(sorted(groups.items()))


def summarize_group(
    suburb: str,
    listings: List[Listing],
    min_priced: int = constants.DEFAULT_MIN_PRICED_FOR_MEDIAN,
) -> SuburbStat:
    """Compute the ask-price statistics for one suburb's listings.

    Args:
        suburb: Suburb key.
        listings: The suburb's listings (priced or not).
        min_priced: Priced listings needed before a median is reported.

    Returns:
        SuburbStat with ``median`` None below ``min_priced`` priced listings
        and ``average`` None when nothing is priced.
    """
    prices = [listing.price_numeric for listing in listings if listing.price_numeric]
    median = upper_median(prices) if len(prices) >= min_priced else None
    average = round_half_up(sum(prices) / len(prices)) if prices else None
    return SuburbStat(
        suburb=suburb,
        count=len(listings),
        median=median,
        average=average,
        pools=sum(1 for listing in listings if listing.pool),
        under_offer=sum(1 for listing in listings if listing.under_offer),
        priced_count=len(prices),
    )


def aggregate_by_suburb(
    listings: Iterable[Listing],
    min_priced: int = constants.DEFAULT_MIN_PRICED_FOR_MEDIAN,
) -> List[SuburbStat]:
    """One SuburbStat per suburb present in ``listings``, alphabetical."""
    return [
        summarize_group(suburb, group, min_priced)
        for suburb, group in group_by_suburb(listings).items()
    ]


def top_suburbs_by_median(stats: Iterable[SuburbStat], limit: Optional[int] = 10) -> List[SuburbStat]:
    """Suburbs with a defined median, cheapest median first."""
    ranked = sorted((s for s in stats if s.median is not None), key=lambda s: s.median)
    return ranked if limit is None else ranked[:limit]


def rank_by_listing_count(stats: Iterable[SuburbStat]) -> List[SuburbStat]:
    """Busiest suburbs first; ties keep alphabetical order."""
    return sorted(stats, key=lambda s: (-s.count, s.suburb))


@dataclass
class HeadlineStats:
    """Counters for the dashboard header."""

    total: int
    with_pool: int
    under_offer: int
    under_budget: int
    budget: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "with_pool": self.with_pool,
            "under_offer": self.under_offer,
            "under_budget": self.under_budget,
            "budget": self.budget,
        }


def summarize_listings(
    filtered: List[Listing],
    all_listings: List[Listing],
    budget: int = constants.DEFAULT_BUDGET,
) -> HeadlineStats:
    """Header counters.

    Total and pool counts follow the current filters; the under-offer and
    under-budget counters always describe the whole market.
    """
    return HeadlineStats(
        total=len(filtered),
        with_pool=sum(1 for listing in filtered if listing.pool),
        under_offer=sum(1 for listing in all_listings if listing.under_offer),
        under_budget=sum(
            1 for listing in all_listings if listing.price_numeric and listing.price_numeric <= budget
        ),
        budget=budget,
    )


def best_investment_picks(
    listings: Iterable[Listing],
    comparables: ComparableIndex,
    discount_pct: float = constants.DEFAULT_INVESTMENT_PICK_DISCOUNT_PCT,
    limit: int = constants.DEFAULT_INVESTMENT_PICK_LIMIT,
) -> List[Listing]:
    """First ``limit`` listings priced ``discount_pct`` below their benchmark."""
    picks = [
        listing for listing in listings
        if is_priced_below_benchmark(listing, comparables, discount_pct)
    ]
    return picks[:limit]


@dataclass
class SuburbPageSummary:
    """Everything the per-suburb page shows."""

    suburb: str
    listings: List[Listing] = field(default_factory=list)
    median_ask: Optional[int] = None
    under_offer_count: int = 0
    under_offer_pct: int = 0
    price_drops: List[Listing] = field(default_factory=list)
    investment: Optional[Dict[str, Any]] = None

    @property
    def slug(self) -> str:
        return slugify(self.suburb)

    @property
    def display_name(self) -> str:
        return title_case(self.suburb)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suburb": self.suburb,
            "slug": self.slug,
            "display_name": self.display_name,
            "listing_count": len(self.listings),
            "median_ask": self.median_ask,
            "under_offer_count": self.under_offer_count,
            "under_offer_pct": self.under_offer_pct,
            "listings": [listing.to_dict() for listing in self.listings],
            "price_drops": [listing.to_dict() for listing in self.price_drops],
            "investment": self.investment,
        }


def summarize_suburb_page(
    suburb: str,
    listings: List[Listing],
    investment_stats: Iterable[Dict[str, Any]] = (),
) -> SuburbPageSummary:
    """Build the suburb page from that suburb's listings.

    Unlike the investor table, the page reports a median as soon as any
    listing is priced.
    """
    prices = [listing.price_numeric for listing in listings if listing.price_numeric]
    under_offer = sum(1 for listing in listings if listing.under_offer)
    under_offer_pct = round_half_up(under_offer / len(listings) * 100) if listings else 0
    investment = next((row for row in investment_stats if row.get("suburb") == suburb), None)
    return SuburbPageSummary(
        suburb=suburb,
        listings=list(listings),
        median_ask=upper_median(prices),
        under_offer_count=under_offer,
        under_offer_pct=under_offer_pct,
        price_drops=[
            listing for listing in listings
            if listing.price_drop_amount and listing.price_drop_amount > 0
        ],
        investment=investment,
    )
