"""
Listing Classification Heuristics

Per-listing flags shown as badges and used by the filters: best value,
motivated seller, land, beach proximity, price drops and new listings.

All functions are total: a listing missing the data a flag needs is simply
not flagged.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from scopeperth.core import constants
from scopeperth.core.models import Comparable, Listing
from scopeperth.utils.date_parser import days_on_market
from scopeperth.utils.geo import distance_to_meridian_km
from scopeperth.utils.numbers import percent_change, round_half_up

ComparableIndex = Dict[Tuple[str, int], Comparable]


def build_comparable_index(comparables: Iterable[Comparable]) -> ComparableIndex:
    """Index comparables by (suburb, bedrooms); the first row for a pair wins."""
    index: ComparableIndex = {}
    for comparable in comparables:
        index.setdefault((comparable.suburb, comparable.bedrooms), comparable)
    return index


def find_comparable(listing: Listing, index: ComparableIndex) -> Optional[Comparable]:
    if listing.bedrooms is None:
        return None
    return index.get((listing.suburb, listing.bedrooms))


def benchmark_price(listing: Listing, index: ComparableIndex) -> Optional[float]:
    """Average sold price for the listing's suburb and bedroom count."""
    comparable = find_comparable(listing, index)
    if comparable is None or not comparable.avg_sold_price:
        return None
    return comparable.avg_sold_price


def is_priced_below_benchmark(
    listing: Listing,
    index: ComparableIndex,
    discount_pct: float,
) -> bool:
    """True when the ask is more than ``discount_pct`` below the benchmark.

    The comparison is strict: a listing at exactly the threshold is not
    below it.
    """
    benchmark = benchmark_price(listing, index)
    if benchmark is None or not listing.price_numeric:
        return False
    return listing.price_numeric < benchmark * (100 - discount_pct) / 100


def is_best_value(
    listing: Listing,
    index: ComparableIndex,
    discount_pct: float = constants.DEFAULT_BEST_VALUE_DISCOUNT_PCT,
) -> bool:
    """Best value: priced at least ``discount_pct`` below its comparable."""
    return is_priced_below_benchmark(listing, index, discount_pct)


def price_vs_benchmark_pct(listing: Listing, index: ComparableIndex) -> Optional[int]:
    """Whole-percent difference between the ask and the suburb benchmark."""
    benchmark = benchmark_price(listing, index)
    if benchmark is None or not listing.price_numeric:
        return None
    return round_half_up(percent_change(listing.price_numeric, benchmark))


# Motivated seller
#
# Detectors run in priority order. Each returns True/False when it has a
# verdict and None when it has nothing to say; the first verdict wins. The
# score detector always has a verdict when the data store supplies a score,
# so the text/age/price heuristics only apply to unscored listings.


@dataclass(frozen=True)
class MotivationRules:
    score_threshold: int = constants.DEFAULT_MOTIVATION_SCORE_THRESHOLD
    max_days_on_market: int = constants.DEFAULT_MOTIVATED_DAYS_ON_MARKET
    keywords: Tuple[str, ...] = constants.NEGOTIATION_KEYWORDS


Detector = Callable[[Listing, datetime, MotivationRules], Optional[bool]]


def detect_motivation_score(listing: Listing, now: datetime, rules: MotivationRules) -> Optional[bool]:
    if listing.motivation_score is None:
        return None
    return listing.motivation_score >= rules.score_threshold


def detect_negotiation_keyword(listing: Listing, now: datetime, rules: MotivationRules) -> Optional[bool]:
    text = (listing.price_display or "").lower()
    if any(keyword in text for keyword in rules.keywords):
        return True
    return None


def detect_long_listing(listing: Listing, now: datetime, rules: MotivationRules) -> Optional[bool]:
    days = days_on_market(listing.first_seen_date, now)
    if days is not None and days > rules.max_days_on_market:
        return True
    return None


def detect_price_drop(listing: Listing, now: datetime, rules: MotivationRules) -> Optional[bool]:
    if listing.price_drop_amount is not None and listing.price_drop_amount > 0:
        return True
    return None


MOTIVATION_DETECTORS: List[Tuple[str, Detector]] = [
    ("motivation_score", detect_motivation_score),
    ("negotiation_keyword", detect_negotiation_keyword),
    ("long_listing", detect_long_listing),
    ("price_drop", detect_price_drop),
]


def motivation_signal(
    listing: Listing,
    now: datetime,
    rules: MotivationRules = MotivationRules(),
    detectors: Sequence[Tuple[str, Detector]] = MOTIVATION_DETECTORS,
) -> Optional[str]:
    """Name of the detector that marks the listing as motivated, if any."""
    for name, detector in detectors:
        verdict = detector(listing, now, rules)
        if verdict is None:
            continue
        return name if verdict else None
    return None


def is_motivated_seller(
    listing: Listing,
    now: datetime,
    rules: MotivationRules = MotivationRules(),
) -> bool:
    return motivation_signal(listing, now, rules) is not None


# Land


def is_land_listing(listing: Listing) -> bool:
    """Vacant land, by property type or, when untyped, by address wording."""
    if listing.property_type:
        return listing.property_type == "land"
    address = listing.address.lower()
    return any(
        re.search(r"\b" + re.escape(marker), address)
        for marker in constants.LAND_ADDRESS_MARKERS
    )


# Beach proximity


def beach_distance_km(
    listing: Listing,
    coast_longitude: float = constants.DEFAULT_COAST_LONGITUDE,
) -> Optional[float]:
    """Kilometres to the coast: the stored figure, else computed from coordinates."""
    if listing.beach_distance_km is not None:
        return listing.beach_distance_km
    if not listing.has_coordinates:
        return None
    return distance_to_meridian_km(listing.latitude, listing.longitude, coast_longitude)


def is_near_beach(
    listing: Listing,
    coast_longitude: float = constants.DEFAULT_COAST_LONGITUDE,
    max_km: float = constants.DEFAULT_NEAR_BEACH_KM,
) -> bool:
    distance = beach_distance_km(listing, coast_longitude)
    return distance is not None and distance <= max_km


# Price history and age


def price_drop_percent(listing: Listing) -> Optional[int]:
    """Whole-percent reduction from the original asking price."""
    price = listing.price_numeric
    original = listing.original_price
    if not price or not original or price >= original:
        return None
    return round_half_up((1 - price / original) * 100)


def is_new_listing(
    listing: Listing,
    now: datetime,
    max_days: int = constants.DEFAULT_NEW_LISTING_DAYS,
) -> bool:
    days = days_on_market(listing.first_seen_date, now)
    return days is not None and days <= max_days
