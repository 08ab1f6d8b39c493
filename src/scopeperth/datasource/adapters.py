"""
Row Adapters

Every field name the data store has used over time is mapped to the
canonical record types here, so nothing downstream sees schema churn.
Coercion is lenient: an unreadable value becomes None and is logged at
DEBUG rather than failing the whole load.
"""

import math
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from scopeperth.core.models import (
    Comparable,
    Listing,
    RentalRecord,
    SoldRecord,
    SuburbDirectoryRow,
    SuburbSoldStats,
)
from scopeperth.logging_config import get_logger
from scopeperth.utils.date_parser import parse_date, parse_timestamp
from scopeperth.utils.property_types import normalize_property_type
from scopeperth.utils.suburbs import normalize_suburb

logger = get_logger(__name__)

Row = Mapping[str, Any]

# Canonical field -> accepted source spellings, in preference order
LISTING_FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "id": ("id", "listing_id", "property_id"),
    "address": ("address", "street_address"),
    "suburb": ("suburb",),
    "bedrooms": ("bedrooms", "beds"),
    "bathrooms": ("bathrooms", "baths"),
    "car_spaces": ("car_spaces", "cars", "parking"),
    "land_size": ("land_size", "land_size_m2"),
    "price_display": ("price_display", "price"),
    "price_numeric": ("price_numeric", "price_value"),
    "property_type": ("property_type", "type"),
    "under_offer": ("under_offer", "is_under_offer"),
    "pool": ("pool", "has_pool"),
    "status": ("status",),
    "first_seen_date": ("first_seen_date", "first_seen", "first_seen_at"),
    "latitude": ("latitude", "lat"),
    "longitude": ("longitude", "lng", "lon"),
    "original_price": ("original_price", "initial_price"),
    "price_drop_amount": ("price_drop_amount", "price_drop"),
    "beach_distance_km": ("beach_distance_km", "beach_km"),
    "motivation_score": ("motivation_score",),
    "agent_name": ("agent_name", "agent"),
    "agency_name": ("agency_name", "agency"),
    "url": ("url", "domain_url", "listing_url"),
    "photo_url": ("photo_url", "image_url"),
    "inspection_start": ("inspection_start", "next_inspection_start", "inspection_open"),
    "inspection_end": ("inspection_end", "next_inspection_end", "inspection_close"),
}

_TRUE_STRINGS = {"true", "t", "1", "yes", "y"}


def pick(row: Row, aliases: Iterable[str]) -> Any:
    """First non-null value among the given field names."""
    for name in aliases:
        value = row.get(name)
        if value is not None:
            return value
    return None


def to_float(value: Any) -> Optional[float]:
    """Finite float or None; NaN and infinities count as unreadable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        text = str(value).replace(",", "").replace("$", "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            logger.debug("Not a number: %r", value)
            return None
    if not math.isfinite(number):
        logger.debug("Not a finite number: %r", value)
        return None
    return number


def to_int(value: Any) -> Optional[int]:
    number = to_float(value)
    if number is None:
        return None
    return int(round(number))


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_price(value: Any) -> Optional[int]:
    """Numeric price; negative values are treated as absent."""
    price = to_int(value)
    if price is not None and price < 0:
        logger.debug("Ignoring negative price: %r", value)
        return None
    return price


def adapt_listing(row: Row) -> Listing:
    """Build a canonical Listing from a raw listing row."""

    def get(field_name: str) -> Any:
        return pick(row, LISTING_FIELD_ALIASES[field_name])

    price_display = get("price_display")
    price_numeric = to_price(get("price_numeric"))
    # Some rows carried the number in "price" before price_numeric existed
    if isinstance(price_display, (int, float, Decimal)) and not isinstance(price_display, bool):
        if price_numeric is None:
            price_numeric = to_price(price_display)
        price_display = None

    return Listing(
        id=str(get("id")) if get("id") is not None else "",
        address=to_text(get("address")) or "",
        suburb=normalize_suburb(get("suburb")),
        bedrooms=to_int(get("bedrooms")),
        bathrooms=to_int(get("bathrooms")),
        car_spaces=to_int(get("car_spaces")),
        land_size=to_float(get("land_size")),
        price_display=to_text(price_display),
        price_numeric=price_numeric,
        property_type=normalize_property_type(get("property_type")),
        under_offer=to_bool(get("under_offer")),
        pool=to_bool(get("pool")),
        status=(to_text(get("status")) or "active").lower(),
        first_seen_date=parse_timestamp(get("first_seen_date")),
        latitude=to_float(get("latitude")),
        longitude=to_float(get("longitude")),
        original_price=to_price(get("original_price")),
        price_drop_amount=to_int(get("price_drop_amount")),
        beach_distance_km=to_float(get("beach_distance_km")),
        motivation_score=to_int(get("motivation_score")),
        agent_name=to_text(get("agent_name")),
        agency_name=to_text(get("agency_name")),
        url=to_text(get("url")) or "",
        photo_url=to_text(get("photo_url")),
        inspection_start=parse_timestamp(get("inspection_start")),
        inspection_end=parse_timestamp(get("inspection_end")),
    )


def adapt_comparable(row: Row) -> Optional[Comparable]:
    """Build a Comparable; rows without suburb or bedrooms are unusable."""
    suburb = normalize_suburb(row.get("suburb"))
    bedrooms = to_int(pick(row, ("bedrooms", "beds")))
    if not suburb or bedrooms is None:
        return None
    return Comparable(
        suburb=suburb,
        bedrooms=bedrooms,
        avg_sold_price=to_float(pick(row, ("avg_sold_price", "average_sold_price", "avg_price"))),
        median_sold_price=to_float(pick(row, ("median_sold_price", "median_price"))),
        sale_count=to_int(pick(row, ("sale_count", "sales", "count"))) or 0,
        last_updated=parse_timestamp(row.get("last_updated")),
    )


def adapt_rental(row: Row) -> Optional[RentalRecord]:
    suburb = normalize_suburb(row.get("suburb"))
    if not suburb:
        return None
    return RentalRecord(
        suburb=suburb,
        bedrooms=to_int(pick(row, ("bedrooms", "beds"))),
        property_type=normalize_property_type(row.get("property_type")),
        median_weekly_rent=to_float(
            pick(row, ("median_weekly_rent", "median_rent", "weekly_rent", "rent"))
        ),
    )


def adapt_suburb_sold_stats(row: Row) -> Optional[SuburbSoldStats]:
    suburb = normalize_suburb(row.get("suburb"))
    if not suburb:
        return None
    return SuburbSoldStats(
        suburb=suburb,
        median_sold_price=to_float(pick(row, ("median_sold_price", "median_sold", "median_price"))),
        avg_sold_price=to_float(pick(row, ("avg_sold_price", "avg_sold", "avg_price"))),
        sold_count=to_int(pick(row, ("sold_count", "sale_count", "count"))) or 0,
        median_sold_price_12m=to_float(pick(row, ("median_sold_price_12m", "median_sold_12m"))),
        avg_sold_price_12m=to_float(pick(row, ("avg_sold_price_12m", "avg_sold_12m"))),
        sold_count_12m=to_int(pick(row, ("sold_count_12m", "sale_count_12m"))) or 0,
    )


def adapt_sold_record(row: Row) -> Optional[SoldRecord]:
    suburb = normalize_suburb(row.get("suburb"))
    sold_date = parse_date(row.get("sold_date"))
    sold_price = to_price(row.get("sold_price"))
    if not suburb or sold_date is None or not sold_price:
        return None
    return SoldRecord(
        suburb=suburb,
        sold_date=sold_date,
        sold_price=sold_price,
        property_type=normalize_property_type(row.get("property_type")),
    )


def _positive_or_none(value: Any) -> Optional[float]:
    # Directory stats use 0 for "no data"
    number = to_float(value)
    return number if number else None


def adapt_directory_row(row: Row) -> Optional[SuburbDirectoryRow]:
    suburb = normalize_suburb(row.get("suburb"))
    if not suburb:
        return None
    return SuburbDirectoryRow(
        suburb=suburb,
        listing_count=to_int(row.get("listing_count")) or 0,
        median_ask=_positive_or_none(row.get("median_ask")),
        median_sold=_positive_or_none(row.get("median_sold")),
        weekly_rent=_positive_or_none(row.get("weekly_rent")),
        gross_yield=_positive_or_none(row.get("gross_yield")),
        under_offer_pct=_positive_or_none(row.get("under_offer_pct")),
    )


def adapt_investment_stats(row: Row) -> Dict[str, Any]:
    """Server-joined investment row with its suburb key normalised."""
    adapted = dict(row)
    adapted["suburb"] = normalize_suburb(row.get("suburb"))
    return adapted


def adapt_rows(rows: Iterable[Row], adapter) -> List[Any]:
    """Apply an adapter to every row, dropping rows it rejects."""
    adapted = []
    for row in rows:
        try:
            record = adapter(row)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("Skipping unreadable row: %s (%r)", e, row)
            continue
        if record is None:
            logger.debug("Skipping unusable row: %r", row)
            continue
        adapted.append(record)
    return adapted
