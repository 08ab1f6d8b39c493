"""
Data Models for the ScopePerth dashboard

Dataclass definitions for the canonical records read from the data store,
the values derived from them, and the dashboard filter selection.
"""

from dataclasses import dataclass, field, asdict, fields
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from scopeperth.exceptions import ValidationError


def _serialize(data: Dict[str, Any]) -> Dict[str, Any]:
    """Render datetimes as ISO strings so rows can be sent as JSON."""
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in data.items()
    }


@dataclass
class Listing:
    """One property for sale, in canonical form."""

    id: str
    address: str
    suburb: str  # normalised key, e.g. "SCARBOROUGH"
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    car_spaces: Optional[int] = None
    land_size: Optional[float] = None
    price_display: Optional[str] = None
    price_numeric: Optional[int] = None
    property_type: Optional[str] = None
    under_offer: bool = False
    pool: bool = False
    status: str = "active"
    first_seen_date: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    original_price: Optional[int] = None
    price_drop_amount: Optional[int] = None
    beach_distance_km: Optional[float] = None
    motivation_score: Optional[int] = None
    agent_name: Optional[str] = None
    agency_name: Optional[str] = None
    url: str = ""
    photo_url: Optional[str] = None
    inspection_start: Optional[datetime] = None
    inspection_end: Optional[datetime] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return _serialize(asdict(self))


@dataclass
class Comparable:
    """Sold-price benchmark for a (suburb, bedroom-count) pair."""

    suburb: str
    bedrooms: int
    avg_sold_price: Optional[float] = None
    median_sold_price: Optional[float] = None
    sale_count: int = 0
    last_updated: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return _serialize(asdict(self))


@dataclass
class RentalRecord:
    """Median weekly rent for a (suburb, bedrooms, property type) configuration."""

    suburb: str
    bedrooms: Optional[int]
    property_type: Optional[str]
    median_weekly_rent: Optional[float] = None


@dataclass
class SuburbSoldStats:
    """Server-aggregated sale statistics for one suburb."""

    suburb: str
    median_sold_price: Optional[float] = None
    avg_sold_price: Optional[float] = None
    sold_count: int = 0
    median_sold_price_12m: Optional[float] = None
    avg_sold_price_12m: Optional[float] = None
    sold_count_12m: int = 0


@dataclass
class SoldRecord:
    """A single historical sale, used for price trends."""

    suburb: str
    sold_date: datetime
    sold_price: int
    property_type: Optional[str] = None


@dataclass
class SuburbStat:
    """Ask-price aggregate for one suburb over a listing subset."""

    suburb: str
    count: int
    median: Optional[int]
    average: Optional[int]
    pools: int = 0
    under_offer: int = 0
    priced_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class InvestmentScorecardRow:
    """Listings, rent and sold data joined for one suburb."""

    suburb: str
    listings: int
    median_ask: Optional[int]
    weekly_rent: Optional[float]
    gross_yield: Optional[float]
    median_sold: Optional[float]
    sold_count: int
    ask_vs_sold_pct: Optional[float]
    under_offer_rate: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class SuburbDirectoryRow:
    """One row of the server-computed suburb directory."""

    suburb: str
    listing_count: int = 0
    median_ask: Optional[float] = None
    median_sold: Optional[float] = None
    weekly_rent: Optional[float] = None
    gross_yield: Optional[float] = None
    under_offer_pct: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class InspectionGroup:
    """Upcoming open homes sharing a schedule label."""

    label: str
    listings: List[Listing] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "listings": [listing.to_dict() for listing in self.listings],
        }


@dataclass
class DashboardData:
    """The four record families fetched on load."""

    listings: List[Listing] = field(default_factory=list)
    comparables: List[Comparable] = field(default_factory=list)
    rentals: List[RentalRecord] = field(default_factory=list)
    suburb_sold_stats: List[SuburbSoldStats] = field(default_factory=list)
    loaded_at: Optional[datetime] = None


_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}

# Query-parameter spelling -> FilterState field
_FILTER_PARAM_ALIASES = {
    "suburb": "suburb",
    "property_type": "property_type",
    "propertyType": "property_type",
    "min_bedrooms": "min_bedrooms",
    "min_beds": "min_bedrooms",
    "minBeds": "min_bedrooms",
    "max_price": "max_price",
    "maxPrice": "max_price",
    "pool_only": "pool_only",
    "pool": "pool_only",
    "under_budget": "under_budget",
    "underBudget": "under_budget",
    "available_only": "available_only",
    "availableOnly": "available_only",
    "hide_land": "hide_land",
    "hideLand": "hide_land",
    "best_value": "best_value",
    "bestValue": "best_value",
    "motivated_seller": "motivated_seller",
    "motivated": "motivated_seller",
    "favourites_only": "favourites_only",
    "favouritesOnly": "favourites_only",
}


def parse_bool(name: str, raw: Any) -> bool:
    """Strict boolean from a query or body value.

    Raises:
        ValidationError: If the value is not a recognised true/false word.
    """
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValidationError(f"Invalid boolean for {name}: {raw!r}", field=name, value=raw)


def _parse_int(name: str, raw: Any, allow_none: bool = False) -> Optional[int]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if allow_none:
            return None
        raise ValidationError(f"Missing value for {name}", field=name, value=raw)
    try:
        value = int(str(raw).replace(",", "").strip())
    except ValueError as e:
        raise ValidationError(f"Invalid integer for {name}: {raw!r}", field=name, value=raw) from e
    if value < 0:
        raise ValidationError(f"{name} must not be negative", field=name, value=raw)
    return value


@dataclass(frozen=True)
class FilterState:
    """Immutable dashboard filter selection.

    Defaults mirror the dashboard's initial view: three or more bedrooms,
    available listings only, land hidden.
    """

    suburb: str = ""
    property_type: str = ""
    min_bedrooms: int = 3
    max_price: Optional[int] = None
    pool_only: bool = False
    under_budget: bool = False
    available_only: bool = True
    hide_land: bool = True
    best_value: bool = False
    motivated_seller: bool = False
    favourites_only: bool = False

    @classmethod
    def unrestricted(cls) -> "FilterState":
        """A selection that admits every listing."""
        return cls(min_bedrooms=0, available_only=False, hide_land=False)

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        base: Optional["FilterState"] = None,
    ) -> "FilterState":
        """Build a filter selection from request/CLI parameters.

        Args:
            params: Mapping of parameter names (snake_case or camelCase) to raw values.
            base: Selection to start from. Defaults to ``FilterState()``.

        Returns:
            New FilterState.

        Raises:
            ValidationError: If a value cannot be parsed.
        """
        values = asdict(base or cls())
        for key, raw in params.items():
            name = _FILTER_PARAM_ALIASES.get(key)
            if name is None:
                continue
            if name in ("suburb", "property_type"):
                values[name] = "" if raw is None else str(raw).strip()
            elif name == "min_bedrooms":
                values[name] = _parse_int(name, raw)
            elif name == "max_price":
                values[name] = _parse_int(name, raw, allow_none=True)
            else:
                values[name] = parse_bool(name, raw)
        return cls(**values)

    def replace(self, **changes: Any) -> "FilterState":
        """Return a copy with the given fields changed."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValidationError(
                f"Unknown filter field(s): {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        values = asdict(self)
        values.update(changes)
        return FilterState(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
