"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests: raw data-store rows in every field
spelling the store has used, an in-memory stand-in for the Supabase query
builder, a temporary preference database and an isolated configuration.
"""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional
from zoneinfo import ZoneInfo

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

PERTH = ZoneInfo("Australia/Perth")

# Wednesday 5 March 2025, 10:00 in Perth
NOW = datetime(2025, 3, 5, 10, 0, tzinfo=PERTH)


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Chainable query that filters in-memory rows like PostgREST would."""

    def __init__(self, name: str, rows: List[Dict[str, Any]], client: "FakeSupabaseClient"):
        self.name = name
        self.rows = [dict(row) for row in rows]
        self.client = client
        self._negate = False

    def _record(self, method: str, *args) -> None:
        self.client.calls.append((self.name, method) + args)

    def _keep(self, predicate: Callable[[Dict[str, Any]], bool]) -> "FakeQuery":
        negate = self._negate
        self._negate = False
        self.rows = [row for row in self.rows if predicate(row) != negate]
        return self

    def select(self, columns: str = "*") -> "FakeQuery":
        self._record("select", columns)
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._record("eq", column, value)
        return self._keep(lambda row: row.get(column) == value)

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self._record("ilike", column, pattern)
        return self._keep(lambda row: str(row.get(column, "")).lower() == pattern.lower())

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        self._record("in_", column, list(values))
        return self._keep(lambda row: row.get(column) in values)

    def gt(self, column: str, value: Any) -> "FakeQuery":
        self._record("gt", column, value)
        return self._keep(lambda row: row.get(column) is not None and row.get(column) > value)

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self._record("gte", column, value)
        return self._keep(lambda row: row.get(column) is not None and row.get(column) >= value)

    @property
    def not_(self) -> "FakeQuery":
        self._negate = True
        return self

    def is_(self, column: str, value: str) -> "FakeQuery":
        self._record("is_", column, value)
        return self._keep(lambda row: row.get(column) is None)

    def order(self, column: str, desc: bool = False, nullsfirst: bool = False) -> "FakeQuery":
        self._record("order", column, desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._record("range", start, end)
        self.rows = self.rows[start:end + 1]
        return self

    def execute(self) -> FakeResponse:
        if self.name in self.client.failing:
            raise RuntimeError(f"{self.name} unavailable")
        return FakeResponse(self.rows)


class FakeSupabaseClient:
    """Stands in for ``supabase.Client`` in repository tests."""

    def __init__(
        self,
        tables: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        rpcs: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        failing: Optional[set] = None,
    ):
        self.tables = tables or {}
        self.rpcs = rpcs or {}
        self.failing = failing or set()
        self.calls: List[tuple] = []

    def table(self, name: str) -> FakeQuery:
        self.calls.append((name, "table"))
        return FakeQuery(name, self.tables.get(name, []), self)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> FakeQuery:
        self.calls.append((name, "rpc"))
        return FakeQuery(name, self.rpcs.get(name, []), self)


@pytest.fixture(scope="function")
def now() -> datetime:
    """Fixed evaluation time (a Wednesday morning in Perth)."""
    return NOW


@pytest.fixture(scope="function")
def make_listing() -> Callable[..., Any]:
    """Factory for canonical listings with sensible defaults."""
    from scopeperth.core.models import Listing

    counter = {"n": 0}

    def factory(**overrides) -> Listing:
        counter["n"] += 1
        values = {
            "id": str(1000 + counter["n"]),
            "address": f"{counter['n']} Test Street",
            "suburb": "SCARBOROUGH",
            "bedrooms": 3,
            "price_numeric": 1_000_000,
            "property_type": "house",
        }
        values.update(overrides)
        return Listing(**values)

    return factory


@pytest.fixture(scope="function")
def listing_rows() -> List[Dict[str, Any]]:
    """Raw listing rows, mixing current and historical field names."""
    return [
        {
            "id": 101,
            "address": "12 Beach Road",
            "suburb": "Scarborough",
            "bedrooms": 4,
            "bathrooms": 2,
            "car_spaces": 2,
            "price_display": "$1,600,000",
            "price_numeric": 1600000,
            "property_type": "House",
            "under_offer": False,
            "pool": True,
            "status": "active",
            "first_seen_date": "2025-02-28",
            "latitude": -31.894,
            "longitude": 115.757,
            "url": "https://www.domain.com.au/12-beach-road-scarborough-wa-6019",
            "inspection_start": "2025-03-08T10:00:00+08:00",
            "inspection_end": "2025-03-08T10:30:00+08:00",
        },
        {
            "id": "102",
            "address": "8 Ocean View Drive",
            "suburb": "SCARBOROUGH ",
            "beds": "3",
            "baths": 1,
            "parking": 1,
            "price": "Offers over $1.1M",
            "price_value": "1,100,000",
            "property_type": "free-standing",
            "is_under_offer": "false",
            "has_pool": "true",
            "status": "active",
            "first_seen": "2024-11-20",
            "domain_url": "https://www.domain.com.au/8-ocean-view-drive-scarborough-wa-6019",
        },
        {
            "id": 103,
            "address": "3 Marina Way",
            "suburb": "hillarys",
            "bedrooms": 3,
            "bathrooms": 2,
            "price_display": "$900,000",
            "price_numeric": 900000,
            "property_type": "Townhouse",
            "under_offer": True,
            "pool": False,
            "status": "active",
            "first_seen_date": "2025-03-01T08:00:00+08:00",
            "beach_distance_km": 0.8,
        },
        {
            "id": 104,
            "address": "Lot 5 Proposed Road",
            "suburb": "KARRINYUP",
            "bedrooms": 0,
            "price_display": "$650,000",
            "price_numeric": 650000,
            "status": "active",
        },
        {
            "id": 105,
            "address": "40 Hilltop Crescent",
            "suburb": "Karrinyup",
            "bedrooms": 4,
            "price_display": "Contact Agent",
            "price_numeric": None,
            "property_type": "House",
            "status": "active",
        },
        {
            "id": 106,
            "address": "1 Sold Street",
            "suburb": "Hillarys",
            "bedrooms": 4,
            "price_numeric": 1200000,
            "status": "sold",
        },
    ]


@pytest.fixture(scope="function")
def comparable_rows() -> List[Dict[str, Any]]:
    return [
        {"suburb": "SCARBOROUGH", "bedrooms": 4, "avg_sold_price": 2000000, "median_sold_price": 1900000, "sale_count": 12},
        {"suburb": "Scarborough", "beds": 3, "avg_sold_price": "1,300,000", "sale_count": 20},
        {"suburb": "HILLARYS", "bedrooms": 3, "avg_sold_price": 1000000},
        {"suburb": None, "bedrooms": 3, "avg_sold_price": 1},
    ]


@pytest.fixture(scope="function")
def rental_rows() -> List[Dict[str, Any]]:
    return [
        {"suburb": "Scarborough", "bedrooms": 3, "property_type": "house", "median_weekly_rent": 850},
        {"suburb": "SCARBOROUGH", "bedrooms": 2, "property_type": "unit", "median_weekly_rent": 600},
        {"suburb": "HILLARYS", "beds": 3, "property_type": "House", "median_rent": 780},
    ]


@pytest.fixture(scope="function")
def sold_stats_rows() -> List[Dict[str, Any]]:
    return [
        {
            "suburb": "scarborough",
            "median_sold_price": 1400000,
            "avg_sold_price": 1450000,
            "sold_count": 210,
            "median_sold_price_12m": 1500000,
            "sold_count_12m": 48,
        },
        {"suburb": "HILLARYS", "median_sold_price": 1100000, "sold_count": 150},
    ]


@pytest.fixture(scope="function")
def sold_rows() -> List[Dict[str, Any]]:
    return [
        {"suburb": "SCARBOROUGH", "sold_date": "2024-01-10", "sold_price": 1000000, "property_type": "house"},
        {"suburb": "SCARBOROUGH", "sold_date": "2024-02-15", "sold_price": 1200000, "property_type": "house"},
        {"suburb": "SCARBOROUGH", "sold_date": "2024-05-01", "sold_price": 1300000, "property_type": "house"},
        {"suburb": "HILLARYS", "sold_date": "2024-01-20", "sold_price": 900000, "property_type": "house"},
        {"suburb": "HILLARYS", "sold_date": "2024-03-30", "sold_price": 950000, "property_type": "house"},
        {"suburb": "HILLARYS", "sold_date": None, "sold_price": 800000, "property_type": "house"},
        {"suburb": "HILLARYS", "sold_date": "2024-03-01", "sold_price": 0, "property_type": "house"},
    ]


@pytest.fixture(scope="function")
def fake_client(
    listing_rows, comparable_rows, rental_rows, sold_stats_rows, sold_rows
) -> FakeSupabaseClient:
    """In-memory Supabase client loaded with the sample rows."""
    from scopeperth.core import constants

    return FakeSupabaseClient(
        tables={
            constants.TABLE_LISTINGS: listing_rows,
            constants.TABLE_COMPARABLES: comparable_rows,
            constants.TABLE_RENTALS: rental_rows,
            constants.TABLE_SUBURB_SOLD_STATS: sold_stats_rows,
            constants.TABLE_SOLD: sold_rows,
        },
        rpcs={
            constants.RPC_SUBURB_INVESTMENT_STATS: [
                {"suburb": "Scarborough", "median_sold": 1500000, "weekly_rent": 850, "gross_yield": 3.4},
            ],
            constants.RPC_SUBURB_PAGE_STATS: [
                {"suburb": "HILLARYS", "listing_count": 4, "median_ask": 950000, "median_sold": 0},
                {"suburb": "SCARBOROUGH", "listing_count": 9, "median_ask": 1350000, "under_offer_pct": 11.1},
                {"suburb": "KARRINYUP", "listing_count": 2},
            ],
            constants.RPC_DISTINCT_SOLD_SUBURBS: [
                {"suburb": "SCARBOROUGH"},
                {"suburb": "hillarys"},
                {"suburb": "Scarborough"},
            ],
        },
    )


@pytest.fixture(scope="function")
def temp_db() -> Generator[str, None, None]:
    """Temporary preference database path.

    Yields:
        Path to temporary database file.
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup
    try:
        os.unlink(db_path)
    except (OSError, PermissionError):
        pass


@pytest.fixture(scope="function")
def test_config(temp_db: str, monkeypatch):
    """Create test configuration with temp database.

    Args:
        temp_db: Path to temporary database.
        monkeypatch: pytest monkeypatch fixture.

    Yields:
        Config object configured for testing.
    """
    # Set environment variables
    monkeypatch.setenv("SCOPEPERTH_PREFS_DB", temp_db)
    monkeypatch.setenv("SCOPEPERTH_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SCOPEPERTH_SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SCOPEPERTH_SUPABASE_KEY", "test-anon-key")
    monkeypatch.delenv("SCOPEPERTH_BUDGET", raising=False)
    monkeypatch.delenv("SCOPEPERTH_BEST_VALUE_DISCOUNT_PCT", raising=False)

    # Reset config singleton
    from scopeperth.config import reset_config, get_config
    reset_config()

    config = get_config()
    yield config

    # Cleanup
    reset_config()


@pytest.fixture(scope="function")
def preferences(temp_db: str):
    from scopeperth.state.preferences import PreferenceStore

    return PreferenceStore(temp_db)


@pytest.fixture(scope="function")
def service(test_config, fake_client, preferences, now):
    """DashboardService over the fake client, frozen at ``now``."""
    from scopeperth.dashboard import DashboardService
    from scopeperth.datasource.repository import ListingRepository

    return DashboardService(
        repository=ListingRepository(client=fake_client),
        preferences=preferences,
        config=test_config,
        clock=lambda: now,
    )


@pytest.fixture(scope="function")
def package_caplog(caplog, monkeypatch):
    """caplog that also sees the package logger (which does not propagate)."""
    monkeypatch.setattr(logging.getLogger("scopeperth"), "propagate", True)
    caplog.set_level(logging.DEBUG, logger="scopeperth")
    return caplog
