"""
Read-only access to the Supabase data store.

Every fetch is a single request per call with no retry. A failed request is
logged and yields an empty result so the dashboard renders "no results"
rather than an error.

Usage:
    from scopeperth.datasource import ListingRepository

    repo = ListingRepository()
    data = repo.load_all()
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from supabase import Client, create_client

from scopeperth.config import SupabaseConfig, get_config
from scopeperth.core import constants
from scopeperth.core.models import (
    Comparable,
    DashboardData,
    Listing,
    RentalRecord,
    SoldRecord,
    SuburbDirectoryRow,
    SuburbSoldStats,
)
from scopeperth.datasource import adapters
from scopeperth.exceptions import ConfigurationError, FetchError
from scopeperth.logging_config import get_logger
from scopeperth.utils.date_parser import lookback_cutoff
from scopeperth.utils.suburbs import normalize_suburb

logger = get_logger(__name__)

Rows = List[Dict[str, Any]]


class ListingRepository:
    """Queries for listings, benchmarks, rents and suburb aggregates."""

    def __init__(
        self,
        client: Optional[Client] = None,
        config: Optional[SupabaseConfig] = None,
    ) -> None:
        self._client = client
        self._config = config

    @property
    def client(self) -> Client:
        if self._client is None:
            config = self._config or get_config().supabase
            if not config.is_configured:
                raise ConfigurationError(
                    "SCOPEPERTH_SUPABASE_URL and SCOPEPERTH_SUPABASE_KEY are required."
                )
            self._client = create_client(config.url, config.key)
        return self._client

    def _execute(self, source: str, build: Callable[[], Any]) -> Rows:
        try:
            response = build().execute()
        except Exception as e:
            raise FetchError(f"Failed to fetch {source}: {e}", source=source) from e
        return response.data or []

    def _fetch_rows(self, source: str, build: Callable[[], Any]) -> Rows:
        try:
            rows = self._execute(source, build)
        except FetchError as e:
            logger.error("Error fetching %s: %s", source, e)
            return []
        logger.debug("Fetched %d rows from %s", len(rows), source)
        return rows

    # Tables

    def fetch_listings(self) -> List[Listing]:
        """All active listings."""
        rows = self._fetch_rows(
            constants.TABLE_LISTINGS,
            lambda: self.client.table(constants.TABLE_LISTINGS)
            .select("*")
            .eq("status", constants.STATUS_ACTIVE),
        )
        return adapters.adapt_rows(rows, adapters.adapt_listing)

    def fetch_listings_for_suburb(self, suburb: str) -> List[Listing]:
        """Active listings in one suburb, cheapest first, priceless last."""
        key = normalize_suburb(suburb)
        if not key:
            return []
        rows = self._fetch_rows(
            constants.TABLE_LISTINGS,
            lambda: self.client.table(constants.TABLE_LISTINGS)
            .select("*")
            .ilike("suburb", key)
            .eq("status", constants.STATUS_ACTIVE)
            .order("price_numeric", desc=False, nullsfirst=False),
        )
        listings = adapters.adapt_rows(rows, adapters.adapt_listing)
        # Ordering is re-applied locally; not every backend honours nulls-last
        return sorted(
            listings,
            key=lambda listing: (listing.price_numeric is None, listing.price_numeric or 0),
        )

    def fetch_comparables(self) -> List[Comparable]:
        rows = self._fetch_rows(
            constants.TABLE_COMPARABLES,
            lambda: self.client.table(constants.TABLE_COMPARABLES).select("*"),
        )
        return adapters.adapt_rows(rows, adapters.adapt_comparable)

    def fetch_rentals(self) -> List[RentalRecord]:
        rows = self._fetch_rows(
            constants.TABLE_RENTALS,
            lambda: self.client.table(constants.TABLE_RENTALS).select("*"),
        )
        return adapters.adapt_rows(rows, adapters.adapt_rental)

    def fetch_suburb_sold_stats(self) -> List[SuburbSoldStats]:
        rows = self._fetch_rows(
            constants.TABLE_SUBURB_SOLD_STATS,
            lambda: self.client.table(constants.TABLE_SUBURB_SOLD_STATS).select("*"),
        )
        return adapters.adapt_rows(rows, adapters.adapt_suburb_sold_stats)

    def fetch_sold_records(
        self,
        suburbs: Sequence[str],
        property_type: Optional[str] = None,
        months: int = constants.DEFAULT_TREND_PERIOD_MONTHS,
        now: Optional[datetime] = None,
    ) -> List[SoldRecord]:
        """Sold records for price trends.

        Args:
            suburbs: Suburbs to include.
            property_type: Category to restrict to, or None/"all" for every type.
            months: Look-back period; 0 means the whole sold history.
            now: Evaluation time for the cutoff.

        Returns:
            Sold records, at most ``SOLD_QUERY_LIMIT`` of them.
        """
        keys = [normalize_suburb(s) for s in suburbs if normalize_suburb(s)]
        if not keys:
            return []
        cutoff = lookback_cutoff(months, now or datetime.now())

        def build():
            query = (
                self.client.table(constants.TABLE_SOLD)
                .select("suburb, sold_date, sold_price, property_type")
                .in_("suburb", keys)
                .gt("sold_price", 0)
                .not_.is_("sold_date", "null")
                .gte("sold_date", cutoff)
                .range(0, constants.SOLD_QUERY_LIMIT - 1)
            )
            if property_type and property_type not in constants.ANY_FILTER_VALUES:
                query = query.eq("property_type", property_type)
            return query

        rows = self._fetch_rows(constants.TABLE_SOLD, build)
        return adapters.adapt_rows(rows, adapters.adapt_sold_record)

    # Server-side aggregates

    def fetch_suburb_investment_stats(self) -> List[Dict[str, Any]]:
        rows = self._fetch_rows(
            constants.RPC_SUBURB_INVESTMENT_STATS,
            lambda: self.client.rpc(constants.RPC_SUBURB_INVESTMENT_STATS, {}),
        )
        return [adapters.adapt_investment_stats(row) for row in rows]

    def fetch_suburb_directory(self) -> List[SuburbDirectoryRow]:
        """Suburb directory rows, busiest suburbs first."""
        rows = self._fetch_rows(
            constants.RPC_SUBURB_PAGE_STATS,
            lambda: self.client.rpc(constants.RPC_SUBURB_PAGE_STATS, {}),
        )
        directory = adapters.adapt_rows(rows, adapters.adapt_directory_row)
        return sorted(directory, key=lambda r: r.listing_count, reverse=True)

    def fetch_distinct_sold_suburbs(self) -> List[str]:
        rows = self._fetch_rows(
            constants.RPC_DISTINCT_SOLD_SUBURBS,
            lambda: self.client.rpc(constants.RPC_DISTINCT_SOLD_SUBURBS, {}),
        )
        suburbs = {normalize_suburb(row.get("suburb")) for row in rows}
        return sorted(s for s in suburbs if s)

    def load_all(self) -> DashboardData:
        """Fetch the four record families the dashboard needs on load."""
        data = DashboardData(
            listings=self.fetch_listings(),
            comparables=self.fetch_comparables(),
            rentals=self.fetch_rentals(),
            suburb_sold_stats=self.fetch_suburb_sold_stats(),
            loaded_at=datetime.now(),
        )
        logger.info(
            "Loaded %d listings, %d comparables, %d rentals, %d suburb sold stats",
            len(data.listings),
            len(data.comparables),
            len(data.rentals),
            len(data.suburb_sold_stats),
        )
        return data
