"""
Dashboard Service

Loads the four record families once per refresh and serves every derived
view from them. Filtered listing sets are memoised per (data load, filter
selection, favourites, day) so repeated requests with the same selection do
not re-run the predicate. The memo holds at most FILTER_CACHE_SIZE selections
and is emptied when the evaluation day changes.

Usage:
    from scopeperth.dashboard import DashboardService

    service = DashboardService()
    rows = service.listing_rows(FilterState())
"""

from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from scopeperth.config import Config, get_config
from scopeperth.core import constants
from scopeperth.core.models import (
    DashboardData,
    FilterState,
    InspectionGroup,
    InvestmentScorecardRow,
    Listing,
    SuburbDirectoryRow,
    SuburbStat,
    parse_bool,
)
from scopeperth.datasource.repository import ListingRepository
from scopeperth.exceptions import ValidationError
from scopeperth.export.calendar import build_inspection_event, inspection_filename
from scopeperth.logging_config import get_logger
from scopeperth.metrics import classification
from scopeperth.metrics.aggregation import (
    HeadlineStats,
    SuburbPageSummary,
    aggregate_by_suburb,
    best_investment_picks,
    summarize_listings,
    summarize_suburb_page,
    top_suburbs_by_median,
)
from scopeperth.metrics.filters import FilterContext, apply_filters
from scopeperth.metrics.inspections import group_inspections
from scopeperth.metrics.scorecard import build_scorecard
from scopeperth.metrics.trends import limit_trend_suburbs, quarterly_medians, summarize_trends
from scopeperth.state.preferences import PreferenceStore
from scopeperth.state.store import (
    DashboardState,
    DismissHero,
    SetNote,
    Store,
    ToggleDarkMode,
    ToggleFavourite,
)
from scopeperth.utils.date_parser import days_on_market, format_days_on_market, now_in
from scopeperth.utils.suburbs import deslugify, slugify

logger = get_logger(__name__)


class DashboardService:
    """Facade over the repository, the metrics engine and the state store."""

    def __init__(
        self,
        repository: Optional[ListingRepository] = None,
        preferences: Optional[PreferenceStore] = None,
        config: Optional[Config] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or get_config()
        self.repository = repository or ListingRepository(config=self.config.supabase)
        self.preferences = preferences or PreferenceStore(self.config.database.path)
        self._clock = clock
        self._data: Optional[DashboardData] = None
        self._store: Optional[Store] = None
        self._filter_cache: "OrderedDict[Tuple, List[Listing]]" = OrderedDict()
        self._filter_cache_day: Optional[date] = None

    # Loading

    @property
    def data(self) -> DashboardData:
        if self._data is None:
            self.refresh()
        return self._data

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._data.loaded_at if self._data is not None else None

    def refresh(self) -> DashboardData:
        """Re-fetch all record families and drop memoised results."""
        self._data = self.repository.load_all()
        self._filter_cache.clear()
        return self._data

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return now_in(self.config.metrics.timezone)

    # State

    @property
    def store(self) -> Store:
        if self._store is None:
            self._store = Store.from_preferences(self.preferences)
        return self._store

    @property
    def state(self) -> DashboardState:
        return self.store.state

    def toggle_favourite(self, listing_id: Any) -> bool:
        """Flip a listing's favourite flag; returns the new flag."""
        state = self.store.dispatch(ToggleFavourite(str(listing_id)))
        return state.is_favourite(listing_id)

    def set_note(self, listing_id: Any, text: str) -> Optional[str]:
        state = self.store.dispatch(SetNote(str(listing_id), text or ""))
        return state.notes_dict.get(str(listing_id))

    def update_preferences(self, changes: Dict[str, Any]) -> DashboardState:
        """Apply dark-mode and hero-dismissed changes from a request body.

        Both values are parsed before anything is applied.

        Raises:
            ValidationError: If a value is not a recognised boolean.
        """
        dark_mode = None
        hero_dismissed = False
        if "dark_mode" in changes:
            dark_mode = parse_bool("dark_mode", changes["dark_mode"])
        if "hero_dismissed" in changes:
            hero_dismissed = parse_bool("hero_dismissed", changes["hero_dismissed"])

        if dark_mode is not None and dark_mode != self.state.dark_mode:
            self.store.dispatch(ToggleDarkMode())
        if hero_dismissed and not self.state.hero_dismissed:
            self.store.dispatch(DismissHero())
        return self.state

    # Filtering

    def filter_context(self) -> FilterContext:
        return FilterContext.from_config(
            comparables=self.data.comparables,
            favourites=self.state.favourites,
            now=self.now(),
            metrics=self.config.metrics,
        )

    def filtered_listings(self, filters: FilterState) -> List[Listing]:
        context = self.filter_context()
        today = context.now.date()
        if today != self._filter_cache_day:
            self._filter_cache.clear()
            self._filter_cache_day = today

        key = (filters, context.favourites)
        cached = self._filter_cache.get(key)
        if cached is not None:
            self._filter_cache.move_to_end(key)
            return cached

        cached = apply_filters(self.data.listings, filters, context)
        self._filter_cache[key] = cached
        if len(self._filter_cache) > constants.FILTER_CACHE_SIZE:
            self._filter_cache.popitem(last=False)
        logger.debug("Filtered %d of %d listings", len(cached), len(self.data.listings))
        return cached

    def enrich_listing(self, listing: Listing, context: FilterContext) -> Dict[str, Any]:
        """Listing row with every derived badge the dashboard shows."""
        metrics = self.config.metrics
        now = context.now
        days = days_on_market(listing.first_seen_date, now)
        signal = classification.motivation_signal(listing, now, context.motivation)
        row = listing.to_dict()
        row.update({
            "benchmark_price": classification.benchmark_price(listing, context.comparables),
            "price_vs_benchmark_pct": classification.price_vs_benchmark_pct(
                listing, context.comparables
            ),
            "is_best_value": classification.is_best_value(
                listing, context.comparables, metrics.best_value_discount_pct
            ),
            "is_motivated_seller": signal is not None,
            "motivation_signal": signal,
            "is_land": classification.is_land_listing(listing),
            "beach_distance_km": classification.beach_distance_km(
                listing, metrics.coast_longitude
            ),
            "is_near_beach": classification.is_near_beach(
                listing, metrics.coast_longitude, metrics.near_beach_km
            ),
            "price_drop_pct": classification.price_drop_percent(listing),
            "days_on_market": days,
            "days_on_market_text": format_days_on_market(days),
            "is_new": classification.is_new_listing(listing, now, metrics.new_listing_days),
            "is_favourite": listing.id in context.favourites,
            "note": self.state.notes_dict.get(listing.id),
        })
        return row

    def listing_rows(self, filters: FilterState) -> List[Dict[str, Any]]:
        context = self.filter_context()
        return [self.enrich_listing(listing, context) for listing in self.filtered_listings(filters)]

    def find_listing(self, listing_id: Any) -> Listing:
        """Look up a loaded listing by id.

        Raises:
            ValidationError: If no loaded listing has that id.
        """
        wanted = str(listing_id)
        for listing in self.data.listings:
            if listing.id == wanted:
                return listing
        raise ValidationError(f"Unknown listing: {wanted}", field="listing_id", value=wanted)

    # Aggregates

    def headline_stats(self, filters: FilterState) -> HeadlineStats:
        return summarize_listings(
            self.filtered_listings(filters), self.data.listings, self.config.metrics.budget
        )

    def suburb_stats(self, filters: FilterState) -> List[SuburbStat]:
        return aggregate_by_suburb(
            self.filtered_listings(filters), self.config.metrics.min_priced_for_median
        )

    def investor_view(self, filters: FilterState, limit: int = 10) -> Dict[str, Any]:
        """Top suburbs by median ask and the best investment picks.

        Raises:
            ValidationError: If limit is below 1.
        """
        if limit < 1:
            raise ValidationError(f"limit must be at least 1, got {limit}", field="limit", value=limit)
        metrics = self.config.metrics
        context = self.filter_context()
        picks = best_investment_picks(
            self.filtered_listings(filters),
            context.comparables,
            metrics.investment_pick_discount_pct,
            metrics.investment_pick_limit,
        )
        return {
            "top_suburbs": top_suburbs_by_median(self.suburb_stats(filters), limit),
            "best_picks": [self.enrich_listing(listing, context) for listing in picks],
        }

    def scorecard(self, filters: FilterState) -> List[InvestmentScorecardRow]:
        metrics = self.config.metrics
        return build_scorecard(
            self.suburb_stats(filters),
            self.data.rentals,
            self.data.suburb_sold_stats,
            metrics.rental_reference_bedrooms,
            metrics.rental_reference_property_type,
        )

    def inspections(self, filters: FilterState) -> List[InspectionGroup]:
        return group_inspections(self.filtered_listings(filters), self.now())

    def inspection_calendar(self, listing_id: Any) -> Tuple[str, str]:
        """Calendar payload and download filename for a listing's inspection."""
        listing = self.find_listing(listing_id)
        payload = build_inspection_event(listing, self.now(), self.config.metrics.timezone)
        return payload, inspection_filename(listing)

    # Per-request queries

    def suburb_directory(self) -> List[SuburbDirectoryRow]:
        return self.repository.fetch_suburb_directory()

    def suburb_page(self, slug: str) -> SuburbPageSummary:
        suburb = deslugify(slug)
        if not suburb:
            raise ValidationError("Suburb is required", field="slug", value=slug)
        listings = self.repository.fetch_listings_for_suburb(suburb)
        stats = self.repository.fetch_suburb_investment_stats()
        return summarize_suburb_page(suburb, listings, stats)

    def sold_suburbs(self) -> List[str]:
        return self.repository.fetch_distinct_sold_suburbs()

    def trends(
        self,
        suburbs: Optional[Sequence[str]] = None,
        property_type: str = "house",
        months: int = constants.DEFAULT_TREND_PERIOD_MONTHS,
    ) -> Dict[str, Any]:
        """Quarterly medians and summaries for up to five suburbs.

        Raises:
            ValidationError: If ``months`` is not one of the offered periods.
        """
        if months not in constants.TREND_PERIOD_MONTHS:
            raise ValidationError(f"Unsupported period: {months} months", field="months", value=months)
        selected = limit_trend_suburbs(suburbs or self.state.trend_suburbs)
        records = self.repository.fetch_sold_records(selected, property_type, months, self.now())
        return {
            "suburbs": selected,
            "property_type": property_type,
            "months": months,
            "points": [point.to_dict() for point in quarterly_medians(records, selected)],
            "summary": [summary.to_dict() for summary in summarize_trends(records, selected)],
        }


def directory_row_dict(row: SuburbDirectoryRow) -> Dict[str, Any]:
    data = row.to_dict()
    data["slug"] = slugify(row.suburb)
    return data
