"""
Unit tests for the dashboard service.
"""

from datetime import timedelta

import pytest

from scopeperth.core import constants
from scopeperth.core.models import FilterState
from scopeperth.dashboard import DashboardService, directory_row_dict
from scopeperth.datasource.repository import ListingRepository
from scopeperth.exceptions import ValidationError


def _ids(listings):
    return [listing.id for listing in listings]


class TestFiltering:
    """Tests for filtered listings and enrichment."""

    def test_default_filters(self, service):
        assert _ids(service.filtered_listings(FilterState())) == ["101", "102", "105"]

    def test_results_memoised(self, service, fake_client):
        service.filtered_listings(FilterState())
        calls = len(fake_client.calls)
        first = service.filtered_listings(FilterState())
        assert service.filtered_listings(FilterState()) is first
        assert len(fake_client.calls) == calls

    def test_refresh_clears_cache(self, service):
        first = service.filtered_listings(FilterState())
        service.refresh()
        assert service.filtered_listings(FilterState()) is not first

    def test_cache_is_bounded(self, service):
        for price in range(500):
            service.filtered_listings(FilterState(max_price=1_000_000 + price))
        assert len(service._filter_cache) == constants.FILTER_CACHE_SIZE

    def test_recently_used_selection_kept(self, service):
        first = service.filtered_listings(FilterState())
        for price in range(constants.FILTER_CACHE_SIZE):
            service.filtered_listings(FilterState(max_price=1_000_000 + price))
            service.filtered_listings(FilterState())
        assert service.filtered_listings(FilterState()) is first

    def test_cache_dropped_when_day_changes(self, test_config, fake_client, preferences, now):
        clock = [now]
        service = DashboardService(
            repository=ListingRepository(client=fake_client),
            preferences=preferences,
            config=test_config,
            clock=lambda: clock[0],
        )
        first = service.filtered_listings(FilterState())
        service.filtered_listings(FilterState(max_price=1_200_000))
        clock[0] = now + timedelta(days=1)
        assert service.filtered_listings(FilterState()) is not first
        assert len(service._filter_cache) == 1

    def test_enriched_row(self, service):
        rows = {row["id"]: row for row in service.listing_rows(FilterState())}
        beach = rows["101"]
        assert beach["benchmark_price"] == 2_000_000
        assert beach["price_vs_benchmark_pct"] == -20
        assert beach["is_best_value"] is True
        assert beach["is_near_beach"] is True
        assert beach["is_new"] is True
        assert beach["days_on_market_text"] == "5 days on market"
        assert beach["is_favourite"] is False
        assert beach["note"] is None

        offers = rows["102"]
        assert offers["is_motivated_seller"] is True
        assert offers["motivation_signal"] == "negotiation_keyword"
        assert offers["is_new"] is False

    def test_favourites_only(self, service):
        service.toggle_favourite("105")
        result = service.filtered_listings(FilterState(favourites_only=True))
        assert _ids(result) == ["105"]

    def test_find_listing(self, service):
        assert service.find_listing(103).suburb == "HILLARYS"
        with pytest.raises(ValidationError) as exc:
            service.find_listing("999")
        assert exc.value.field == "listing_id"


class TestAggregates:
    """Tests for headline stats, investor view and scorecard."""

    def test_headline_stats(self, service):
        stats = service.headline_stats(FilterState())
        assert stats.to_dict() == {
            "total": 3,
            "with_pool": 2,
            "under_offer": 1,
            "under_budget": 4,
            "budget": 1_750_000,
        }

    def test_investor_view(self, service):
        view = service.investor_view(FilterState())
        assert view["top_suburbs"] == []
        assert [row["id"] for row in view["best_picks"]] == ["101", "102"]

    def test_scorecard(self, service):
        service.config.metrics.min_priced_for_median = 2
        rows = {row.suburb: row for row in service.scorecard(FilterState())}
        scarborough = rows["SCARBOROUGH"]
        assert scarborough.median_ask == 1_600_000
        assert scarborough.weekly_rent == 850
        assert scarborough.gross_yield == pytest.approx(2.7625)
        assert scarborough.median_sold == 1_500_000
        assert scarborough.sold_count == 48
        assert rows["KARRINYUP"].gross_yield is None

    def test_inspections(self, service):
        groups = service.inspections(FilterState())
        assert [g.label for g in groups] == ["This Weekend"]
        assert _ids(groups[0].listings) == ["101"]

    def test_inspection_calendar(self, service):
        payload, filename = service.inspection_calendar("101")
        assert "DTSTART:20250308T020000Z" in payload
        assert filename == "inspection-12-beach-road-scarborough.ics"

    def test_calendar_without_window(self, service):
        with pytest.raises(ValidationError) as exc:
            service.inspection_calendar("102")
        assert exc.value.field == "inspection_start"


class TestPerRequestQueries:
    """Tests for the suburb pages, directory and trends."""

    def test_suburb_page(self, service):
        page = service.suburb_page("scarborough")
        assert page.suburb == "SCARBOROUGH"
        assert page.median_ask == 1_600_000
        assert page.investment["gross_yield"] == 3.4

    def test_directory_rows(self, service):
        rows = [directory_row_dict(row) for row in service.suburb_directory()]
        assert rows[0]["slug"] == "scarborough"
        assert rows[1]["median_sold"] is None

    def test_trends_default_selection(self, service):
        trends = service.trends()
        assert trends["suburbs"] == ["SCARBOROUGH", "HILLARYS", "KARRINYUP"]
        assert trends["points"][0] == {
            "quarter": "2024 Q1",
            "SCARBOROUGH": 1_100_000,
            "HILLARYS": 925_000,
            "KARRINYUP": None,
        }
        assert trends["summary"][0]["count"] == 3

    def test_trends_rejects_unknown_period(self, service):
        with pytest.raises(ValidationError):
            service.trends(["Scarborough"], months=7)


class TestPreferences:
    """Tests for state changes made through the service."""

    def test_toggle_favourite_persists(self, service, preferences):
        assert service.toggle_favourite(101) is True
        assert preferences.get_favourites() == frozenset({"101"})
        assert service.toggle_favourite(101) is False

    def test_note(self, service, preferences):
        assert service.set_note("101", "Ask about strata") == "Ask about strata"
        assert preferences.get_notes() == {"101": "Ask about strata"}
        rows = {row["id"]: row for row in service.listing_rows(FilterState())}
        assert rows["101"]["note"] == "Ask about strata"

    def test_update_preferences(self, service, preferences):
        state = service.update_preferences({"dark_mode": True, "hero_dismissed": True})
        assert state.dark_mode is True
        assert preferences.get_dark_mode() is True
        assert preferences.get_hero_dismissed() is True

    def test_update_preferences_parses_strings(self, service, preferences):
        service.update_preferences({"dark_mode": "true"})
        state = service.update_preferences({"dark_mode": "false", "hero_dismissed": "false"})
        assert state.dark_mode is False
        assert state.hero_dismissed is False
        assert preferences.get_dark_mode() is False

    def test_update_preferences_rejects_non_boolean(self, service, preferences):
        with pytest.raises(ValidationError) as exc:
            service.update_preferences({"dark_mode": True, "hero_dismissed": "maybe"})
        assert exc.value.field == "hero_dismissed"
        assert service.state.dark_mode is False
        assert preferences.get_dark_mode() is False
