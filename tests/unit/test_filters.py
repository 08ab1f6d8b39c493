"""
Unit tests for the listing filter predicate.
"""

from datetime import timedelta

import pytest

from scopeperth.core.models import Comparable, FilterState
from scopeperth.metrics.filters import FilterContext, apply_filters, matches_filters


@pytest.fixture
def context(now, test_config):
    return FilterContext.from_config(
        comparables=[Comparable(suburb="SCARBOROUGH", bedrooms=3, avg_sold_price=1_200_000)],
        favourites=["fav"],
        now=now,
    )


@pytest.fixture
def listings(make_listing, now):
    return [
        make_listing(id="a", price_numeric=1_000_000, pool=True),
        make_listing(id="b", suburb="HILLARYS", bedrooms=4, price_numeric=2_000_000),
        make_listing(id="c", bedrooms=2, price_numeric=700_000, property_type="unit"),
        make_listing(id="d", under_offer=True),
        make_listing(id="e", address="Lot 9 New Road", property_type=None, bedrooms=0),
        make_listing(id="fav", price_numeric=None, price_display="Offers invited"),
        make_listing(id="g", first_seen_date=now - timedelta(days=90), price_numeric=1_500_000),
    ]


def _ids(result):
    return [listing.id for listing in result]


class TestDefaults:
    """Tests for the default filter selection."""

    def test_defaults(self, listings, context):
        result = apply_filters(listings, FilterState(), context)
        assert _ids(result) == ["a", "b", "fav", "g"]

    def test_unrestricted_admits_everything(self, listings, context):
        assert len(apply_filters(listings, FilterState.unrestricted(), context)) == len(listings)


class TestConstraints:
    """Tests for individual constraints."""

    @pytest.mark.parametrize("value", ["", "all", "__all__", "ALL"])
    def test_suburb_any_values(self, value, listings, context):
        filters = FilterState(suburb=value)
        assert "b" in _ids(apply_filters(listings, filters, context))

    def test_suburb_case_insensitive(self, listings, context):
        result = apply_filters(listings, FilterState(suburb="hillarys"), context)
        assert _ids(result) == ["b"]

    def test_property_type(self, listings, context):
        filters = FilterState.unrestricted().replace(property_type="Apartment")
        assert _ids(apply_filters(listings, filters, context)) == ["c"]

    def test_max_price_excludes_unpriced(self, listings, context):
        filters = FilterState(max_price=1_500_000)
        assert _ids(apply_filters(listings, filters, context)) == ["a", "g"]

    def test_max_price_can_keep_unpriced(self, listings, now):
        context = FilterContext(now=now, exclude_unpriced_under_max_price=False)
        filters = FilterState(max_price=1_500_000)
        assert "fav" in _ids(apply_filters(listings, filters, context))

    def test_pool_only(self, listings, context):
        assert _ids(apply_filters(listings, FilterState(pool_only=True), context)) == ["a"]

    def test_under_budget(self, listings, now):
        context = FilterContext(now=now, budget=1_500_000)
        result = apply_filters(listings, FilterState(under_budget=True), context)
        assert _ids(result) == ["a", "g"]

    def test_available_only_off(self, listings, context):
        assert "d" in _ids(apply_filters(listings, FilterState(available_only=False), context))

    def test_hide_land_off(self, listings, context):
        filters = FilterState(min_bedrooms=0, hide_land=False)
        assert "e" in _ids(apply_filters(listings, filters, context))

    def test_hide_land_drops_zero_bedrooms(self, make_listing, context):
        studio = make_listing(bedrooms=0, property_type="unit")
        assert matches_filters(studio, FilterState(min_bedrooms=0), context) is False

    def test_best_value(self, listings, context):
        # benchmark 1.2M at 15% -> strictly under 1.02M
        assert _ids(apply_filters(listings, FilterState(best_value=True), context)) == ["a"]

    def test_motivated_seller(self, listings, context):
        result = apply_filters(listings, FilterState(motivated_seller=True), context)
        assert _ids(result) == ["fav", "g"]

    def test_favourites_only(self, listings, context):
        result = apply_filters(listings, FilterState(favourites_only=True), context)
        assert _ids(result) == ["fav"]


class TestFilterProperties:
    """Properties that hold for any selection."""

    SELECTIONS = [
        FilterState(),
        FilterState(suburb="Scarborough", pool_only=True),
        FilterState(max_price=1_200_000, best_value=True),
        FilterState(under_budget=True, motivated_seller=True, favourites_only=True),
    ]

    @pytest.mark.parametrize("filters", SELECTIONS)
    def test_result_is_ordered_subset(self, filters, listings, context):
        result = apply_filters(listings, filters, context)
        positions = [listings.index(listing) for listing in result]
        assert positions == sorted(positions)

    @pytest.mark.parametrize("filters", SELECTIONS)
    @pytest.mark.parametrize("relaxed", [
        {"suburb": ""},
        {"min_bedrooms": 0},
        {"max_price": None},
        {"pool_only": False},
        {"under_budget": False},
        {"available_only": False},
        {"hide_land": False},
        {"best_value": False},
        {"motivated_seller": False},
        {"favourites_only": False},
    ])
    def test_relaxing_a_constraint_never_shrinks(self, filters, relaxed, listings, context):
        strict = _ids(apply_filters(listings, filters, context))
        loose = _ids(apply_filters(listings, filters.replace(**relaxed), context))
        assert set(strict) <= set(loose)
