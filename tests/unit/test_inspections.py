"""
Unit tests for inspection scheduling.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from scopeperth.metrics.inspections import group_inspections, inspection_bucket, upcoming_inspections

PERTH = ZoneInfo("Australia/Perth")


def perth(day, hour=10, minute=0):
    return datetime(2025, 3, day, hour, minute, tzinfo=PERTH)


class TestInspectionBucket:
    """Buckets evaluated on Wednesday 5 March."""

    @pytest.mark.parametrize("start, label", [
        (perth(5, 14), "Today"),
        (perth(6, 9), "Tomorrow"),
        (perth(7), "Later"),
        (perth(8), "This Weekend"),
        (perth(9, 16), "This Weekend"),
        (perth(10), "Next Week"),
        (perth(16), "Next Week"),
        (perth(17), "Later"),
    ])
    def test_midweek(self, start, label, now):
        assert inspection_bucket(start, now) == label

    def test_utc_start_uses_local_date(self, now):
        # 16:30 UTC on the 5th is 00:30 on the 6th in Perth
        start = datetime(2025, 3, 5, 16, 30, tzinfo=timezone.utc)
        assert inspection_bucket(start, now) == "Tomorrow"


class TestBucketsOnAWeekend:
    """Buckets evaluated on Saturday 8 March."""

    @pytest.mark.parametrize("start, label", [
        (perth(8, 14), "Today"),
        (perth(9), "Tomorrow"),
        (perth(15), "Next Week"),
        (perth(16), "Next Week"),
        (perth(17), "Later"),
    ])
    def test_saturday(self, start, label):
        assert inspection_bucket(start, perth(8, 9)) == label

    def test_sunday_evaluation(self):
        assert inspection_bucket(perth(10), perth(9, 9)) == "Tomorrow"
        assert inspection_bucket(perth(15), perth(9, 9)) == "Next Week"


class TestGroupInspections:
    """Tests for upcoming_inspections and group_inspections."""

    @pytest.fixture
    def listings(self, make_listing):
        def with_window(id, start):
            return make_listing(id=id, inspection_start=start, inspection_end=start + timedelta(minutes=30))

        return [
            with_window("sat", perth(8, 10)),
            with_window("today", perth(5, 15)),
            with_window("past", perth(4, 10)),
            with_window("sat-early", perth(8, 9)),
            with_window("in-progress", perth(5, 9, 45)),
            with_window("later", perth(28)),
            make_listing(id="none"),
        ]

    def test_upcoming_sorted_and_future_only(self, listings, now):
        ids = [listing.id for listing in upcoming_inspections(listings, now)]
        assert ids == ["today", "sat-early", "sat", "later"]

    def test_groups_in_bucket_order(self, listings, now):
        groups = group_inspections(listings, now)
        assert [g.label for g in groups] == ["Today", "This Weekend", "Later"]
        assert [listing.id for listing in groups[1].listings] == ["sat-early", "sat"]

    def test_naive_timestamps_use_reference_zone(self, make_listing, now):
        listing = make_listing(
            inspection_start=datetime(2025, 3, 5, 12, 0),
            inspection_end=datetime(2025, 3, 5, 12, 30),
        )
        groups = group_inspections([listing], now)
        assert groups[0].label == "Today"

    def test_nothing_upcoming(self, now):
        assert group_inspections([], now) == []
