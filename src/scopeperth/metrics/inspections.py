"""
Inspection Scheduling

Groups upcoming open homes into the labelled buckets of the inspections
view: Today, Tomorrow, This Weekend, Next Week and Later.
"""

from datetime import datetime
from typing import Dict, Iterable, List

from scopeperth.core import constants
from scopeperth.core.models import InspectionGroup, Listing
from scopeperth.utils.date_parser import align_to

SATURDAY = 5
SUNDAY = 6


def upcoming_inspections(listings: Iterable[Listing], now: datetime) -> List[Listing]:
    """Listings whose inspection opens and closes after ``now``, soonest first."""
    upcoming = []
    for listing in listings:
        if listing.inspection_start is None or listing.inspection_end is None:
            continue
        start = align_to(listing.inspection_start, now)
        end = align_to(listing.inspection_end, now)
        if start > now and end > now:
            upcoming.append((start, listing))
    upcoming.sort(key=lambda pair: pair[0])
    return [listing for _, listing in upcoming]


def inspection_bucket(start: datetime, now: datetime) -> str:
    """Label for an inspection opening at ``start``, evaluated at ``now``.

    Weeks run Monday to Sunday. "This Weekend" is the Saturday or Sunday of
    the current week; "Next Week" is the whole of the following week. Weekdays
    later in the current week that are not today or tomorrow fall into
    "Later".
    """
    start = align_to(start, now)
    diff = (start.date() - now.date()).days
    days_until_sunday = SUNDAY - now.weekday()

    if diff == 0:
        return constants.BUCKET_TODAY
    if diff == 1:
        return constants.BUCKET_TOMORROW
    if start.weekday() in (SATURDAY, SUNDAY) and 0 < diff <= days_until_sunday:
        return constants.BUCKET_THIS_WEEKEND
    if days_until_sunday < diff <= days_until_sunday + 7:
        return constants.BUCKET_NEXT_WEEK
    return constants.BUCKET_LATER


def group_inspections(listings: Iterable[Listing], now: datetime) -> List[InspectionGroup]:
    """Bucket upcoming inspections; empty buckets are omitted.

    Args:
        listings: Any listings; those without a future window are ignored.
        now: Evaluation time. Aware or naive, matching the timestamps.

    Returns:
        Non-empty groups in fixed bucket order, each sorted by opening time.
    """
    buckets: Dict[str, List[Listing]] = {label: [] for label in constants.INSPECTION_BUCKETS}
    for listing in upcoming_inspections(listings, now):
        buckets[inspection_bucket(listing.inspection_start, now)].append(listing)
    return [
        InspectionGroup(label=label, listings=buckets[label])
        for label in constants.INSPECTION_BUCKETS
        if buckets[label]
    ]
