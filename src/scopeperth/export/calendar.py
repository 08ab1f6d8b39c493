"""
Inspection Calendar Export

Builds an iCalendar (RFC 5545) file holding one event for a listing's
open-home window, ready to be offered as a download.

Usage:
    from scopeperth.export.calendar import build_inspection_event, inspection_filename

    payload = build_inspection_event(listing, now)
    filename = inspection_filename(listing)
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from scopeperth.core import constants
from scopeperth.core.models import Listing
from scopeperth.exceptions import ValidationError
from scopeperth.utils.date_parser import get_timezone
from scopeperth.utils.formatting import format_price
from scopeperth.utils.suburbs import slugify, title_case

CRLF = "\r\n"
MAX_LINE_OCTETS = 75


def escape_text(value: str) -> str:
    """Escape a TEXT property value."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line at 75 octets, continuation lines start with a space."""
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line
    parts = []
    current = ""
    limit = MAX_LINE_OCTETS
    for char in line:
        if len((current + char).encode("utf-8")) > limit:
            parts.append(current)
            current = char
            # Continuation lines lose one octet to the leading space
            limit = MAX_LINE_OCTETS - 1
        else:
            current += char
    parts.append(current)
    return (CRLF + " ").join(parts)


def format_utc(value: datetime, tz_name: Optional[str] = None) -> str:
    """Render a datetime as an iCalendar UTC timestamp.

    Naive values are read as wall-clock time in the dashboard timezone.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_timezone(tz_name))
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _describe(listing: Listing) -> str:
    lines = [format_price(listing.price_numeric, empty=listing.price_display or "Contact Agent")]
    features = []
    if listing.bedrooms is not None:
        features.append(f"{listing.bedrooms} bed")
    if listing.bathrooms is not None:
        features.append(f"{listing.bathrooms} bath")
    if listing.car_spaces is not None:
        features.append(f"{listing.car_spaces} car")
    if features:
        lines.append(" | ".join(features))
    if listing.agent_name or listing.agency_name:
        lines.append(" - ".join(filter(None, [listing.agent_name, listing.agency_name])))
    if listing.url:
        lines.append(listing.url)
    return "\n".join(lines)


def build_inspection_event(
    listing: Listing,
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None,
) -> str:
    """Build the calendar payload for a listing's inspection.

    Args:
        listing: Listing with both inspection timestamps.
        now: Creation time stamped on the event. Defaults to the current time.
        tz_name: Timezone for naive timestamps. Defaults to Australia/Perth.

    Returns:
        VCALENDAR text with CRLF line endings.

    Raises:
        ValidationError: If the listing has no complete inspection window.
    """
    if listing.inspection_start is None or listing.inspection_end is None:
        raise ValidationError(
            f"Listing {listing.id} has no scheduled inspection",
            field="inspection_start",
            value=listing.id,
        )

    start = format_utc(listing.inspection_start, tz_name)
    location = listing.address
    if listing.suburb:
        location = f"{listing.address}, {title_case(listing.suburb)}"

    lines: List[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{constants.ICS_PRODUCT_ID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:inspection-{listing.id}-{start}@{constants.ICS_UID_DOMAIN}",
        f"DTSTAMP:{format_utc(now or datetime.now(timezone.utc), tz_name)}",
        f"DTSTART:{start}",
        f"DTEND:{format_utc(listing.inspection_end, tz_name)}",
        f"SUMMARY:{escape_text('Inspection: ' + listing.address)}",
        f"LOCATION:{escape_text(location)}",
        f"DESCRIPTION:{escape_text(_describe(listing))}",
    ]
    if listing.url:
        lines.append(f"URL:{listing.url}")
    lines.extend(["END:VEVENT", "END:VCALENDAR"])
    return CRLF.join(fold_line(line) for line in lines) + CRLF


def inspection_filename(listing: Listing) -> str:
    """Download name, e.g. "inspection-12-beach-rd-scarborough.ics"."""
    base = re.sub(r"[^a-z0-9]+", "-", f"{listing.address} {listing.suburb}".lower()).strip("-")
    return f"inspection-{base or slugify(listing.id)}.ics"
