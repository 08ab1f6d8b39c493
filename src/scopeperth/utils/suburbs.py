"""
Suburb name helpers.

Sources disagree on suburb casing ("Scarborough" vs "SCARBOROUGH"), so every
suburb is keyed by its upper-cased form once, when a row is adapted.
"""

import re
from typing import Optional


def normalize_suburb(name: Optional[str]) -> str:
    """Canonical suburb key: trimmed, single-spaced, upper-case.

    Example:
        >>> normalize_suburb("  north  beach ")
        "NORTH BEACH"
    """
    if not name:
        return ""
    return re.sub(r"\s+", " ", str(name)).strip().upper()


def slugify(suburb: str) -> str:
    """URL slug for a suburb, e.g. "NORTH BEACH" -> "north-beach"."""
    return re.sub(r"\s+", "-", normalize_suburb(suburb).lower())


def deslugify(slug: str) -> str:
    """Suburb key for a URL slug, e.g. "north-beach" -> "NORTH BEACH"."""
    return normalize_suburb(slug.replace("-", " "))


def title_case(suburb: str) -> str:
    """Display form of a suburb key, e.g. "NORTH BEACH" -> "North Beach"."""
    return " ".join(word.capitalize() for word in normalize_suburb(suburb).split(" "))
