"""
Property Type Utilities

Listing, rental and sold rows spell property types differently ("House",
"free-standing", "Apartment / Unit / Flat", "Vacant Land", ...). Everything
is folded into one set of lower-case categories at the data-access boundary.
"""

import re
from typing import List, Optional

from scopeperth.logging_config import get_logger

logger = get_logger(__name__)

# Maps raw property types (lower-cased, separators collapsed to "-") to categories
PROPERTY_TYPE_MAP = {
    # House types
    "house": "house",
    "free-standing": "house",
    "semi-detached": "house",
    "terrace": "house",
    "acreage": "house",
    "rural": "house",
    # Unit types
    "unit": "unit",
    "apartment": "unit",
    "apartment-unit-flat": "unit",
    "studio": "unit",
    "pent-house": "unit",
    "penthouse": "unit",
    "flat": "unit",
    "serviced-apartment": "unit",
    # Townhouse types
    "townhouse": "townhouse",
    "town-house": "townhouse",
    # Villa / duplex are tracked separately in WA listings
    "villa": "villa",
    "villas": "villa",
    "duplex": "duplex",
    "duplex-semi-detached": "duplex",
    # Land
    "land": "land",
    "vacant-land": "land",
    "residential-land": "land",
    "development-site": "land",
}

# Consolidated property categories
PROPERTY_CATEGORIES = {"house", "townhouse", "unit", "villa", "duplex", "land", "other"}


def _key(prop_type: str) -> str:
    return re.sub(r"[\s/_]+", "-", str(prop_type).lower().strip()).strip("-")


def normalize_property_type(prop_type: Optional[str]) -> Optional[str]:
    """Map a raw property type to its category.

    Args:
        prop_type: Raw property type string from any source.

    Returns:
        One of the categories, "other" for unrecognised types, or None when
        the source gave no type at all.

    Example:
        >>> normalize_property_type("Apartment / Unit / Flat")
        "unit"
        >>> normalize_property_type("Vacant Land")
        "land"
        >>> normalize_property_type(None) is None
        True
    """
    if prop_type is None or not str(prop_type).strip():
        return None

    key = _key(prop_type)
    category = PROPERTY_TYPE_MAP.get(key)
    if category is None:
        category = PROPERTY_TYPE_MAP.get(key.replace("-", ""))
    if category is None:
        logger.debug("Unrecognised property type: %s", prop_type)
        return "other"
    return category


def is_land_type(prop_type: Optional[str]) -> bool:
    """Check if a property type is vacant land."""
    return normalize_property_type(prop_type) == "land"


def is_house_type(prop_type: Optional[str]) -> bool:
    """Check if a property type is a house."""
    return normalize_property_type(prop_type) == "house"


def get_property_categories() -> List[str]:
    """Get a list of consolidated property categories."""
    return sorted(PROPERTY_CATEGORIES)
