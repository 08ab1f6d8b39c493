"""
Core modules for the ScopePerth dashboard.

Contains shared constants, the canonical record types and the SQLite
helpers behind the local preference store.
"""

from scopeperth.core.constants import (
    DEFAULT_BUDGET,
    INSPECTION_BUCKETS,
    STATUS_ACTIVE,
)
from scopeperth.core.models import (
    Comparable,
    DashboardData,
    FilterState,
    InspectionGroup,
    InvestmentScorecardRow,
    Listing,
    RentalRecord,
    SoldRecord,
    SuburbDirectoryRow,
    SuburbSoldStats,
    SuburbStat,
)

__all__ = [
    "DEFAULT_BUDGET",
    "INSPECTION_BUCKETS",
    "STATUS_ACTIVE",
    "Comparable",
    "DashboardData",
    "FilterState",
    "InspectionGroup",
    "InvestmentScorecardRow",
    "Listing",
    "RentalRecord",
    "SoldRecord",
    "SuburbDirectoryRow",
    "SuburbSoldStats",
    "SuburbStat",
]
