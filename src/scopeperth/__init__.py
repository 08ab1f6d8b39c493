"""
ScopePerth Dashboard Engine

Perth property listings dashboard: pulls active listings, sold-price
benchmarks, rental medians and suburb statistics from Supabase and derives
the suburb, investment and inspection views shown by the dashboard.

Main components:
- datasource: Supabase access and record adaptation
- metrics: filters, aggregation, classification, scorecard, inspections, trends
- state: dashboard state container and persisted preferences
- export: inspection calendar files
- api: Flask REST API server
- cli: Command-line interfaces

Usage:
    from scopeperth import get_config
    from scopeperth.dashboard import DashboardService
"""

__version__ = "1.0.0"

from scopeperth.config import get_config
from scopeperth.logging_config import setup_logging

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
]
