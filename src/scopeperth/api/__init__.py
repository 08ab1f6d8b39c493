"""
Flask REST API for the ScopePerth dashboard.

Provides endpoints for:
- Filtered listings, stats, investor view and scorecard
- Suburb directory, suburb pages and price trends
- Inspections and calendar downloads
- Preferences, favourites and notes
"""

from scopeperth.api.server import create_app
from scopeperth.api.routes import register_routes

__all__ = [
    "create_app",
    "register_routes",
]
