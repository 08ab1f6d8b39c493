"""
API Routes for the ScopePerth dashboard

Provides REST API endpoints for:
- Filtered listings with derived badges
- Headline stats, investor view and investment scorecard
- Suburb directory and suburb pages
- Inspection schedule and calendar downloads
- Sold price trends
- Preferences, favourites and notes
"""

from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request

from scopeperth.core import constants
from scopeperth.core.models import FilterState
from scopeperth.dashboard import DashboardService, directory_row_dict
from scopeperth.exceptions import ScopePerthError, ValidationError
from scopeperth.logging_config import get_logger

logger = get_logger(__name__)

# Create blueprint
api = Blueprint("api", __name__, url_prefix="/api")

SERVICE_KEY = "scopeperth.service"


def get_service() -> DashboardService:
    """The app's dashboard service, created on first use."""
    service = current_app.extensions.get(SERVICE_KEY)
    if service is None:
        service = DashboardService()
        current_app.extensions[SERVICE_KEY] = service
    return service


def _error(message: str, status: int):
    return jsonify({"status": "error", "error": message}), status


def _filters() -> FilterState:
    return FilterState.from_params(request.args)


# Health
@api.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    service = get_service()
    loaded_at = service.loaded_at
    return jsonify({
        "status": "healthy",
        "data_loaded": loaded_at is not None,
        "loaded_at": loaded_at.isoformat() if loaded_at else None,
        "supabase_configured": service.config.supabase.is_configured,
    })


# Listing Endpoints
@api.route("/listings", methods=["GET"])
def get_listings():
    """Filtered listings, each enriched with derived flags."""
    try:
        filters = _filters()
        rows = get_service().listing_rows(filters)
        return jsonify({
            "status": "success",
            "count": len(rows),
            "filters": filters.to_dict(),
            "listings": rows,
        })
    except ValidationError as e:
        return _error(e.message, 400)
    except ScopePerthError as e:
        logger.error("Listings error: %s", e)
        return _error(e.message, 500)


@api.route("/stats", methods=["GET"])
def get_stats():
    """Headline counters for the current filter selection."""
    try:
        stats = get_service().headline_stats(_filters())
        return jsonify({"status": "success", "stats": stats.to_dict()})
    except ValidationError as e:
        return _error(e.message, 400)


@api.route("/investor", methods=["GET"])
def get_investor_view():
    """Top suburbs by median ask and best investment picks."""
    try:
        limit = int(request.args.get("limit", 10))
        view = get_service().investor_view(_filters(), limit=limit)
        return jsonify({
            "status": "success",
            "top_suburbs": [s.to_dict() for s in view["top_suburbs"]],
            "best_picks": view["best_picks"],
        })
    except ValidationError as e:
        return _error(e.message, 400)
    except ValueError as e:
        return _error(f"Invalid input: {e}", 400)


@api.route("/scorecard", methods=["GET"])
def get_scorecard():
    """Investment scorecard, highest gross yield first."""
    try:
        rows = get_service().scorecard(_filters())
        return jsonify({"status": "success", "rows": [row.to_dict() for row in rows]})
    except ValidationError as e:
        return _error(e.message, 400)


# Suburb Endpoints
@api.route("/suburbs", methods=["GET"])
def get_suburb_directory():
    """Suburb directory, busiest suburbs first."""
    rows = get_service().suburb_directory()
    return jsonify({
        "status": "success",
        "count": len(rows),
        "suburbs": [directory_row_dict(row) for row in rows],
    })


@api.route("/suburbs/<slug>", methods=["GET"])
def get_suburb_page(slug: str):
    """Listings and statistics for one suburb."""
    try:
        page = get_service().suburb_page(slug)
        return jsonify({"status": "success", "suburb": page.to_dict()})
    except ValidationError as e:
        return _error(e.message, 400)


@api.route("/sold-suburbs", methods=["GET"])
def get_sold_suburbs():
    """Suburbs with sold history, for the trends selector."""
    suburbs = get_service().sold_suburbs()
    return jsonify({"status": "success", "suburbs": suburbs})


# Inspection Endpoints
@api.route("/inspections", methods=["GET"])
def get_inspections():
    """Upcoming open homes grouped by schedule label."""
    try:
        groups = get_service().inspections(_filters())
        return jsonify({"status": "success", "groups": [g.to_dict() for g in groups]})
    except ValidationError as e:
        return _error(e.message, 400)


@api.route("/inspections/<listing_id>.ics", methods=["GET"])
def download_inspection(listing_id: str):
    """Calendar file for a listing's inspection window."""
    try:
        payload, filename = get_service().inspection_calendar(listing_id)
    except ValidationError as e:
        status = 404 if e.field == "listing_id" else 400
        return _error(e.message, status)
    return Response(
        payload,
        mimetype="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Trends
@api.route("/trends", methods=["GET"])
def get_trends():
    """Quarterly median sold prices for selected suburbs."""
    try:
        suburbs = request.args.getlist("suburb")
        if len(suburbs) == 1 and "," in suburbs[0]:
            suburbs = suburbs[0].split(",")
        months = int(request.args.get("months", constants.DEFAULT_TREND_PERIOD_MONTHS))
        property_type = request.args.get("property_type", "house")
        trends = get_service().trends(suburbs, property_type, months)
        return jsonify({"status": "success", **trends})
    except ValidationError as e:
        return _error(e.message, 400)
    except ValueError as e:
        return _error(f"Invalid input: {e}", 400)


# Preferences
def _preferences_payload() -> Dict[str, Any]:
    state = get_service().state
    return {
        "dark_mode": state.dark_mode,
        "hero_dismissed": state.hero_dismissed,
        "favourites": sorted(state.favourites),
        "notes": state.notes_dict,
    }


@api.route("/preferences", methods=["GET"])
def get_preferences():
    """Persisted theme, hero flag, favourites and notes."""
    return jsonify({"status": "success", "preferences": _preferences_payload()})


@api.route("/preferences", methods=["PUT"])
def update_preferences():
    """Update dark mode and the dismissed-hero flag."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error("Request body must be a JSON object", 400)
    try:
        get_service().update_preferences(data)
    except ValidationError as e:
        return _error(e.message, 400)
    except ScopePerthError as e:
        logger.error("Preferences update error: %s", e)
        return _error(e.message, 500)
    return jsonify({"status": "success", "preferences": _preferences_payload()})


@api.route("/favourites", methods=["GET"])
def get_favourites():
    favourites = sorted(get_service().state.favourites)
    return jsonify({"status": "success", "count": len(favourites), "favourites": favourites})


@api.route("/favourites/<listing_id>/toggle", methods=["POST"])
def toggle_favourite(listing_id: str):
    """Add or remove a listing from the favourites."""
    try:
        is_favourite = get_service().toggle_favourite(listing_id)
    except ScopePerthError as e:
        logger.error("Favourite toggle error for %s: %s", listing_id, e)
        return _error(e.message, 500)
    return jsonify({"status": "success", "listing_id": listing_id, "is_favourite": is_favourite})


@api.route("/notes/<listing_id>", methods=["PUT"])
def update_note(listing_id: str):
    """Save (or clear, with empty text) a private note."""
    data = request.get_json(silent=True) or {}
    text = data.get("note", "")
    if not isinstance(text, str):
        return _error("note must be a string", 400)
    try:
        note = get_service().set_note(listing_id, text)
    except ScopePerthError as e:
        logger.error("Note update error for %s: %s", listing_id, e)
        return _error(e.message, 500)
    return jsonify({"status": "success", "listing_id": listing_id, "note": note})


@api.route("/refresh", methods=["POST"])
def refresh():
    """Re-fetch dashboard data from the data store."""
    data = get_service().refresh()
    return jsonify({
        "status": "success",
        "loaded_at": data.loaded_at.isoformat() if data.loaded_at else None,
        "listings": len(data.listings),
        "comparables": len(data.comparables),
        "rentals": len(data.rentals),
        "suburb_sold_stats": len(data.suburb_sold_stats),
    })


def register_routes(app, service: DashboardService = None):
    """Register API routes with Flask app."""
    if service is not None:
        app.extensions[SERVICE_KEY] = service
    app.register_blueprint(api)
    logger.info("API routes registered")
