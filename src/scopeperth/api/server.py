"""
Flask Application Factory

Creates and configures the Flask application.
"""

from flask import Flask
from flask_cors import CORS

from scopeperth.config import get_config
from scopeperth.api.routes import register_routes
from scopeperth.logging_config import setup_logging, get_logger

logger = get_logger(__name__)


def create_app(test_config=None, service=None) -> Flask:
    """Create and configure the Flask application.

    Args:
        test_config: Optional test configuration dict.
        service: DashboardService to serve. Created lazily on the first
            request when omitted.

    Returns:
        Configured Flask application.
    """
    config = get_config()

    # Setup logging
    setup_logging()

    app = Flask(__name__)

    # Apply configuration
    app.config["DEBUG"] = config.api.debug

    if test_config:
        app.config.update(test_config)

    # Enable CORS for the dashboard front end
    CORS(app)

    # Register API routes
    register_routes(app, service=service)

    logger.info("Flask app created")
    return app


def run_server(host: str = None, port: int = None, debug: bool = None):
    """Run the Flask development server.

    Args:
        host: Host to bind to.
        port: Port to bind to.
        debug: Enable debug mode.
    """
    config = get_config()

    host = host or config.api.host
    port = port or config.api.port
    debug = debug if debug is not None else config.api.debug

    app = create_app()

    logger.info("Starting server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
