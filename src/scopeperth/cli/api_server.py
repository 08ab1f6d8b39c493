#!/usr/bin/env python
"""
CLI for running the ScopePerth API Server.

Usage:
    python -m scopeperth.cli.api_server
    python -m scopeperth.cli.api_server --port 8080
    python -m scopeperth.cli.api_server --host 0.0.0.0 --port 5000 --debug
"""

import argparse
import sys

from scopeperth.config import get_config
from scopeperth.logging_config import setup_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ScopePerth Dashboard API Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    scopeperth-api
    scopeperth-api --port 8080
    scopeperth-api --host 0.0.0.0 --debug
        """,
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (default: from config or 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: from config or 5000)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set log level",
    )
    return parser


def main(argv=None):
    """Main entry point for the API server CLI."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(level=args.log_level)
    logger = get_logger(__name__)

    config = get_config()
    host = args.host or config.api.host
    port = args.port or config.api.port
    debug = args.debug or config.api.debug

    if not config.supabase.is_configured:
        logger.warning(
            "Supabase credentials are not set; listing endpoints will return empty results"
        )

    logger.info("Starting ScopePerth API Server")
    logger.info("Host: %s, Port: %d, Debug: %s", host, port, debug)

    try:
        from scopeperth.api.server import run_server
        run_server(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error("Server error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
