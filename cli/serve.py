#!/usr/bin/env python3

from api import create_app
from cli.migrate import apply_pending
from logger import get_logger

logger = get_logger()


def cmd_serve(args, services):
    """Apply pending migrations and run the HTTP API."""
    config = services.config

    applied = apply_pending(services.db_manager)
    if applied:
        logger.info(f"Applied {len(applied)} pending migration(s) before startup")

    host = args.host or config.server_host
    port = args.port or config.server_port

    logger.info(f"Serving Accountbook API on http://{host}:{port}")
    logger.info(f"Database: {config.db_path}")

    app = create_app(services)
    app.run(host=host, port=port, debug=config.server_debug)


def setup_parser(subparsers):
    """Setup serve subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
        description="Run the Accountbook HTTP API (Flask development server)",
    )
    parser.add_argument("--host", help="Bind address (default from config)")
    parser.add_argument("--port", type=int, help="Port (default from config)")
    parser.set_defaults(func=cmd_serve)
