#!/usr/bin/env python3
"""
Run script for the Inventory API
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from inventory_api import create_app  # noqa: E402
from inventory_api.build import build_database  # noqa: E402
from inventory_api.logger import get_logger  # noqa: E402

# Note: Default credentials are configured via environment variables.
# Run 'python generate_env.py' to create a .env file with a secure secret key.

logger = get_logger("inventory_api.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Inventory API')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and critical data, then exit without starting the server')
    parser.add_argument('--seed-demo-data', action='store_true',
                        help='Insert demo stores, products, stock and users')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting Inventory API...")

    app = create_app()
    build_database(app, enable_demo_data=args.seed_demo_data)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
