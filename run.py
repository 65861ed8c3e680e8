#!/usr/bin/env python3
"""
Entry point for the Pickup Games site.

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development, testing or production (default: development)
    PORT: Port to run on (default: 3000)
    STORE_BACKEND: memory, sql or firestore
    LOG_LEVEL: Logging level (default: INFO)
"""
import logging
import os

from pickup.app import create_app


def main():
    """Run the web server."""
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    app = create_app()
    port = app.config['PORT']
    debug = app.config.get('DEBUG', False)

    logging.getLogger(__name__).info(f"Starting Pickup Games on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=debug)


if __name__ == '__main__':
    main()
