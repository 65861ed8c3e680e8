#!/usr/bin/env python3
"""
Database management script for deployment.

Production apps do not create tables on startup (AUTO_CREATE_TABLES is off),
so run this during the build/deployment pipeline when the sql store backend
is in use.

Usage:
    python manage_db.py          # create missing tables
    python manage_db.py reset    # drop and recreate every table
"""
import sys

from pickup.app import create_app
from pickup.models import db


def deploy(reset: bool = False):
    """Run deployment tasks."""
    app = create_app()
    if app.store.backend != 'sql':
        print(f"Store backend is {app.store.backend}; no tables to create.")
        return

    with app.app_context():
        try:
            if reset:
                print("Dropping database tables...")
                db.drop_all()
            print("Creating database tables...")
            db.create_all()
            print("✓ Database tables ready.")
        except Exception as e:
            print(f"Error creating tables: {e}")
            sys.exit(1)


if __name__ == '__main__':
    deploy(reset=sys.argv[1:] == ['reset'])
