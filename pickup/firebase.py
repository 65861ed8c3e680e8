import logging

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)


def get_firebase_app(credentials_path: str) -> firebase_admin.App:
    """Return the default Firebase app, initializing it from the service account file once."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        logger.info(f"Initializing Firebase app from {credentials_path}")
        return firebase_admin.initialize_app(credentials.Certificate(credentials_path))
