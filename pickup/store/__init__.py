import logging

from flask import Flask

from .base import (
    SERVER_TIMESTAMP,
    ArrayUnion,
    Collection,
    DocumentNotFound,
    DocumentStore,
    Increment,
    StoreError,
)
from .memory import MemoryDocumentStore
from .sql import SQLDocumentStore

logger = logging.getLogger(__name__)


def create_store(app: Flask) -> DocumentStore:
    """Build the document store selected by STORE_BACKEND."""
    backend = app.config.get('STORE_BACKEND', 'sql')

    if backend == 'memory':
        store = MemoryDocumentStore()
    elif backend == 'sql':
        store = SQLDocumentStore()
    elif backend == 'firestore':
        from firebase_admin import firestore
        from ..firebase import get_firebase_app
        from .firestore import FirestoreDocumentStore

        firebase_app = get_firebase_app(app.config['FIREBASE_CREDENTIALS'])
        store = FirestoreDocumentStore(firestore.client(firebase_app))
    else:
        raise ValueError(f"Unknown STORE_BACKEND: {backend}")

    logger.info(f"Using {backend} document store")
    return store
