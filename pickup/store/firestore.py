"""
Google Cloud Firestore backend.

Field transforms map onto Firestore's own sentinels, so increments and
array unions are applied server-side in a single write.
"""
import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError, NotFound

from .base import (
    ArrayUnion,
    Collection,
    Decider,
    DocumentNotFound,
    DocumentStore,
    Increment,
    ServerTimestamp,
    StoreError,
)

logger = logging.getLogger(__name__)


def translate(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Swap store-neutral transforms for Firestore sentinels."""
    translated = {}
    for field, value in fields.items():
        if isinstance(value, Increment):
            translated[field] = firestore.Increment(value.value)
        elif isinstance(value, ArrayUnion):
            translated[field] = firestore.ArrayUnion(value.values)
        elif isinstance(value, ServerTimestamp):
            translated[field] = firestore.SERVER_TIMESTAMP
        else:
            translated[field] = value
    return translated


def _to_dict(snapshot) -> Dict[str, Any]:
    return {'id': snapshot.id, **(snapshot.to_dict() or {})}


class FirestoreCollection(Collection):
    def __init__(self, name: str, client):
        super().__init__(name)
        self._client = client
        self._ref = client.collection(name)

    def add(self, data: Dict[str, Any]) -> str:
        try:
            _, ref = self._ref.add(translate(data))
        except GoogleAPICallError as e:
            logger.error(f"Failed to add document to {self.name}: {e}")
            raise StoreError(f"Failed to add document to '{self.name}'") from e
        return ref.id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            snapshot = self._ref.document(doc_id).get()
        except GoogleAPICallError as e:
            logger.error(f"Failed to read {self.name}/{doc_id}: {e}")
            raise StoreError(f"Failed to read '{self.name}/{doc_id}'") from e
        return _to_dict(snapshot) if snapshot.exists else None

    def list(self, order_by: str = None, descending: bool = False) -> List[Dict[str, Any]]:
        query = self._ref
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        try:
            return [_to_dict(snapshot) for snapshot in query.stream()]
        except GoogleAPICallError as e:
            logger.error(f"Failed to list {self.name}: {e}")
            raise StoreError(f"Failed to list '{self.name}'") from e

    def update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        try:
            self._ref.document(doc_id).update(translate(fields))
        except NotFound as e:
            raise DocumentNotFound(self.name, doc_id) from e
        except GoogleAPICallError as e:
            logger.error(f"Failed to update {self.name}/{doc_id}: {e}")
            raise StoreError(f"Failed to update '{self.name}/{doc_id}'") from e

    def delete(self, doc_id: str) -> None:
        try:
            self._ref.document(doc_id).delete()
        except GoogleAPICallError as e:
            logger.error(f"Failed to delete {self.name}/{doc_id}: {e}")
            raise StoreError(f"Failed to delete '{self.name}/{doc_id}'") from e

    def transact(self, doc_id: str, decide: Decider) -> Any:
        ref = self._ref.document(doc_id)

        @firestore.transactional
        def run(transaction):
            snapshot = ref.get(transaction=transaction)
            updates, result = decide(_to_dict(snapshot) if snapshot.exists else None)
            if updates:
                transaction.update(ref, translate(updates))
            return result

        try:
            return run(self._client.transaction())
        except GoogleAPICallError as e:
            logger.error(f"Transaction on {self.name}/{doc_id} failed: {e}")
            raise StoreError(f"Transaction on '{self.name}/{doc_id}' failed") from e


class FirestoreDocumentStore(DocumentStore):
    backend = 'firestore'

    def __init__(self, client):
        self._client = client

    def collection(self, name: str) -> FirestoreCollection:
        return FirestoreCollection(name, self._client)

    def ping(self) -> bool:
        try:
            list(self._client.collections())
            return True
        except GoogleAPICallError:
            return False
