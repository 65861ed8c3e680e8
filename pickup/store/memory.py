import copy
import itertools
import threading
from typing import Any, Dict, List, Optional

from .base import Collection, DocumentStore, DocumentNotFound, Decider, apply_updates, new_document_id


class MemoryCollection(Collection):
    def __init__(self, name: str, lock: threading.RLock, counter):
        super().__init__(name)
        self._lock = lock
        self._counter = counter
        self._docs: Dict[str, tuple] = {}

    def _snapshot(self, doc_id: str) -> Optional[Dict[str, Any]]:
        entry = self._docs.get(doc_id)
        if entry is None:
            return None
        return {'id': doc_id, **copy.deepcopy(entry[1])}

    def add(self, data: Dict[str, Any]) -> str:
        with self._lock:
            doc_id = new_document_id()
            self._docs[doc_id] = (next(self._counter), apply_updates({}, data))
            return doc_id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._snapshot(doc_id)

    def list(self, order_by: str = None, descending: bool = False) -> List[Dict[str, Any]]:
        with self._lock:
            entries = list(self._docs.items())

        if order_by:
            entries.sort(
                key=lambda item: (item[1][1].get(order_by) is None, item[1][1].get(order_by), item[1][0]),
                reverse=descending
            )
        return [{'id': doc_id, **copy.deepcopy(data)} for doc_id, (_, data) in entries]

    def update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            entry = self._docs.get(doc_id)
            if entry is None:
                raise DocumentNotFound(self.name, doc_id)
            self._docs[doc_id] = (entry[0], apply_updates(entry[1], fields))

    def delete(self, doc_id: str) -> None:
        with self._lock:
            self._docs.pop(doc_id, None)

    def transact(self, doc_id: str, decide: Decider) -> Any:
        with self._lock:
            updates, result = decide(self._snapshot(doc_id))
            if updates:
                self.update(doc_id, updates)
            return result


class MemoryDocumentStore(DocumentStore):
    """
    In-process store for tests and local demos.
    A single lock serializes every call, which makes each one atomic.
    """
    backend = 'memory'

    def __init__(self):
        self._lock = threading.RLock()
        self._counter = itertools.count()
        self._collections: Dict[str, MemoryCollection] = {}

    def collection(self, name: str) -> MemoryCollection:
        with self._lock:
            if name not in self._collections:
                self._collections[name] = MemoryCollection(name, self._lock, self._counter)
            return self._collections[name]
