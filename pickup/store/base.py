"""
Document store interface shared by every backend.

Documents are plain dicts. Reads return a copy with the document id under
the ``id`` key. Writes accept plain values mixed with the field transforms
below, which each backend applies atomically.
"""
import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple


class ServerTimestamp:
    """Replaced with the store's clock at write time."""

    def __repr__(self):
        return 'SERVER_TIMESTAMP'


SERVER_TIMESTAMP = ServerTimestamp()


class Increment:
    def __init__(self, value: int):
        self.value = value

    def __repr__(self):
        return f'Increment({self.value})'


class ArrayUnion:
    """Append each value that is not already an element of the array field."""

    def __init__(self, values: List[Any]):
        self.values = list(values)

    def __repr__(self):
        return f'ArrayUnion({self.values!r})'


class StoreError(Exception):
    """A backend call failed."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"No document '{doc_id}' in '{collection}'")


# decide(data) -> (updates or None, result); data is None when absent
Decider = Callable[[Optional[Dict[str, Any]]], Tuple[Optional[Dict[str, Any]], Any]]


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def apply_updates(data: Dict[str, Any], updates: Dict[str, Any], now: datetime = None) -> Dict[str, Any]:
    """Return a copy of ``data`` with ``updates`` applied, resolving transforms."""
    now = now or datetime.now(timezone.utc)
    result = copy.deepcopy(data)

    for field, value in updates.items():
        if isinstance(value, Increment):
            result[field] = (result.get(field) or 0) + value.value
        elif isinstance(value, ArrayUnion):
            items = list(result.get(field) or [])
            for item in value.values:
                if item not in items:
                    items.append(copy.deepcopy(item))
            result[field] = items
        elif isinstance(value, ServerTimestamp):
            result[field] = now.isoformat()
        else:
            result[field] = copy.deepcopy(value)

    return result


class Collection:
    """One named collection of documents."""

    def __init__(self, name: str):
        self.name = name

    def add(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def list(self, order_by: str = None, descending: bool = False) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, doc_id: str) -> None:
        """Remove a document. Deleting an absent document is not an error."""
        raise NotImplementedError

    def transact(self, doc_id: str, decide: Decider) -> Any:
        """
        Read ``doc_id`` and apply whatever update ``decide`` returns as one
        atomic step, so the decision is made on the snapshot being written.
        Returns the result half of the decider's answer.
        """
        raise NotImplementedError

    def increment(self, doc_id: str, field: str, delta: int) -> None:
        self.update(doc_id, {field: Increment(delta)})

    def array_union(self, doc_id: str, field: str, *values) -> None:
        self.update(doc_id, {field: ArrayUnion(values)})


class DocumentStore:
    backend = 'base'

    def collection(self, name: str) -> Collection:
        raise NotImplementedError

    def ping(self) -> bool:
        return True
