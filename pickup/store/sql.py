import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..models import db, Document, utcnow
from .base import Collection, DocumentStore, DocumentNotFound, Decider, StoreError, apply_updates, new_document_id

logger = logging.getLogger(__name__)

# Ordering on this field uses the indexed created_at column
CREATED_AT_FIELD = 'createdAt'

# A transact that keeps losing the version check gives up after this many reads
MAX_TRANSACT_ATTEMPTS = 10


class WriteConflict(StoreError):
    """Another writer changed the document between our read and our write."""
    pass


@contextmanager
def _unit_of_work(collection: str):
    """Commit on success, roll back and wrap database errors otherwise."""
    try:
        yield db.session
        db.session.commit()
    except StaleDataError as e:
        db.session.rollback()
        raise WriteConflict(f"Concurrent write on collection '{collection}'") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Database error on collection '{collection}': {e}")
        raise StoreError(f"Database error on collection '{collection}'") from e
    except Exception:
        db.session.rollback()
        raise


class SQLCollection(Collection):
    def _query(self):
        return Document.query.filter_by(collection=self.name)

    def _row(self, doc_id: str) -> Optional[Document]:
        return self._query().filter_by(doc_id=doc_id).first()

    def add(self, data: Dict[str, Any]) -> str:
        now = utcnow()
        doc_id = new_document_id()
        with _unit_of_work(self.name) as session:
            session.add(Document(
                collection=self.name,
                doc_id=doc_id,
                data=apply_updates({}, data, now),
                created_at=now
            ))
        return doc_id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with _unit_of_work(self.name):
            row = self._row(doc_id)
            return row.to_dict() if row else None

    def list(self, order_by: str = None, descending: bool = False) -> List[Dict[str, Any]]:
        with _unit_of_work(self.name):
            query = self._query()
            if order_by == CREATED_AT_FIELD:
                if descending:
                    query = query.order_by(Document.created_at.desc(), Document.id.desc())
                else:
                    query = query.order_by(Document.created_at.asc(), Document.id.asc())
            else:
                query = query.order_by(Document.id.asc())
            docs = [row.to_dict() for row in query.all()]

        if order_by and order_by != CREATED_AT_FIELD:
            docs.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by)), reverse=descending)
        return docs

    def update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        def decide(data):
            if data is None:
                raise DocumentNotFound(self.name, doc_id)
            return fields, None

        self.transact(doc_id, decide)

    def delete(self, doc_id: str) -> None:
        with _unit_of_work(self.name):
            self._query().filter_by(doc_id=doc_id).delete()

    def transact(self, doc_id: str, decide: Decider) -> Any:
        """
        Read the row, let `decide` pick the updates, write them back.

        The write only lands if the row's version is still the one read;
        otherwise the row is re-read and `decide` runs again. This holds on
        SQLite too, where SELECT ... FOR UPDATE is not available.
        """
        for attempt in range(1, MAX_TRANSACT_ATTEMPTS + 1):
            try:
                with _unit_of_work(self.name):
                    row = self._row(doc_id)
                    updates, result = decide(row.to_dict() if row else None)
                    if updates:
                        row.data = apply_updates(row.data or {}, updates)
                return result
            except WriteConflict:
                logger.debug(f"Retrying write to {self.name}/{doc_id} after conflict (attempt {attempt})")

        logger.error(f"Gave up writing {self.name}/{doc_id} after {MAX_TRANSACT_ATTEMPTS} conflicts")
        raise WriteConflict(f"Too many concurrent writes to {self.name}/{doc_id}")


class SQLDocumentStore(DocumentStore):
    """
    Documents as JSON rows in one table.
    Writes are checked against the row version read, and retried on conflict.
    Must be used inside a Flask app context.
    """
    backend = 'sql'

    def collection(self, name: str) -> SQLCollection:
        return SQLCollection(name)

    def ping(self) -> bool:
        try:
            db.session.execute(db.text('SELECT 1'))
            return True
        except SQLAlchemyError:
            return False
