from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc)


class Document(db.Model):
    """A schemaless document stored as JSON, keyed by collection and id."""
    __tablename__ = 'documents'

    id = db.Column(db.Integer, primary_key=True)
    collection = db.Column(db.String(100), nullable=False, index=True)
    doc_id = db.Column(db.String(40), nullable=False, index=True)
    data = db.Column(db.JSON, nullable=False, default=dict)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.UniqueConstraint('collection', 'doc_id', name='unique_document_per_collection'),
    )

    # Every UPDATE checks the version it read, so a concurrent write
    # surfaces as StaleDataError instead of being overwritten
    __mapper_args__ = {'version_id_col': version}

    def to_dict(self):
        return {'id': self.doc_id, **(self.data or {})}
