# radical_backend/records/models.py
from datetime import datetime, timezone
from radical_backend.init_db import db


def _utcnow():
    return datetime.now(timezone.utc)


class RecordCollection(db.Model):
    """One named collection of JSON records (messages, gallery, settings, ...)."""
    __tablename__ = 'record_collections'
    name = db.Column(db.String(64), primary_key=True)
    records = db.Column(db.JSON, nullable=False, default=list)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f'<RecordCollection {self.name}>'
