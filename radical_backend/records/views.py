# radical_backend/records/views.py
import copy
import threading
from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.attributes import flag_modified
from radical_backend.init_db import db
from radical_backend.logging_config import setup_logging
from radical_backend.records.models import RecordCollection

logger = setup_logging()

_locks = {}
_locks_guard = threading.Lock()


def _lock_for(name):
    with _locks_guard:
        lock = _locks.get(name)
        if lock is None:
            lock = _locks[name] = threading.RLock()
        return lock


@contextmanager
def collection_lock(name):
    """Serialize read-modify-write cycles on one collection within the process."""
    lock = _lock_for(name)
    with lock:
        yield


def read_collection(name):
    """Return the records stored under ``name``, or an empty list."""
    row = db.session.get(RecordCollection, name, populate_existing=True)
    if row is None or not row.records:
        return []
    return copy.deepcopy(row.records)


def write_collection(name, records):
    """Replace the whole collection in a single transaction."""
    records = copy.deepcopy(list(records))
    try:
        row = db.session.get(RecordCollection, name, populate_existing=True)
        if row is None:
            row = RecordCollection(name=name, records=records)
            db.session.add(row)
        else:
            row.records = records
            flag_modified(row, 'records')
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to write collection '{name}': {e}")
        raise
