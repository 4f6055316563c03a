# radical_backend/content/views.py
import copy
import uuid
from datetime import datetime, timezone
from radical_backend.content.models import (
    MESSAGES, GALLERY, SERVICES, SETTINGS, ABOUT,
    MESSAGE_FIELDS, GALLERY_FIELDS, SERVICE_FIELDS, SETTINGS_FIELDS, ABOUT_FIELDS,
    DEFAULT_SETTINGS, DEFAULT_ABOUT,
)
from radical_backend.logging_config import setup_logging
from radical_backend.records.views import collection_lock, read_collection, write_collection

logger = setup_logging()


def now_iso():
    return datetime.now(timezone.utc).isoformat()


class ResourceCollection:
    """Create/list/update/delete over one list collection of the record store."""

    def __init__(self, name, fields, timestamp_field='createdAt', has_visibility=True):
        self.name = name
        self.fields = fields
        self.timestamp_field = timestamp_field
        self.has_visibility = has_visibility

    def _pick(self, data):
        return {key: data[key] for key in self.fields if key in data}

    def defaults(self):
        return {'visible': True} if self.has_visibility else {}

    def create(self, data):
        record = self.defaults()
        record.update(self._pick(data))
        record['id'] = uuid.uuid4().hex
        record[self.timestamp_field] = now_iso()

        with collection_lock(self.name):
            records = read_collection(self.name)
            records.append(record)
            write_collection(self.name, records)

        logger.info(f"Created {self.name} record {record['id']}.")
        return record

    def list(self):
        return read_collection(self.name)

    def list_visible(self):
        return [record for record in self.list() if record.get('visible') is True]

    def get(self, record_id):
        return next((r for r in self.list() if r.get('id') == record_id), None)

    def update(self, record_id, updates):
        changes = self._pick(updates)
        with collection_lock(self.name):
            records = read_collection(self.name)
            record = next((r for r in records if r.get('id') == record_id), None)
            if record is None:
                return None
            record.update(changes)
            write_collection(self.name, records)

        logger.info(f"Updated {self.name} record {record_id}: {sorted(changes)}.")
        return record

    def delete(self, record_id):
        with collection_lock(self.name):
            records = read_collection(self.name)
            remaining = [r for r in records if r.get('id') != record_id]
            if len(remaining) != len(records):
                write_collection(self.name, remaining)
                logger.info(f"Deleted {self.name} record {record_id}.")


class MessageCollection(ResourceCollection):
    def __init__(self):
        super().__init__(MESSAGES, MESSAGE_FIELDS, timestamp_field='date', has_visibility=False)

    def defaults(self):
        return {'read': False}

    def mark_read(self, record_id, read):
        return self.update(record_id, {'read': bool(read)})

    def search(self, query):
        needle = query.lower()
        return [
            m for m in self.list()
            if needle in str(m.get('name', '')).lower()
            or needle in str(m.get('email', '')).lower()
            or needle in str(m.get('message', '')).lower()
        ]


class SingletonResource:
    """A one-record collection that reads as ``default`` until first saved."""

    def __init__(self, name, fields, default):
        self.name = name
        self.fields = fields
        self.default = default

    def get(self):
        records = read_collection(self.name)
        return records[0] if records else copy.deepcopy(self.default)

    def update(self, updates):
        with collection_lock(self.name):
            current = self.get()
            current.update({key: updates[key] for key in self.fields if key in updates})
            write_collection(self.name, [current])
        logger.info(f"Updated {self.name}.")
        return current


messages = MessageCollection()
gallery = ResourceCollection(GALLERY, GALLERY_FIELDS)
services = ResourceCollection(SERVICES, SERVICE_FIELDS)
settings = SingletonResource(SETTINGS, SETTINGS_FIELDS, DEFAULT_SETTINGS)
about = SingletonResource(ABOUT, ABOUT_FIELDS, DEFAULT_ABOUT)


def dashboard_stats():
    all_messages = messages.list()
    return {
        'totalMessages': len(all_messages),
        'unreadMessages': len([m for m in all_messages if not m.get('read')]),
        'totalGalleryImages': len(gallery.list()),
        'totalServices': len(services.list()),
        'recentActivity': list(reversed(all_messages[-5:])),
    }
