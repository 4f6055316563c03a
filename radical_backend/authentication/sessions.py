# radical_backend/authentication/sessions.py
"""
Admin session registry.

A session is an opaque random identifier that the admin panel sends back in
the ``x-admin-session`` header. The registry only knows whether an id is
active; where the ids live is decided by the injected store.
"""
import secrets
import threading
from datetime import datetime, timedelta, timezone

from radical_backend.records.views import collection_lock, read_collection, write_collection

SESSIONS_COLLECTION = 'admin-sessions'


def now_utc():
    return datetime.now(timezone.utc)


class SessionStore:
    """Storage capability behind the registry: id -> creation time."""

    def add(self, session_id, created_at):
        raise NotImplementedError

    def get(self, session_id):
        raise NotImplementedError

    def remove(self, session_id):
        raise NotImplementedError

    def remove_older_than(self, cutoff):
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Process-local store; only correct for a single app instance."""

    def __init__(self):
        self._sessions = {}
        self._lock = threading.Lock()

    def add(self, session_id, created_at):
        with self._lock:
            self._sessions[session_id] = created_at

    def get(self, session_id):
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id):
        with self._lock:
            self._sessions.pop(session_id, None)

    def remove_older_than(self, cutoff):
        with self._lock:
            stale = [sid for sid, created in self._sessions.items() if created < cutoff]
            for sid in stale:
                del self._sessions[sid]
        return len(stale)

    def __len__(self):
        return len(self._sessions)


class DatabaseSessionStore(SessionStore):
    """Keeps sessions in the record store so every process sharing the database sees them."""

    def add(self, session_id, created_at):
        with collection_lock(SESSIONS_COLLECTION):
            sessions = read_collection(SESSIONS_COLLECTION)
            sessions.append({'id': session_id, 'createdAt': created_at.isoformat()})
            write_collection(SESSIONS_COLLECTION, sessions)

    def get(self, session_id):
        for session in read_collection(SESSIONS_COLLECTION):
            if session.get('id') == session_id:
                return datetime.fromisoformat(session['createdAt'])
        return None

    def remove(self, session_id):
        with collection_lock(SESSIONS_COLLECTION):
            sessions = read_collection(SESSIONS_COLLECTION)
            remaining = [s for s in sessions if s.get('id') != session_id]
            if len(remaining) != len(sessions):
                write_collection(SESSIONS_COLLECTION, remaining)

    def remove_older_than(self, cutoff):
        with collection_lock(SESSIONS_COLLECTION):
            sessions = read_collection(SESSIONS_COLLECTION)
            remaining = [s for s in sessions if datetime.fromisoformat(s['createdAt']) >= cutoff]
            removed = len(sessions) - len(remaining)
            if removed:
                write_collection(SESSIONS_COLLECTION, remaining)
        return removed


class SessionRegistry:
    def __init__(self, store=None, ttl=None):
        self.store = store if store is not None else InMemorySessionStore()
        self.ttl = ttl

    def create_session(self):
        session_id = secrets.token_urlsafe(32)
        self.store.add(session_id, now_utc())
        return session_id

    def destroy_session(self, session_id):
        if session_id:
            self.store.remove(session_id)

    def is_active(self, session_id):
        if not session_id:
            return False
        created_at = self.store.get(session_id)
        if created_at is None:
            return False
        if self.ttl is not None and created_at + self.ttl < now_utc():
            self.store.remove(session_id)
            return False
        return True

    def purge_expired(self):
        if self.ttl is None:
            return 0
        return self.store.remove_older_than(now_utc() - self.ttl)


def create_session_registry(config):
    backend = (config.get('SESSION_BACKEND') or 'memory').lower()
    store = DatabaseSessionStore() if backend == 'database' else InMemorySessionStore()
    ttl_minutes = config.get('ADMIN_SESSION_TTL_MINUTES')
    ttl = timedelta(minutes=ttl_minutes) if ttl_minutes else None
    return SessionRegistry(store=store, ttl=ttl)
