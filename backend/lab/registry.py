# backend/lab/registry.py
#
# Process-local lab sessions, one per owner. An owner is "user:<id>" for a
# signed-in user or "guest:<session key>" otherwise. After every state change
# the whole session is written to the cache as a single JSON blob, and a
# process that has never seen the owner restores from that blob.

import json
import logging
import threading

from django.conf import settings
from django.core.cache import cache

from .session import ACTIVE, LabSession

logger = logging.getLogger(__name__)

USER_PREFIX  = "user:"
GUEST_PREFIX = "guest:"

_sessions = {}
_lock     = threading.RLock()


def owner_for(user_id=None, session_key=None):
    if user_id:
        return f"{USER_PREFIX}{user_id}"
    return f"{GUEST_PREFIX}{session_key}"


def user_id_for(owner):
    if owner.startswith(USER_PREFIX):
        return owner[len(USER_PREFIX):]
    return None


def snapshot_key(owner):
    return f"{settings.LAB_SNAPSHOT_KEY}:{owner}"


def _restore(owner):
    raw = cache.get(snapshot_key(owner))
    if not raw:
        return LabSession()
    try:
        return LabSession.from_snapshot(json.loads(raw))
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning("Discarding unreadable lab snapshot for %s: %s", owner, exc)
        return LabSession()


def get_session(owner):
    with _lock:
        session = _sessions.get(owner)
        if session is None:
            session = _restore(owner)
            _sessions[owner] = session
        return session


def persist(owner):
    with _lock:
        session = _sessions.get(owner)
        if session is None:
            return
        blob = json.dumps(session.snapshot())
    cache.set(snapshot_key(owner), blob, timeout=settings.LAB_SNAPSHOT_TIMEOUT)


def discard(owner):
    with _lock:
        _sessions.pop(owner, None)
    cache.delete(snapshot_key(owner))


def active_sessions():
    """(owner, session) pairs whose experiment is currently running."""
    with _lock:
        return [(o, s) for o, s in _sessions.items() if s.status == ACTIVE]


def clear():
    with _lock:
        owners = list(_sessions)
        _sessions.clear()
    cache.delete_many([snapshot_key(o) for o in owners])
