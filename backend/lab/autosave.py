# backend/lab/autosave.py

import logging
import threading

from django.conf import settings
from django.db import close_old_connections

from . import registry

logger = logging.getLogger(__name__)

_autosave_thread = None
_stop_event      = threading.Event()


def run_autosave_tick():
    """Save every running session owned by a signed-in user with auto-save on.

    Returns the number of successful saves. A failure is logged and not
    retried; the remaining sessions are still saved.
    """
    saved = 0
    try:
        for owner, session in registry.active_sessions():
            user_id = registry.user_id_for(owner)
            if not user_id or not session.auto_save_enabled:
                continue
            try:
                result = session.save(user_id, auto=True)
            except Exception:
                logger.exception("Auto-save failed for %s", owner)
                continue
            if result.ok:
                saved += 1
    finally:
        close_old_connections()
    logger.debug("Auto-save tick: %s session(s) saved", saved)
    return saved


def _run_autosave(interval):
    logger.info("Auto-save thread started (every %ss)", interval)
    while not _stop_event.wait(interval):
        try:
            run_autosave_tick()
        except Exception:
            logger.exception("Auto-save tick failed")
    logger.info("Auto-save thread stopped")


def start_autosave():
    global _autosave_thread
    if not settings.LAB_AUTOSAVE_ENABLED:
        return False
    _stop_event.clear()
    if _autosave_thread is None or not _autosave_thread.is_alive():
        _autosave_thread = threading.Thread(
            target=_run_autosave,
            args=(settings.LAB_AUTOSAVE_INTERVAL,),
            name="lab-autosave",
            daemon=True,
        )
        _autosave_thread.start()
    return True


def stop_autosave():
    _stop_event.set()


def is_running():
    return _autosave_thread is not None and _autosave_thread.is_alive()
