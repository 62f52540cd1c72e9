# backend/lab/consumers.py

import asyncio
import json
import threading

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from . import autosave, registry
from .exceptions import LabError

DEFAULT_VOLUME = 5.0


def _save_result(result):
    if result is None:
        return None
    return {"saved": result.ok, "message": result.message}


def _record(record):
    return record.to_dict() if record else None


# action name -> (session, message, user_id) -> JSON-safe result
ACTIONS = {
    "start":           lambda s, m, u: s.start(),
    "pause":           lambda s, m, u: s.pause(),
    "resume":          lambda s, m, u: s.resume(),
    "complete":        lambda s, m, u: _save_result(s.complete(u)),
    "reset":           lambda s, m, u: s.reset(),
    "save":            lambda s, m, u: _save_result(s.save(u)),
    "place_equipment": lambda s, m, u: s.place_equipment(m.get("type", ""), m.get("position", (0, 0, 0))).to_dict(),
    "add_chemical":    lambda s, m, u: _record(s.add_chemical(
                           m.get("equipment_id"), m.get("chemical") or m.get("name"),
                           m.get("volume", DEFAULT_VOLUME))),
    "heat":            lambda s, m, u: _record(s.heat(m.get("equipment_id"), m.get("temperature"))),
    "change_volume":   lambda s, m, u: s.change_volume(m.get("equipment_id"), m.get("index", 0),
                                                       m.get("volume")).to_dict(),
    "clear_alerts":    lambda s, m, u: s.clear_safety_alerts(),
    "state":           lambda s, m, u: None,
}


class LabConsumer(AsyncWebsocketConsumer):
    """
    WebSocket boundary between the 3D workbench and the lab session.

    Protocol (JSON text messages):
      Browser → Backend : {"action": "add_chemical", "equipment_id": ..., ...}
      Backend → Browser : {"type": "event", ...} for each session event, then
                          {"type": "state", "action": ..., "result": ..., "state": {...}}
                          or {"type": "error", "action": ..., "error": "..."}

    Events raised outside this socket's own actions (auto-save, HTTP calls
    against the same bench) are pushed as soon as they happen.
    """

    async def connect(self):
        await self.accept()
        self.pending        = []
        self.loop           = asyncio.get_running_loop()
        self._action_thread = None
        self.user_id, self.owner = await database_sync_to_async(self._resolve_owner)()
        self.session = await database_sync_to_async(registry.get_session)(self.owner)
        self.session.subscribe(self._queue_event)
        await self._send_json({"type": "state", "action": "connect", "result": None,
                               "state": await database_sync_to_async(self.session.to_state)()})

    async def disconnect(self, close_code):
        session = getattr(self, "session", None)
        if session is not None:
            session.unsubscribe(self._queue_event)

    def _resolve_owner(self):
        user = self.scope.get("user")
        if user is not None and user.is_authenticated:
            user_id = str(user.pk)
            return user_id, registry.owner_for(user_id=user_id)
        session = self.scope.get("session")
        key = session.session_key if session is not None and session.session_key else self.channel_name
        return None, registry.owner_for(session_key=key)

    def _queue_event(self, event):
        if threading.get_ident() == self._action_thread:
            self.pending.append(event.to_dict())
            return
        # emitted elsewhere (auto-save, an HTTP request on the same bench): push now
        asyncio.run_coroutine_threadsafe(
            self._send_json({"type": "event", **event.to_dict()}), self.loop)

    def _apply(self, action, message):
        self._action_thread = threading.get_ident()
        try:
            result = ACTIONS[action](self.session, message, self.user_id)
            if action == "start":
                autosave.start_autosave()
            registry.persist(self.owner)
            return result, self.session.to_state()
        finally:
            self._action_thread = None

    async def receive(self, text_data=None, bytes_data=None):
        if text_data is None:
            return
        try:
            message = json.loads(text_data)
        except json.JSONDecodeError:
            await self._send_json({"type": "error", "action": None, "error": "Invalid JSON."})
            return
        action = message.get("action") if isinstance(message, dict) else None
        if action not in ACTIONS:
            await self._send_json({"type": "error", "action": action, "error": "Unknown action."})
            return

        try:
            result, state = await database_sync_to_async(self._apply)(action, message)
        except LabError as exc:
            await self._flush_events()
            await self._send_json({"type": "error", "action": action, "error": exc.message})
            return

        await self._flush_events()
        await self._send_json({"type": "state", "action": action, "result": result, "state": state})

    async def _flush_events(self):
        events, self.pending = self.pending, []
        for event in events:
            await self._send_json({"type": "event", **event})

    async def _send_json(self, payload):
        await self.send(text_data=json.dumps(payload))
