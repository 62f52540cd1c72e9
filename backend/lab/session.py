# backend/lab/session.py
#
# One user's lab bench: placed equipment, recorded reactions, the experiment
# lifecycle and the score ledger. Everything the renderer shows is derived from
# this object; every mutation goes through its methods.

import logging
import math
import time
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional

from django.conf import settings

from .catalog import get_reaction
from .engine import ReactionEngine
from .equipment import Equipment
from .exceptions import (
    AuthenticationRequired,
    EquipmentNotFound,
    ExperimentNotActive,
    InvalidTransition,
    LabError,
    PersistenceError,
)
from .persistence import DjangoExperimentStore
from .scoring import ScoreLedger

logger = logging.getLogger(__name__)

IDLE      = "idle"
ACTIVE    = "active"
PAUSED    = "paused"
COMPLETED = "completed"
STATUSES  = (IDLE, ACTIVE, PAUSED, COMPLETED)


@dataclass
class LabEvent:
    kind: str
    message: str
    payload: dict = field(default_factory=dict)

    def to_dict(self):
        return {"kind": self.kind, "message": self.message, "payload": self.payload}


@dataclass
class ReactionRecord:
    id: str
    reaction_id: str
    name: str
    type: str
    energy: str
    danger_level: str
    balanced_equation: str
    equipment_id: str
    points: int
    timestamp: str

    def to_dict(self):
        return asdict(self)


@dataclass
class SaveResult:
    ok: bool
    message: str
    record: Optional[dict] = None
    auto: bool = False


class LabSession:
    def __init__(self, engine=None, ledger=None, store=None, points=None,
                 ambient_temperature=None, clock=time.time):
        self.engine      = engine or ReactionEngine()
        self.ledger      = ledger or ScoreLedger()
        self.store       = store or DjangoExperimentStore()
        self.points      = dict(settings.LAB_POINTS, **(points or {}))
        self.ambient     = (settings.LAB_AMBIENT_TEMPERATURE
                            if ambient_temperature is None else float(ambient_temperature))
        self.clock       = clock

        self.equipment         = {}
        self.reactions         = []
        self.status            = IDLE
        self.start_time        = None
        self.current_session   = None
        self.auto_save_enabled = True
        self._listeners        = []

    # ── Event bus ────────────────────────────────────────────────────────────
    def subscribe(self, callback):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, kind, message, **payload):
        event = LabEvent(kind=kind, message=message, payload=payload)
        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception:
                logger.exception("Lab event listener failed for %s", kind)
        return event

    # ── Experiment lifecycle ─────────────────────────────────────────────────
    @property
    def is_experiment_started(self):
        return self.status in (ACTIVE, PAUSED)

    @property
    def score(self):
        return self.ledger.score

    @property
    def badges(self):
        return self.ledger.badges

    @property
    def chemicals_mixed(self):
        return sum(len(eq.contents) for eq in self.equipment.values())

    def _require_active(self):
        if self.status == PAUSED:
            raise ExperimentNotActive("The experiment is paused. Resume it to continue.")
        if self.status != ACTIVE:
            raise ExperimentNotActive()

    def start(self):
        if self.is_experiment_started:
            raise InvalidTransition("An experiment is already running.")
        self.status          = ACTIVE
        self.start_time      = self.clock()
        self.current_session = f"session-{uuid.uuid4().hex[:12]}"
        self.ledger.award(self.points["experiment_started"], "Experiment started")
        self._emit("experiment_started",
                   "Welcome to your virtual chemistry lab! Use the equipment rack to add tools.",
                   status=self.status)

    def pause(self):
        if self.status != ACTIVE:
            raise InvalidTransition("Only a running experiment can be paused.")
        self.status = PAUSED
        self._emit("experiment_paused", "Experiment paused.", status=self.status)

    def resume(self):
        if self.status != PAUSED:
            raise InvalidTransition("Only a paused experiment can be resumed.")
        self.status = ACTIVE
        self._emit("experiment_resumed", "Experiment resumed.", status=self.status)

    def complete(self, user_id=None):
        """Finish the run; when a user is signed in the session is saved once."""
        if not self.is_experiment_started:
            raise InvalidTransition("There is no experiment to complete.")
        self.status = COMPLETED
        self._emit("experiment_completed", "Experiment completed.", status=self.status)
        if user_id:
            return self.save(user_id)
        return None

    def reset(self):
        self.equipment.clear()
        self.reactions.clear()
        self.engine.reset()
        self.ledger.reset()
        self.status          = IDLE
        self.start_time      = None
        self.current_session = None
        self._emit("lab_reset", "All equipment and reactions have been cleared.")

    def set_auto_save(self, enabled):
        self.auto_save_enabled = bool(enabled)

    # ── Workbench ────────────────────────────────────────────────────────────
    def get_equipment(self, equipment_id):
        try:
            return self.equipment[equipment_id]
        except KeyError:
            raise EquipmentNotFound(equipment_id)

    def place_equipment(self, equipment_type, position=(0.0, 0.0, 0.0)):
        self._require_active()
        equipment_type = str(equipment_type or "").strip()
        if not equipment_type:
            raise LabError("Choose a piece of equipment to place.")
        try:
            position = [float(v) for v in position]
        except (TypeError, ValueError):
            raise LabError("Position must be a list of coordinates.")
        if not all(math.isfinite(v) for v in position):
            raise LabError("Position coordinates must be finite numbers.")
        equipment = Equipment(
            id=f"{equipment_type}-{uuid.uuid4().hex[:8]}",
            type=equipment_type,
            position=position,
        )
        equipment.set_temperature(self.ambient, self.ambient)
        equipment.refresh()
        self.equipment[equipment.id] = equipment
        self.ledger.award(self.points["equipment_placed"], f"Placed {equipment_type}")
        self._emit("equipment_placed", f"{equipment_type} has been placed on the workbench.",
                   equipment_id=equipment.id)
        return equipment

    def add_chemical(self, equipment_id, chemical, volume):
        """Pour a chemical into a container and re-evaluate its full contents.

        ``chemical`` is a name or a ``{"name", "color"}`` mapping. Returns the
        new ``ReactionRecord`` when a reaction fired for the first time in this
        container, otherwise ``None``.
        """
        self._require_active()
        equipment = self.get_equipment(equipment_id)
        if isinstance(chemical, dict):
            name, color = chemical.get("name"), chemical.get("color")
        else:
            name, color = chemical, None
        name = str(name or "").strip()
        if not name:
            raise LabError("Choose a chemical to add.")

        equipment.add_portion(name, volume, color)
        self.ledger.award(self.points["chemical_added"], f"Added {name}")
        record = self._evaluate(equipment)
        self._emit("chemical_added", f"{name} added to equipment successfully.",
                   equipment_id=equipment.id, chemical=name)
        return record

    def heat(self, equipment_id, temperature):
        self._require_active()
        equipment = self.get_equipment(equipment_id)
        try:
            temperature = float(temperature)
        except (TypeError, ValueError):
            raise LabError("Temperature must be a number of degrees Celsius.")
        if not math.isfinite(temperature):
            raise LabError("Temperature must be a finite number of degrees Celsius.")
        equipment.set_temperature(temperature, self.ambient)
        record = self._evaluate(equipment)
        self._emit("temperature_changed", f"{equipment.id} is now at {temperature:g}°C.",
                   equipment_id=equipment.id, temperature=temperature)
        return record

    def change_volume(self, equipment_id, index, volume):
        self._require_active()
        equipment = self.get_equipment(equipment_id)
        equipment.change_volume(index, volume)
        equipment.refresh(self.engine.match(equipment.contents, equipment.temperature))
        return equipment

    def _evaluate(self, equipment):
        before   = len(self.engine.safety_alerts)
        reaction = self.engine.detect_reaction(equipment.contents, equipment.temperature)
        for alert in self.engine.safety_alerts[before:]:
            self._emit("safety_alert", alert.message, alert=alert.to_dict(),
                       equipment_id=equipment.id)
        equipment.refresh(reaction)

        if reaction is None or reaction.id in equipment.awarded_reactions:
            return None

        points = self.points["reaction_detected"]
        record = ReactionRecord(
            id=f"reaction-{int(self.clock() * 1000)}-{uuid.uuid4().hex[:6]}",
            reaction_id=reaction.id,
            name=reaction.name,
            type=reaction.type,
            energy=reaction.energy,
            danger_level=reaction.danger_level,
            balanced_equation=reaction.balanced_equation,
            equipment_id=equipment.id,
            points=points,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        equipment.awarded_reactions.append(reaction.id)
        self.reactions.append(record)
        self.engine.record(reaction)
        self.ledger.award(points, f"{reaction.name} detected")
        self.ledger.award_badge(reaction.type)
        self._emit("reaction_detected", f"{reaction.name} detected! +{points} points",
                   reaction=record.to_dict(), insights=self.engine.insights(reaction))
        return record

    # ── Alerts ───────────────────────────────────────────────────────────────
    @property
    def safety_alerts(self):
        return self.engine.safety_alerts

    def clear_safety_alerts(self):
        self.engine.clear_safety_alerts()

    # ── Snapshot / state ─────────────────────────────────────────────────────
    @property
    def experiment_state(self):
        return {
            "status":            self.status,
            "start_time":        self.start_time,
            "current_session":   self.current_session,
            "auto_save_enabled": self.auto_save_enabled,
        }

    def snapshot(self):
        return {
            "placed_equipment":      [eq.to_dict() for eq in self.equipment.values()],
            "reactions":             [r.to_dict() for r in self.reactions],
            "experiment_state":      self.experiment_state,
            "is_experiment_started": self.is_experiment_started,
            "score":                 self.ledger.score,
            "badges":                list(self.ledger.badges),
        }

    def to_state(self):
        state = self.snapshot()
        state["safety_alerts"]   = [a.to_dict() for a in self.safety_alerts]
        state["chemicals_mixed"] = self.chemicals_mixed
        return state

    @classmethod
    def from_snapshot(cls, data, **kwargs):
        session = cls(ledger=ScoreLedger.from_dict(data), **kwargs)
        for item in data.get("placed_equipment", []):
            equipment = Equipment.from_dict(item)
            session.equipment[equipment.id] = equipment
        session.reactions = [ReactionRecord(**r) for r in data.get("reactions", [])]
        for record in session.reactions:
            reaction = get_reaction(record.reaction_id)
            if reaction is not None:
                session.engine.reaction_history.append(reaction)
        state = data.get("experiment_state", {})
        status = state.get("status", IDLE)
        session.status            = status if status in STATUSES else IDLE
        session.start_time        = state.get("start_time")
        session.current_session   = state.get("current_session")
        session.auto_save_enabled = state.get("auto_save_enabled", True)
        return session

    # ── Remote save ──────────────────────────────────────────────────────────
    def build_experiment_record(self, user_id):
        # the autosave thread reads while request threads mutate
        equipment = list(self.equipment.values())
        reactions = list(self.reactions)
        now       = datetime.now(timezone.utc)
        chemicals_used = list(dict.fromkeys(
            name for eq in equipment for name in eq.contents
        ))
        duration = round(self.clock() - self.start_time) if self.start_time else 0
        return {
            "user_id":         str(user_id),
            "experiment_name": f"Lab Session {now:%Y-%m-%d}",
            "chemicals_used":  chemicals_used,
            "results": {
                "reactions":          len(reactions),
                "equipment_used":     [eq.type for eq in equipment],
                "chemicals_mixed":    sum(len(eq.contents) for eq in equipment),
                "session_duration":   duration,
                "equipment_details": [
                    {
                        "id":           eq.id,
                        "type":         eq.type,
                        "contents":     list(eq.contents),
                        "total_volume": eq.total_volume,
                        "temperature":  eq.temperature,
                    }
                    for eq in equipment
                ],
                "reactions_performed": [r.name for r in reactions],
                "timestamp":           now.isoformat(),
            },
            "score": self.ledger.score,
        }

    def save(self, user_id, auto=False):
        """Write the session to the experiment store.

        A failed write is reported, never raised, and leaves in-memory state
        untouched. There is no retry.
        """
        if not user_id:
            raise AuthenticationRequired()
        record = self.build_experiment_record(user_id)
        try:
            self.store.save(record)
        except PersistenceError as exc:
            message = f"Could not save your experiment: {exc}"
            logger.warning("%s save failed for user %s: %s",
                           "Auto" if auto else "Manual", user_id, exc)
            self._emit("save_failed", message, auto=auto)
            return SaveResult(ok=False, message=message, record=record, auto=auto)
        self._emit("experiment_saved", "Your lab session has been recorded successfully.", auto=auto)
        return SaveResult(ok=True, message="Experiment saved.", record=record, auto=auto)

